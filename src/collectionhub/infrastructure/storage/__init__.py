"""Asset stores for collection icons."""

from collectionhub.infrastructure.storage.base import AssetStore, UploadedAsset
from collectionhub.infrastructure.storage.local_asset_store import LocalAssetStore
from collectionhub.infrastructure.storage.s3_asset_store import (
    S3AssetStore,
    S3StorageSettings,
)
from collectionhub.infrastructure.storage.storage_service import create_asset_store

__all__ = [
    "AssetStore",
    "LocalAssetStore",
    "S3AssetStore",
    "S3StorageSettings",
    "UploadedAsset",
    "create_asset_store",
]
