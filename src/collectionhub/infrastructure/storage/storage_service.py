"""Selection of the configured asset store."""

from collectionhub.core.config import Settings
from collectionhub.core.logging import get_logger
from collectionhub.infrastructure.storage.base import AssetStore
from collectionhub.infrastructure.storage.local_asset_store import LocalAssetStore
from collectionhub.infrastructure.storage.s3_asset_store import S3AssetStore, S3StorageSettings

logger = get_logger(__name__)


def create_asset_store(settings: Settings) -> AssetStore:
    """Build the asset store named by ``settings.storage_backend``."""
    if settings.storage_backend == "s3":
        logger.info("Using S3 asset store", bucket=settings.s3_bucket, region=settings.s3_region)
        return S3AssetStore(
            S3StorageSettings(
                bucket=settings.s3_bucket,
                region=settings.s3_region,
                access_key_id=settings.s3_access_key_id,
                secret_access_key=settings.s3_secret_access_key,
                endpoint_url=settings.s3_endpoint_url,
            )
        )

    logger.info("Using local asset store", path=settings.storage_path)
    return LocalAssetStore(storage_path=settings.storage_path)
