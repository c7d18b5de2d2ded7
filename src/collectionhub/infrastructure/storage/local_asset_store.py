"""Local filesystem asset store."""

import asyncio
from pathlib import Path

from collectionhub.core.exceptions import StorageFailureError
from collectionhub.core.logging import get_logger
from collectionhub.infrastructure.storage.base import AssetStore, UploadedAsset

logger = get_logger(__name__)


class LocalAssetStore(AssetStore):
    """Asset store implementation for local filesystem storage."""

    def __init__(self, storage_path: str) -> None:
        self.storage_path = Path(storage_path)

    def _resolve(self, path: str) -> Path:
        absolute_path = (self.storage_path / path).resolve()
        if not absolute_path.is_relative_to(self.storage_path.resolve()):
            raise StorageFailureError(f"Invalid asset path: {path}")
        return absolute_path

    @staticmethod
    def _write(target: Path, data: bytes) -> None:
        target.parent.mkdir(parents=True, exist_ok=True)
        with open(target, "wb") as f:
            f.write(data)

    async def upload_file(self, content_type: str, path: str, data: bytes) -> UploadedAsset:
        target = self._resolve(path)
        try:
            await asyncio.to_thread(self._write, target, data)
        except OSError as e:
            raise StorageFailureError(f"Failed to write asset {path}: {e}") from e

        logger.debug("Asset stored", path=path, size=len(data))
        return UploadedAsset(file_name=path, content_type=content_type, size=len(data))

    async def delete_file(self, path: str) -> None:
        target = self._resolve(path)
        try:
            await asyncio.to_thread(target.unlink)
        except FileNotFoundError as e:
            raise StorageFailureError(f"Asset not found: {path}") from e
        except OSError as e:
            raise StorageFailureError(f"Failed to delete asset {path}: {e}") from e

    async def test_connection(self) -> tuple[bool, str | None]:
        """Verify that the configured storage path is writable."""
        try:
            self.storage_path.mkdir(parents=True, exist_ok=True)

            probe_file = self.storage_path / ".asset_store_probe"
            probe_file.write_text("ok", encoding="utf-8")
            probe_file.unlink(missing_ok=True)

            return True, f"Local storage is writable at '{self.storage_path}'."
        except Exception as e:
            return False, f"Local storage test failed: {str(e)}"
