"""Keeps collection icon metadata and blob storage consistent.

The asset store and the relational store are not transactionally linked.
Uploads happen before the row is updated, so a failed update leaves an
orphaned blob behind; old blobs are removed only once the new state has
been committed, and failing to remove them is logged, never raised.
"""

import asyncio
from typing import AsyncIterable

from collectionhub.core.config import Settings, get_settings
from collectionhub.core.exceptions import ValidationFailedError
from collectionhub.core.logging import get_logger
from collectionhub.domain.entities import Collection
from collectionhub.domain.services.image_utils import (
    content_hash,
    get_color_from_img,
    get_image_content_type,
    read_from_payload,
)
from collectionhub.infrastructure.persistence.database import transaction
from collectionhub.infrastructure.persistence.repositories import CollectionRepository
from collectionhub.infrastructure.storage.base import AssetStore

logger = get_logger(__name__)

# Strong references to in-flight cleanup tasks from every manager;
# the event loop only keeps weak ones.
_cleanup_tasks: set[asyncio.Task] = set()


async def wait_for_icon_cleanup() -> None:
    """Wait for every scheduled background icon deletion to finish."""
    if _cleanup_tasks:
        await asyncio.gather(*list(_cleanup_tasks))


class IconAssetManager:
    """Orchestrates icon uploads and removals for collections."""

    def __init__(
        self,
        repository: CollectionRepository,
        asset_store: AssetStore,
        settings: Settings | None = None,
    ) -> None:
        """Initialize the manager.

        Args:
            repository: Collection repository bound to the request's session.
            asset_store: Blob store icons are uploaded to.
            settings: Optional settings; defaults to the process settings.
        """
        self.repository = repository
        self.asset_store = asset_store
        self.settings = settings or get_settings()

    @staticmethod
    def content_type_for(extension: str) -> str:
        """Map an icon extension to its content type.

        Raises:
            ValidationFailedError: If the extension is not on the allow-list.
        """
        content_type = get_image_content_type(extension)
        if content_type is None:
            raise ValidationFailedError.single(
                "ext",
                f"Invalid format for collection icon: {extension}",
                "invalid_extension",
            )
        return content_type

    def asset_path(self, collection_id: str, digest: str, extension: str) -> str:
        return f"{self.settings.icon_namespace}/{collection_id}/{digest}.{extension}"

    def icon_url(self, path: str) -> str:
        return f"{self.settings.cdn_url}/{path}"

    def path_from_url(self, icon_url: str) -> str | None:
        """Recover the storage path from an icon URL built by ``icon_url``."""
        prefix = f"{self.settings.cdn_url}/"
        if not icon_url.startswith(prefix):
            return None
        return icon_url[len(prefix) :] or None

    async def set_icon(
        self,
        collection: Collection,
        extension: str,
        payload: bytes | AsyncIterable[bytes],
    ) -> str:
        """Upload a new icon and point the collection at it.

        Args:
            collection: The (already authorized) collection.
            extension: File extension of the icon.
            payload: Raw bytes or an async stream of chunks.

        Returns:
            The new icon URL.

        Raises:
            ValidationFailedError: Bad extension or payload above the size ceiling.
            StorageFailureError: The upload failed.
            PersistenceFailureError: The row update failed; the uploaded blob is orphaned.
        """
        content_type = self.content_type_for(extension)
        data = await read_from_payload(
            payload,
            self.settings.max_icon_size,
            f"Icons must be smaller than {self.settings.max_icon_size // 1024}KiB",
        )

        color = await asyncio.to_thread(get_color_from_img, data)
        path = self.asset_path(collection.id, content_hash(data), extension)

        upload = await self.asset_store.upload_file(content_type, path, data)
        new_url = self.icon_url(upload.file_name)

        async with transaction(self.repository.session):
            await self.repository.update_icon(collection.id, new_url, color)

        logger.info(
            "Collection icon updated",
            collection_id=collection.id,
            path=upload.file_name,
            size=upload.size,
            color=color,
        )

        if collection.icon_url:
            old_path = self.path_from_url(collection.icon_url)
            if old_path and old_path != upload.file_name:
                self._schedule_cleanup(old_path)

        return new_url

    async def clear_icon(self, collection: Collection) -> None:
        """Remove the collection's icon blob and clear its icon metadata."""
        if collection.icon_url:
            old_path = self.path_from_url(collection.icon_url)
            if old_path:
                await self._delete_quietly(old_path)

        async with transaction(self.repository.session):
            await self.repository.update_icon(collection.id, None, None)

        logger.info("Collection icon removed", collection_id=collection.id)

    def _schedule_cleanup(self, path: str) -> None:
        """Delete an old blob in the background."""
        task = asyncio.create_task(self._delete_quietly(path))
        _cleanup_tasks.add(task)
        task.add_done_callback(_cleanup_tasks.discard)

    async def _delete_quietly(self, path: str) -> None:
        """Best-effort blob deletion; failures are logged and swallowed."""
        try:
            await self.asset_store.delete_file(path)
        except Exception as e:
            logger.warning("Failed to delete old icon", path=path, error=str(e))
