"""Base abstractions for asset stores."""

from abc import ABC, abstractmethod
from dataclasses import dataclass


@dataclass(slots=True)
class UploadedAsset:
    """Transport object returned by asset stores after an upload."""

    file_name: str
    content_type: str
    size: int


class AssetStore(ABC):
    """Content-addressed blob storage.

    Paths are chosen by the caller. Uploading the same bytes to the same
    path twice leaves a single blob.
    """

    @abstractmethod
    async def upload_file(self, content_type: str, path: str, data: bytes) -> UploadedAsset:
        """Store ``data`` under ``path``."""
        ...

    @abstractmethod
    async def delete_file(self, path: str) -> None:
        """Delete the blob stored under ``path``."""
        ...

    @abstractmethod
    async def test_connection(self) -> tuple[bool, str | None]:
        """Test store connectivity and credentials."""
        ...
