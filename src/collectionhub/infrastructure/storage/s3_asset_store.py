"""Amazon S3 (and S3-compatible) asset store."""

import asyncio

import boto3
from botocore.exceptions import BotoCoreError, ClientError
from pydantic import BaseModel, ConfigDict

from collectionhub.core.exceptions import StorageFailureError
from collectionhub.infrastructure.storage.base import AssetStore, UploadedAsset


class S3StorageSettings(BaseModel):
    """Configuration settings for the S3 asset store."""

    model_config = ConfigDict(from_attributes=True)

    bucket: str
    region: str
    access_key_id: str | None = None
    secret_access_key: str | None = None
    endpoint_url: str | None = None


class S3AssetStore(AssetStore):
    """Asset store implementation for Amazon S3."""

    def __init__(self, settings: S3StorageSettings) -> None:
        self.settings = settings
        self._client = None

    def _get_client(self):
        """Get or create the S3 client."""
        if self._client is None:
            client_kwargs = {"region_name": self.settings.region}
            if self.settings.access_key_id:
                client_kwargs["aws_access_key_id"] = self.settings.access_key_id
                client_kwargs["aws_secret_access_key"] = self.settings.secret_access_key
            if self.settings.endpoint_url:
                client_kwargs["endpoint_url"] = self.settings.endpoint_url

            self._client = boto3.client("s3", **client_kwargs)
        return self._client

    async def upload_file(self, content_type: str, path: str, data: bytes) -> UploadedAsset:
        try:
            await asyncio.to_thread(
                self._get_client().put_object,
                Bucket=self.settings.bucket,
                Key=path,
                Body=data,
                ContentType=content_type,
            )
        except (ClientError, BotoCoreError) as e:
            raise StorageFailureError(f"Failed to upload file to S3: {str(e)}") from e

        return UploadedAsset(file_name=path, content_type=content_type, size=len(data))

    async def delete_file(self, path: str) -> None:
        try:
            await asyncio.to_thread(
                self._get_client().delete_object,
                Bucket=self.settings.bucket,
                Key=path,
            )
        except (ClientError, BotoCoreError) as e:
            raise StorageFailureError(f"Failed to delete file from S3: {str(e)}") from e

    async def test_connection(self) -> tuple[bool, str | None]:
        try:
            await asyncio.to_thread(self._get_client().head_bucket, Bucket=self.settings.bucket)
            return True, (
                f"S3 connection successful. Bucket '{self.settings.bucket}' "
                f"is accessible in region '{self.settings.region}'."
            )
        except ClientError as e:
            error_code = e.response.get("Error", {}).get("Code", "Unknown")
            error_message = e.response.get("Error", {}).get("Message", str(e))
            return False, f"S3 connection failed ({error_code}): {error_message}"
        except BotoCoreError as e:
            return False, f"S3 connection failed: {str(e)}"
