"""S3 storage for chat attachments."""

from __future__ import annotations

import asyncio
import uuid
from typing import Any, Optional

import boto3
from botocore.exceptions import BotoCoreError, ClientError

from app.adapters.base import BaseBlobStorage, StoredBlob
from app.config import get_settings
from app.exceptions import AttachmentUploadError
from app.infra.logging_config import get_logger

logger = get_logger("blob_storage")


class S3BlobStorage(BaseBlobStorage):
    """Uploads attachment bytes with put_object and returns a public URL."""

    def __init__(
        self,
        bucket_name: str,
        region: str,
        prefix: str = "chat-attachments",
        public_base_url: Optional[str] = None,
        client: Any = None,
    ) -> None:
        self.bucket_name = bucket_name
        self.region = region
        self.prefix = prefix.strip("/")
        self.public_base_url = (
            public_base_url or f"https://{bucket_name}.s3.{region}.amazonaws.com"
        ).rstrip("/")
        self.client = client or boto3.client("s3", region_name=region)

    def _put(self, key: str, content: bytes, content_type: str) -> None:
        self.client.put_object(
            Bucket=self.bucket_name,
            Key=key,
            Body=content,
            ContentType=content_type,
        )

    async def upload(self, content: bytes, file_name: str, content_type: str) -> StoredBlob:
        key = f"{self.prefix}/{uuid.uuid4().hex}/{file_name}"
        try:
            await asyncio.to_thread(self._put, key, content, content_type)
        except (BotoCoreError, ClientError) as e:
            logger.error("Attachment upload failed for %s: %s", file_name, e)
            raise AttachmentUploadError(
                "Failed to upload attachment. Please try again.", details=str(e)
            ) from e
        return StoredBlob(
            url=f"{self.public_base_url}/{key}",
            key=key,
            file_name=file_name,
            file_type=content_type,
            file_size=len(content),
        )


def build_blob_storage_from_env() -> Optional[S3BlobStorage]:
    """Return None when no bucket is configured; attachments are then rejected."""
    settings = get_settings()
    if not settings.s3_bucket:
        logger.warning("S3_BUCKET is not set; chat attachments are disabled.")
        return None
    return S3BlobStorage(
        bucket_name=settings.s3_bucket,
        region=settings.s3_region,
        prefix=settings.s3_prefix,
        public_base_url=settings.s3_public_base_url,
    )
