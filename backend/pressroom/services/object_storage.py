"""
Pressroom Backend — Object Storage (S3-compatible)
====================================================

What:  Uploads article images to an S3-compatible bucket with boto3.
Who:   Selected with IMAGE_STORAGE_BACKEND=object (the default).
How:   The three credentials (account id, access key, access secret) come
       from settings. The endpoint defaults to the account's Cloudflare R2
       endpoint and can be overridden with STORAGE_ENDPOINT_URL.

Threading:
    boto3 is synchronous. Each call runs in Starlette's threadpool so that a
    slow upload delays only its own request, not the event loop.

Reference format:
    <STORAGE_PUBLIC_URL>/<key>      when a public URL is configured
    <endpoint>/<bucket>/<key>       otherwise
"""

import logging
from typing import Optional

import boto3
from botocore.exceptions import BotoCoreError, ClientError
from starlette.concurrency import run_in_threadpool

from pressroom.config import settings
from pressroom.exceptions import StorageError
from pressroom.services.storage_base import ImageStorage

logger = logging.getLogger(__name__)


class ObjectImageStorage(ImageStorage):
    """Image storage backed by a bucket in S3-compatible object storage."""

    def __init__(
        self,
        access_key_id: Optional[str] = None,
        secret_access_key: Optional[str] = None,
        endpoint_url: Optional[str] = None,
        bucket_name: Optional[str] = None,
        public_url: Optional[str] = None,
        region: Optional[str] = None,
        client=None,
    ):
        self.access_key_id = access_key_id or settings.storage_access_key
        self.secret_access_key = secret_access_key or settings.storage_access_secret
        self.endpoint_url = (endpoint_url or settings.resolved_storage_endpoint).rstrip("/")
        self.bucket_name = bucket_name or settings.storage_bucket
        self.public_url = (public_url or settings.storage_public_url).rstrip("/")
        self.region = region or settings.storage_region

        self._client = client

    @property
    def s3_client(self):
        """
        The boto3 client, built on first use.

        Missing or malformed credentials fail here, per request, as a
        StorageError; start-up never touches the endpoint.
        """
        if self._client is None:
            try:
                self._client = boto3.client(
                    "s3",
                    aws_access_key_id=self.access_key_id,
                    aws_secret_access_key=self.secret_access_key,
                    endpoint_url=self.endpoint_url,
                    region_name=self.region,
                )
            except (BotoCoreError, ValueError) as e:
                logger.error("Object storage client could not be created: %s", str(e))
                raise StorageError(
                    message="Image storage is not configured. Please try again later.",
                    context={"endpoint": self.endpoint_url, "error": str(e)},
                )
        return self._client

    def url_for(self, key: str) -> str:
        if self.public_url:
            return f"{self.public_url}/{key}"
        return f"{self.endpoint_url}/{self.bucket_name}/{key}"

    def key_for(self, reference: str) -> Optional[str]:
        """Inverse of url_for; None when the reference is not ours."""
        for base in (self.public_url, f"{self.endpoint_url}/{self.bucket_name}"):
            if base and reference.startswith(base + "/"):
                return reference[len(base) + 1:]
        return None

    async def store(self, key: str, content: bytes, content_type: str) -> str:
        try:
            await run_in_threadpool(
                self.s3_client.put_object,
                Bucket=self.bucket_name,
                Key=key,
                Body=content,
                ContentType=content_type,
            )
        except (BotoCoreError, ClientError) as e:
            logger.error("Object upload failed for %s: %s", key, str(e))
            raise StorageError(
                message="Failed to upload image. Please try again later.",
                context={"key": key, "bucket": self.bucket_name, "error": str(e)},
            )

        logger.info("Object stored: %s/%s (%d bytes)", self.bucket_name, key, len(content))
        return self.url_for(key)

    async def delete(self, reference: str) -> None:
        key = self.key_for(reference)
        if key is None:
            logger.debug("Cleanup: reference not in bucket %s: %s", self.bucket_name, reference)
            return
        try:
            await run_in_threadpool(
                self.s3_client.delete_object,
                Bucket=self.bucket_name,
                Key=key,
            )
            logger.info("Cleaned up object: %s", key)
        except (BotoCoreError, ClientError, StorageError) as e:
            logger.warning("Failed to clean up object %s: %s", key, str(e))

    async def health_check(self) -> bool:
        try:
            await run_in_threadpool(self.s3_client.head_bucket, Bucket=self.bucket_name)
            return True
        except (BotoCoreError, ClientError, StorageError) as e:
            logger.warning("Object storage health check failed: %s", str(e))
            return False

    async def close(self) -> None:
        close = getattr(self._client, "close", None)
        if close is not None:
            await run_in_threadpool(close)
