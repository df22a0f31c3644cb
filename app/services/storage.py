"""S3 storage helpers for submission audio."""

from __future__ import annotations

import logging
from typing import Any

from botocore.exceptions import BotoCoreError, ClientError
from fastapi.concurrency import run_in_threadpool

from app.config.settings import settings
from app.services.aws import create_boto3_client

logger = logging.getLogger(__name__)


class StorageError(RuntimeError):
    """Raised when S3 audio access fails."""


class AudioStore:
    """Issue upload URLs for and read back participant recordings."""

    def __init__(self, client: Any | None = None, bucket: str | None = None) -> None:
        self._client = client or create_boto3_client(
            "s3",
            region_name=settings.s3.region,
            signature_version="s3v4",
        )
        self._bucket = bucket or settings.s3.bucket_name

    async def create_upload_url(
        self,
        object_key: str,
        *,
        content_type: str,
        expires_in: int,
    ) -> str:
        """Presign a PUT for exactly ``object_key`` restricted to ``content_type``."""

        if not self._bucket:
            raise StorageError("S3 bucket name is not configured.")

        try:
            return await run_in_threadpool(
                self._client.generate_presigned_url,
                "put_object",
                Params={
                    "Bucket": self._bucket,
                    "Key": object_key,
                    "ContentType": content_type,
                },
                ExpiresIn=expires_in,
            )
        except (BotoCoreError, ClientError) as exc:
            raise StorageError(f"Failed to presign upload for {object_key}: {exc}") from exc

    async def download_audio(self, object_key: str) -> bytes:
        """Read the whole object into memory."""

        def _read() -> bytes:
            response = self._client.get_object(Bucket=self._bucket, Key=object_key)
            body = response["Body"]
            try:
                return body.read()
            finally:
                body.close()

        try:
            audio_bytes = await run_in_threadpool(_read)
        except (BotoCoreError, ClientError) as exc:
            raise StorageError(f"Failed to download audio {object_key}: {exc}") from exc

        if not audio_bytes:
            raise StorageError(f"Audio object {object_key} is empty.")
        logger.debug("Downloaded %s bytes from s3://%s/%s", len(audio_bytes), self._bucket, object_key)
        return audio_bytes


__all__ = ["AudioStore", "StorageError"]
