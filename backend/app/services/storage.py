"""Reference file storage on an S3-compatible bucket.

Uploaded form attachments are written to the bucket and replaced by a
retrievable URL before the confirmation email is rendered. Documents
(PDF, Word, …) are stored as raw downloads; everything else is stored
inline so images preview in the browser.
"""

from __future__ import annotations

import re
from datetime import datetime, timedelta, timezone
from typing import Any, Literal

import boto3
from botocore.config import Config
from botocore.exceptions import BotoCoreError, ClientError
from fastapi import UploadFile
from fastapi.concurrency import run_in_threadpool
from loguru import logger

from app.config import Settings
from app.models.project_request import UploadedFile

_UNSAFE_CHARS = re.compile(r"[^a-zA-Z0-9]")
_EPOCH = datetime(1970, 1, 1, tzinfo=timezone.utc)


class StorageError(Exception):
    """Raised when a reference file could not be stored."""

    def __init__(self, filename: str, detail: str):
        self.filename = filename
        self.detail = detail
        super().__init__(f"Upload of '{filename}' failed: {detail}")


def resource_type_for(content_type: str | None) -> Literal["raw", "auto"]:
    """Documents are stored as raw binaries, anything else as 'auto'."""
    mimetype = (content_type or "").lower()
    if mimetype == "application/pdf" or "word" in mimetype or "document" in mimetype:
        return "raw"
    return "auto"


def build_object_key(folder: str, filename: str, resource_type: str, now: datetime) -> str:
    """Sanitized original filename plus a millisecond timestamp."""
    safe_name = _UNSAFE_CHARS.sub("_", filename)
    millis = (now.astimezone(timezone.utc) - _EPOCH) // timedelta(milliseconds=1)
    return f"{folder}/{resource_type}/{safe_name}_{millis}"


def get_s3_client(settings: Settings) -> Any:
    """Create a boto3 S3 client for the configured endpoint."""
    return boto3.client(
        "s3",
        endpoint_url=settings.storage_endpoint_url or None,
        aws_access_key_id=settings.storage_access_key_id or None,
        aws_secret_access_key=settings.storage_secret_access_key or None,
        region_name=settings.storage_region,
        config=Config(signature_version="s3v4"),
    )


class ReferenceFileStorage:
    """Stores uploaded reference files and hands back their URLs."""

    def __init__(
        self,
        client: Any,
        bucket: str,
        *,
        folder: str = "portfolio_uploads",
        public_base_url: str = "",
        url_expiration: int = 7 * 24 * 3600,
    ) -> None:
        self._client = client
        self.bucket = bucket
        self.folder = folder.strip("/")
        self.public_base_url = public_base_url.rstrip("/")
        self.url_expiration = url_expiration

    @classmethod
    def from_settings(cls, settings: Settings) -> ReferenceFileStorage:
        return cls(
            get_s3_client(settings),
            settings.storage_bucket,
            folder=settings.storage_folder,
            public_base_url=settings.storage_public_base_url,
            url_expiration=settings.storage_url_expiration,
        )

    def _object_url(self, key: str) -> str:
        if self.public_base_url:
            return f"{self.public_base_url}/{key}"
        return self._client.generate_presigned_url(
            "get_object",
            Params={"Bucket": self.bucket, "Key": key},
            ExpiresIn=self.url_expiration,
        )

    def store(
        self,
        data: bytes,
        filename: str,
        content_type: str | None,
        now: datetime | None = None,
    ) -> UploadedFile:
        """Write one file to the bucket (blocking)."""
        if not self.bucket:
            raise StorageError(filename, "STORAGE_BUCKET is not configured")

        resource_type = resource_type_for(content_type)
        key = build_object_key(self.folder, filename, resource_type, now or datetime.now())
        disposition = "attachment" if resource_type == "raw" else "inline"
        mimetype = content_type or "application/octet-stream"

        try:
            self._client.put_object(
                Bucket=self.bucket,
                Key=key,
                Body=data,
                ContentType=mimetype,
                ContentDisposition=f'{disposition}; filename="{_UNSAFE_CHARS.sub("_", filename)}"',
            )
            url = self._object_url(key)
        except (BotoCoreError, ClientError) as e:
            raise StorageError(filename, str(e)) from e

        logger.debug("Stored '{}' as {} ({}, {} bytes)", filename, key, resource_type, len(data))
        return UploadedFile(
            filename=filename,
            content_type=mimetype,
            url=url,
            resource_type=resource_type,
        )

    async def upload(self, file: UploadFile) -> UploadedFile:
        data = await file.read()
        return await run_in_threadpool(self.store, data, file.filename or "file", file.content_type)

    async def upload_all(self, files: list[UploadFile] | None) -> list[UploadedFile]:
        """Upload every non-empty form part, in order.

        Any failure aborts the whole batch with StorageError.
        """
        uploaded: list[UploadedFile] = []
        for file in files or []:
            # Browsers send an empty part when no file was picked
            if not file.filename:
                continue
            uploaded.append(await self.upload(file))

        if uploaded:
            logger.info("Uploaded {} reference file(s) to bucket '{}'", len(uploaded), self.bucket)
        return uploaded
