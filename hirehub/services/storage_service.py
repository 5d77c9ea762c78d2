"""
Storage Service - keeps the raw resume files.

Uses an S3-compatible bucket (AWS S3, Cloudflare R2, MinIO) when one is
configured, the local upload directory otherwise. Returns the file URL.
"""

import re
import uuid
from pathlib import Path
from typing import Optional

import boto3
from botocore.client import Config
from botocore.exceptions import BotoCoreError, ClientError

from hirehub.core.config import Settings, get_settings
from hirehub.core.logging import get_logger

logger = get_logger(__name__)


class StorageError(Exception):
    pass


def _safe_name(filename: str) -> str:
    return f"{uuid.uuid4().hex}-{re.sub(r'[^A-Za-z0-9._-]+', '-', filename)}"


class StorageService:
    def __init__(self, settings: Optional[Settings] = None):
        self.settings = settings or get_settings()

    def _s3_client(self):
        """boto3 S3 client, or None when no bucket credentials are configured."""
        s = self.settings
        if not (s.s3_bucket and s.s3_access_key and s.s3_secret_key):
            return None
        return boto3.client(
            "s3",
            endpoint_url=s.s3_endpoint or None,
            aws_access_key_id=s.s3_access_key,
            aws_secret_access_key=s.s3_secret_key,
            config=Config(signature_version="s3v4"),
            region_name=s.s3_region or None,
        )

    def store(self, filename: str, content_type: str, data: bytes) -> str:
        """
        Store raw bytes.

        Returns:
            Public URL for S3 storage, `/uploads/<key>` for local storage.
        """
        key = _safe_name(filename)

        s3 = self._s3_client()
        if s3 is not None:
            object_key = f"resumes/{key}"
            try:
                s3.put_object(
                    Bucket=self.settings.s3_bucket,
                    Key=object_key,
                    Body=data,
                    ContentType=content_type,
                )
            except (BotoCoreError, ClientError) as e:
                raise StorageError(f"Failed to upload file: {e}") from e
            return self._s3_url(object_key)

        upload_dir = Path(self.settings.upload_dir)
        try:
            upload_dir.mkdir(parents=True, exist_ok=True)
            (upload_dir / key).write_bytes(data)
        except OSError as e:
            raise StorageError(f"Failed to upload file: {e}") from e
        logger.info("file_stored_locally", key=key, size=len(data))
        return f"/uploads/{key}"

    def _s3_url(self, object_key: str) -> str:
        s = self.settings
        if s.s3_endpoint:
            return f"{s.s3_endpoint.rstrip('/')}/{s.s3_bucket}/{object_key}"
        return f"https://{s.s3_bucket}.s3.{s.s3_region}.amazonaws.com/{object_key}"


def get_storage_service() -> StorageService:
    """Dependency - the file storage collaborator."""
    return StorageService()
