"""Object storage service: bucket writes, removals and download URLs via MinIO."""

import io
import logging
from datetime import timedelta

from minio import Minio
from minio.error import S3Error
from urllib3.exceptions import HTTPError as TransportError

from foodtech.core.config import settings
from foodtech.core.exceptions import StorageError

logger = logging.getLogger("foodtech")

# S3 rejections plus an unreachable or misbehaving MinIO endpoint
STORAGE_ERRORS = (S3Error, TransportError, OSError)


class StorageService:
    """Thin wrapper around the MinIO client used by attachments and the knowledge base."""

    def __init__(self):
        self.client = Minio(
            settings.MINIO_ENDPOINT,
            access_key=settings.MINIO_ACCESS_KEY,
            secret_key=settings.MINIO_SECRET_KEY,
            secure=settings.MINIO_SECURE,
        )

    def ensure_bucket(self, bucket: str) -> None:
        """Create a bucket if it doesn't exist."""
        if not self.client.bucket_exists(bucket):
            self.client.make_bucket(bucket)

    def upload(self, bucket: str, key: str, content: bytes, content_type: str) -> None:
        """Write an object. Existing objects under the same key are overwritten."""
        try:
            self.client.put_object(
                bucket,
                key,
                io.BytesIO(content),
                length=len(content),
                content_type=content_type or "application/octet-stream",
            )
        except STORAGE_ERRORS as e:
            logger.error("Upload of %s/%s failed: %s", bucket, key, e)
            raise StorageError(f"Failed to upload file: {e}")

    def remove(self, bucket: str, key: str) -> None:
        """Delete an object. Removing a missing object is not an error."""
        try:
            self.client.remove_object(bucket, key)
        except S3Error as e:
            if e.code == "NoSuchKey":
                return
            raise StorageError(f"Failed to delete file: {e}")
        except (TransportError, OSError) as e:
            raise StorageError(f"Failed to delete file: {e}")

    def presigned_url(self, bucket: str, key: str, expires: timedelta = timedelta(hours=1)) -> str:
        """Generate a time-limited download URL."""
        try:
            return self.client.presigned_get_object(bucket, key, expires=expires)
        except STORAGE_ERRORS as e:
            raise StorageError(f"Failed to generate signed URL: {e}")

    def public_url(self, bucket: str, key: str) -> str:
        """Unsigned object URL, only usable for public buckets."""
        scheme = "https" if settings.MINIO_SECURE else "http"
        return f"{scheme}://{settings.MINIO_ENDPOINT}/{bucket}/{key}"


storage_service = StorageService()
