"""Object storage collaborator for file bytes.

The namespace engine never handles file contents; it only asks the object
store to drop an object when a file record is deleted. Uploads go through
put_object before the record is created.

Backends (settings.object_storage_backend):
- memory: in-process dict (local-dev, tests)
- s3: any S3-compatible endpoint through boto3
"""

import threading
from typing import Protocol

import boto3
from botocore.exceptions import BotoCoreError, ClientError

from docspace.components.namespace.errors import NotFound, StoreUnavailable
from docspace.settings import settings
from docspace.utils import get_logger

logger = get_logger(__name__)


class ObjectStorageProtocol(Protocol):
    """Protocol defining the object storage interface."""

    def put_object(self, key: str, data: bytes, content_type: str | None = None) -> int: ...
    def delete_object(self, key: str) -> None: ...
    def get_url(self, key: str) -> str: ...


class MemoryObjectStorage:
    """Thread-safe in-memory object store."""

    def __init__(self):
        self._lock = threading.Lock()
        self._objects: dict[str, tuple[bytes, str | None]] = {}

    def put_object(self, key: str, data: bytes, content_type: str | None = None) -> int:
        """Store bytes under key. Returns the stored size."""
        with self._lock:
            self._objects[key] = (bytes(data), content_type)
        return len(data)

    def delete_object(self, key: str) -> None:
        """Delete an object; deleting a missing key is not an error."""
        with self._lock:
            self._objects.pop(key, None)

    def get_url(self, key: str) -> str:
        with self._lock:
            if key not in self._objects:
                raise NotFound(f"Object not found: {key}")
        return f"memory://{key}"

    def exists(self, key: str) -> bool:
        with self._lock:
            return key in self._objects

    def clear_all(self) -> None:
        with self._lock:
            self._objects.clear()


class S3ObjectStorage:
    """S3-compatible object store.

    Credentials, endpoint and region come from settings unless a client is
    injected (for testing).
    """

    def __init__(self, client=None, bucket_name: str | None = None):
        self._client = client
        self.bucket_name = bucket_name or settings.s3_bucket_name

    @property
    def client(self):
        """Lazy initialization of the boto3 client."""
        if self._client is None:
            self._client = boto3.client(
                "s3",
                endpoint_url=settings.s3_endpoint or None,
                aws_access_key_id=settings.s3_access_key,
                aws_secret_access_key=settings.s3_secret_key,
                region_name=settings.s3_region,
            )
            logger.info(f"S3 client created: bucket={self.bucket_name}, endpoint={settings.s3_endpoint or 'aws'}")
        return self._client

    def put_object(self, key: str, data: bytes, content_type: str | None = None) -> int:
        """Upload bytes under key. Returns the uploaded size."""
        extra = {"ContentType": content_type} if content_type else {}
        try:
            self.client.put_object(Bucket=self.bucket_name, Key=key, Body=data, **extra)
        except (ClientError, BotoCoreError) as e:
            logger.error(f"Failed to upload object {key}: {e}")
            raise StoreUnavailable(f"Failed to upload object {key}: {e}") from e
        logger.debug(f"Uploaded object: {key} ({len(data)} bytes)")
        return len(data)

    def delete_object(self, key: str) -> None:
        """Delete an object from the bucket."""
        try:
            self.client.delete_object(Bucket=self.bucket_name, Key=key)
        except (ClientError, BotoCoreError) as e:
            logger.error(f"Failed to delete object {key}: {e}")
            raise StoreUnavailable(f"Failed to delete object {key}: {e}") from e
        logger.debug(f"Deleted object: {key}")

    def get_url(self, key: str) -> str:
        """Presigned download URL for key."""
        try:
            return self.client.generate_presigned_url(
                "get_object",
                Params={"Bucket": self.bucket_name, "Key": key},
                ExpiresIn=settings.s3_url_expiry_seconds,
            )
        except (ClientError, BotoCoreError) as e:
            logger.error(f"Failed to generate presigned URL for {key}: {e}")
            raise StoreUnavailable(f"Failed to generate URL for {key}: {e}") from e


# Singleton instance
_object_storage: ObjectStorageProtocol | None = None


def get_object_storage() -> ObjectStorageProtocol:
    """Get the object store configured by settings.object_storage_backend."""
    global _object_storage
    if _object_storage is None:
        if settings.object_storage_backend == "s3":
            if not settings.is_s3_configured():
                logger.warning("S3 object storage selected but credentials are incomplete")
            _object_storage = S3ObjectStorage()
        else:
            _object_storage = MemoryObjectStorage()
        logger.info(f"ObjectStorage: Using {settings.object_storage_backend} backend")
    return _object_storage


def reset_object_storage() -> None:
    """Reset the object storage singleton (for testing)."""
    global _object_storage
    _object_storage = None
