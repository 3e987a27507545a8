"""Avatar storage in an S3-compatible object store (MinIO, AWS S3, ...)."""

import logging
import uuid
from typing import Any
from urllib.parse import urlparse

from botocore.exceptions import BotoCoreError, ClientError

from src.storage.base import StorageError

logger = logging.getLogger(__name__)


class ObjectStorageBackend:
    """Stores blobs as objects under a fixed key prefix in one bucket.

    Object URLs have the path-style shape
    ``{scheme}://{endpoint}/{bucket}/{key_prefix}/{uuid}.{ext}``.
    """

    name = "s3"

    def __init__(
        self,
        client: Any,
        bucket: str,
        endpoint: str,
        key_prefix: str = "avatars",
        secure: bool = False,
    ) -> None:
        self.client = client
        self.bucket = bucket
        self.endpoint = endpoint
        self.key_prefix = key_prefix.strip("/")
        self.scheme = "https" if secure else "http"

    def object_key(self, filename: str) -> str:
        """Build a collision-resistant key keeping the original extension."""
        _, dot, ext = filename.rpartition(".")
        ext = ext.lower() if dot and ext and "/" not in ext else "bin"
        key = f"{uuid.uuid4().hex}.{ext}"
        return f"{self.key_prefix}/{key}" if self.key_prefix else key

    def put(self, data: bytes, filename: str, content_type: str) -> str:
        key = self.object_key(filename)
        try:
            self.client.put_object(
                Bucket=self.bucket,
                Key=key,
                Body=data,
                ContentType=content_type,
            )
        except (BotoCoreError, ClientError) as e:
            raise StorageError(f"Failed to upload {key}: {e}") from e

        return f"{self.scheme}://{self.endpoint}/{self.bucket}/{key}"

    def delete(self, url: str) -> None:
        key = self.key_from_url(url)
        try:
            self.client.delete_object(Bucket=self.bucket, Key=key)
        except (BotoCoreError, ClientError) as e:
            raise StorageError(f"Failed to delete {key}: {e}") from e

    def check(self) -> None:
        try:
            self.client.head_bucket(Bucket=self.bucket)
        except (BotoCoreError, ClientError) as e:
            raise StorageError(f"Bucket {self.bucket} is not reachable: {e}") from e

    def key_from_url(self, url: str) -> str:
        """Extract the object key from a URL produced by ``put``."""
        parts = urlparse(url).path.lstrip("/").split("/", 1)
        if len(parts) != 2 or parts[0] != self.bucket or not parts[1]:
            raise StorageError(f"URL {url!r} does not reference bucket {self.bucket}")
        return parts[1]
