"""Avatar storage backends and the factory that picks one from settings."""

import boto3
from botocore.config import Config

from src.core.config import Settings
from src.storage.base import StorageBackend, StorageError
from src.storage.local import LocalStorageBackend
from src.storage.object_store import ObjectStorageBackend

__all__ = [
    "LocalStorageBackend",
    "ObjectStorageBackend",
    "StorageBackend",
    "StorageError",
    "create_storage_backend",
]


def create_storage_backend(settings: Settings) -> StorageBackend:
    """Build the storage backend selected by ``settings.storage_backend``.

    Args:
        settings: Application settings.

    Returns:
        StorageBackend: Local filesystem or object store backend.
    """
    if settings.storage_backend == "s3":
        client = boto3.client(
            "s3",
            endpoint_url=settings.s3_endpoint_url,
            aws_access_key_id=settings.s3_access_key,
            aws_secret_access_key=settings.s3_secret_key,
            region_name=settings.s3_region,
            config=Config(signature_version="s3v4", s3={"addressing_style": "path"}),
        )
        return ObjectStorageBackend(
            client=client,
            bucket=settings.s3_bucket,
            endpoint=settings.s3_endpoint,
            key_prefix=settings.s3_key_prefix,
            secure=settings.s3_secure,
        )

    return LocalStorageBackend(
        upload_dir=settings.local_upload_dir,
        url_prefix=settings.local_upload_url_prefix,
    )
