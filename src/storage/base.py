"""Storage backend interface for avatar blobs."""

from typing import Protocol, runtime_checkable


class StorageError(Exception):
    """Raised when a blob cannot be written, removed, or located."""


@runtime_checkable
class StorageBackend(Protocol):
    """Contract shared by every avatar storage backend.

    URLs returned by ``put`` are opaque to callers: the only thing a caller
    may do with one besides publishing it is pass it back to ``delete``.
    """

    name: str

    def put(self, data: bytes, filename: str, content_type: str) -> str:
        """Store a blob and return a publicly resolvable URL.

        Args:
            data: Raw blob bytes.
            filename: Caller-suggested name; used for the extension and,
                depending on the backend, part of the stored name.
            content_type: MIME type recorded with the blob where supported.

        Returns:
            str: URL of the stored blob.

        Raises:
            StorageError: If the blob cannot be stored.
        """
        ...

    def delete(self, url: str) -> None:
        """Remove the blob behind a URL previously returned by ``put``.

        Raises:
            StorageError: If the URL does not belong to this backend or the
                removal fails.
        """
        ...

    def check(self) -> None:
        """Verify the backend is reachable and writable.

        Raises:
            StorageError: If the backend is unusable.
        """
        ...
