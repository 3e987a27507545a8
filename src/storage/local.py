"""Avatar storage on the local filesystem."""

import logging
import os
import re
import uuid
from pathlib import Path

from src.storage.base import StorageError

logger = logging.getLogger(__name__)

_UNSAFE_CHARS = re.compile(r"[^A-Za-z0-9._-]+")


def _safe_filename(filename: str) -> str:
    """Reduce a client-supplied name to a bare, filesystem-safe filename."""
    name = os.path.basename(filename.replace("\\", "/")).strip()
    name = _UNSAFE_CHARS.sub("_", name).lstrip(".")
    return name or "avatar"


class LocalStorageBackend:
    """Stores blobs as files in a directory served under a URL prefix."""

    name = "local"

    def __init__(self, upload_dir: str | Path, url_prefix: str = "/uploads") -> None:
        self.upload_dir = Path(upload_dir)
        self.url_prefix = "/" + url_prefix.strip("/")
        self.upload_dir.mkdir(parents=True, exist_ok=True)

    def put(self, data: bytes, filename: str, content_type: str) -> str:
        stored_name = f"{uuid.uuid4().hex[:8]}_{_safe_filename(filename)}"
        path = self.upload_dir / stored_name
        try:
            self.upload_dir.mkdir(parents=True, exist_ok=True)
            path.write_bytes(data)
        except OSError as e:
            raise StorageError(f"Failed to write {stored_name}: {e}") from e

        logger.debug("Stored %d bytes (%s) at %s", len(data), content_type, path)
        return f"{self.url_prefix}/{stored_name}"

    def delete(self, url: str) -> None:
        path = self._path_for(url)
        try:
            path.unlink(missing_ok=True)
        except OSError as e:
            raise StorageError(f"Failed to delete {path.name}: {e}") from e

    def check(self) -> None:
        if not self.upload_dir.is_dir() or not os.access(self.upload_dir, os.W_OK):
            raise StorageError(f"Upload directory {self.upload_dir} is not writable")

    def _path_for(self, url: str) -> Path:
        """Map a URL produced by ``put`` back to a file inside the upload dir."""
        prefix = self.url_prefix + "/"
        if not url.startswith(prefix):
            raise StorageError(f"URL {url!r} does not belong to local storage")

        name = url[len(prefix):]
        root = self.upload_dir.resolve()
        path = (root / name).resolve()
        if path.parent != root:
            raise StorageError(f"URL {url!r} points outside the upload directory")
        return path
