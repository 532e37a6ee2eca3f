from __future__ import annotations

import logging
from pathlib import Path
from typing import Iterable, Optional, Protocol
from urllib.parse import urlparse

logger = logging.getLogger(__name__)


class FileStorage(Protocol):
    """Where uploaded document images live.

    Uploads themselves happen client-side; the service only ever removes files.
    """

    def delete_files(self, keys: Iterable[str]) -> None:
        raise NotImplementedError


def extract_file_key(url: Optional[str]) -> Optional[str]:
    """Return the path segment following "/f/" in an upload URL.

    e.g. https://utfs.io/f/abc123 -> "abc123"
    """
    if not url:
        return None
    try:
        parsed = urlparse(url)
    except ValueError:
        return None
    if not parsed.scheme or not parsed.netloc:
        return None
    parts = parsed.path.split("/")
    if "f" not in parts:
        return None
    idx = parts.index("f")
    if idx + 1 < len(parts) and parts[idx + 1]:
        return parts[idx + 1]
    return None


def file_keys(*urls: Optional[str]) -> list[str]:
    keys = []
    for url in urls:
        key = extract_file_key(url)
        if key:
            keys.append(key)
    return keys


class LocalFileStorage(FileStorage):
    """Upload directory on the local disk, one file per key."""

    def __init__(self, base_dir: str | Path):
        self.base_dir = Path(base_dir)

    def path_for(self, key: str) -> Path:
        # Keys are single path segments; refuse anything that walks out.
        name = Path(key).name
        if not name or name != key:
            raise ValueError(f"Invalid file key: {key!r}")
        return self.base_dir / name

    def delete_files(self, keys: Iterable[str]) -> None:
        for key in keys:
            path = self.path_for(key)
            if path.exists():
                path.unlink()
                logger.debug("Deleted upload %s", path)
            else:
                logger.debug("Upload %s already gone", path)
