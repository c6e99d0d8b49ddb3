"""Local filesystem item.

An item is only a path and the length of its container's root prefix.
Nothing is cached: every accessor stats the file again.
"""

from __future__ import annotations

import os
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, BinaryIO

from blobfs.storage.backends.base import Item


def file_url(path: str) -> str:
    """Build a file-scheme URL over the cleaned path."""
    return Path(os.path.normpath(path)).absolute().as_uri()


class LocalItem(Item):
    """A file beneath a local container root.

    Attributes:
        path: Absolute path of the file.
        prefix_len: Length of the container root plus one separator.
    """

    def __init__(self, path: str, prefix_len: int) -> None:
        self.path = path
        self.prefix_len = prefix_len

    def __repr__(self) -> str:
        return f"LocalItem({self.path!r})"

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, LocalItem):
            return NotImplemented
        return self.path == other.path

    def __hash__(self) -> int:
        return hash(self.path)

    @property
    def id(self) -> str:
        return self.path

    @property
    def name(self) -> str:
        return self.path[self.prefix_len:]

    @property
    def url(self) -> str:
        return file_url(self.path)

    def _stat(self) -> os.stat_result:
        return os.stat(self.path)

    @property
    def size(self) -> int:
        return self._stat().st_size

    @property
    def last_modified(self) -> datetime:
        return datetime.fromtimestamp(self._stat().st_mtime, tz=timezone.utc)

    @property
    def etag(self) -> str:
        # Changes whenever the modification time does.
        return self.last_modified.strftime("%Y%m%dT%H%M%S.%fZ")

    def open(self) -> BinaryIO:
        """Open the file for reading. The caller closes the handle."""
        return open(self.path, "rb")

    def metadata(self) -> dict[str, Any]:
        """Describe the file from a fresh stat.

        Returns:
            Dict with path, name, size, is_dir, mode (octal string),
            mode_d (decimal string), modified (ISO 8601) and inode.
        """
        info = self._stat()
        mode = info.st_mode & 0o7777
        return {
            "path": self.path,
            "name": self.name,
            "size": info.st_size,
            "is_dir": os.path.isdir(self.path),
            "mode": f"{mode:o}",
            "mode_d": str(mode),
            "modified": datetime.fromtimestamp(info.st_mtime, tz=timezone.utc).isoformat(),
            "inode": info.st_ino,
        }
