"""Local filesystem storage backend.

A location is a directory; each of its subdirectories is a container; every
file anywhere below a container directory is an item of that container.
Listings re-walk the container tree on every call, there is no index.

Examples:
    >>> location = LocalLocation(LocationConfig(path="/srv/blobs"))
    >>> photos = location.create_container("photos")
    >>> with open("beach.jpg", "rb") as f:
    ...     photos.put("2024/beach.jpg", f, size=0)
    >>> items, cursor = photos.items("2024", CURSOR_START, 100, depth=1)
"""

from __future__ import annotations

import logging
import os
import shutil
import stat
from pathlib import Path
from typing import Any, BinaryIO
from urllib.parse import urlparse
from urllib.request import url2pathname

from blobfs.storage.backends.base import Container, Location
from blobfs.storage.backends.local_item import LocalItem, file_url
from blobfs.storage.config import LocationConfig
from blobfs.storage.errors import NotFoundError, SizeMismatchError, UnexpectedDirectoryError
from blobfs.storage.filters import EntryFilter, from_slash
from blobfs.storage.flatten import SEPARATOR, flatten_tree
from blobfs.storage.paginator import paginate
from blobfs.storage.registry import register

logger = logging.getLogger(__name__)

KIND = "local"
CHUNK_SIZE = 64 * 1024  # 64 KB


def copy_stream(src: BinaryIO, dst: BinaryIO) -> int:
    """Copy src to dst in 64 KB chunks, returning the bytes copied."""
    written = 0
    while chunk := src.read(CHUNK_SIZE):
        dst.write(chunk)
        written += len(chunk)
    return written


class LocalContainer(Container):
    """A directory exposed as a flat item namespace.

    Attributes:
        path: Absolute, canonical root directory of the container.
    """

    def __init__(self, name: str, path: str) -> None:
        self._name = name
        self._path = path

    def __repr__(self) -> str:
        return f"LocalContainer({self._name!r}, {self._path!r})"

    @property
    def path(self) -> str:
        return self._path

    @property
    def id(self) -> str:
        return self._path

    @property
    def name(self) -> str:
        return self._name

    @property
    def url(self) -> str:
        return file_url(self._path)

    def _item(self, path: str) -> LocalItem:
        return LocalItem(path, prefix_len=len(self._path) + 1)

    def _resolve(self, name: str) -> str:
        return os.path.join(self._path, from_slash(name))

    def _check_relative(self, path: str) -> None:
        """Raise ValueError if path cannot be expressed relative to the root.

        On Windows this happens when path and root are on different drives.
        """
        os.path.relpath(path, self._path)

    def items(self, prefix: str, cursor: str, count: int, depth: int = 0) -> tuple[list[LocalItem], str]:
        """List one page of items.

        The page is cut from the full depth-ordered tree before the prefix
        and depth filter runs, so a page can hold fewer than count items,
        or none, and still return a cursor for the next page.

        Args:
            prefix: Path prefix, relative to the container or absolute.
            cursor: CURSOR_START or the cursor of the previous page.
            count: Number of tree entries to scan for this page.
            depth: Maximum nesting below the prefix; 0 is unlimited.

        Returns:
            Tuple of (items, next cursor).

        Raises:
            BadCursorError: If the cursor is not in the current tree.
            OSError: If the tree cannot be walked.
        """
        entries = flatten_tree(self._path)
        page, next_cursor = paginate(entries, cursor, count)

        entry_filter = EntryFilter(self._path, prefix, depth)
        items = [
            self._item(entry_filter.full_path(entry))
            for entry in page
            if entry_filter.matches(entry)
        ]
        logger.debug(
            f"Listed {self._name}: {len(items)}/{len(page)} entries kept, "
            f"next cursor {next_cursor!r}"
        )
        return items, next_cursor

    def item(self, id: str) -> LocalItem:
        """Fetch a file by absolute path or path relative to the root.

        Raises:
            NotFoundError: If nothing exists at the path.
            UnexpectedDirectoryError: If the path is a directory.
            ValueError: If the path cannot be made relative to the root.
        """
        path = id if os.path.isabs(id) else self._resolve(id)
        try:
            info = os.stat(path)
        except FileNotFoundError:
            raise NotFoundError(id) from None
        if stat.S_ISDIR(info.st_mode):
            raise UnexpectedDirectoryError(path)
        self._check_relative(path)
        return self._item(path)

    def create_item(self, name: str) -> tuple[LocalItem, BinaryIO]:
        """Create or truncate a file and return it with an open writer.

        The parent directory must already exist. The caller closes the
        writer.
        """
        path = self._resolve(name)
        f = open(path, "wb")
        return self._item(path), f

    def put(
        self,
        name: str,
        stream: BinaryIO,
        size: int,
        metadata: dict[str, Any] | None = None,
    ) -> LocalItem:
        """Write a file from a byte stream, creating parent directories.

        Args:
            name: Item name; an absolute path is made relative to the root.
            stream: Readable binary stream.
            size: Declared size, checked when positive.
            metadata: Ignored by the local backend.

        Returns:
            The written item.

        Raises:
            SizeMismatchError: If size is positive and differs from the bytes
                copied. The copied bytes stay on disk.
            OSError: If the file cannot be created or written. A partially
                written file is left in place.
        """
        if os.path.isabs(name):
            name = os.path.relpath(name, self._path)

        path = self._resolve(name)
        p = Path(path)
        p.parent.mkdir(parents=True, exist_ok=True)
        with p.open("wb") as f:
            written = copy_stream(stream, f)

        if size > 0 and written != size:
            raise SizeMismatchError(size, written, path)
        logger.info(f"Item written: {path} ({written} bytes)")
        return self._item(path)

    def remove_item(self, id: str) -> None:
        """Remove a file by its id. The path is not checked against the root."""
        os.remove(id)
        logger.info(f"Item removed: {id}")


class LocalLocation(Location):
    """A directory whose subdirectories are containers.

    Attributes:
        config: Validated location configuration.
    """

    def __init__(self, config: LocationConfig) -> None:
        self.config = config

    def __repr__(self) -> str:
        return f"LocalLocation({self.root!r})"

    @property
    def root(self) -> str:
        return self.config.path

    def _resolve(self, id: str) -> str:
        if os.path.isabs(id):
            return id
        return os.path.join(self.root, from_slash(id))

    def _container(self, path: str) -> LocalContainer:
        return LocalContainer(os.path.basename(path), path)

    def containers(self, prefix: str, cursor: str, count: int) -> tuple[list[LocalContainer], str]:
        """List one page of containers, ordered by name.

        Raises:
            BadCursorError: If the cursor names no current container.
        """
        with os.scandir(self.root) as it:
            names = sorted(
                d.name for d in it
                if d.is_dir(follow_symlinks=False) and d.name.startswith(prefix)
            )
        page, next_cursor = paginate(names, cursor, count, key=str)
        return [self._container(os.path.join(self.root, n)) for n in page], next_cursor

    def container(self, id: str) -> LocalContainer:
        """Fetch a container by path, absolute or relative to the root.

        Raises:
            NotFoundError: If the path is missing or not a directory.
        """
        path = self._resolve(id)
        if not os.path.isdir(path):
            raise NotFoundError(id)
        return self._container(os.path.realpath(path))

    def create_container(self, name: str) -> LocalContainer:
        """Create a container directory. Existing directories are reused."""
        path = self._resolve(name)
        Path(path).mkdir(parents=True, exist_ok=True)
        logger.info(f"Container created: {path}")
        return self._container(os.path.realpath(path))

    def remove_container(self, id: str) -> None:
        """Remove a container directory and everything below it.

        Raises:
            NotFoundError: If the container does not exist.
        """
        path = self.container(id).path
        shutil.rmtree(path)
        logger.info(f"Container removed: {path}")

    def item_by_url(self, url: str) -> LocalItem:
        """Resolve a file URL to an item.

        Files below the location root belong to the container named by their
        first path segment; any other file belongs to its parent directory.

        Raises:
            ValueError: If the URL is not a file URL.
            NotFoundError: If the file or its container does not exist.
        """
        parsed = urlparse(url)
        if parsed.scheme != "file":
            raise ValueError(f"not a file URL: {url}")
        path = os.path.realpath(url2pathname(parsed.path))

        rel = os.path.relpath(path, self.root)
        outside = rel == os.pardir or rel.startswith(os.pardir + SEPARATOR)
        if outside or SEPARATOR not in rel:
            container_path = os.path.dirname(path)
        else:
            container_path = os.path.join(self.root, rel.split(SEPARATOR, 1)[0])
        return self.container(container_path).item(path)


def validate_config(config: Any) -> LocationConfig:
    return LocationConfig.model_validate(config)


def dial_location(config: Any) -> LocalLocation:
    return LocalLocation(validate_config(config))


register(KIND, dial_location, validate_config)
