"""Blob storage package for blobfs.

Exposes a directory tree as locations, containers and items with an
opaque-cursor listing contract.

Examples:
    >>> from blobfs.storage import CURSOR_START, LocationConfig, dial
    >>> location = dial("local", LocationConfig(path="/srv/blobs"))
    >>> items, cursor = location.container("photos").items("", CURSOR_START, 50)
"""

from blobfs.storage.backends import Container, Item, LocalContainer, LocalItem, LocalLocation, Location
from blobfs.storage.config import LocationConfig
from blobfs.storage.errors import (
    BadCursorError,
    ErrorKind,
    NotFoundError,
    SizeMismatchError,
    StorageError,
    UnexpectedDirectoryError,
    error_kind,
)
from blobfs.storage.paginator import CURSOR_END, CURSOR_START, is_cursor_end
from blobfs.storage.registry import dial, kinds, register, validate
from blobfs.storage.walk import walk_containers, walk_items

__all__ = [
    "BadCursorError",
    "CURSOR_END",
    "CURSOR_START",
    "Container",
    "ErrorKind",
    "Item",
    "LocalContainer",
    "LocalItem",
    "LocalLocation",
    "Location",
    "LocationConfig",
    "NotFoundError",
    "SizeMismatchError",
    "StorageError",
    "UnexpectedDirectoryError",
    "dial",
    "error_kind",
    "is_cursor_end",
    "kinds",
    "register",
    "validate",
    "walk_containers",
    "walk_items",
]
