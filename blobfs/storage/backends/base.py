"""Abstract base classes for storage backends.

A backend provides three layers: a Location holding Containers, and
Containers holding Items. Callers only see these interfaces, so every
backend is listed, fetched and written the same way.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from datetime import datetime
from typing import Any, BinaryIO


class Item(ABC):
    """A single addressable blob inside a container."""

    @property
    @abstractmethod
    def id(self) -> str:
        """Stable identity string, usable with Container.item()."""

    @property
    @abstractmethod
    def name(self) -> str:
        """Name of the item relative to its container."""

    @property
    @abstractmethod
    def url(self) -> str:
        """Canonical locator for the item."""

    @property
    @abstractmethod
    def size(self) -> int:
        """Size of the item in bytes."""

    @property
    @abstractmethod
    def last_modified(self) -> datetime:
        """Time the item was last modified."""

    @property
    @abstractmethod
    def etag(self) -> str:
        """Opaque version tag that changes when the item changes."""

    @abstractmethod
    def open(self) -> BinaryIO:
        """Open the item's content for reading. Caller closes."""

    @abstractmethod
    def metadata(self) -> dict[str, Any]:
        """Backend-specific metadata for the item."""


class Container(ABC):
    """A flat, paginated namespace of items."""

    @property
    @abstractmethod
    def id(self) -> str:
        """Stable identity string, usable with Location.container()."""

    @property
    @abstractmethod
    def name(self) -> str:
        """Human-readable container name."""

    @property
    @abstractmethod
    def url(self) -> str:
        """Canonical locator for the container."""

    @abstractmethod
    def items(self, prefix: str, cursor: str, count: int, depth: int = 0) -> tuple[list[Item], str]:
        """List one page of items.

        Args:
            prefix: Only return items whose path starts with this prefix.
            cursor: CURSOR_START or the cursor returned by the previous page.
            count: Maximum number of entries scanned for this page.
            depth: Maximum nesting below the prefix; 0 is unlimited.

        Returns:
            Tuple of (items, next cursor). The next cursor is CURSOR_END
            when there are no further pages.
        """

    @abstractmethod
    def item(self, id: str) -> Item:
        """Fetch a single item by id."""

    @abstractmethod
    def create_item(self, name: str) -> tuple[Item, BinaryIO]:
        """Create an empty item and return it with an open writer."""

    @abstractmethod
    def put(
        self,
        name: str,
        stream: BinaryIO,
        size: int,
        metadata: dict[str, Any] | None = None,
    ) -> Item:
        """Write an item from a byte stream.

        Args:
            name: Item name relative to the container.
            stream: Readable binary stream with the content.
            size: Declared size; checked against bytes copied when positive.
            metadata: Optional backend metadata.
        """

    @abstractmethod
    def remove_item(self, id: str) -> None:
        """Remove an item by id."""


class Location(ABC):
    """The top-level handle of a backend, holding containers."""

    @abstractmethod
    def containers(self, prefix: str, cursor: str, count: int) -> tuple[list[Container], str]:
        """List one page of containers whose names start with prefix."""

    @abstractmethod
    def container(self, id: str) -> Container:
        """Fetch a container by id."""

    @abstractmethod
    def create_container(self, name: str) -> Container:
        """Create a new container."""

    @abstractmethod
    def remove_container(self, id: str) -> None:
        """Remove a container and everything in it."""

    @abstractmethod
    def item_by_url(self, url: str) -> Item:
        """Resolve an item from its URL."""

    def close(self) -> None:
        """Release any resources held by the location."""
