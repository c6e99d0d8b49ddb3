"""Helpers that follow cursors across every page of a listing.

Examples:
    >>> for item in walk_items(container, prefix="2024", page_size=100):
    ...     print(item.name)
"""

from __future__ import annotations

from collections.abc import Iterator

from blobfs.storage.backends.base import Container, Item, Location
from blobfs.storage.paginator import CURSOR_START, is_cursor_end


def walk_items(container: Container, prefix: str = "", page_size: int = 100, depth: int = 0) -> Iterator[Item]:
    """Yield every item of a container, page by page.

    Raises:
        BadCursorError: If the tree changes so an in-flight cursor disappears.
    """
    cursor = CURSOR_START
    while True:
        items, cursor = container.items(prefix, cursor, page_size, depth)
        yield from items
        if is_cursor_end(cursor):
            return


def walk_containers(location: Location, prefix: str = "", page_size: int = 100) -> Iterator[Container]:
    """Yield every container of a location, page by page."""
    cursor = CURSOR_START
    while True:
        containers, cursor = location.containers(prefix, cursor, page_size)
        yield from containers
        if is_cursor_end(cursor):
            return
