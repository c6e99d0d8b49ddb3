"""Cursor pagination over an ordered entry sequence.

A cursor is the name of the entry the next page starts at. CURSOR_START
asks for the head of the sequence; a returned CURSOR_END means there are
no further pages. Entry names are never empty, so the empty string is
safe for both sentinels.

Examples:
    >>> page, cursor = paginate(entries, CURSOR_START, 2)
    >>> [e.name for e in page], cursor
    (['a.txt', 'b.txt'], 'c.txt')
    >>> page, cursor = paginate(entries, cursor, 2)
    >>> [e.name for e in page], cursor
    (['c.txt'], '')
"""

from __future__ import annotations

from collections.abc import Callable, Sequence
from operator import attrgetter
from typing import TypeVar

from blobfs.storage.errors import BadCursorError

CURSOR_START = ""
CURSOR_END = ""

T = TypeVar("T")


def is_cursor_end(cursor: str) -> bool:
    """Check whether a returned cursor means the listing is exhausted."""
    return cursor == CURSOR_END


def seek(entries: Sequence[T], cursor: str, key: Callable[[T], str]) -> Sequence[T]:
    """Drop entries before the one named by cursor.

    Raises:
        BadCursorError: If no entry carries the cursor's name.
    """
    if cursor == CURSOR_START:
        return entries
    for i, entry in enumerate(entries):
        if key(entry) == cursor:
            return entries[i:]
    raise BadCursorError(cursor)


def paginate(
    entries: Sequence[T],
    cursor: str,
    count: int,
    key: Callable[[T], str] = attrgetter("name"),
) -> tuple[Sequence[T], str]:
    """Cut one page out of an ordered sequence.

    Args:
        entries: Fully ordered sequence, unfiltered.
        cursor: CURSOR_START or a cursor returned by a previous call.
        count: Page size.
        key: Returns the name a cursor is compared against.

    Returns:
        Tuple of (page entries, next cursor).

    Raises:
        BadCursorError: If the cursor names no entry.
        ValueError: If count is not positive.
    """
    if count < 1:
        raise ValueError(f"page size must be positive, got {count}")

    remaining = seek(entries, cursor, key)
    if len(remaining) > count:
        return remaining[:count], key(remaining[count])
    return remaining, CURSOR_END
