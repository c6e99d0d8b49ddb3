"""Prefix and depth filtering of flattened entries.

Prefix matching is a plain string-prefix test on the entry's full path. It
is not segment aware: prefix "ab" also matches "abc/file.txt".

Depth counts separators in the part of the path after the prefix, so with
prefix "a" and max_depth 1, "a/x.txt" is kept and "a/b/c.txt" is dropped.

Examples:
    >>> f = EntryFilter(root="/srv/photos", prefix="2024", max_depth=1)
    >>> f.matches(entry)
    True
"""

from __future__ import annotations

import os

from blobfs.storage.flatten import SEPARATOR, FlatEntry


def from_slash(path: str) -> str:
    """Convert a slash-separated path to platform separators."""
    if SEPARATOR == "/":
        return path
    return path.replace("/", SEPARATOR)


class EntryFilter:
    """Decides whether a flattened entry belongs in a listing.

    Attributes:
        root: Container root the entries are relative to.
        prefix: Full-path prefix to match, empty to match everything.
        max_depth: Maximum separator count below the prefix; 0 is unlimited.
    """

    def __init__(self, root: str, prefix: str = "", max_depth: int = 0) -> None:
        self.root = root
        self.prefix = resolve_prefix(root, prefix)
        self.max_depth = max_depth

    def full_path(self, entry: FlatEntry) -> str:
        return os.path.join(self.root, entry.name)

    def matches(self, entry: FlatEntry) -> bool:
        """Check an entry against the prefix and depth bounds.

        Args:
            entry: Entry produced by the tree walk.

        Returns:
            True if the entry should appear in the listing.
        """
        if entry.is_dir:
            return False
        if not self.prefix:
            return True

        path = self.full_path(entry)
        if not path.startswith(self.prefix):
            return False

        if self.max_depth > 0:
            remainder = path[len(self.prefix):]
            if remainder.startswith(SEPARATOR):
                remainder = remainder[1:]
            if remainder.count(SEPARATOR) >= self.max_depth:
                return False
        return True


def resolve_prefix(root: str, prefix: str) -> str:
    """Turn a caller prefix into a full-path prefix.

    Relative prefixes are appended to the root with a single separator
    and no normalization, so partial names keep matching byte-wise.

    Args:
        root: Container root path.
        prefix: Prefix as given by the caller, slash or native separated.

    Returns:
        Full-path prefix, or "" if no prefix was given.
    """
    if not prefix:
        return ""
    prefix = from_slash(prefix)
    if os.path.isabs(prefix):
        return prefix
    return root.rstrip(SEPARATOR) + SEPARATOR + prefix
