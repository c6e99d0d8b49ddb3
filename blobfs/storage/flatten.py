"""Tree flattening and entry ordering.

Walks a directory subtree once and flattens it into a list of entries named
by their path relative to the walk root. The list is ordered so entries
closer to the root come first, which keeps pagination cursors valid between
calls on an unchanged tree.

Examples:
    >>> from blobfs.storage.flatten import flatten_tree
    >>> [e.name for e in flatten_tree("/srv/blobs/photos")]
    ['cover.jpg', 'readme.txt', '2024/beach.jpg', '2024/06/sunset.jpg']
"""

from __future__ import annotations

import os
import stat as stat_module
from dataclasses import dataclass

SEPARATOR = os.sep


@dataclass(frozen=True)
class FlatEntry:
    """A file found by the tree walk.

    Attributes:
        name: Path relative to the walk root, with platform separators.
        is_dir: Whether the underlying entry is a directory.
        stat: File metadata captured during the walk.
    """

    name: str
    is_dir: bool
    stat: os.stat_result

    @property
    def depth(self) -> int:
        return entry_depth(self.name)


def entry_depth(name: str) -> int:
    """Count path separators in a relative name."""
    return name.count(SEPARATOR)


def order_entries(entries: list[FlatEntry]) -> list[FlatEntry]:
    """Sort entries shallowest first, ties broken by name.

    Args:
        entries: Flattened entries in walk order.

    Returns:
        New list ordered by (depth, name).
    """
    return sorted(entries, key=lambda e: (e.depth, e.name))


def flatten_tree(root: str) -> list[FlatEntry]:
    """Walk a directory subtree and return its files, ordered by depth.

    Directories are descended into but not returned. Symlinked directories
    are not followed.

    Args:
        root: Directory to walk.

    Returns:
        Ordered list of FlatEntry, one per non-directory entry.

    Raises:
        OSError: If any directory cannot be read or any entry cannot be
            stat'ed.
        ValueError: If a path cannot be made relative to root.
    """
    entries: list[FlatEntry] = []
    pending = [root]
    while pending:
        directory = pending.pop()
        with os.scandir(directory) as it:
            for dirent in it:
                info = dirent.stat(follow_symlinks=False)
                if stat_module.S_ISDIR(info.st_mode):
                    pending.append(dirent.path)
                    continue
                flat_name = os.path.relpath(dirent.path, root)
                entries.append(FlatEntry(name=flat_name, is_dir=False, stat=info))
    return order_entries(entries)
