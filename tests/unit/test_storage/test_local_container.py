"""Tests for blobfs.storage.backends.local.LocalContainer.

Covers:
    - items: ordering, pagination, prefix/depth filtering, bad cursors
    - item: relative and absolute ids, not found, directories
    - put / create_item / remove_item
"""

import io
import os
from pathlib import Path

import pytest

from blobfs.storage import (
    CURSOR_START,
    BadCursorError,
    NotFoundError,
    SizeMismatchError,
    UnexpectedDirectoryError,
    is_cursor_end,
    walk_items,
)
from tests.utils.trees import make_tree, native


def _names(items):
    return [item.name for item in items]


class TestContainerIdentity:
    """Tests for id, name and url."""

    def test_id_is_path(self, container, location_root):
        assert container.id == container.path
        assert container.path == os.path.realpath(location_root / "photos")

    def test_name(self, container):
        assert container.name == "photos"

    def test_url(self, container):
        assert container.url == Path(container.path).as_uri()


class TestItems:
    """Tests for LocalContainer.items()."""

    def test_full_listing_in_depth_order(self, sample_container):
        items, cursor = sample_container.items("", CURSOR_START, 100)
        assert _names(items) == [native("top.txt"), native("a/x.txt"), native("a/b/c.txt")]
        assert is_cursor_end(cursor)

    def test_listing_is_stable(self, sample_container):
        first, _ = sample_container.items("", CURSOR_START, 3)
        second, _ = sample_container.items("", CURSOR_START, 3)
        assert _names(first) == _names(second)

    def test_items_are_absolute_paths(self, sample_container):
        items, _ = sample_container.items("", CURSOR_START, 100)
        for item in items:
            assert os.path.isabs(item.id)
            assert item.id == os.path.join(sample_container.path, item.name)

    def test_first_page_cursor(self, sample_container):
        items, cursor = sample_container.items("", CURSOR_START, 1)
        assert _names(items) == [native("top.txt")]
        assert cursor == native("a/x.txt")

    def test_resume_from_cursor(self, sample_container):
        _, cursor = sample_container.items("", CURSOR_START, 1)
        items, cursor = sample_container.items("", cursor, 1)
        assert _names(items) == [native("a/x.txt")]
        assert cursor == native("a/b/c.txt")

    def test_empty_container(self, container):
        items, cursor = container.items("", CURSOR_START, 10)
        assert items == []
        assert is_cursor_end(cursor)

    def test_pagination_is_complete(self, container):
        files = {f"d{i % 4}/sub{i % 2}/f{i:02d}.txt": b"" for i in range(30)}
        files.update({f"root{i}.txt": b"" for i in range(5)})
        make_tree(Path(container.path), files)

        everything, _ = container.items("", CURSOR_START, 1000)
        for page_size in (1, 4, 7, 35, 50):
            paged = list(walk_items(container, page_size=page_size))
            assert _names(paged) == _names(everything)
            assert len(set(_names(paged))) == 35

    def test_bad_cursor(self, sample_container):
        with pytest.raises(BadCursorError):
            sample_container.items("", "no/such/entry.txt", 10)

    def test_cursor_invalid_after_deletion(self, sample_container):
        _, cursor = sample_container.items("", CURSOR_START, 1)
        os.remove(os.path.join(sample_container.path, cursor))
        with pytest.raises(BadCursorError):
            sample_container.items("", cursor, 1)

    def test_directories_not_listed(self, sample_container):
        os.mkdir(os.path.join(sample_container.path, "empty"))
        items, _ = sample_container.items("", CURSOR_START, 100)
        assert native("empty") not in _names(items)
        assert len(items) == 3


class TestItemsFiltering:
    """Prefix and depth filtering through LocalContainer.items()."""

    def test_depth_one(self, sample_container):
        items, _ = sample_container.items("a", CURSOR_START, 100, 1)
        assert _names(items) == [native("a/x.txt")]

    def test_depth_two(self, sample_container):
        items, _ = sample_container.items("a", CURSOR_START, 100, 2)
        assert _names(items) == [native("a/x.txt"), native("a/b/c.txt")]

    def test_depth_zero_unlimited(self, sample_container):
        items, _ = sample_container.items("a", CURSOR_START, 100, 0)
        assert _names(items) == [native("a/x.txt"), native("a/b/c.txt")]

    def test_slash_prefix(self, sample_container):
        items, _ = sample_container.items("a/b", CURSOR_START, 100)
        assert _names(items) == [native("a/b/c.txt")]

    def test_absolute_prefix(self, sample_container):
        prefix = os.path.join(sample_container.path, "a")
        items, _ = sample_container.items(prefix, CURSOR_START, 100, 1)
        assert _names(items) == [native("a/x.txt")]

    def test_prefix_matches_partial_names(self, container):
        make_tree(Path(container.path), {"ab/1.txt": b"", "abc/2.txt": b"", "b/3.txt": b""})
        items, _ = container.items("ab", CURSOR_START, 100)
        assert sorted(_names(items)) == [native("ab/1.txt"), native("abc/2.txt")]

    def test_filtered_page_can_be_empty_but_advances(self, sample_container):
        # The first entry (top.txt) is dropped by the prefix after the page is cut.
        items, cursor = sample_container.items("a", CURSOR_START, 1)
        assert items == []
        assert cursor == native("a/x.txt")

        items, cursor = sample_container.items("a", cursor, 1)
        assert _names(items) == [native("a/x.txt")]

    def test_prefix_without_matches(self, sample_container):
        items, cursor = sample_container.items("nope", CURSOR_START, 100)
        assert items == []
        assert is_cursor_end(cursor)


class TestItem:
    """Tests for LocalContainer.item()."""

    def test_relative_id(self, sample_container):
        item = sample_container.item("a/x.txt")
        assert item.name == native("a/x.txt")
        assert item.id == os.path.join(sample_container.path, native("a/x.txt"))

    def test_absolute_id(self, sample_container):
        path = os.path.join(sample_container.path, "top.txt")
        assert sample_container.item(path).name == "top.txt"

    def test_listing_id_round_trips(self, sample_container):
        items, _ = sample_container.items("", CURSOR_START, 100)
        for item in items:
            assert sample_container.item(item.id) == item

    def test_not_found(self, sample_container):
        with pytest.raises(NotFoundError):
            sample_container.item("missing.txt")

    def test_directory(self, sample_container):
        with pytest.raises(UnexpectedDirectoryError):
            sample_container.item("a")

    def test_path_not_relative_to_root(self, sample_container, monkeypatch):
        def different_drive(path, start=None):
            raise ValueError("path is on mount 'D:', start on mount 'C:'")

        monkeypatch.setattr(os.path, "relpath", different_drive)
        with pytest.raises(ValueError):
            sample_container.item("top.txt")


class TestPut:
    """Tests for LocalContainer.put()."""

    def test_round_trip(self, container):
        data = b"hello blob"
        item = container.put("note.txt", io.BytesIO(data), len(data))
        fetched = container.item("note.txt")
        assert fetched == item
        with fetched.open() as f:
            assert f.read() == data

    def test_creates_parents(self, container):
        item = container.put("deep/er/file.bin", io.BytesIO(b"x"), 1)
        assert item.name == native("deep/er/file.bin")
        assert os.path.isfile(item.id)

    def test_existing_parents_are_reused(self, sample_container):
        sample_container.put("a/b/new.txt", io.BytesIO(b"n"), 1)
        with sample_container.item("a/b/c.txt").open() as f:
            assert f.read() == b"c"
        assert (Path(sample_container.path) / "a" / "b" / "new.txt").read_bytes() == b"n"

    def test_overwrites(self, container):
        container.put("f.txt", io.BytesIO(b"first"), 0)
        container.put("f.txt", io.BytesIO(b"2nd"), 0)
        with container.item("f.txt").open() as f:
            assert f.read() == b"2nd"

    def test_zero_size_unchecked(self, container):
        item = container.put("f.txt", io.BytesIO(b"anything"), 0)
        assert item.size == 8

    def test_size_mismatch_keeps_written_bytes(self, container):
        with pytest.raises(SizeMismatchError) as exc_info:
            container.put("short.bin", io.BytesIO(b"abc"), 10)
        assert exc_info.value.expected == 10
        assert exc_info.value.written == 3
        with open(os.path.join(container.path, "short.bin"), "rb") as f:
            assert f.read() == b"abc"

    def test_size_too_small(self, container):
        with pytest.raises(SizeMismatchError):
            container.put("long.bin", io.BytesIO(b"abcdef"), 2)

    def test_absolute_name_inside_root(self, container):
        name = os.path.join(container.path, "sub", "abs.txt")
        item = container.put(name, io.BytesIO(b"a"), 1)
        assert item.name == native("sub/abs.txt")

    def test_large_stream(self, container):
        data = os.urandom(200 * 1024)
        item = container.put("big.bin", io.BytesIO(data), len(data))
        assert item.size == len(data)

    def test_listed_after_put(self, container):
        container.put("a/new.txt", io.BytesIO(b"n"), 1)
        items, _ = container.items("", CURSOR_START, 10)
        assert _names(items) == [native("a/new.txt")]


class TestCreateAndRemove:
    """Tests for create_item() and remove_item()."""

    def test_create_item(self, container):
        item, writer = container.create_item("created.txt")
        with writer:
            writer.write(b"abc")
        assert item.name == "created.txt"
        assert item.size == 3

    def test_create_item_needs_parent(self, container):
        with pytest.raises(FileNotFoundError):
            container.create_item("no/parent.txt")

    def test_remove_item(self, sample_container):
        item = sample_container.item("top.txt")
        sample_container.remove_item(item.id)
        with pytest.raises(NotFoundError):
            sample_container.item("top.txt")

    def test_remove_missing_raises_os_error(self, sample_container):
        with pytest.raises(FileNotFoundError):
            sample_container.remove_item(os.path.join(sample_container.path, "gone.txt"))


class TestIOFailures:
    """Underlying I/O errors propagate unchanged."""

    def test_walk_failure_propagates(self, sample_container, monkeypatch):
        def scandir(path):
            raise PermissionError(13, "Permission denied", os.fspath(path))

        monkeypatch.setattr(os, "scandir", scandir)
        with pytest.raises(PermissionError):
            sample_container.items("", CURSOR_START, 10)
