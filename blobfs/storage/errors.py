"""Storage error taxonomy.

Every failure a storage call can raise belongs to exactly one ErrorKind.
Storage-specific conditions are StorageError subclasses; underlying I/O
failures propagate as the raw OSError and classify as IO_FAILURE.

Examples:
    >>> try:
    ...     container.item("missing.txt")
    ... except StorageError as e:
    ...     e.kind
    <ErrorKind.NOT_FOUND: 'not_found'>
"""

from __future__ import annotations

from enum import Enum


class ErrorKind(str, Enum):
    """Closed set of storage failure kinds."""

    NOT_FOUND = "not_found"
    BAD_CURSOR = "bad_cursor"
    UNEXPECTED_DIRECTORY = "unexpected_directory"
    SIZE_MISMATCH = "size_mismatch"
    IO_FAILURE = "io_failure"


class StorageError(Exception):
    """Base exception for storage errors.

    Attributes:
        kind: The ErrorKind this error belongs to.
        target: Path, id or cursor the error refers to (if any).
    """

    kind: ErrorKind

    def __init__(self, message: str, target: str | None = None) -> None:
        super().__init__(message)
        self.target = target

    def __str__(self) -> str:
        if self.target:
            return f"{self.args[0]}: {self.target}"
        return self.args[0]


class NotFoundError(StorageError):
    """The requested item or container does not exist."""

    kind = ErrorKind.NOT_FOUND

    def __init__(self, target: str | None = None) -> None:
        super().__init__("not found", target)


class BadCursorError(StorageError):
    """The cursor does not name any entry of the current listing.

    Raised when the tree changed so the cursor's entry disappeared, or when
    the cursor was corrupted or came from a different container.
    """

    kind = ErrorKind.BAD_CURSOR

    def __init__(self, cursor: str) -> None:
        super().__init__("bad cursor", cursor)


class UnexpectedDirectoryError(StorageError):
    """The target resolves to a directory where a file was expected."""

    kind = ErrorKind.UNEXPECTED_DIRECTORY

    def __init__(self, target: str | None = None) -> None:
        super().__init__("unexpected directory", target)


class SizeMismatchError(StorageError):
    """Bytes written by a put differ from the declared size.

    Attributes:
        expected: Declared size.
        written: Bytes actually copied.
    """

    kind = ErrorKind.SIZE_MISMATCH

    def __init__(self, expected: int, written: int, target: str | None = None) -> None:
        super().__init__(f"bad size (expected {expected}, wrote {written})", target)
        self.expected = expected
        self.written = written


def error_kind(exc: BaseException) -> ErrorKind | None:
    """Classify an exception raised by a storage call.

    Args:
        exc: Exception raised by a storage operation.

    Returns:
        The matching ErrorKind, or None if the exception is not a storage
        or I/O failure (e.g. a programming error).
    """
    if isinstance(exc, StorageError):
        return exc.kind
    if isinstance(exc, OSError):
        return ErrorKind.IO_FAILURE
    return None
