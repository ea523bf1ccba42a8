"""Errors raised by the byte readers, writers and stream I/O."""

from __future__ import annotations

from enum import Enum


class _KindError(Exception):
    """Base for errors that carry a kind describing what went wrong."""

    def __init__(self, kind: Enum, detail: object | None = None) -> None:
        self.kind = kind
        self.detail = detail
        message = kind.value if detail is None else f"{kind.value}: {detail}"
        super().__init__(message)


class BytesReadErrorKind(Enum):
    """Reasons a read from a byte buffer can fail."""

    NOT_ENOUGH_BYTES = "not enough bytes to read"
    EMPTY_STREAM = "empty stream"
    IO = "io error"
    INDEX_OUT_OF_RANGE = "index out of range"


class BytesReadError(_KindError):
    """Raised when bytes cannot be read from a buffer."""

    kind: BytesReadErrorKind


class BytesWriteErrorKind(Enum):
    """Reasons a write to a byte buffer or stream can fail."""

    IO = "io error"
    BYTES_IO_ERROR = "not enough bytes to write"
    TIMEOUT = "write time out"
    OUT_OF_INDEX = "out of index"


class BytesWriteError(_KindError):
    """Raised when bytes cannot be written."""

    kind: BytesWriteErrorKind


class BytesIOErrorKind(Enum):
    """Reasons stream I/O can fail."""

    NOT_ENOUGH_BYTES = "not enough bytes"
    EMPTY_STREAM = "empty stream"
    IO_ERROR = "io error"
    TIMEOUT_ERROR = "time out error"
    NONE_RETURN = "none return"


class BytesIOError(_KindError):
    """Raised when reading from or writing to a stream fails."""

    kind: BytesIOErrorKind