"""Errors raised while building an MPEG transport stream."""

from __future__ import annotations

from enum import Enum


class MpegTsErrorKind(Enum):
    """Reasons transport stream muxing can fail."""

    BYTES_READ_ERROR = "bytes read error"
    BYTES_WRITE_ERROR = "bytes write error"
    IO_ERROR = "io error"
    PROGRAM_NUMBER_EXISTS = "program number exists"
    PMT_COUNT_EXCEEDED = "pmt count exceeded"
    STREAM_COUNT_EXCEEDED = "stream count exceeded"
    STREAM_NOT_FOUND = "stream not found"


class MpegTsError(Exception):
    """Raised when a transport stream cannot be built."""

    def __init__(self, kind: MpegTsErrorKind, detail: object | None = None) -> None:
        self.kind = kind
        self.detail = detail
        message = kind.value if detail is None else f"{kind.value}: {detail}"
        super().__init__(message)