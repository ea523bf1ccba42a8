"""Errors raised while muxing and demuxing FLV and its payloads."""

from __future__ import annotations

from enum import Enum

from ..bytesio.bytes_errors import BytesReadError, BytesWriteError


class _KindError(Exception):
    """Base for errors that carry a kind describing what went wrong."""

    def __init__(self, kind: Enum, detail: object | None = None) -> None:
        self.kind = kind
        self.detail = detail
        message = kind.value if detail is None else f"{kind.value}: {detail}"
        super().__init__(message)


class TagParseErrorKind(Enum):
    """Reasons parsing an FLV tag can fail."""

    BYTES_READ_ERROR = "bytes read error"
    TAG_DATA_LENGTH = "tag data length error"
    UNKNOWN_TAG_TYPE = "unknown tag type error"


class TagParseError(_KindError):
    """Raised when an FLV tag cannot be parsed."""

    kind: TagParseErrorKind


class MuxerError(Exception):
    """Raised when writing FLV output fails."""

    def __init__(self, cause: BytesWriteError) -> None:
        self.cause = cause
        super().__init__("bytes write error")


class MpegAacErrorKind(Enum):
    """Reasons AAC or AVC payload processing can fail."""

    BYTES_READ_ERROR = "bytes read error"
    BYTES_WRITE_ERROR = "bytes write error"
    NOT_ENOUGH_BITS_TO_READ = "there is not enough bits to read"
    SHOULD_NOT_COME_HERE = "should not come here"


class MpegAvcError(_KindError):
    """Raised when an AVC payload cannot be processed."""

    kind: MpegAacErrorKind


class MpegAacError(_KindError):
    """Raised when an AAC payload cannot be processed."""

    kind: MpegAacErrorKind


_DEMUXER_CAUSES: tuple[tuple[type[Exception], str], ...] = (
    (BytesWriteError, "bytes write error"),
    (BytesReadError, "bytes read error"),
    (MpegAvcError, "mpeg avc error"),
    (MpegAacError, "mpeg aac error"),
)


class FlvDemuxerError(Exception):
    """Raised when demuxing FLV fails; ``cause`` holds the underlying error."""

    def __init__(self, cause: Exception) -> None:
        for cause_type, message in _DEMUXER_CAUSES:
            if isinstance(cause, cause_type):
                break
        else:
            raise TypeError(f"unsupported demuxer error cause: {type(cause).__name__}")
        self.cause = cause
        super().__init__(message)


class BitVecError(Exception):
    """Raised when a bit vector has too few bits left."""

    def __init__(self) -> None:
        super().__init__("not enough bits left")