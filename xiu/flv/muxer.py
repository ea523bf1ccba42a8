"""Writing of FLV file headers and tags."""

from __future__ import annotations

from collections.abc import Iterator
from contextlib import contextmanager

from ..bytesio.bytes_errors import BytesWriteError
from ..bytesio.bytes_writer import BytesWriter
from .flv_errors import MuxerError

FLV_HEADER = bytes(
    [
        0x46,  # 'F'
        0x4C,  # 'L'
        0x56,  # 'V'
        0x01,  # version
        0x05,  # audio and video tags present
        0x00, 0x00, 0x00, 0x09,  # header size
    ]
)
HEADER_LENGTH = 11


@contextmanager
def _writing() -> Iterator[None]:
    try:
        yield
    except BytesWriteError as err:
        raise MuxerError(err) from err


class FlvMuxer:
    """Builds an FLV byte stream in ``writer``."""

    def __init__(self) -> None:
        self.writer = BytesWriter()

    def write_flv_header(self) -> None:
        with _writing():
            self.writer.write(FLV_HEADER)

    def write_flv_tag_header(self, tag_type: int, data_size: int, timestamp: int) -> None:
        """Write the 11-byte tag header."""
        with _writing():
            self.writer.write_u8(tag_type)
            self.writer.write_u24(data_size)
            self.writer.write_u24(timestamp & 0xFFFFFF)
            self.writer.write_u8((timestamp >> 24) & 0xFF)
            self.writer.write_u24(0)

    def write_flv_tag_body(self, body: bytes | bytearray) -> None:
        with _writing():
            self.writer.write(body)

    def write_previous_tag_size(self, size: int) -> None:
        with _writing():
            self.writer.write_u32(size)