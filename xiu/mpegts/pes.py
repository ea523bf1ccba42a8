"""Elementary stream state and PES packet header writing."""

from __future__ import annotations

from collections.abc import Iterator
from contextlib import contextmanager
from dataclasses import dataclass

from ..bytesio.bytes_errors import BytesWriteError
from ..bytesio.bytes_writer import BytesWriter
from .ts_define import PES_HEADER_LEN, PTS_NO_VALUE, PsiStreamType
from .ts_errors import MpegTsError, MpegTsErrorKind

_H264_AUD = bytes([0x00, 0x00, 0x00, 0x01, 0x09, 0xF0])
_MAX_PES_PACKET_LENGTH = 0xFFFF


@contextmanager
def _ts_errors() -> Iterator[None]:
    try:
        yield
    except BytesWriteError as err:
        raise MpegTsError(MpegTsErrorKind.BYTES_WRITE_ERROR, err) from err


@dataclass
class Pes:
    """State of one elementary stream within a program."""

    program_number: int = 0
    pid: int = 0
    stream_id: int = 0
    codec_id: int = 0
    continuity_counter: int = 0
    esinfo: bytes = b""
    esinfo_length: int = 0
    data_alignment_indicator: int = 0
    pts: int = 0
    dts: int = 0
    escr_base: int = 0
    escr_extension: int = 0
    es_rate: int = 0


def _timestamp_bytes(prefix: int, value: int) -> bytes:
    """Encode a 33-bit timestamp into 5 bytes with marker bits."""
    return bytes(
        [
            (prefix | (((value >> 30) & 0x07) << 1) | 0x01) & 0xFF,
            (value >> 22) & 0xFF,
            ((value >> 14) & 0xFE) | 0x01,
            (value >> 7) & 0xFF,
            ((value << 1) & 0xFE) | 0x01,
        ]
    )


class PesMuxer:
    """Writes the header of a PES packet."""

    def __init__(self) -> None:
        self.bytes_writer = BytesWriter()

    def __len__(self) -> int:
        return len(self.bytes_writer)

    def write_pes_header(
        self, payload_data_length: int, stream_data: Pes, h264_h265_with_aud: bool
    ) -> None:
        """Write the PES header for a payload of ``payload_data_length`` bytes."""
        writer = self.bytes_writer
        with _ts_errors():
            writer.write(b"\x00\x00\x01")  # start code
            writer.write_u8(stream_data.stream_id & 0xFF)
            writer.write(b"\x00\x00")  # packet length, filled in below
            writer.write_u8(0x80)
            if stream_data.data_alignment_indicator > 0:
                writer.or_u8_at(6, 0x04)

            flags = 0x00
            header_data_length = 0
            if stream_data.pts != PTS_NO_VALUE:
                flags |= 0x80
                header_data_length += 5
            if stream_data.dts != PTS_NO_VALUE and stream_data.dts != stream_data.pts:
                flags |= 0x40
                header_data_length += 5

            writer.write_u8(flags)
            writer.write_u8(header_data_length)

            if flags & 0x80:
                writer.write(_timestamp_bytes((flags >> 2) & 0x30, stream_data.pts))
            if flags & 0x40:
                writer.write(_timestamp_bytes(0x10, stream_data.dts))

            if stream_data.codec_id == PsiStreamType.PSI_STREAM_H264 and not h264_h265_with_aud:
                writer.write(_H264_AUD)

            packet_length = len(writer) - PES_HEADER_LEN + payload_data_length
            if packet_length > _MAX_PES_PACKET_LENGTH:
                # Zero means unbounded; only video may exceed the limit.
                writer.write_u8_at(4, 0x00)
                writer.write_u8_at(5, 0x00)
            else:
                writer.write_u8_at(4, (packet_length >> 8) & 0xFF)
                writer.write_u8_at(5, packet_length & 0xFF)