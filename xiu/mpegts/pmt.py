"""Building of the MPEG-TS program map table section."""

from __future__ import annotations

from collections.abc import Iterator
from contextlib import contextmanager
from dataclasses import dataclass, field

from ..bytesio.bytes_errors import BytesWriteError
from ..bytesio.bytes_writer import BytesWriter
from .crc32 import gen_crc32
from .pes import Pes
from .ts_define import PatTableId, PsiStreamType
from .ts_errors import MpegTsError, MpegTsErrorKind

_MAX_PROGRAM_INFO_LENGTH = 0x400


@contextmanager
def _ts_errors() -> Iterator[None]:
    try:
        yield
    except BytesWriteError as err:
        raise MpegTsError(MpegTsErrorKind.BYTES_WRITE_ERROR, err) from err


@dataclass
class Pmt:
    """A program map table describing the streams of one program."""

    pid: int = 0
    program_number: int = 0
    version_number: int = 0
    continuity_counter: int = 0
    pcr_pid: int = 0
    program_info: bytes = b""
    streams: list[Pes] = field(default_factory=list)


class PmtMuxer:
    """Serialises a Pmt into a PSI section."""

    def __init__(self) -> None:
        self.bytes_writer = BytesWriter()

    def write(self, pmt: Pmt) -> bytes:
        """Return the PMT section for ``pmt``, CRC included."""
        writer = self.bytes_writer
        body = BytesWriter()
        with _ts_errors():
            writer.write_u8(PatTableId.PAT_TID_PMS)

            body.write_u16(pmt.program_number & 0xFFFF)
            body.write_u8((0xC1 | (pmt.version_number << 1)) & 0xFF)
            body.write_u8(0x00)  # section number
            body.write_u8(0x00)  # last section number
            body.write_u16((0xE000 | pmt.pcr_pid) & 0xFFFF)

            info_length = len(pmt.program_info) & 0xFFFF
            body.write_u16((0xF000 | info_length) & 0xFFFF)
            if 0 < info_length < _MAX_PROGRAM_INFO_LENGTH:
                body.write(pmt.program_info)

            for stream in pmt.streams:
                if stream.codec_id == PsiStreamType.PSI_STREAM_AUDIO_OPUS:
                    stream_type = PsiStreamType.PSI_STREAM_PRIVATE_DATA
                else:
                    stream_type = stream.codec_id
                body.write_u8(stream_type)
                body.write_u16((0xE000 | stream.pid) & 0xFFFF)
                body.write_u16(0xF000)  # ES info length

            writer.write_u16((0xB000 | (len(body) + 4)) & 0xFFFF)
            writer.write(body.extract_current_bytes())

            crc = gen_crc32(0xFFFFFFFF, writer.get_current_bytes())
            writer.write_u32(crc, "little")
            return writer.extract_current_bytes()

    def write_descriptor(self) -> None:
        """Descriptors are not emitted; the writer is left unchanged."""