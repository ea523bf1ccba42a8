"""Building of the MPEG-TS program association table section."""

from __future__ import annotations

from collections.abc import Iterator
from contextlib import contextmanager
from dataclasses import dataclass, field

from ..bytesio.bytes_errors import BytesWriteError
from ..bytesio.bytes_writer import BytesWriter
from .crc32 import gen_crc32
from .pmt import Pmt
from .ts_define import PatTableId
from .ts_errors import MpegTsError, MpegTsErrorKind


@contextmanager
def _ts_errors() -> Iterator[None]:
    try:
        yield
    except BytesWriteError as err:
        raise MpegTsError(MpegTsErrorKind.BYTES_WRITE_ERROR, err) from err


@dataclass
class Pat:
    """A program association table listing the programs of a stream."""

    transport_stream_id: int = 1
    version_number: int = 0
    continuity_counter: int = 0
    pmt: list[Pmt] = field(default_factory=list)


class PatMuxer:
    """Serialises a Pat into a PSI section (ITU-T H.222.0)."""

    def __init__(self) -> None:
        self.bytes_writer = BytesWriter()

    def write(self, pat: Pat) -> bytes:
        """Return the PAT section for ``pat``, CRC included."""
        writer = self.bytes_writer
        with _ts_errors():
            writer.write_u8(PatTableId.PAT_TID_PAS)
            section_length = (len(pat.pmt) * 4 + 5 + 4) & 0xFFFF
            writer.write_u16(0xB000 | section_length)
            writer.write_u16(pat.transport_stream_id & 0xFFFF)
            writer.write_u8((0xC1 | (pat.version_number << 1)) & 0xFF)
            writer.write_u16(0x00)  # section number and last section number

            for pmt in pat.pmt:
                writer.write_u16(pmt.program_number & 0xFFFF)
                writer.write_u16((0xE000 | pmt.pid) & 0xFFFF)

            crc = gen_crc32(0xFFFFFFFF, writer.get_current_bytes())
            writer.write_u32(crc, "little")
            return writer.extract_current_bytes()