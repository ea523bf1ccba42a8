"""Parsing of AVC decoder configuration records and AVCC to Annex B conversion."""

from __future__ import annotations

from collections.abc import Iterator
from contextlib import contextmanager
from dataclasses import dataclass, field

from ..bytesio.bytes_errors import BytesReadError, BytesWriteError
from ..bytesio.bytes_reader import BytesReader
from ..bytesio.bytes_writer import BytesWriter
from .flv_define import H264NalType
from .flv_errors import MpegAacErrorKind, MpegAvcError

H264_START_CODE = b"\x00\x00\x00\x01"

# Profiles whose decoder configuration record carries the chroma/bit-depth extension.
_EXTENDED_PROFILES = frozenset({100, 110, 122, 244, 44, 83, 86, 118, 128, 138, 139, 134})


@contextmanager
def _avc_errors() -> Iterator[None]:
    try:
        yield
    except BytesReadError as err:
        raise MpegAvcError(MpegAacErrorKind.BYTES_READ_ERROR, err) from err
    except BytesWriteError as err:
        raise MpegAvcError(MpegAacErrorKind.BYTES_WRITE_ERROR, err) from err


@dataclass
class Sps:
    """One sequence parameter set as stored in the configuration record."""

    size: int = 0
    data: bytes = b""


@dataclass
class Pps:
    """One picture parameter set as stored in the configuration record."""

    size: int = 0
    data: bytes = b""


@dataclass
class Mpeg4Avc:
    """Fields of an AVC decoder configuration record."""

    profile: int = 0
    compatibility: int = 0
    level: int = 0
    nalu_length: int = 0
    nb_sps: int = 0
    nb_pps: int = 0
    sps: list[Sps] = field(default_factory=list)
    pps: list[Pps] = field(default_factory=list)
    sps_annexb_data: BytesWriter = field(default_factory=BytesWriter)
    pps_annexb_data: BytesWriter = field(default_factory=BytesWriter)
    chroma_format_idc: int = 0
    bit_depth_luma_minus8: int = 0
    bit_depth_chroma_minus8: int = 0


class Mpeg4AvcProcessor:
    """Reads AVC payloads and writes them out as Annex B byte streams."""

    def __init__(self) -> None:
        self.bytes_reader = BytesReader()
        self.bytes_writer = BytesWriter()
        self.mpeg4_avc = Mpeg4Avc()

    def extend_data(self, data: bytes | bytearray) -> None:
        self.bytes_reader.extend_from_slice(data)

    def clear_sps_data(self) -> None:
        self.mpeg4_avc.sps.clear()
        self.mpeg4_avc.sps_annexb_data.clear()

    def clear_pps_data(self) -> None:
        self.mpeg4_avc.pps.clear()
        self.mpeg4_avc.pps_annexb_data.clear()

    def decoder_configuration_record_load(self) -> None:
        """Read a decoder configuration record and keep its SPS and PPS units."""
        reader = self.bytes_reader
        avc = self.mpeg4_avc
        with _avc_errors():
            reader.read_u8()  # configuration version
            avc.profile = reader.read_u8()
            avc.compatibility = reader.read_u8()
            avc.level = reader.read_u8()
            # The length-size byte is masked with 0x04, so standard records yield 4.
            avc.nalu_length = reader.read_u8() & 0x04

            avc.nb_sps = reader.read_u8() & 0x1F
            if avc.nb_sps > 0:
                self.clear_sps_data()
            for _ in range(avc.nb_sps):
                size = reader.read_u16()
                sps = Sps(size=size, data=reader.read_bytes(size))
                avc.sps.append(sps)
                avc.sps_annexb_data.write(H264_START_CODE)
                avc.sps_annexb_data.write(sps.data)

            avc.nb_pps = reader.read_u8()
            if avc.nb_pps > 0:
                self.clear_pps_data()
            for _ in range(avc.nb_pps):
                size = reader.read_u16()
                pps = Pps(size=size, data=reader.read_bytes(size))
                avc.pps.append(pps)
                avc.pps_annexb_data.write(H264_START_CODE)
                avc.pps_annexb_data.write(pps.data)

    def h264_mp4toannexb(self) -> None:
        """Convert length-prefixed NAL units to start-code-prefixed ones.

        SPS and PPS units are inserted before the first IDR frame if the
        payload does not carry its own.
        """
        sps_pps_seen = False
        with _avc_errors():
            while len(self.bytes_reader) > 0:
                size = self.get_nalu_size()
                nalu_type = self.bytes_reader.advance_u8() & 0x1F

                if nalu_type in (H264NalType.H264_NAL_PPS, H264NalType.H264_NAL_SPS):
                    sps_pps_seen = True
                elif nalu_type == H264NalType.H264_NAL_IDR and not sps_pps_seen:
                    sps_pps_seen = True
                    self.bytes_writer.prepend(self.mpeg4_avc.pps_annexb_data.get_current_bytes())
                    self.bytes_writer.prepend(self.mpeg4_avc.sps_annexb_data.get_current_bytes())

                self.bytes_writer.write(H264_START_CODE)
                self.bytes_writer.write(self.bytes_reader.read_bytes(size))

    def get_nalu_size(self) -> int:
        """Read one big-endian NAL unit length of ``nalu_length`` bytes."""
        size = 0
        with _avc_errors():
            for _ in range(self.mpeg4_avc.nalu_length):
                size = (self.bytes_reader.read_u8() + (size << 8)) & 0xFFFFFFFF
        return size


class Mpeg4AvcWriter:
    """Serialises an Mpeg4Avc back into a decoder configuration record."""

    def __init__(self, mpeg4_avc: Mpeg4Avc | None = None) -> None:
        self.bytes_writer = BytesWriter()
        self.mpeg4_avc = mpeg4_avc if mpeg4_avc is not None else Mpeg4Avc()

    def decoder_configuration_record_save(self) -> None:
        avc = self.mpeg4_avc
        writer = self.bytes_writer
        with _avc_errors():
            writer.write_u8(1)
            writer.write_u8(avc.profile)
            writer.write_u8(avc.compatibility)
            writer.write_u8(avc.level)
            writer.write_u8(((avc.nalu_length - 1) | 0xFC) & 0xFF)

            writer.write_u8(avc.nb_sps | 0xE0)
            for sps in avc.sps[: avc.nb_sps]:
                writer.write_u16(sps.size)
                writer.write(sps.data)

            writer.write_u8(avc.nb_pps)
            for pps in avc.pps[: avc.nb_pps]:
                writer.write_u16(pps.size)
                writer.write(pps.data)

            if avc.profile in _EXTENDED_PROFILES:
                writer.write_u8(0xFC | avc.chroma_format_idc)
                writer.write_u8(0xF8 | avc.bit_depth_luma_minus8)
                writer.write_u8(0xF8 | avc.bit_depth_chroma_minus8)
                writer.write_u8(0)