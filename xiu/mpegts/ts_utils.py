"""Helpers for writing PCR fields and classifying stream types."""

from __future__ import annotations

from ..bytesio.bytes_writer import BytesWriter
from .ts_define import PsiStreamType

_VIDEO_STREAM_TYPES = frozenset({PsiStreamType.PSI_STREAM_H264})
_AUDIO_STREAM_TYPES = frozenset(
    {
        PsiStreamType.PSI_STREAM_AUDIO_OPUS,
        PsiStreamType.PSI_STREAM_AAC,
        PsiStreamType.PSI_STREAM_MP3,
        PsiStreamType.PSI_STREAM_MPEG4_AAC,
    }
)


def _truncating_divmod(value: int, divisor: int) -> tuple[int, int]:
    quotient = abs(value) // divisor
    if value < 0:
        quotient = -quotient
    return quotient, value - quotient * divisor


def pcr_write(writer: BytesWriter, pcr: int) -> None:
    """Write the 6-byte program clock reference for a 27 MHz ``pcr``."""
    pcr_base, pcr_ext = _truncating_divmod(pcr, 300)
    writer.write_u8((pcr_base >> 25) & 0xFF)
    writer.write_u8((pcr_base >> 17) & 0xFF)
    writer.write_u8((pcr_base >> 9) & 0xFF)
    writer.write_u8((pcr_base >> 1) & 0xFF)
    writer.write_u8((((pcr_base & 0x01) << 7) | 0x7E | ((pcr_ext >> 8) & 0x01)) & 0xFF)
    writer.write_u8(pcr_ext & 0xFF)


def is_stream_type_video(stream_type: int) -> bool:
    return stream_type in _VIDEO_STREAM_TYPES


def is_stream_type_audio(stream_type: int) -> bool:
    return stream_type in _AUDIO_STREAM_TYPES