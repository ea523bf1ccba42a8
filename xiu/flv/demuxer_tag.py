"""Parsing of FLV audio and video tag headers."""

from __future__ import annotations

from dataclasses import dataclass, replace

from ..bytesio.bytes_errors import BytesReadError
from ..bytesio.bytes_reader import BytesReader
from .flv_define import CodecId, SoundFormat
from .flv_errors import FlvDemuxerError


@dataclass
class AudioTagHeader:
    """Header fields at the start of an FLV audio tag body."""

    sound_format: int = 0
    sound_rate: int = 0
    sound_size: int = 0
    sound_type: int = 0
    aac_packet_type: int = 0


class AudioTagHeaderDemuxer:
    """Reads an audio tag header and hands back the payload after it."""

    def __init__(self, data: bytes | bytearray) -> None:
        self._reader = BytesReader(data)
        self._tag = AudioTagHeader()

    def parse_tag_header(self) -> AudioTagHeader:
        try:
            flags = self._reader.read_u8()
            self._tag.sound_format = flags >> 4
            self._tag.sound_rate = (flags >> 2) & 0x03
            self._tag.sound_size = (flags >> 1) & 0x01
            self._tag.sound_type = flags & 0x01
            if self._tag.sound_format == SoundFormat.AAC:
                self._tag.aac_packet_type = self._reader.read_u8()
        except BytesReadError as err:
            raise FlvDemuxerError(err) from err
        return replace(self._tag)

    def get_remaining_bytes(self) -> bytes:
        return self._reader.extract_remaining_bytes()


@dataclass
class VideoTagHeader:
    """Header fields at the start of an FLV video tag body."""

    frame_type: int = 0
    codec_id: int = 0
    avc_packet_type: int = 0
    composition_time: int = 0


class VideoTagHeaderDemuxer:
    """Reads a video tag header and hands back the payload after it."""

    def __init__(self, data: bytes | bytearray) -> None:
        self._reader = BytesReader(data)
        self._tag = VideoTagHeader()

    def parse_tag_header(self) -> VideoTagHeader:
        try:
            flags = self._reader.read_u8()
            self._tag.frame_type = flags >> 4
            self._tag.codec_id = flags & 0x0F
            if self._tag.codec_id in (CodecId.FLV_VIDEO_H264, CodecId.FLV_VIDEO_H265):
                self._tag.avc_packet_type = self._reader.read_u8()
                composition_time = 0
                for _ in range(3):
                    composition_time = ((composition_time << 8) + self._reader.read_u8()) & 0xFFFFFFFF
                self._tag.composition_time = composition_time
        except BytesReadError as err:
            raise FlvDemuxerError(err) from err
        return replace(self._tag)

    def get_remaining_bytes(self) -> bytes:
        return self._reader.extract_remaining_bytes()