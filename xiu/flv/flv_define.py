"""Constants and data types of the FLV container."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum, IntEnum


class SoundFormat(IntEnum):
    """Audio codec identifiers used in FLV audio tags."""

    AAC = 10


class AacPacketType(IntEnum):
    """Kinds of AAC packets carried in an audio tag."""

    AAC_SEQHDR = 0
    AAC_RAW = 1


class AvcPacketType(IntEnum):
    """Kinds of AVC packets carried in a video tag."""

    AVC_SEQHDR = 0
    AVC_NALU = 1
    AVC_EOS = 2


class FrameType(IntEnum):
    """Video frame types; 1 is a seekable key frame, 2 a non-seekable inter frame."""

    KEY_FRAME = 1
    INTER_FRAME = 2


class CodecId(IntEnum):
    """Video codec identifiers used in FLV video tags."""

    FLV_VIDEO_H264 = 7
    FLV_VIDEO_H265 = 12


class TagType(IntEnum):
    """FLV tag types."""

    AUDIO = 8
    VIDEO = 9
    SCRIPT_DATA_AMF = 18


class H264NalType(IntEnum):
    """H.264 NAL unit types of interest."""

    H264_NAL_IDR = 5
    H264_NAL_SPS = 7
    H264_NAL_PPS = 8
    H264_NAL_AUD = 9


class FlvDataKind(Enum):
    """What an FLV tag body holds."""

    VIDEO = "video"
    AUDIO = "audio"
    META_DATA = "metadata"


@dataclass
class FlvData:
    """The body of one FLV tag with its timestamp."""

    kind: FlvDataKind
    timestamp: int
    data: bytes