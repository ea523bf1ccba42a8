"""Constants of the MPEG transport stream format."""

from __future__ import annotations

from enum import IntEnum


class PatTableId(IntEnum):
    """Table identifiers of program specific information sections."""

    PAT_TID_PAS = 0x00
    PAT_TID_CAS = 0x01  # conditional access section
    PAT_TID_PMS = 0x02  # program map section


class PsiStreamType(IntEnum):
    """Stream types carried in a program map table."""

    PSI_STREAM_MP3 = 0x04
    PSI_STREAM_PRIVATE_DATA = 0x06
    PSI_STREAM_AAC = 0x0F
    PSI_STREAM_H264 = 0x1B
    PSI_STREAM_MPEG4_AAC = 0x1C
    PSI_STREAM_AUDIO_OPUS = 0x9C


class PesStreamId(IntEnum):
    """PES stream identifiers."""

    PES_SID_AUDIO = 0xC0
    PES_SID_VIDEO = 0xE0
    PES_SID_PRIVATE_1 = 0xBD


AF_FLAG_PCR = 0x10
AF_FLAG_RANDOM_ACCESS_INDICATOR = 0x40
PTS_NO_VALUE = -(2**63)

TS_HEADER_LEN = 4  # sync byte, PID and continuity counter
PES_HEADER_LEN = 6  # start code prefix, stream id and packet length

TS_PAYLOAD_UNIT_START_INDICATOR = 0x40

TS_PACKET_SIZE = 188

MPEG_FLAG_IDR_FRAME = 0x0001
MPEG_FLAG_H264_H265_WITH_AUD = 0x8000

PAT_PERIOD = 400 * 90