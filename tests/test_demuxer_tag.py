import pytest

from xiu.bytesio.bytes_errors import BytesReadError
from xiu.flv.demuxer_tag import AudioTagHeaderDemuxer, VideoTagHeaderDemuxer
from xiu.flv.flv_define import AacPacketType, AvcPacketType, CodecId, FrameType, SoundFormat
from xiu.flv.flv_errors import FlvDemuxerError


def test_aac_audio_header():
    payload = b"\x12\x34\x56"
    demuxer = AudioTagHeaderDemuxer(bytes([0xAF, AacPacketType.AAC_RAW]) + payload)
    header = demuxer.parse_tag_header()
    assert header.sound_format == SoundFormat.AAC
    assert header.sound_rate == 3
    assert header.sound_type == 1
    assert header.sound_size == 1
    assert header.aac_packet_type == AacPacketType.AAC_RAW
    assert demuxer.get_remaining_bytes() == payload
    assert demuxer.get_remaining_bytes() == b""


def test_non_aac_audio_has_no_packet_type():
    flags = 2 << 4
    demuxer = AudioTagHeaderDemuxer(bytes([flags, 0x01, 0x02]))
    header = demuxer.parse_tag_header()
    assert header.sound_format == 2
    assert header.aac_packet_type == 0
    assert demuxer.get_remaining_bytes() == b"\x01\x02"


def test_avc_video_header():
    cts = b"\x01\x02\x03"
    body = b"\xaa\xbb"
    flags = (FrameType.KEY_FRAME << 4) | CodecId.FLV_VIDEO_H264
    demuxer = VideoTagHeaderDemuxer(bytes([flags, AvcPacketType.AVC_NALU]) + cts + body)
    header = demuxer.parse_tag_header()
    assert header.frame_type == FrameType.KEY_FRAME
    assert header.codec_id == CodecId.FLV_VIDEO_H264
    assert header.avc_packet_type == AvcPacketType.AVC_NALU
    assert header.composition_time == int.from_bytes(cts, "big")
    assert demuxer.get_remaining_bytes() == body


def test_hevc_video_header_reads_composition_time():
    flags = (FrameType.INTER_FRAME << 4) | CodecId.FLV_VIDEO_H265
    demuxer = VideoTagHeaderDemuxer(bytes([flags, 1, 0, 0, 0]))
    header = demuxer.parse_tag_header()
    assert header.codec_id == CodecId.FLV_VIDEO_H265
    assert header.composition_time == 0
    assert demuxer.get_remaining_bytes() == b""


def test_other_video_codec_keeps_payload():
    flags = (FrameType.KEY_FRAME << 4) | 2
    demuxer = VideoTagHeaderDemuxer(bytes([flags, 9, 8]))
    header = demuxer.parse_tag_header()
    assert header.codec_id == 2
    assert header.avc_packet_type == 0
    assert demuxer.get_remaining_bytes() == b"\x09\x08"


def test_empty_video_data_raises():
    with pytest.raises(FlvDemuxerError) as info:
        VideoTagHeaderDemuxer(b"").parse_tag_header()
    assert isinstance(info.value.cause, BytesReadError)


def test_truncated_aac_header_raises():
    with pytest.raises(FlvDemuxerError):
        AudioTagHeaderDemuxer(b"\xaf").parse_tag_header()