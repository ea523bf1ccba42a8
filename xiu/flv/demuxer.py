"""Demuxing of FLV files into tags and of tag bodies into elementary streams."""

from __future__ import annotations

from dataclasses import dataclass

from ..bytesio.bytes_errors import BytesReadError
from ..bytesio.bytes_reader import BytesReader
from .demuxer_tag import AudioTagHeaderDemuxer, VideoTagHeaderDemuxer
from .flv_define import (
    AacPacketType,
    AvcPacketType,
    CodecId,
    FlvData,
    FlvDataKind,
    SoundFormat,
    TagType,
)
from .flv_errors import FlvDemuxerError, MpegAacError, MpegAvcError
from .mpeg4_aac import Mpeg4AacProcessor
from .mpeg4_avc import Mpeg4AvcProcessor

FLV_HEADER_SIZE = 9


@dataclass
class FlvDemuxerAudioData:
    """An ADTS audio frame produced from an FLV audio tag."""

    has_data: bool = False
    sound_format: int = 0
    dts: int = 0
    pts: int = 0
    data: bytes = b""


@dataclass
class FlvDemuxerVideoData:
    """An Annex B video access unit produced from an FLV video tag."""

    has_data: bool = False
    codec_id: int = 0
    dts: int = 0
    pts: int = 0
    frame_type: int = 0
    data: bytes = b""


class FlvVideoTagDemuxer:
    """Turns FLV video tag bodies into Annex B H.264 data."""

    def __init__(self) -> None:
        self._avc_processor = Mpeg4AvcProcessor()

    def demux(self, timestamp: int, data: bytes | bytearray) -> FlvDemuxerVideoData:
        """Demux one video tag body.

        A sequence header only updates the stored configuration and yields
        an empty result; a NALU packet yields the converted frame.
        """
        tag_demuxer = VideoTagHeaderDemuxer(data)
        header = tag_demuxer.parse_tag_header()
        self._avc_processor.extend_data(tag_demuxer.get_remaining_bytes())

        if header.codec_id != CodecId.FLV_VIDEO_H264:
            return FlvDemuxerVideoData()

        try:
            if header.avc_packet_type == AvcPacketType.AVC_SEQHDR:
                self._avc_processor.decoder_configuration_record_load()
                return FlvDemuxerVideoData()
            if header.avc_packet_type == AvcPacketType.AVC_NALU:
                self._avc_processor.h264_mp4toannexb()
                return FlvDemuxerVideoData(
                    has_data=True,
                    codec_id=CodecId.FLV_VIDEO_H264,
                    pts=timestamp + header.composition_time,
                    dts=timestamp,
                    frame_type=header.frame_type,
                    data=self._avc_processor.bytes_writer.extract_current_bytes(),
                )
        except MpegAvcError as err:
            raise FlvDemuxerError(err) from err
        return FlvDemuxerVideoData()


class FlvAudioTagDemuxer:
    """Turns FLV audio tag bodies into ADTS AAC frames."""

    def __init__(self) -> None:
        self._aac_processor = Mpeg4AacProcessor()

    def demux(self, timestamp: int, data: bytes | bytearray) -> FlvDemuxerAudioData:
        """Demux one audio tag body.

        A sequence header only updates the stored configuration and yields
        an empty result; a raw packet yields an ADTS frame.
        """
        tag_demuxer = AudioTagHeaderDemuxer(data)
        header = tag_demuxer.parse_tag_header()
        self._aac_processor.extend_data(tag_demuxer.get_remaining_bytes())

        if header.sound_format != SoundFormat.AAC:
            return FlvDemuxerAudioData()

        try:
            if header.aac_packet_type == AacPacketType.AAC_SEQHDR:
                self._aac_processor.audio_specific_config_load()
                return FlvDemuxerAudioData()
            if header.aac_packet_type == AacPacketType.AAC_RAW:
                self._aac_processor.adts_save()
                return FlvDemuxerAudioData(
                    has_data=True,
                    sound_format=header.sound_format,
                    pts=timestamp,
                    dts=timestamp,
                    data=self._aac_processor.bytes_writer.extract_current_bytes(),
                )
        except MpegAacError as err:
            raise FlvDemuxerError(err) from err
        return FlvDemuxerAudioData()


class FlvDemuxer:
    """Reads the header and tags of an FLV byte stream."""

    def __init__(self, data: bytes | bytearray) -> None:
        self._reader = BytesReader(data)

    def read_flv_header(self) -> None:
        """Consume the 9-byte FLV header."""
        try:
            self._reader.read_bytes(FLV_HEADER_SIZE)
        except BytesReadError as err:
            raise FlvDemuxerError(err) from err

    def read_flv_tag(self) -> FlvData | None:
        """Read the previous tag size and the next tag.

        Returns the tag body for audio and video tags and None for others.
        """
        reader = self._reader
        try:
            reader.read_u32()  # previous tag size
            tag_type = reader.read_u8()
            data_size = reader.read_u24()
            timestamp = reader.read_u24()
            timestamp_ext = reader.read_u8()
            reader.read_u24()  # stream id
            body = reader.read_bytes(data_size)
        except BytesReadError as err:
            raise FlvDemuxerError(err) from err

        dts = (timestamp & 0xFFFFFF) | (timestamp_ext << 24)

        if tag_type == TagType.VIDEO:
            return FlvData(FlvDataKind.VIDEO, dts, body)
        if tag_type == TagType.AUDIO:
            return FlvData(FlvDataKind.AUDIO, dts, body)
        return None