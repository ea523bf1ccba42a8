"""Multiplexing of elementary stream frames into an MPEG transport stream."""

from __future__ import annotations

from collections.abc import Iterator
from contextlib import contextmanager

from ..bytesio.bytes_errors import BytesReadError, BytesWriteError
from ..bytesio.bytes_reader import BytesReader
from ..bytesio.bytes_writer import BytesWriter
from .pat import Pat, PatMuxer
from .pes import Pes, PesMuxer
from .pmt import Pmt, PmtMuxer
from .ts_define import (
    AF_FLAG_PCR,
    AF_FLAG_RANDOM_ACCESS_INDICATOR,
    MPEG_FLAG_H264_H265_WITH_AUD,
    MPEG_FLAG_IDR_FRAME,
    PAT_PERIOD,
    PTS_NO_VALUE,
    TS_PACKET_SIZE,
    TS_PAYLOAD_UNIT_START_INDICATOR,
    PatTableId,
    PesStreamId,
)
from .ts_errors import MpegTsError, MpegTsErrorKind
from .ts_utils import is_stream_type_audio, is_stream_type_video, pcr_write

_FIRST_PID = 0x0100
_NO_PCR_PID = 0x1FFF
_MAX_PROGRAMS = 4
_MAX_STREAMS = 4
_PCR_PERIOD = 80 * 90
_SYNC_BYTE = 0x47
_PAT_PMT_HEADER_LEN = 5


@contextmanager
def _ts_errors() -> Iterator[None]:
    try:
        yield
    except BytesWriteError as err:
        raise MpegTsError(MpegTsErrorKind.BYTES_WRITE_ERROR, err) from err
    except BytesReadError as err:
        raise MpegTsError(MpegTsErrorKind.BYTES_READ_ERROR, err) from err


class TsMuxer:
    """Builds 188-byte transport stream packets from PES payloads."""

    def __init__(self) -> None:
        self.bytes_writer = BytesWriter()
        self.pat = Pat()
        self._pat_continuity_counter = 0
        self._pmt_continuity_counter = 0
        self._h264_h265_with_aud = False
        self._pid = _FIRST_PID
        self._pat_period = 0
        self._pcr_period = _PCR_PERIOD
        self._pcr_clock = 0
        self._cur_pmt_index = 0
        self._cur_stream_index = 0
        self.packet_number = 0

    def reset(self) -> None:
        """Force the tables to be written again before the next frame."""
        self._pat_period = 0
        self._pcr_period = _PCR_PERIOD
        self._pcr_clock = 0
        self.packet_number = 0

    def get_data(self) -> bytes:
        """Return and clear the packets written so far."""
        return self.bytes_writer.extract_current_bytes()

    def _current(self) -> tuple[Pmt, Pes]:
        pmt = self.pat.pmt[self._cur_pmt_index]
        return pmt, pmt.streams[self._cur_stream_index]

    def write(self, pid: int, pts: int, dts: int, flags: int, payload: bytes | bytearray) -> None:
        """Packetise one frame of the stream ``pid``.

        The PAT and PMTs are written first when they are due.
        """
        self._h264_h265_with_aud = bool(flags & MPEG_FLAG_H264_H265_WITH_AUD)
        self.find_stream(pid)
        cur_pmt, cur_stream = self._current()

        is_video = (cur_stream.stream_id & PesStreamId.PES_SID_VIDEO) == PesStreamId.PES_SID_VIDEO
        if cur_pmt.pcr_pid == _NO_PCR_PID or (is_video and cur_pmt.pcr_pid != cur_stream.pid):
            cur_pmt.pcr_pid = cur_stream.pid
            self._pat_period = 0

        if cur_pmt.pcr_pid == cur_stream.pid:
            self._pcr_clock += 1

        cur_stream.pts = pts
        cur_stream.dts = dts
        cur_stream.data_alignment_indicator = 1 if flags & MPEG_FLAG_IDR_FRAME else 0

        if self._pat_period == 0 or self._pat_period + PAT_PERIOD <= dts:
            self._pat_period = dts
            pat_data = PatMuxer().write(self.pat)
            self.write_ts_header_for_pat_pmt(
                PatTableId.PAT_TID_PAS, pat_data, self._pat_continuity_counter
            )
            self._pat_continuity_counter = (self._pat_continuity_counter + 1) % 16
            self.packet_number += 1

            for pmt in self.pat.pmt:
                pmt_data = PmtMuxer().write(pmt)
                self.write_ts_header_for_pat_pmt(pmt.pid, pmt_data, self._pmt_continuity_counter)
                self._pmt_continuity_counter = (self._pmt_continuity_counter + 1) % 16
                self.packet_number += 1

        self.write_pes(payload)

    def write_ts_header_for_pat_pmt(
        self, pid: int, payload: bytes | bytearray, continuity_counter: int
    ) -> None:
        """Write one packet holding a PSI section, padded with 0xFF."""
        left_size = TS_PACKET_SIZE - len(payload) - _PAT_PMT_HEADER_LEN
        if left_size < 0:
            raise MpegTsError(
                MpegTsErrorKind.BYTES_WRITE_ERROR,
                f"section of {len(payload)} bytes does not fit in one packet",
            )
        header = bytes(
            [
                _SYNC_BYTE,
                0x40 | ((pid >> 8) & 0x1F),
                pid & 0xFF,
                (0x10 | continuity_counter) & 0xFF,
                0x00,  # pointer field
            ]
        )
        with _ts_errors():
            self.bytes_writer.write(header)
            self.bytes_writer.write(bytes(payload))
            self.bytes_writer.write(b"\xff" * left_size)

    def write_pes(self, payload: bytes | bytearray) -> None:
        """Split a PES packet for the current stream over transport packets."""
        reader = BytesReader(bytes(payload))
        is_start = True
        with _ts_errors():
            while len(reader) > 0:
                pes_muxer = PesMuxer()
                if is_start:
                    _, stream = self._current()
                    pes_muxer.write_pes_header(len(reader), stream, self._h264_h265_with_aud)

                ts_header = BytesWriter()
                payload_length = self.write_ts_header_for_pes(
                    ts_header, len(pes_muxer), len(reader), is_start
                )
                self.packet_number += 1
                is_start = False

                data = reader.read_bytes(payload_length)
                self.bytes_writer.append(ts_header)
                self.bytes_writer.append(pes_muxer.bytes_writer)
                self.bytes_writer.write(data)

    def write_ts_header_for_pes(
        self,
        ts_header: BytesWriter,
        pes_header_length: int,
        payload_data_length: int,
        is_start: bool,
    ) -> int:
        """Write a packet header with any adaptation field and stuffing.

        Returns how many payload bytes fit in the packet.
        """
        cur_pmt, stream = self._current()
        pcr_pid = cur_pmt.pcr_pid

        with _ts_errors():
            ts_header.write_u8(_SYNC_BYTE)
            ts_header.write_u8((stream.pid >> 8) & 0x1F)
            ts_header.write_u8(stream.pid & 0xFF)
            ts_header.write_u8(0x10 | (stream.continuity_counter & 0x0F))
            stream.continuity_counter = (stream.continuity_counter + 1) % 16

            random_access = stream.data_alignment_indicator > 0 and stream.pts != PTS_NO_VALUE
            if is_start:
                ts_header.or_u8_at(1, TS_PAYLOAD_UNIT_START_INDICATOR)
                if stream.pid == pcr_pid or random_access:
                    ts_header.or_u8_at(3, 0x20)
                    ts_header.write_u8(0x01)  # adaptation field length: flags only
                    ts_header.write_u8(0x00)  # adaptation field flags
                    if stream.pid == pcr_pid:
                        ts_header.or_u8_at(5, AF_FLAG_PCR)
                        pcr = stream.pts if stream.dts == PTS_NO_VALUE else stream.dts
                        pcr_bytes = BytesWriter()
                        pcr_write(pcr_bytes, pcr * 300)
                        ts_header.write(pcr_bytes.extract_current_bytes())
                        ts_header.add_u8_at(4, 6)
                    if random_access:
                        ts_header.or_u8_at(5, AF_FLAG_RANDOM_ACCESS_INDICATOR)

            ts_header_length = len(ts_header)
            stuffing_length = TS_PACKET_SIZE - (
                ts_header_length + pes_header_length + payload_data_length
            )
            if stuffing_length <= 0:
                return TS_PACKET_SIZE - ts_header_length - pes_header_length

            if ts_header.get(3) & 0x20:
                ts_header.add_u8_at(4, stuffing_length)
            else:
                ts_header.or_u8_at(3, 0x20)
                stuffing_length -= 1  # the adaptation field length byte
                ts_header.write_u8(stuffing_length)
                if stuffing_length >= 1:
                    stuffing_length -= 1  # the adaptation field flags byte
                    ts_header.write_u8(0x00)
            ts_header.write(b"\xff" * stuffing_length)

        return payload_data_length

    def find_stream(self, pid: int) -> None:
        """Make the stream ``pid`` the current one."""
        for pmt_index, pmt in enumerate(self.pat.pmt):
            for stream_index, stream in enumerate(pmt.streams):
                if stream.pid == pid:
                    self._cur_pmt_index = pmt_index
                    self._cur_stream_index = stream_index
                    return
        raise MpegTsError(MpegTsErrorKind.STREAM_NOT_FOUND, f"pid {pid:#x}")

    def add_stream(self, codec_id: int, extra_data: bytes | bytearray) -> int:
        """Add a stream to the first program, creating it if needed; return its PID."""
        if not self.pat.pmt:
            self.add_program(1, b"")
        return self.pmt_add_stream(0, codec_id, extra_data)

    def pmt_add_stream(self, pmt_index: int, codec_id: int, extra_data: bytes | bytearray) -> int:
        """Add a stream to the program at ``pmt_index`` and return its PID."""
        pmt = self.pat.pmt[pmt_index]
        if len(pmt.streams) == _MAX_STREAMS:
            raise MpegTsError(MpegTsErrorKind.STREAM_COUNT_EXCEEDED)

        if is_stream_type_video(codec_id):
            stream_id = PesStreamId.PES_SID_VIDEO
        elif is_stream_type_audio(codec_id):
            stream_id = PesStreamId.PES_SID_AUDIO
        else:
            stream_id = PesStreamId.PES_SID_PRIVATE_1

        stream = Pes(
            codec_id=codec_id,
            pid=self._pid,
            stream_id=int(stream_id),
            esinfo=bytes(extra_data),
        )
        self._pid += 1
        pmt.streams.append(stream)
        pmt.version_number = (pmt.version_number + 1) % 32
        self.reset()
        return stream.pid

    def add_program(self, program_number: int, info: bytes | bytearray) -> None:
        """Add a program with its own PMT."""
        if any(pmt.program_number == program_number for pmt in self.pat.pmt):
            raise MpegTsError(MpegTsErrorKind.PROGRAM_NUMBER_EXISTS)
        if len(self.pat.pmt) == _MAX_PROGRAMS:
            raise MpegTsError(MpegTsErrorKind.PMT_COUNT_EXCEEDED)

        self.pat.pmt.append(
            Pmt(
                pid=self._pid,
                program_number=program_number,
                version_number=0,
                continuity_counter=0,
                pcr_pid=_NO_PCR_PID,
                program_info=bytes(info),
            )
        )
        self._pid += 1