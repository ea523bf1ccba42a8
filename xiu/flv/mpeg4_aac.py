"""Parsing of AAC audio-specific configuration and ADTS framing."""

from __future__ import annotations

from collections.abc import Iterator
from contextlib import contextmanager
from dataclasses import dataclass

from ..bytesio.bytes_errors import BytesReadError, BytesWriteError
from ..bytesio.bytes_reader import BytesReader
from ..bytesio.bytes_writer import BytesWriter
from .flv_errors import MpegAacError, MpegAacErrorKind
from .mpeg4_bitvec import BitVectorOpType, Mpeg4BitVec, mpeg4_bits_copy

AAC_FREQUENCE = (
    96000, 88200, 64000, 48000, 44100, 32000, 24000, 22050, 16000, 12000, 11025, 8000, 7350,
)

_GA_PROFILES = frozenset({1, 2, 3, 4, 5, 6, 7, 17, 19, 20, 21, 22, 23})
_EP_PROFILES = frozenset({17, 19, 20, 21, 22, 23, 24, 25, 26, 27, 39})


@contextmanager
def _aac_errors() -> Iterator[None]:
    try:
        yield
    except BytesReadError as err:
        raise MpegAacError(MpegAacErrorKind.BYTES_READ_ERROR, err) from err
    except BytesWriteError as err:
        raise MpegAacError(MpegAacErrorKind.BYTES_WRITE_ERROR, err) from err


@dataclass
class Mpeg4Aac:
    """Decoded fields of an AAC audio-specific configuration."""

    profile: int = 0
    sampling_frequency_index: int = 0
    channel_configuration: int = 0
    sampling_frequency: int = 0
    channels: int = 0
    sbr: int = 0
    ps: int = 0
    pce: bytes = b""
    npce: int = 0


class Mpeg4AacProcessor:
    """Reads AAC configuration and wraps raw AAC frames in ADTS headers."""

    def __init__(self) -> None:
        self.bytes_reader = BytesReader()
        self.bytes_writer = BytesWriter()
        self.bits_data = Mpeg4BitVec()
        self.mpeg4_aac = Mpeg4Aac()

    def extend_data(self, data: bytes | bytearray) -> None:
        self.bytes_reader.extend_from_slice(data)

    def audio_specific_config_load(self) -> None:
        """Read profile, sampling rate and channels from the first two bytes."""
        aac = self.mpeg4_aac
        with _aac_errors():
            byte_0 = self.bytes_reader.read_u8()
            aac.profile = (byte_0 >> 3) & 0x1F
            byte_1 = self.bytes_reader.read_u8()
        aac.sampling_frequency_index = ((byte_0 & 0x07) << 1) | ((byte_1 >> 7) & 0x01)
        aac.channel_configuration = (byte_1 >> 3) & 0x0F
        aac.channels = aac.channel_configuration
        if aac.sampling_frequency_index >= len(AAC_FREQUENCE):
            raise MpegAacError(
                MpegAacErrorKind.SHOULD_NOT_COME_HERE,
                f"sampling frequency index {aac.sampling_frequency_index}",
            )
        aac.sampling_frequency = AAC_FREQUENCE[aac.sampling_frequency_index]
        self.bytes_reader.extract_remaining_bytes()

    def audio_specific_config_load2(self) -> None:
        """Parse the full audio-specific configuration bit by bit."""
        with _aac_errors():
            remaining = self.bytes_reader.extract_remaining_bytes()
        bits = self.bits_data
        bits.extend_from_bytes(remaining)
        aac = self.mpeg4_aac

        aac.profile = self.get_audio_object_type()
        aac.sampling_frequency_index = self.get_sampling_frequency()
        aac.channel_configuration = bits.read_n_bits(4)

        extension_audio_object_type = 0
        if aac.profile in (5, 29):
            extension_audio_object_type = 5
            aac.sbr = 1
            if aac.profile == 29:
                aac.ps = 1
            self.get_sampling_frequency()  # extension sampling frequency index
            aac.profile = self.get_audio_object_type()
            if aac.profile == 22:
                bits.read_n_bits(4)  # extension channel configuration

        if aac.profile in _GA_PROFILES:
            self.ga_specific_config_load()
        elif aac.profile == 8:
            self.celp_specific_config_load()

        if aac.profile in _EP_PROFILES and bits.read_n_bits(2) in (2, 3):
            raise MpegAacError(MpegAacErrorKind.SHOULD_NOT_COME_HERE)

        if extension_audio_object_type != 5 and len(bits) >= 16:
            if bits.read_n_bits(11) == 0x2B7:
                extension_audio_object_type = self.get_audio_object_type()
                if extension_audio_object_type == 5:
                    aac.sbr = bits.read_n_bits(1)
                    if aac.sbr > 0:
                        self.get_sampling_frequency()
                        if len(bits) >= 12 and bits.read_n_bits(11) == 0x548:
                            aac.ps = bits.read_n_bits(1)
                elif extension_audio_object_type == 22:
                    aac.sbr = bits.read_n_bits(1)
                    if aac.sbr > 0:
                        self.get_sampling_frequency()
                    bits.read_n_bits(4)

        bits.bits_alignment(8, BitVectorOpType.READ)

    def celp_specific_config_load(self) -> None:
        bits = self.bits_data
        if bits.read_n_bits(1) > 0:
            excitation_mode = bits.read_n_bits(1)
            bits.read_n_bits(1)
            bits.read_n_bits(1)
            if excitation_mode == 1:
                bits.read_n_bits(3)
            elif excitation_mode == 0:
                bits.read_n_bits(5)
                bits.read_n_bits(2)
                bits.read_n_bits(1)
        else:
            bits.read_n_bits(1)
            bits.read_n_bits(2)

    def ga_specific_config_load(self) -> None:
        bits = self.bits_data
        aac = self.mpeg4_aac
        bits.read_n_bits(1)  # frame length flag
        if bits.read_n_bits(1) > 0:  # depends on core coder
            bits.read_n_bits(14)
        extension_flag = bits.read_n_bits(1)

        if aac.channel_configuration == 0:
            self.pce_load()

        if aac.profile in (6, 20):
            bits.read_n_bits(3)

        if extension_flag > 0:
            if aac.profile == 22:
                bits.read_n_bits(5)
                bits.read_n_bits(11)
            elif aac.profile in (17, 19, 20, 23):
                bits.read_n_bits(1)
                bits.read_n_bits(1)
                bits.read_n_bits(1)
            bits.read_n_bits(1)

    def pce_load(self) -> int:
        """Read a program config element, counting its channels.

        Returns the size in bytes of the copied element.
        """
        aac = self.mpeg4_aac
        src = self.bits_data
        pce_bits = Mpeg4BitVec()
        pce_bits.extend_from_bytes(aac.pce)

        def copy(n: int) -> int:
            return mpeg4_bits_copy(pce_bits, src, n)

        aac.channels = 0
        copy(4)  # element instance tag
        copy(2)  # object type
        copy(4)  # sampling frequency index
        num_front = copy(4)
        num_side = copy(4)
        num_back = copy(4)
        num_lfe = copy(2)
        num_assoc_data = copy(3)
        num_valid_cc = copy(4)

        for _ in range(3):  # mono, stereo and matrix mixdown
            if copy(1) > 0:
                copy(4)

        for _ in range(num_front + num_side + num_back):
            cpe = copy(1)
            copy(4)
            aac.channels += 2 if cpe > 0 or aac.ps > 0 else 1

        for _ in range(num_lfe):
            copy(4)
            aac.channels += 1

        for _ in range(num_assoc_data):
            copy(4)

        for _ in range(num_valid_cc):
            copy(1)
            copy(4)

        pce_bits.bits_alignment(8, BitVectorOpType.WRITE)
        src.bits_alignment(8, BitVectorOpType.READ)

        comment_field_bytes = copy(8)
        for _ in range(comment_field_bytes):
            copy(8)

        return ((pce_bits.write_offset + 7) // 8) & 0xFF

    def get_audio_object_type(self) -> int:
        audio_object_type = self.bits_data.read_n_bits(5)
        if audio_object_type == 31:
            audio_object_type = 32 + self.bits_data.read_n_bits(6)
        return audio_object_type & 0xFF

    def get_sampling_frequency(self) -> int:
        index = self.bits_data.read_n_bits(4)
        if index == 0x0F:
            index = self.bits_data.read_n_bits(24)
        return index & 0xFF

    def adts_save(self) -> None:
        """Write an ADTS header followed by the buffered raw AAC frame."""
        aac = self.mpeg4_aac
        frame_length = len(self.bytes_reader) + 7
        profile = aac.profile
        index = aac.sampling_frequency_index
        channels = aac.channel_configuration
        header = bytes(
            [
                0xFF,
                0xF0 | (0 << 3) | (0x00 << 2) | 0x01,  # MPEG-4, layer 0, no CRC
                (((profile - 1) << 6) | ((index & 0x0F) << 2) | ((channels >> 2) & 0x01)) & 0xFF,
                ((channels & 0x03) << 6) | ((frame_length >> 11) & 0x03),
                (frame_length >> 3) & 0xFF,
                ((frame_length & 0x07) << 5) | 0x1F,
                0xFC,
            ]
        )
        with _aac_errors():
            self.bytes_writer.write(header)
            self.bytes_writer.write(self.bytes_reader.extract_remaining_bytes())