import pytest

from xiu.flv.flv_errors import MpegAacError, MpegAacErrorKind
from xiu.flv.mpeg4_aac import AAC_FREQUENCE, Mpeg4AacProcessor

AAC_LC_44100_STEREO = bytes([0x12, 0x10])


def _reading_order_bytes(bits: str) -> bytes:
    """Bytes whose bits are popped from the bit vector in the order of ``bits``."""
    padded = bits + "0" * (-len(bits) % 8)
    stored = padded[::-1]
    return bytes(int(stored[pos : pos + 8], 2) for pos in range(0, len(stored), 8))


def _processor_with_bits(bits: str) -> Mpeg4AacProcessor:
    proc = Mpeg4AacProcessor()
    proc.bits_data.extend_from_bytes(_reading_order_bytes(bits))
    return proc


def test_audio_specific_config_load_lc_stereo():
    proc = Mpeg4AacProcessor()
    proc.extend_data(AAC_LC_44100_STEREO)
    proc.audio_specific_config_load()
    aac = proc.mpeg4_aac
    assert aac.profile == 2
    assert aac.sampling_frequency_index == 4
    assert aac.channel_configuration == 2
    assert aac.channels == aac.channel_configuration
    assert aac.sampling_frequency == 44100
    assert len(proc.bytes_reader) == 0


def test_audio_specific_config_load_discards_trailing_bytes():
    proc = Mpeg4AacProcessor()
    proc.extend_data(AAC_LC_44100_STEREO + b"\x56\xe5")
    proc.audio_specific_config_load()
    assert len(proc.bytes_reader) == 0
    assert proc.mpeg4_aac.sampling_frequency == AAC_FREQUENCE[4]


def test_audio_specific_config_load_truncated():
    proc = Mpeg4AacProcessor()
    proc.extend_data(b"\x12")
    with pytest.raises(MpegAacError) as info:
        proc.audio_specific_config_load()
    assert info.value.kind is MpegAacErrorKind.BYTES_READ_ERROR


def test_audio_specific_config_load_bad_frequency_index():
    proc = Mpeg4AacProcessor()
    proc.extend_data(bytes([0x16, 0x90]))
    with pytest.raises(MpegAacError) as info:
        proc.audio_specific_config_load()
    assert info.value.kind is MpegAacErrorKind.SHOULD_NOT_COME_HERE


def test_adts_header_for_lc_stereo():
    proc = Mpeg4AacProcessor()
    proc.extend_data(AAC_LC_44100_STEREO)
    proc.audio_specific_config_load()
    payload = bytes([0x21, 0x00, 0x49, 0x90])
    proc.extend_data(payload)
    proc.adts_save()
    out = proc.bytes_writer.extract_current_bytes()
    assert out[:4] == bytes([0xFF, 0xF1, 0x50, 0x80])
    assert out[6] == 0xFC
    assert out[7:] == payload
    frame_length = ((out[3] & 0x03) << 11) | (out[4] << 3) | (out[5] >> 5)
    assert frame_length == len(out)
    assert len(proc.bytes_reader) == 0


def test_load2_aac_lc():
    proc = Mpeg4AacProcessor()
    proc.extend_data(_reading_order_bytes("00010" + "0100" + "0010" + "000"))
    proc.audio_specific_config_load2()
    aac = proc.mpeg4_aac
    assert (aac.profile, aac.sampling_frequency_index, aac.channel_configuration) == (
        0b00010,
        0b0100,
        0b0010,
    )
    assert aac.sbr == 0
    assert len(proc.bits_data) == 0


@pytest.mark.parametrize("profile_bits, ps", [("00101", 0), ("11101", 1)])
def test_load2_explicit_sbr(profile_bits, ps):
    bits = profile_bits + "0110" + "0010" + "0011" + "00010" + "000"
    proc = Mpeg4AacProcessor()
    proc.extend_data(_reading_order_bytes(bits))
    proc.audio_specific_config_load2()
    aac = proc.mpeg4_aac
    assert aac.sbr == 1
    assert aac.ps == ps
    assert aac.profile == 0b00010
    assert len(proc.bits_data) % 8 == 0


def test_load2_sync_extension_sbr():
    bits = "00010" + "0100" + "0010" + "000" + "01010110111" + "00101" + "1" + "0011"
    proc = Mpeg4AacProcessor()
    proc.extend_data(_reading_order_bytes(bits))
    proc.audio_specific_config_load2()
    assert proc.mpeg4_aac.sbr == 1
    assert proc.mpeg4_aac.profile == 0b00010
    assert len(proc.bits_data) % 8 == 0


def test_load2_rejects_error_protection_config():
    bits = "10001" + "0100" + "0010" + "000" + "10"
    proc = Mpeg4AacProcessor()
    proc.extend_data(_reading_order_bytes(bits))
    with pytest.raises(MpegAacError) as info:
        proc.audio_specific_config_load2()
    assert info.value.kind is MpegAacErrorKind.SHOULD_NOT_COME_HERE


def test_get_audio_object_type_plain():
    proc = _processor_with_bits("00010")
    assert proc.get_audio_object_type() == 0b00010


def test_get_audio_object_type_escape():
    proc = _processor_with_bits("11111" + "000001")
    assert proc.get_audio_object_type() == 33


def test_get_sampling_frequency_plain():
    proc = _processor_with_bits("0100")
    assert proc.get_sampling_frequency() == 0b0100


def test_reading_without_bits_raises():
    proc = Mpeg4AacProcessor()
    with pytest.raises(MpegAacError) as info:
        proc.get_audio_object_type()
    assert info.value.kind is MpegAacErrorKind.NOT_ENOUGH_BITS_TO_READ


def test_celp_without_excitation_branches_consume_equally():
    first = _processor_with_bits("0" + "1" + "01")
    second = _processor_with_bits("0" + "0" + "11")
    first.celp_specific_config_load()
    second.celp_specific_config_load()
    assert len(first.bits_data) == len(second.bits_data)
    assert first.bits_data.read_offset == second.bits_data.read_offset


def test_celp_without_bits_raises():
    proc = Mpeg4AacProcessor()
    with pytest.raises(MpegAacError):
        proc.celp_specific_config_load()


def test_pce_load_counts_channels():
    bits = (
        "0000" + "01" + "0100"  # tag, object type, sampling frequency index
        + "0001" + "0000" + "0000"  # one front element, no side or back
        + "01" + "000" + "0000"  # one lfe, no assoc data, no cc
        + "000"  # no mixdowns
        + "1" + "0000"  # front channel pair
        + "0000"  # lfe tag
        + "00000"  # byte alignment
        + "00000000"  # no comment bytes
    )
    proc = _processor_with_bits(bits)
    proc.pce_load()
    assert proc.mpeg4_aac.channels == 3
    assert len(proc.bits_data) == 0


def test_pce_load_truncated_raises():
    proc = _processor_with_bits("0000" + "01")
    with pytest.raises(MpegAacError) as info:
        proc.pce_load()
    assert info.value.kind is MpegAacErrorKind.NOT_ENOUGH_BITS_TO_READ