from xiu.mpegts.crc32 import gen_crc32
from xiu.mpegts.pes import Pes
from xiu.mpegts.pmt import Pmt, PmtMuxer
from xiu.mpegts.ts_define import PatTableId, PsiStreamType


def _program(**overrides):
    values = dict(
        pid=0x100,
        program_number=1,
        pcr_pid=0x101,
        streams=[Pes(pid=0x101, codec_id=PsiStreamType.PSI_STREAM_H264)],
    )
    values.update(overrides)
    return Pmt(**values)


def test_table_id_and_section_length():
    out = PmtMuxer().write(_program())
    assert out[0] == PatTableId.PAT_TID_PMS
    assert out[1] & 0xF0 == 0xB0
    assert int.from_bytes(out[1:3], "big") & 0x0FFF == len(out) - 3


def test_header_fields():
    out = PmtMuxer().write(_program(version_number=2))
    assert out[3:5] == b"\x00\x01"
    assert out[5] == 0xC1 | (2 << 1)
    assert int.from_bytes(out[8:10], "big") == 0xE000 | 0x101
    assert int.from_bytes(out[10:12], "big") == 0xF000


def test_stream_entry():
    out = PmtMuxer().write(_program())
    assert out[12] == PsiStreamType.PSI_STREAM_H264
    assert int.from_bytes(out[13:15], "big") == 0xE000 | 0x101
    assert int.from_bytes(out[15:17], "big") == 0xF000


def test_opus_stream_is_private_data():
    pmt = _program(streams=[Pes(pid=0x102, codec_id=PsiStreamType.PSI_STREAM_AUDIO_OPUS)])
    out = PmtMuxer().write(pmt)
    assert out[12] == PsiStreamType.PSI_STREAM_PRIVATE_DATA


def test_crc_trailer_matches_section():
    out = PmtMuxer().write(_program())
    assert int.from_bytes(out[-4:], "little") == gen_crc32(0xFFFFFFFF, out[:-4])


def test_program_info_is_written():
    info = b"\x05\x04abcd"
    out = PmtMuxer().write(_program(program_info=info, streams=[]))
    assert int.from_bytes(out[10:12], "big") == 0xF000 | len(info)
    assert out[12 : 12 + len(info)] == info
    assert len(out) == 12 + len(info) + 4


def test_oversized_program_info_is_dropped():
    info = bytes(0x400)
    out = PmtMuxer().write(_program(program_info=info, streams=[]))
    assert int.from_bytes(out[10:12], "big") == 0xF000 | 0x400
    assert len(out) == 12 + 4


def test_muxer_reuse_and_descriptor():
    muxer = PmtMuxer()
    first = muxer.write(_program())
    muxer.write_descriptor()
    assert len(muxer.bytes_writer) == 0
    assert muxer.write(_program()) == first