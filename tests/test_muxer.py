from xiu.bytesio.bytes_reader import BytesReader
from xiu.flv.flv_define import TagType
from xiu.flv.muxer import FLV_HEADER, HEADER_LENGTH, FlvMuxer


def test_flv_header_bytes():
    muxer = FlvMuxer()
    muxer.write_flv_header()
    data = muxer.writer.get_current_bytes()
    assert data == b"FLV\x01\x05\x00\x00\x00\x09"
    assert data == FLV_HEADER


def test_tag_header_round_trip():
    muxer = FlvMuxer()
    timestamp = 0x12345678
    muxer.write_flv_tag_header(TagType.VIDEO, 1000, timestamp)
    data = muxer.writer.extract_current_bytes()
    assert len(data) == HEADER_LENGTH

    reader = BytesReader(data)
    assert reader.read_u8() == TagType.VIDEO
    assert reader.read_u24("big") == 1000
    low = reader.read_u24("big")
    ext = reader.read_u8()
    assert (ext << 24) | low == timestamp
    assert reader.read_u24("big") == 0
    assert len(reader) == 0


def test_tag_body_and_previous_size():
    muxer = FlvMuxer()
    body = b"\x01\x02\x03"
    muxer.write_flv_tag_header(TagType.AUDIO, len(body), 40)
    muxer.write_flv_tag_body(body)
    muxer.write_previous_tag_size(HEADER_LENGTH + len(body))
    data = muxer.writer.get_current_bytes()
    assert len(data) == HEADER_LENGTH + len(body) + 4
    assert data[HEADER_LENGTH:HEADER_LENGTH + len(body)] == body
    reader = BytesReader(data[-4:])
    assert reader.read_u32("big") == HEADER_LENGTH + len(body)


def test_small_timestamp_has_zero_extension():
    muxer = FlvMuxer()
    muxer.write_flv_tag_header(TagType.SCRIPT_DATA_AMF, 0, 40)
    data = muxer.writer.get_current_bytes()
    assert data[0] == TagType.SCRIPT_DATA_AMF
    assert data[7] == 0
    assert int.from_bytes(data[4:7], "big") == 40