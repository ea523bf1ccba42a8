import pytest

from xiu.bytesio.bytes_errors import (
    BytesReadError,
    BytesReadErrorKind,
    BytesWriteError,
    BytesWriteErrorKind,
)
from xiu.flv.flv_errors import (
    BitVecError,
    FlvDemuxerError,
    MpegAacError,
    MpegAacErrorKind,
    MpegAvcError,
    MuxerError,
    TagParseError,
    TagParseErrorKind,
)


def test_tag_parse_error_kind_and_message():
    err = TagParseError(TagParseErrorKind.UNKNOWN_TAG_TYPE)
    assert err.kind is TagParseErrorKind.UNKNOWN_TAG_TYPE
    assert str(err) == TagParseErrorKind.UNKNOWN_TAG_TYPE.value


def test_tag_parse_error_with_detail():
    cause = BytesReadError(BytesReadErrorKind.NOT_ENOUGH_BYTES)
    err = TagParseError(TagParseErrorKind.BYTES_READ_ERROR, cause)
    assert err.detail is cause
    assert str(err).startswith("bytes read error")


def test_muxer_error_keeps_cause():
    cause = BytesWriteError(BytesWriteErrorKind.OUT_OF_INDEX)
    err = MuxerError(cause)
    assert err.cause is cause
    assert str(err) == "bytes write error"


@pytest.mark.parametrize(
    "cause, message",
    [
        (BytesWriteError(BytesWriteErrorKind.TIMEOUT), "bytes write error"),
        (BytesReadError(BytesReadErrorKind.EMPTY_STREAM), "bytes read error"),
        (MpegAvcError(MpegAacErrorKind.SHOULD_NOT_COME_HERE), "mpeg avc error"),
        (MpegAacError(MpegAacErrorKind.NOT_ENOUGH_BITS_TO_READ), "mpeg aac error"),
    ],
)
def test_demuxer_error_messages(cause, message):
    err = FlvDemuxerError(cause)
    assert err.cause is cause
    assert str(err) == message


def test_demuxer_error_rejects_other_causes():
    with pytest.raises(TypeError):
        FlvDemuxerError(ValueError("x"))


def test_mpeg_errors_share_kinds():
    aac = MpegAacError(MpegAacErrorKind.NOT_ENOUGH_BITS_TO_READ)
    avc = MpegAvcError(MpegAacErrorKind.NOT_ENOUGH_BITS_TO_READ)
    assert aac.kind is avc.kind
    assert str(aac) == "there is not enough bits to read"


def test_bit_vec_error_message():
    err = BitVecError()
    assert "not enough bits left" in str(err)