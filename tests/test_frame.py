import pytest

from grpcwire.errors import OtherError
from grpcwire.frame import (
    GRPC_HEADER_LEN,
    GrpcFrameParser,
    decode_request_stream,
    parse_grpc_frame,
    parse_grpc_frame_header,
    parse_grpc_frames,
    write_grpc_frame,
    write_grpc_frame_cb,
)


def test_parse_grpc_frame():
    assert parse_grpc_frame(b"") is None
    assert parse_grpc_frame(b"1") is None
    assert parse_grpc_frame(b"14sc") is None
    assert parse_grpc_frame(b"\x00\x00\x00\x00\x07\x0a\x05wo") is None
    assert parse_grpc_frame(b"\x00\x00\x00\x00\x07\x0a\x05world") == (b"\x0a\x05world", 12)


@pytest.mark.parametrize(
    "expected, data, trail",
    [
        ([], b"", b""),
        ([], b"", b"1"),
        ([], b"", b"14sc"),
        ([b"\x0a\x05world"], b"\x00\x00\x00\x00\x07\x0a\x05world", b""),
        ([b"ab", b"cde"], b"\0\x00\x00\x00\x02ab\0\x00\x00\x00\x03cde", b"\x00"),
    ],
)
def test_parse_grpc_frames(expected, data, trail):
    frames, rest = parse_grpc_frames(data + trail)
    assert frames == expected
    assert rest == trail


def test_write_grpc_frame_cb():
    out = write_grpc_frame_cb(0, lambda buf: buf.extend(b"\x17\x19"))
    assert out == b"\x00\x00\x00\x00\x02\x17\x19"


def test_write_grpc_frame_cb_propagates_errors():
    def failing(buf):
        raise ValueError("cannot serialize")

    with pytest.raises(ValueError):
        write_grpc_frame_cb(10, failing)


@pytest.mark.parametrize("payload", [b"", b"x", b"\x0a\x05world", bytes(range(256)) * 3])
def test_write_then_parse_round_trip(payload):
    framed = write_grpc_frame(payload)
    assert len(framed) == len(payload) + GRPC_HEADER_LEN
    assert parse_grpc_frame(framed) == (payload, len(framed))


def test_header_rejects_compression():
    with pytest.raises(OtherError) as info:
        parse_grpc_frame_header(b"\x01\x00\x00\x00\x00")
    assert info.value.message == "compression is not implemented"


def test_header_rejects_unknown_flag():
    with pytest.raises(OtherError) as info:
        parse_grpc_frame_header(b"\x07\x00\x00\x00\x00")
    assert info.value.message == "unknown compression flag"


def _parse_one(data):
    parser = GrpcFrameParser()
    parser.enqueue(data)
    return parser.next_frame()


def test_parser_cases():
    assert _parse_one(b"") is None
    assert _parse_one(b"1") is None
    assert _parse_one(b"14sc") is None
    assert _parse_one(b"\x00\x00\x00\x00\x07\x0a\x05wo") is None
    assert _parse_one(b"\x00\x00\x00\x00\x07\x0a\x05world") == (b"\x0a\x05world", 12)


def test_parser_byte_by_byte():
    data = b"\0\x00\x00\x00\x02ab\0\x00\x00\x00\x03cde"
    parser = GrpcFrameParser()
    collected = []
    total = 0
    for byte in data:
        parser.enqueue(bytes([byte]))
        frames, consumed = parser.next_frames()
        collected.extend(frames)
        total += consumed
    assert collected == [b"ab", b"cde"]
    assert total == len(data)
    assert parser.is_empty()
    parser.check_empty()
    assert parser.next_frame() is None


def test_parser_partial_frame_is_not_empty():
    parser = GrpcFrameParser()
    parser.enqueue(b"\x00\x00\x00\x00\x07\x0a\x05wo")
    assert parser.next_frame() is None
    assert not parser.is_empty()
    with pytest.raises(OtherError) as info:
        parser.check_empty()
    assert info.value.message == "partial frame"


def test_parser_header_only_is_not_empty():
    parser = GrpcFrameParser()
    parser.enqueue(b"\x00\x00\x00\x00\x02")
    assert parser.next_frame() is None
    assert not parser.is_empty()


def test_decode_request_stream_split_parts_and_trailers():
    data = write_grpc_frame(b"hello") + write_grpc_frame(b"") + write_grpc_frame(b"world")
    parts = [data[:3], data[3:9], {"grpc-status": "0"}, data[9:]]
    assert list(decode_request_stream(parts)) == [b"hello", b"", b"world"]


def test_decode_request_stream_partial_frame_fails():
    parts = [write_grpc_frame(b"ok"), b"\x00\x00\x00"]
    stream = decode_request_stream(parts)
    assert next(stream) == b"ok"
    with pytest.raises(OtherError):
        next(stream)


def test_decode_request_stream_empty():
    assert list(decode_request_stream([])) == []