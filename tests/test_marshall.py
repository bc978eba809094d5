import pytest
from google.protobuf import wrappers_pb2

from grpcwire.errors import MarshallerError
from grpcwire.frame import parse_grpc_frame
from grpcwire.marshall import Marshaller, ProtobufMarshaller, frame_message


class Utf8Marshaller(Marshaller):
    def write(self, message):
        return message.encode("utf-8")

    def read(self, data):
        try:
            return bytes(data).decode("utf-8")
        except UnicodeDecodeError as exc:
            raise MarshallerError(exc) from exc


def test_default_size_estimate_is_zero():
    m = ProtobufMarshaller(wrappers_pb2.StringValue)
    assert m.write_size_estimate(wrappers_pb2.StringValue(value="abc")) == 0


def test_marshaller_is_abstract():
    with pytest.raises(TypeError):
        Marshaller()


def test_protobuf_round_trip():
    m = ProtobufMarshaller(wrappers_pb2.StringValue)
    data = m.write(wrappers_pb2.StringValue(value="hello"))
    assert m.read(data).value == "hello"


def test_protobuf_read_memoryview():
    m = ProtobufMarshaller(wrappers_pb2.StringValue)
    data = m.write(wrappers_pb2.StringValue(value="world"))
    assert m.read(memoryview(data)).value == "world"


def test_protobuf_wire_bytes():
    m = ProtobufMarshaller(wrappers_pb2.StringValue)
    assert m.write(wrappers_pb2.StringValue(value="hi")) == b"\x0a\x02hi"


def test_protobuf_read_invalid_raises():
    m = ProtobufMarshaller(wrappers_pb2.StringValue)
    with pytest.raises(MarshallerError):
        m.read(b"\xff")


def test_protobuf_read_empty_gives_default():
    m = ProtobufMarshaller(wrappers_pb2.StringValue)
    assert m.read(b"").value == ""


def test_frame_message_protobuf():
    m = ProtobufMarshaller(wrappers_pb2.StringValue)
    framed = frame_message(m, wrappers_pb2.StringValue(value="hi"))
    assert framed == b"\x00\x00\x00\x00\x04\x0a\x02hi"


def test_frame_message_round_trip():
    m = Utf8Marshaller()
    framed = frame_message(m, "gRPC message")
    parsed = parse_grpc_frame(framed)
    assert parsed is not None
    payload, consumed = parsed
    assert m.read(payload) == "gRPC message"
    assert consumed == len(framed)


def test_frame_message_propagates_marshaller_error():
    class Failing(Utf8Marshaller):
        def write(self, message):
            raise MarshallerError("boom")

    with pytest.raises(MarshallerError):
        frame_message(Failing(), "x")