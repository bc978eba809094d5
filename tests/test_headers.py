import base64

import pytest

from grpcwire.errors import GrpcMessageError, MetadataDecodeError, OtherError
from grpcwire.headers import (
    grpc_error_message,
    header_value,
    headers_200,
    headers_500,
    init_headers_to_metadata,
    trailers,
    trailers_to_metadata,
)
from grpcwire.metadata import Metadata
from grpcwire.status import GrpcStatus


def _metadata():
    md = Metadata()
    md.add("x-user", b"alice")
    md.add("x-bin", b"\x00\x01")
    return md


def test_header_value():
    headers = [("a", b"1"), ("b", "2"), ("a", b"3")]
    assert header_value(headers, "a") == "1"
    assert header_value(headers, "b") == "2"
    assert header_value(headers, "c") is None


def test_headers_500():
    headers = headers_500(GrpcStatus.NOT_FOUND, "missing")
    assert header_value(headers, ":status") == "500"
    assert header_value(headers, "content-type") == "application/grpc"
    assert header_value(headers, "grpc-status") == "5"
    assert header_value(headers, "grpc-message") == "missing"


def test_headers_200_carries_metadata():
    headers = headers_200(_metadata())
    assert header_value(headers, ":status") == "200"
    assert header_value(headers, "grpc-status") == "0"
    assert init_headers_to_metadata(headers) == _metadata()


def test_grpc_error_message():
    headers = grpc_error_message("boom")
    assert header_value(headers, "grpc-status") == "13"
    assert header_value(headers, "grpc-message") == "boom"


def test_trailers_without_message():
    headers = trailers(GrpcStatus.OK, None, _metadata())
    assert header_value(headers, "grpc-message") is None
    assert headers[0] == ("grpc-status", b"0")
    assert trailers_to_metadata(headers) == _metadata()


def test_trailers_with_message_raise():
    headers = trailers(GrpcStatus.ABORTED, "stop", Metadata())
    with pytest.raises(GrpcMessageError) as info:
        trailers_to_metadata(headers)
    assert info.value.grpc_status == GrpcStatus.ABORTED
    assert info.value.grpc_message == "stop"


def test_trailers_without_status_uses_unknown():
    with pytest.raises(GrpcMessageError) as info:
        trailers_to_metadata([("grpc-message", b"oops")])
    assert info.value.grpc_status == GrpcStatus.UNKNOWN


def test_trailers_error_without_message():
    with pytest.raises(OtherError):
        trailers_to_metadata([("grpc-status", b"13")])


def test_init_headers_not_200():
    with pytest.raises(OtherError) as info:
        init_headers_to_metadata(headers_500(GrpcStatus.INTERNAL, "x"))
    assert info.value.message == "not 200"


def test_init_headers_error_status_default_message():
    with pytest.raises(GrpcMessageError) as info:
        init_headers_to_metadata([(":status", b"200"), ("grpc-status", b"5")])
    assert info.value.grpc_status == GrpcStatus.NOT_FOUND
    assert info.value.grpc_message == "unknown error"


def test_init_headers_without_grpc_status():
    md = init_headers_to_metadata([(":status", "200"), ("x", "y")])
    assert md.get("x") == b"y"


def test_init_headers_bad_binary_metadata():
    with pytest.raises(MetadataDecodeError):
        init_headers_to_metadata([(":status", "200"), ("x-bin", "%%%")])


def test_binary_metadata_is_base64_on_wire():
    headers = headers_200(_metadata())
    assert base64.b64decode(header_value(headers, "x-bin")) == b"\x00\x01"