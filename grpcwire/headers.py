"""HTTP/2 header sets used by gRPC requests and responses."""

from __future__ import annotations

from typing import Iterable, List, Optional, Tuple, Union

from grpcwire.errors import GrpcMessageError, OtherError
from grpcwire.metadata import Metadata
from grpcwire.status import GrpcStatus

HEADER_GRPC_STATUS = "grpc-status"
HEADER_GRPC_MESSAGE = "grpc-message"

StrOrBytes = Union[str, bytes, bytearray, memoryview]
Header = Tuple[str, bytes]


def _as_str(value: StrOrBytes) -> Optional[str]:
    if isinstance(value, str):
        return value
    try:
        return bytes(value).decode("utf-8")
    except UnicodeDecodeError:
        return None


def header_value(headers: Iterable[Tuple[StrOrBytes, StrOrBytes]], name: str) -> Optional[str]:
    """Return the first value of header ``name`` as text, or ``None``."""
    for header_name, value in headers:
        if _as_str(header_name) == name:
            return _as_str(value)
    return None


def _header_int(headers: Iterable[Tuple[StrOrBytes, StrOrBytes]], name: str) -> Optional[int]:
    value = header_value(headers, name)
    if value is None:
        return None
    try:
        return int(value.strip())
    except ValueError:
        return None


def headers_500(grpc_status: GrpcStatus, message: str) -> List[Header]:
    """Response headers reporting a failed call with HTTP status 500."""
    return [
        (":status", b"500"),
        ("content-type", b"application/grpc"),
        (HEADER_GRPC_STATUS, str(int(grpc_status)).encode()),
        (HEADER_GRPC_MESSAGE, message.encode("utf-8")),
    ]


def headers_200(metadata: Metadata) -> List[Header]:
    """Successful response headers followed by the given metadata."""
    headers: List[Header] = [
        (":status", b"200"),
        ("content-type", b"application/grpc"),
        (HEADER_GRPC_STATUS, b"0"),
    ]
    headers.extend(metadata.to_headers())
    return headers


def grpc_error_message(message: str) -> List[Header]:
    """Headers of a body-less response reporting an internal gRPC error."""
    return [
        (":status", b"200"),
        (HEADER_GRPC_STATUS, str(int(GrpcStatus.INTERNAL)).encode()),
        (HEADER_GRPC_MESSAGE, message.encode("utf-8")),
    ]


def trailers(grpc_status: GrpcStatus, message: Optional[str], metadata: Metadata) -> List[Header]:
    """Trailers: status, optional status message, then custom metadata."""
    headers: List[Header] = [(HEADER_GRPC_STATUS, str(int(grpc_status)).encode())]
    if message is not None:
        headers.append((HEADER_GRPC_MESSAGE, message.encode("utf-8")))
    headers.extend(metadata.to_headers())
    return headers


def init_headers_to_metadata(headers: Iterable[Tuple[StrOrBytes, StrOrBytes]]) -> Metadata:
    """Check initial response headers and return their metadata.

    Raises :class:`OtherError` unless ``:status`` is 200, and
    :class:`GrpcMessageError` for a non-OK ``grpc-status``.
    """
    headers = list(headers)
    if header_value(headers, ":status") != "200":
        raise OtherError("not 200")
    grpc_status = _header_int(headers, HEADER_GRPC_STATUS)
    if grpc_status is not None and grpc_status != GrpcStatus.OK:
        message = header_value(headers, HEADER_GRPC_MESSAGE)
        raise GrpcMessageError(grpc_status, "unknown error" if message is None else message)
    return Metadata.from_headers(headers)


def trailers_to_metadata(headers: Iterable[Tuple[StrOrBytes, StrOrBytes]]) -> Metadata:
    """Check response trailers and return their metadata.

    Raises :class:`GrpcMessageError` when the status is not OK and a message is
    present, :class:`OtherError` when it is not OK and there is no message.
    """
    headers = list(headers)
    grpc_status = _header_int(headers, HEADER_GRPC_STATUS)
    if grpc_status == GrpcStatus.OK:
        return Metadata.from_headers(headers)
    message = header_value(headers, HEADER_GRPC_MESSAGE)
    if message is None:
        raise OtherError("not xxx")
    status = int(GrpcStatus.UNKNOWN) if grpc_status is None else grpc_status
    raise GrpcMessageError(status, message)