"""Errors raised by the gRPC wire layer."""

from __future__ import annotations

from typing import Any, Optional


class GrpcError(Exception):
    """Base class of every error raised by this package."""


class GrpcIoError(GrpcError):
    """An I/O error."""

    def __init__(self, error: BaseException) -> None:
        super().__init__(error)
        self.error = error

    def __str__(self) -> str:
        return f"io error: {self.error}"


class HttpError(GrpcError):
    """An error from the HTTP/2 layer."""

    def __init__(self, error: Any) -> None:
        super().__init__(error)
        self.error = error

    def __str__(self) -> str:
        return f"http error: {self.error}"


class GrpcMessageError(GrpcError):
    """An error reported by the peer in gRPC protocol headers."""

    def __init__(self, grpc_status: int, grpc_message: str) -> None:
        super().__init__(grpc_status, grpc_message)
        self.grpc_status = grpc_status
        self.grpc_message = grpc_message

    def __str__(self) -> str:
        return f"grpc message error: {self.grpc_message}"


class MetadataDecodeError(GrpcError):
    """Metadata could not be decoded."""

    def __init__(self, cause: Optional[BaseException] = None) -> None:
        super().__init__(cause)
        self.cause = cause

    def __str__(self) -> str:
        return "metadata decode error"


class PanicError(GrpcError):
    """A handler failed unexpectedly."""

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message

    def __str__(self) -> str:
        return f"panic: {self.message}"


class MarshallerError(GrpcError):
    """A message could not be serialized or parsed."""

    def __init__(self, cause: Any) -> None:
        super().__init__(cause)
        self.cause = cause

    def __str__(self) -> str:
        return f"marshaller error: {self.cause}"


class OtherError(GrpcError):
    """Any other protocol error."""

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message

    def __str__(self) -> str:
        return f"other error: {self.message}"


def any_to_string(value: Any) -> str:
    """Describe a failure payload: strings are kept, anything else is unknown."""
    if isinstance(value, str):
        return value
    return "unknown any"