"""Method descriptors: streaming kind, full name and marshallers."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Any


class GrpcStreaming(Enum):
    """Streaming kind of a gRPC method."""

    UNARY = "Unary"
    CLIENT_STREAMING = "ClientStreaming"
    SERVER_STREAMING = "ServerStreaming"
    BIDI = "Bidi"

    @classmethod
    def from_flags(cls, client_streaming: bool, server_streaming: bool) -> "GrpcStreaming":
        """Pick the kind from the client and server streaming flags."""
        if client_streaming:
            return cls.BIDI if server_streaming else cls.CLIENT_STREAMING
        return cls.SERVER_STREAMING if server_streaming else cls.UNARY

    @property
    def client_streaming(self) -> bool:
        """True when the client sends a stream of messages."""
        return self in (GrpcStreaming.CLIENT_STREAMING, GrpcStreaming.BIDI)

    @property
    def server_streaming(self) -> bool:
        """True when the server answers with a stream of messages."""
        return self in (GrpcStreaming.SERVER_STREAMING, GrpcStreaming.BIDI)


@dataclass(frozen=True)
class MethodDescriptor:
    """Everything needed to call a method: path, streaming kind, marshallers."""

    name: str
    streaming: GrpcStreaming
    req_marshaller: Any
    resp_marshaller: Any