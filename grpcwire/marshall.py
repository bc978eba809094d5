"""Message marshallers and framing of marshalled messages."""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Any, Generic, Type, TypeVar, Union

from google.protobuf.message import DecodeError, EncodeError, Message

from grpcwire.errors import MarshallerError
from grpcwire.frame import write_grpc_frame_cb

M = TypeVar("M")

BytesLike = Union[bytes, bytearray, memoryview]


class Marshaller(ABC, Generic[M]):
    """Serializes request or response messages to bytes and back."""

    def write_size_estimate(self, message: M) -> int:
        """Estimate the serialized size; the default estimate is zero."""
        return 0

    @abstractmethod
    def write(self, message: M) -> bytes:
        """Serialize a message."""

    @abstractmethod
    def read(self, data: BytesLike) -> M:
        """Parse a message."""


class ProtobufMarshaller(Marshaller[Message]):
    """Marshaller for protobuf messages of one type."""

    def __init__(self, message_type: Type[Message]) -> None:
        self.message_type = message_type

    def write(self, message: Message) -> bytes:
        """Serialize with protobuf; failures raise :class:`MarshallerError`."""
        try:
            return message.SerializeToString()
        except EncodeError as exc:
            raise MarshallerError(exc) from exc

    def read(self, data: BytesLike) -> Message:
        """Parse and check that required fields are set.

        Failures raise :class:`MarshallerError`.
        """
        message = self.message_type()
        try:
            message.MergeFromString(bytes(data))
        except DecodeError as exc:
            raise MarshallerError(exc) from exc
        if not message.IsInitialized():
            missing = ", ".join(message.FindInitializationErrors())
            raise MarshallerError(f"message is missing required fields: {missing}")
        return message


def frame_message(marshaller: Marshaller[Any], message: Any) -> bytes:
    """Serialize ``message`` with ``marshaller`` into a single gRPC frame."""
    estimate = marshaller.write_size_estimate(message)
    return write_grpc_frame_cb(estimate, lambda buf: buf.extend(marshaller.write(message)))