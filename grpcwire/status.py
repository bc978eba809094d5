"""gRPC status codes."""

from __future__ import annotations

from enum import IntEnum
from typing import Optional


class GrpcStatus(IntEnum):
    """gRPC status constants as carried in the ``grpc-status`` header."""

    OK = 0
    CANCELLED = 1
    UNKNOWN = 2
    ARGUMENT = 3
    DEADLINE_EXCEEDED = 4
    NOT_FOUND = 5
    ALREADY_EXISTS = 6
    PERMISSION_DENIED = 7
    UNAUTHENTICATED = 16
    RESOURCE_EXHAUSTED = 8
    FAILED_PRECONDITION = 9
    ABORTED = 10
    OUT_OF_RANGE = 11
    UNIMPLEMENTED = 12
    INTERNAL = 13
    UNAVAILABLE = 14
    DATA_LOSS = 15

    def code(self) -> int:
        """Return the numeric protocol code."""
        return int(self.value)

    @classmethod
    def from_code(cls, code: int) -> Optional["GrpcStatus"]:
        """Find the status with the given code, or ``None`` if there is none."""
        return next((status for status in cls if status.code() == code), None)

    @classmethod
    def from_code_or_unknown(cls, code: int) -> "GrpcStatus":
        """Find the status with the given code, falling back to ``UNKNOWN``."""
        status = cls.from_code(code)
        return cls.UNKNOWN if status is None else status