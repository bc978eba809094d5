"""gRPC length-prefixed message framing."""

from __future__ import annotations

from typing import Callable, Iterable, Iterator, List, Optional, Tuple, Union

from grpcwire.errors import OtherError

GRPC_HEADER_LEN = 5

_MAX_FRAME_LEN = 0xFFFFFFFF

BytesLike = Union[bytes, bytearray, memoryview]


def parse_grpc_frame_header(data: BytesLike) -> Optional[int]:
    """Return the payload length from a frame header, or ``None`` if incomplete.

    Raises :class:`OtherError` for a compressed or unknown compression flag.
    """
    if len(data) < GRPC_HEADER_LEN:
        return None
    flag = data[0]
    if flag == 1:
        raise OtherError("compression is not implemented")
    if flag != 0:
        raise OtherError("unknown compression flag")
    return int.from_bytes(bytes(data[1:GRPC_HEADER_LEN]), "big")


def parse_grpc_frame(data: BytesLike) -> Optional[Tuple[bytes, int]]:
    """Parse one whole frame: return ``(payload, bytes consumed)`` or ``None``."""
    length = parse_grpc_frame_header(data)
    if length is None:
        return None
    end = GRPC_HEADER_LEN + length
    if end > len(data):
        return None
    return bytes(data[GRPC_HEADER_LEN:end]), end


def parse_grpc_frames(data: BytesLike) -> Tuple[List[bytes], bytes]:
    """Parse all whole frames: return the payloads and the unparsed remainder."""
    view = memoryview(bytes(data))
    frames: List[bytes] = []
    while (parsed := parse_grpc_frame(view)) is not None:
        payload, consumed = parsed
        frames.append(payload)
        view = view[consumed:]
    return frames, bytes(view)


def write_grpc_frame_cb(estimate: int, frame: Callable[[bytearray], None]) -> bytes:
    """Build a frame whose payload is appended by ``frame`` to the given buffer.

    ``estimate`` is a hint of the payload size. Exceptions from ``frame``
    propagate unchanged.
    """
    out = bytearray()
    out.extend(b"\x00\x00\x00\x00\x00")
    payload = bytearray()
    if estimate > 0:
        payload.extend(bytes(estimate))
        del payload[:]
    frame(payload)
    if len(payload) > _MAX_FRAME_LEN:
        raise ValueError("frame payload too large")
    out[1:GRPC_HEADER_LEN] = len(payload).to_bytes(4, "big")
    out.extend(payload)
    return bytes(out)


def write_grpc_frame(payload: BytesLike) -> bytes:
    """Prefix ``payload`` with an uncompressed gRPC frame header."""
    return write_grpc_frame_cb(len(payload), lambda buf: buf.extend(payload))


class GrpcFrameParser:
    """Incremental parser that collects bytes and yields whole frames."""

    def __init__(self) -> None:
        self._next_frame_len: Optional[int] = None
        self._buffer = bytearray()

    def enqueue(self, data: BytesLike) -> None:
        """Add received bytes to the buffer."""
        self._buffer.extend(data)

    def _fill_next_frame_len(self) -> Optional[int]:
        if self._next_frame_len is None:
            length = parse_grpc_frame_header(self._buffer)
            if length is not None:
                del self._buffer[:GRPC_HEADER_LEN]
                self._next_frame_len = length
        return self._next_frame_len

    def next_frame(self) -> Optional[Tuple[bytes, int]]:
        """Return ``(payload, bytes consumed)`` if a whole frame is buffered."""
        length = self._fill_next_frame_len()
        if length is None or len(self._buffer) < length:
            return None
        self._next_frame_len = None
        payload = bytes(self._buffer[:length])
        del self._buffer[:length]
        return payload, length + GRPC_HEADER_LEN

    def next_frames(self) -> Tuple[List[bytes], int]:
        """Return every whole buffered frame and the total bytes consumed."""
        frames: List[bytes] = []
        consumed = 0
        while (parsed := self.next_frame()) is not None:
            payload, size = parsed
            frames.append(payload)
            consumed += size
        return frames, consumed

    def is_empty(self) -> bool:
        """True when nothing is buffered, not even a frame header."""
        return self._next_frame_len is None and not self._buffer

    def check_empty(self) -> None:
        """Raise :class:`OtherError` if a partial frame is buffered."""
        if not self.is_empty():
            raise OtherError("partial frame")


def decode_request_stream(parts: Iterable[object]) -> Iterator[bytes]:
    """Yield frame payloads from a sequence of HTTP body parts.

    Byte-like parts are data; any other part is treated as trailers and
    ignored. A partial frame at the end raises :class:`OtherError`.
    """
    parser = GrpcFrameParser()
    for part in parts:
        if isinstance(part, (bytes, bytearray, memoryview)):
            parser.enqueue(part)
            frames, _ = parser.next_frames()
            yield from frames
    parser.check_empty()