"""Request and response metadata carried in HTTP/2 headers."""

from __future__ import annotations

import base64
import binascii
from dataclasses import dataclass, field
from typing import Iterable, List, Optional, Tuple, Union

from grpcwire.errors import MetadataDecodeError

StrOrBytes = Union[str, bytes, bytearray, memoryview]
Header = Tuple[str, bytes]


def _to_str(value: StrOrBytes) -> str:
    if isinstance(value, str):
        return value
    return bytes(value).decode("utf-8")


def _to_bytes(value: StrOrBytes) -> bytes:
    if isinstance(value, str):
        return value.encode("utf-8")
    return bytes(value)


@dataclass(frozen=True)
class MetadataKey:
    """A metadata key, i.e. a header name. It must not be empty."""

    name: str

    def __post_init__(self) -> None:
        name = _to_str(self.name)
        if not name:
            raise ValueError("metadata key must not be empty")
        object.__setattr__(self, "name", name)

    def is_bin(self) -> bool:
        """True for binary keys, whose values are base64 encoded on the wire."""
        return self.name.endswith("-bin")

    def __str__(self) -> str:
        return self.name


@dataclass(frozen=True)
class MetadataEntry:
    """A single metadata key and its raw value."""

    key: MetadataKey
    value: bytes

    def to_header(self) -> Header:
        """Return the ``(name, value)`` header for this entry."""
        value = base64.b64encode(self.value) if self.key.is_bin() else self.value
        return self.key.name, value

    @classmethod
    def from_header(cls, name: StrOrBytes, value: StrOrBytes) -> Optional["MetadataEntry"]:
        """Build an entry from a header, or ``None`` for pseudo and ``grpc-`` headers.

        Raises :class:`MetadataDecodeError` if a binary value is not valid base64.
        """
        header_name = _to_str(name)
        if header_name.startswith(":") or header_name.startswith("grpc-"):
            return None
        key = MetadataKey(header_name)
        raw = _to_bytes(value)
        if key.is_bin():
            try:
                raw = base64.b64decode(raw, validate=True)
            except (binascii.Error, ValueError) as exc:
                raise MetadataDecodeError(exc) from exc
        return cls(key, raw)


@dataclass
class Metadata:
    """Ordered request or response metadata."""

    entries: List[MetadataEntry] = field(default_factory=list)

    @classmethod
    def from_headers(cls, headers: Iterable[Tuple[StrOrBytes, StrOrBytes]]) -> "Metadata":
        """Collect metadata from HTTP/2 headers, skipping reserved ones."""
        metadata = cls()
        for name, value in headers:
            entry = MetadataEntry.from_header(name, value)
            if entry is not None:
                metadata.entries.append(entry)
        return metadata

    def to_headers(self) -> List[Header]:
        """Convert the metadata into HTTP/2 headers."""
        return [entry.to_header() for entry in self.entries]

    def get(self, name: str) -> Optional[bytes]:
        """Return the value of the first entry with this key, if any."""
        return next((e.value for e in self.entries if e.key.name == name), None)

    def extend(self, other: "Metadata") -> None:
        """Append all entries of ``other``."""
        self.entries.extend(other.entries)

    def add(self, key: Union[MetadataKey, StrOrBytes], value: StrOrBytes) -> None:
        """Append an entry."""
        if not isinstance(key, MetadataKey):
            key = MetadataKey(_to_str(key))
        self.entries.append(MetadataEntry(key, _to_bytes(value)))

    def __len__(self) -> int:
        return len(self.entries)


@dataclass
class RequestOptions:
    """Options of a single gRPC request."""

    metadata: Metadata = field(default_factory=Metadata)
    cachable: bool = False