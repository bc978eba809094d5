"""gRPC wire-format building blocks: framing, status codes, metadata, marshalling and stub generation."""

__version__ = "0.1.0"

__all__ = [
    "codegen",
    "codewriter",
    "errors",
    "frame",
    "headers",
    "marshall",
    "metadata",
    "method",
    "routeguide",
    "status",
]