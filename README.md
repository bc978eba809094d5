# grpcwire

Building blocks for the gRPC wire format, plus a `protoc` plugin that
generates service stubs.

The package has these modules:

- `grpcwire.status`: `GrpcStatus`, the gRPC status codes, with `code()`,
  `from_code()` (returns `None` for an unknown code) and
  `from_code_or_unknown()` (falls back to `UNKNOWN`).
- `grpcwire.errors`: `GrpcError` and its subclasses `GrpcIoError`,
  `HttpError`, `GrpcMessageError`, `MetadataDecodeError`, `PanicError`,
  `MarshallerError` and `OtherError`, and `any_to_string()`.
- `grpcwire.frame`: the 5-byte length-prefixed message framing
  (`write_grpc_frame`, `write_grpc_frame_cb`, `parse_grpc_frame_header`,
  `parse_grpc_frame`, `parse_grpc_frames`), the incremental
  `GrpcFrameParser`, and `decode_request_stream()`, which yields payloads
  from a sequence of body parts.
- `grpcwire.metadata`: `MetadataKey`, `MetadataEntry`, `Metadata` and
  `RequestOptions`.
- `grpcwire.headers`: builders of response headers and trailers
  (`headers_200`, `headers_500`, `grpc_error_message`, `trailers`),
  checks of incoming ones (`init_headers_to_metadata`,
  `trailers_to_metadata`) and `header_value()`.
- `grpcwire.marshall`: the `Marshaller` interface, `ProtobufMarshaller`
  and `frame_message()`.
- `grpcwire.method`: `GrpcStreaming` and `MethodDescriptor`.
- `grpcwire.routeguide`: an in-process route guide service (`RouteGuide`)
  with its message types and the helpers `in_range`, `calc_distance`,
  `serialize_point` and `load_features`.
- `grpcwire.codewriter` and `grpcwire.codegen`: `CodeWriter` and the stub
  generator behind the `protoc-gen-rust-grpc` command.

## Installation

```
pip install grpcwire
```

With the test dependencies:

```
pip install "grpcwire[test]"
```

## Framing

```python
from grpcwire.frame import GrpcFrameParser, write_grpc_frame

wire = write_grpc_frame(b"\x0a\x05world")
assert wire == b"\x00\x00\x00\x00\x07\x0a\x05world"

parser = GrpcFrameParser()
parser.enqueue(wire[:6])
assert parser.next_frame() is None      # not a whole frame yet
parser.enqueue(wire[6:])
print(parser.next_frame())              # (b"\n\x05world", 12)
parser.check_empty()                    # raises OtherError on a partial frame
```

A frame with the compression flag set, or with an unknown flag, raises
`OtherError`.

## Status codes

```python
from grpcwire.status import GrpcStatus

GrpcStatus.NOT_FOUND.code()             # 5
GrpcStatus.from_code(16)                # GrpcStatus.UNAUTHENTICATED
GrpcStatus.from_code(99)                # None
GrpcStatus.from_code_or_unknown(99)     # GrpcStatus.UNKNOWN
```

## Metadata and headers

Headers are `(name, value)` pairs. Keys ending in `-bin` carry binary
values: they are base64-encoded by `to_headers()` and decoded by
`from_headers()`, which raises `MetadataDecodeError` on invalid base64.
Pseudo-headers (names starting with `:`) and `grpc-*` headers are not
metadata and are skipped.

```python
from grpcwire.metadata import Metadata, MetadataKey

md = Metadata()
md.add(MetadataKey("trace-bin"), b"\x00\x01")
md.add(MetadataKey("user-agent"), b"example")
headers = md.to_headers()
assert Metadata.from_headers(headers).get("trace-bin") == b"\x00\x01"
```

`init_headers_to_metadata()` raises `OtherError` unless `:status` is 200
and `GrpcMessageError` for a non-OK `grpc-status`.
`trailers_to_metadata()` returns the metadata of OK trailers and otherwise
raises `GrpcMessageError`, or `OtherError` when no `grpc-message` is given.

## Marshalling

`ProtobufMarshaller(message_type)` serializes protobuf messages and parses
them back, raising `MarshallerError` on failure or when required fields are
missing. `frame_message(marshaller, message)` serializes a message and wraps
it in one gRPC frame.

## Route guide

`RouteGuide.from_db(path)` loads features from a JSON array of
`{"name": ..., "location": {"latitude": ..., "longitude": ...}}` objects.
`get_feature()` returns the feature at a point (or an unnamed one),
`list_features()` yields the features inside a rectangle, `record_route()`
returns a `RouteSummary`, and `route_chat()` stores each note and yields
every note at its location.

## Code generation

`protoc-gen-rust-grpc` is a `protoc` plugin: it reads a code generator
request on standard input and writes the response on standard output. For
every requested `.proto` file that declares services it emits a
`<name>_grpc.rs` file holding the server trait, the client stub and the
service definition. Command line arguments are ignored.

```
protoc-gen-rust-grpc < request.bin > response.bin
```

From Python, `grpcwire.codegen.gen(file_descriptors, files_to_generate)`
does the same work and returns a list of `GenResult(name, content)`.
Method names are turned into snake case by `snake_name`:

```python
from grpcwire.codegen import snake_name

snake_name("CreateIDForReq")            # "create_id_for_req"
```

## What this package does not do

There is no network client or server here: the package opens no HTTP/2
connections and sends or receives nothing itself. It builds and checks
frames, headers and metadata that a transport would carry, and
`RouteGuide` is called directly in process. Message compression is not
supported.