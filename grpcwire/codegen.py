"""Generator of gRPC service stubs from protobuf file descriptors."""

from __future__ import annotations

import re
import sys
from dataclasses import dataclass
from typing import Dict, Iterable, List, Optional, Sequence, Tuple

from google.protobuf import descriptor_pb2
from google.protobuf.compiler import plugin_pb2

from grpcwire.codewriter import CodeWriter
from grpcwire.method import GrpcStreaming

_KEYWORDS = frozenset(
    """
    as break const continue crate else enum extern false fn for if impl in let
    loop match mod move mut pub ref return self Self static struct super trait
    true type unsafe use where while abstract alignof become box do final macro
    offsetof override priv proc pure sizeof typeof unsized virtual yield async
    await dyn try
    """.split()
)

_STREAMING_LOWER = {
    GrpcStreaming.UNARY: "unary",
    GrpcStreaming.SERVER_STREAMING: "server_streaming",
    GrpcStreaming.CLIENT_STREAMING: "client_streaming",
    GrpcStreaming.BIDI: "bidi",
}

_MARSHALLER = "::grpc::rt::ArcOrStatic::Static(&::grpc_protobuf::MarshallerProtobuf)"


def snake_name(name: str) -> str:
    """Convert a method name to snake case, keeping acronyms together."""
    out: List[str] = []
    chars = iter(name)
    last_char = "."
    for c in chars:
        if not c.isupper():
            last_char = c
            out.append(c)
            continue
        can_append_underscore = False
        if out and last_char != "_":
            out.append("_")
        last_char = c
        for c in chars:
            if not c.isupper():
                if can_append_underscore and c != "_":
                    out.append("_")
                out.append(last_char.lower())
                out.append(c)
                last_char = c
                break
            out.append(last_char.lower())
            last_char = c
            can_append_underscore = True
        else:
            out.append(last_char.lower())
    return "".join(out)


def proto_path_to_rust_mod(path: str) -> str:
    """Module name for a ``.proto`` file: base name, identifier-safe."""
    base = path.rsplit("/", 1)[-1]
    if base.endswith(".proto"):
        base = base[: -len(".proto")]
    name = re.sub(r"\W", "_", base)
    if name[:1].isdigit():
        name = "_" + name[1:]
    if name in _KEYWORDS:
        name += "_pb"
    return name


@dataclass(frozen=True)
class FoundMessage:
    """A message located in a file, with the path of names that leads to it."""

    file: descriptor_pb2.FileDescriptorProto
    path: Tuple[str, ...]
    descriptor: descriptor_pb2.DescriptorProto

    def rust_fq_name(self) -> str:
        """Fully qualified generated type name, relative to the parent module."""
        return f"{proto_path_to_rust_mod(self.file.name)}::{'_'.join(self.path)}"


class RootScope:
    """All file descriptors known to the generator."""

    def __init__(self, file_descriptors: Sequence[descriptor_pb2.FileDescriptorProto]) -> None:
        self.file_descriptors = list(file_descriptors)

    def find_message(self, fq_name: str) -> FoundMessage:
        """Find a message by its fully qualified name, e.g. ``.pkg.Outer.Inner``.

        Raises :class:`KeyError` when no file defines it.
        """
        name = fq_name[1:] if fq_name.startswith(".") else fq_name
        for file in self.file_descriptors:
            rest = name
            if file.package:
                prefix = file.package + "."
                if not rest.startswith(prefix):
                    continue
                rest = rest[len(prefix):]
            found = self._find_in(file.message_type, rest.split("."))
            if found is not None:
                path, descriptor = found
                return FoundMessage(file, path, descriptor)
        raise KeyError(f"message not found: {fq_name}")

    @staticmethod
    def _find_in(
        messages: Iterable[descriptor_pb2.DescriptorProto], parts: List[str]
    ) -> Optional[Tuple[Tuple[str, ...], descriptor_pb2.DescriptorProto]]:
        head, *tail = parts
        for message in messages:
            if message.name != head:
                continue
            if not tail:
                return (message.name,), message
            found = RootScope._find_in(message.nested_type, tail)
            if found is not None:
                return (message.name,) + found[0], found[1]
        return None


class MethodGen:
    """Generates the code of one service method."""

    def __init__(
        self,
        proto: descriptor_pb2.MethodDescriptorProto,
        service_path: str,
        root_scope: RootScope,
    ) -> None:
        self.proto = proto
        self.service_path = service_path
        self.root_scope = root_scope

    @property
    def _streaming(self) -> GrpcStreaming:
        return GrpcStreaming.from_flags(self.proto.client_streaming, self.proto.server_streaming)

    def snake_name(self) -> str:
        return snake_name(self.proto.name)

    def input_message(self) -> str:
        return f"super::{self.root_scope.find_message(self.proto.input_type).rust_fq_name()}"

    def output_message(self) -> str:
        return f"super::{self.root_scope.find_message(self.proto.output_type).rust_fq_name()}"

    def _client_resp_type(self) -> str:
        if self.proto.server_streaming:
            return f"::grpc::StreamingResponse<{self.output_message()}>"
        return f"::grpc::SingleResponse<{self.output_message()}>"

    def client_sig(self) -> str:
        """Signature of the client stub method."""
        resp_type = self._client_resp_type()
        if self.proto.client_streaming:
            req_param = ""
            return_type = (
                "impl ::std::future::Future<Output=::grpc::Result<"
                f"(::grpc::ClientRequestSink<{self.input_message()}>, {resp_type})>>"
            )
        else:
            req_param = f", req: {self.input_message()}"
            return_type = resp_type
        return f"{self.snake_name()}(&self, o: ::grpc::RequestOptions{req_param}) -> {return_type}"

    def _server_req_type(self) -> str:
        if self.proto.client_streaming:
            return f"::grpc::ServerRequest<{self.input_message()}>"
        return f"::grpc::ServerRequestSingle<{self.input_message()}>"

    def _server_resp_type(self) -> str:
        if self.proto.server_streaming:
            return f"::grpc::ServerResponseSink<{self.output_message()}>"
        return f"::grpc::ServerResponseUnarySink<{self.output_message()}>"

    def server_sig(self) -> str:
        """Signature of the server trait method."""
        return (
            f"{self.snake_name()}(&self, o: ::grpc::ServerHandlerContext, "
            f"req: {self._server_req_type()}, resp: {self._server_resp_type()}) "
            "-> ::grpc::Result<()>"
        )

    def streaming_upper(self) -> str:
        return self._streaming.value

    def streaming_lower(self) -> str:
        return _STREAMING_LOWER[self._streaming]

    def write_server_intf(self, w: CodeWriter) -> None:
        w.fn_def(self.server_sig())

    def write_client(self, w: CodeWriter) -> None:
        with w.pub_fn(self.client_sig()):
            self.write_descriptor(w, "let descriptor = ::grpc::rt::ArcOrStatic::Static(&", ");")
            req = "" if self.proto.client_streaming else ", req"
            w.write_line(f"self.grpc_client.call_{self.streaming_lower()}(o{req}, descriptor)")

    def write_descriptor(self, w: CodeWriter, before: str, after: str) -> None:
        with w.block(f"{before}::grpc::rt::MethodDescriptor {{", f"}}{after}"):
            w.field_entry(
                "name",
                f'::grpc::rt::StringOrStatic::Static("{self.service_path}/{self.proto.name}")',
            )
            w.field_entry("streaming", f"::grpc::rt::GrpcStreaming::{self.streaming_upper()}")
            w.field_entry("req_marshaller", _MARSHALLER)
            w.field_entry("resp_marshaller", _MARSHALLER)


class ServiceGen:
    """Generates the server trait, client stub and server definition of a service."""

    def __init__(
        self,
        proto: descriptor_pb2.ServiceDescriptorProto,
        file: descriptor_pb2.FileDescriptorProto,
        root_scope: RootScope,
    ) -> None:
        self.proto = proto
        self.root_scope = root_scope
        self.package = file.package
        if file.package:
            self.service_path = f"/{file.package}.{proto.name}"
        else:
            self.service_path = f"/{proto.name}"
        self.methods = [MethodGen(m, self.service_path, root_scope) for m in proto.method]

    def server_intf_name(self) -> str:
        return self.proto.name

    def client_name(self) -> str:
        return f"{self.proto.name}Client"

    def server_name(self) -> str:
        return f"{self.proto.name}Server"

    def _write_server_intf(self, w: CodeWriter) -> None:
        with w.pub_trait(self.server_intf_name()):
            for i, method in enumerate(self.methods):
                if i:
                    w.write_line("")
                method.write_server_intf(w)

    def _write_client(self, w: CodeWriter) -> None:
        with w.pub_struct(self.client_name()):
            w.field_decl("grpc_client", "::std::sync::Arc<::grpc::Client>")
        w.write_line("")
        with w.impl_for_block("::grpc::ClientStub", self.client_name()):
            with w.def_fn("with_client(grpc_client: ::std::sync::Arc<::grpc::Client>) -> Self"):
                with w.expr_block(self.client_name()):
                    w.field_entry("grpc_client", "grpc_client")
        w.write_line("")
        with w.impl_self_block(self.client_name()):
            for i, method in enumerate(self.methods):
                if i:
                    w.write_line("")
                method.write_client(w)

    def _write_service_definition(self, before: str, after: str, handler: str, w: CodeWriter) -> None:
        first = f'{before}::grpc::rt::ServerServiceDefinition::new("{self.service_path}",'
        with w.block(first, f"){after}"):
            with w.block("vec![", "],"):
                for method in self.methods:
                    with w.block("::grpc::rt::ServerMethod::new(", "),"):
                        method.write_descriptor(w, "::grpc::rt::ArcOrStatic::Static(&", "),")
                        with w.block("{", "},"):
                            w.write_line(f"let handler_copy = {handler}.clone();")
                            w.write_line(
                                f"::grpc::rt::MethodHandler{method.streaming_upper()}::new("
                                "move |ctx, req, resp| "
                                f"(*handler_copy).{method.snake_name()}(ctx, req, resp))"
                            )

    def _write_server(self, w: CodeWriter) -> None:
        w.write_line(f"pub struct {self.server_name()};")
        w.write_line("")
        w.write_line("")
        with w.impl_self_block(self.server_name()):
            sig = (
                f"new_service_def<H : {self.server_intf_name()} + 'static + Sync + Send + 'static>"
                "(handler: H) -> ::grpc::rt::ServerServiceDefinition"
            )
            with w.pub_fn(sig):
                w.write_line("let handler_arc = ::std::sync::Arc::new(handler);")
                self._write_service_definition("", "", "handler_arc", w)

    def write(self, w: CodeWriter) -> None:
        w.comment("server interface")
        w.write_line("")
        self._write_server_intf(w)
        w.write_line("")
        w.comment("client")
        w.write_line("")
        self._write_client(w)
        w.write_line("")
        w.comment("server")
        w.write_line("")
        self._write_server(w)


@dataclass(frozen=True)
class GenResult:
    """A generated output file."""

    name: str
    content: bytes


def gen_file(file: descriptor_pb2.FileDescriptorProto, root_scope: RootScope) -> Optional[GenResult]:
    """Generate the stub file for ``file``, or ``None`` if it has no services."""
    if not file.service:
        return None
    w = CodeWriter()
    w.write_generated()
    w.write_line("")
    for service in file.service:
        w.write_line("")
        ServiceGen(service, file, root_scope).write(w)
    return GenResult(
        name=proto_path_to_rust_mod(file.name) + "_grpc.rs",
        content=w.getvalue().encode("utf-8"),
    )


def gen(
    file_descriptors: Sequence[descriptor_pb2.FileDescriptorProto],
    files_to_generate: Iterable[str],
) -> List[GenResult]:
    """Generate stubs for the named files. Unknown names raise :class:`KeyError`."""
    files_map: Dict[str, descriptor_pb2.FileDescriptorProto] = {
        f.name: f for f in file_descriptors
    }
    root_scope = RootScope(file_descriptors)
    results = []
    for file_name in files_to_generate:
        result = gen_file(files_map[file_name], root_scope)
        if result is not None:
            results.append(result)
    return results


def main(argv: Optional[Sequence[str]] = None) -> int:
    """Run as a compiler plugin: request on stdin, response on stdout.

    Command line arguments are not used by the plugin protocol.
    """
    request = plugin_pb2.CodeGeneratorRequest()
    request.ParseFromString(sys.stdin.buffer.read())
    response = plugin_pb2.CodeGeneratorResponse()
    for result in gen(list(request.proto_file), list(request.file_to_generate)):
        response.file.add(name=result.name, content=result.content.decode("utf-8"))
    sys.stdout.buffer.write(response.SerializeToString())
    sys.stdout.buffer.flush()
    return 0