"""Indenting writer for generated source code."""

from __future__ import annotations

import io
from contextlib import contextmanager
from typing import Iterator, Optional, TextIO

_INDENT = "    "

_GENERATED_ALLOWS = (
    "box_pointers",
    "dead_code",
    "missing_docs",
    "non_camel_case_types",
    "non_snake_case",
    "non_upper_case_globals",
    "trivial_casts",
    "unsafe_code",
    "unused_imports",
    "unused_results",
)


class CodeWriter:
    """Writes lines of code with a current indentation prefix.

    Nested constructs are context managers that yield the writer itself
    with a deeper indentation, restored when the block ends.
    """

    def __init__(self, out: Optional[TextIO] = None, indent: str = "") -> None:
        self._out: TextIO = out if out is not None else io.StringIO()
        self.indent = indent

    def write_line(self, line: str) -> None:
        """Write one line; empty lines carry no indentation."""
        if line:
            self._out.write(f"{self.indent}{line}\n")
        else:
            self._out.write("\n")

    def write_generated(self) -> None:
        """Write the header that marks a file as generated."""
        self.write_line("// This file is generated. Do not edit")
        self.write_line("// @generated")
        self.write_line("")
        self.comment("lints that older toolchains do not know are allowed")
        self.write_line("#![allow(unknown_lints)]")
        self.write_line("#![allow(clippy::all)]")
        self.write_line("")
        self.write_line("#![cfg_attr(rustfmt, rustfmt_skip)]")
        self.write_line("")
        for lint in _GENERATED_ALLOWS:
            self.write_line(f"#![allow({lint})]")

    @contextmanager
    def _prefixed(self, indent: str) -> Iterator["CodeWriter"]:
        saved = self.indent
        self.indent = indent
        try:
            yield self
        finally:
            self.indent = saved

    def indented(self):
        """Indent the lines written inside the ``with`` block by four spaces."""
        return self._prefixed(self.indent + _INDENT)

    def commented(self):
        """Comment out the lines written inside the ``with`` block."""
        return self._prefixed("// " + self.indent)

    @contextmanager
    def block(self, first_line: str, last_line: str) -> Iterator["CodeWriter"]:
        """Write ``first_line``, the indented body, then ``last_line``."""
        self.write_line(first_line)
        with self.indented():
            yield self
        self.write_line(last_line)

    def expr_block(self, prefix: str):
        """A ``prefix { ... }`` block."""
        return self.block(f"{prefix} {{", "}")

    def impl_self_block(self, name: str):
        """An inherent ``impl`` block."""
        return self.expr_block(f"impl {name}")

    def impl_for_block(self, tr: str, ty: str):
        """A trait ``impl`` block."""
        return self.expr_block(f"impl {tr} for {ty}")

    def pub_struct(self, name: str):
        """A public struct definition block."""
        return self.expr_block(f"pub struct {name}")

    def pub_trait(self, name: str):
        """A public trait definition block."""
        return self.expr_block(f"pub trait {name}")

    def field_entry(self, name: str, value: str) -> None:
        """A ``name: value,`` field initializer."""
        self.write_line(f"{name}: {value},")

    def field_decl(self, name: str, field_type: str) -> None:
        """A ``name: type,`` field declaration."""
        self.write_line(f"{name}: {field_type},")

    def comment(self, comment: str) -> None:
        """A line comment."""
        if comment:
            self.write_line(f"// {comment}")
        else:
            self.write_line("//")

    def fn_def(self, sig: str) -> None:
        """A function declaration without a body."""
        self.write_line(f"fn {sig};")

    def fn_block(self, public: bool, sig: str):
        """A function definition block, public or private."""
        if public:
            return self.expr_block(f"pub fn {sig}")
        return self.expr_block(f"fn {sig}")

    def pub_fn(self, sig: str):
        """A public function definition block."""
        return self.fn_block(True, sig)

    def def_fn(self, sig: str):
        """A private function definition block."""
        return self.fn_block(False, sig)

    def getvalue(self) -> str:
        """Return everything written so far when writing to an in-memory buffer."""
        getvalue = getattr(self._out, "getvalue", None)
        if getvalue is None:
            raise TypeError("output stream does not keep its contents")
        return getvalue()