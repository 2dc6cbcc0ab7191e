# vim: set noexpandtab: -*- indent-tabs-mode: t -*-
"""
Classified fields -> Python source for a record and its builder.

Output per declaration (field order always equals declaration order):

  - the record as a `@dataclass`, carrying the factory `<Record>.builder()`;
  - `<Record>Builder`: storage (`__slots__` + `__init__` with every optional
    slot None and every sequence slot empty), then per field a setter, or for
    repeatable fields the element-append method plus (unless it is named like
    the field) a bulk setter, then `build()`.

`build()` raises `MissingFieldError` for the first unset required field; it
does not collect all of them.

The emitter is a plain text writer. It assumes names were already validated
by `check_member_names`; it never re-checks them.
"""

from __future__ import annotations

import logging
from typing import List, Mapping, Sequence

from strict_builder.config import GeneratorConfig
from strict_builder.parser.ast import (
	ArrayType,
	PathType,
	RefType,
	TupleType,
	TypeArg,
	TypeDeclaration,
	TypeExpr,
)

from .fields import Classification, RepeatableField, RequiredField

logger = logging.getLogger(__name__)

INDENT = "\t"

MODULE_HEADER = """\
# Generated by strict-builder. Do not edit.
from __future__ import annotations

from dataclasses import dataclass as _dataclass
from typing import Optional

from strict_builder.runtime import MissingFieldError as _MissingFieldError
"""


def render_type(type_expr: TypeExpr, type_map: Mapping[str, str]) -> str:
	"""
	Render a host type expression as a Python annotation string.

	Path types are looked up by their last segment; lifetime and const
	arguments are dropped; references render as their referent. A type_map
	entry of "" makes a single-argument wrapper transparent (`Box<T>` -> `T`).
	"""
	if isinstance(type_expr, RefType):
		return render_type(type_expr.inner, type_map)
	if isinstance(type_expr, TupleType):
		if not type_expr.elems:
			return "tuple[()]"
		return "tuple[" + ", ".join(render_type(e, type_map) for e in type_expr.elems) + "]"
	if isinstance(type_expr, ArrayType):
		return f"list[{render_type(type_expr.elem, type_map)}]"
	if isinstance(type_expr, PathType):
		last = type_expr.segments[-1]
		mapped = type_map.get(last.name, last.name)
		type_args = [a.type_expr for a in (last.args or ()) if isinstance(a, TypeArg)]
		rendered = [render_type(a, type_map) for a in type_args]
		if mapped == "":
			if len(rendered) == 1:
				return rendered[0]
			mapped = last.name
		if not rendered:
			return mapped
		return f"{mapped}[{', '.join(rendered)}]"
	raise TypeError(f"unsupported type expression {type_expr!r}")


class BuilderEmitter:
	"""Writes the record and builder classes for one classified declaration."""

	def __init__(self, decl: TypeDeclaration, fields: Sequence[Classification], config: GeneratorConfig) -> None:
		self.decl = decl
		self.fields = list(fields)
		self.config = config
		self.builder_name = config.builder_name(decl.name)
		self.lines: List[str] = []

	def _t(self, type_expr: TypeExpr) -> str:
		return render_type(type_expr, self.config.type_map)

	def _emit(self, text: str = "", depth: int = 0) -> None:
		self.lines.append(f"{INDENT * depth}{text}" if text else "")

	def emit(self) -> str:
		self.emit_record()
		self._emit()
		self._emit()
		self.emit_storage()
		for f in self.fields:
			self.emit_setters(f)
		self.emit_build()
		return "\n".join(self.lines) + "\n"

	def emit_record(self) -> None:
		self._emit("@_dataclass")
		self._emit(f"class {self.decl.name}:")
		for f in self.fields:
			self._emit(f"{f.name}: {self._t(f.declared_type)}", 1)
		if self.fields:
			self._emit()
		self._emit("@staticmethod", 1)
		self._emit(f"def {self.config.factory_name}() -> {self.builder_name}:", 1)
		self._emit(f"return {self.builder_name}()", 2)

	def emit_storage(self) -> None:
		slots = [f'"_{f.name}"' for f in self.fields]
		slots_src = ", ".join(slots) + ("," if len(slots) == 1 else "")
		self._emit(f"class {self.builder_name}:")
		self._emit(f"__slots__ = ({slots_src})", 1)
		self._emit()
		self._emit("def __init__(self) -> None:", 1)
		if not self.fields:
			self._emit("pass", 2)
		for f in self.fields:
			if isinstance(f, RepeatableField):
				self._emit(f"self._{f.name}: list[{self._t(f.type_expr)}] = []", 2)
			else:
				self._emit(f"self._{f.name}: Optional[{self._t(f.type_expr)}] = None", 2)

	def emit_setters(self, f: Classification) -> None:
		if isinstance(f, RepeatableField):
			self._method(f.each_name, self._t(f.type_expr), f"self._{f.name}.append(value)")
			if f.has_bulk_setter:
				self._method(f.name, f"list[{self._t(f.type_expr)}]", f"self._{f.name} = list(value)")
			return
		self._method(f.name, self._t(f.type_expr), f"self._{f.name} = value")

	def _method(self, name: str, param_type: str, body: str) -> None:
		self._emit()
		self._emit(f"def {name}(self, value: {param_type}) -> {self.builder_name}:", 1)
		self._emit(body, 2)
		self._emit("return self", 2)

	def emit_build(self) -> None:
		self._emit()
		self._emit(f"def {self.config.build_method}(self) -> {self.decl.name}:", 1)
		for f in self.fields:
			if isinstance(f, RequiredField):
				self._emit(f"if self._{f.name} is None:", 2)
				self._emit(f'raise _MissingFieldError("{f.name}")', 3)
		if not self.fields:
			self._emit(f"return {self.decl.name}()", 2)
			return
		self._emit(f"return {self.decl.name}(", 2)
		for f in self.fields:
			self._emit(f"{f.name}={self._value_expr(f)},", 3)
		self._emit(")", 2)

	def _value_expr(self, f: Classification) -> str:
		if isinstance(f, RepeatableField):
			return f"list(self._{f.name})"
		return f"self._{f.name}"


def emit_declaration(decl: TypeDeclaration, fields: Sequence[Classification], config: GeneratorConfig) -> str:
	"""Python source (without module header) for one declaration."""
	src = BuilderEmitter(decl, fields, config).emit()
	logger.debug("emitted %s and %s", decl.name, config.builder_name(decl.name))
	return src


def emit_module(chunks: Sequence[str]) -> str:
	"""Join per-declaration sources under the shared module header."""
	parts = [MODULE_HEADER]
	for chunk in chunks:
		parts.append("\n\n" + chunk)
	return "".join(parts)


__all__ = ["MODULE_HEADER", "BuilderEmitter", "emit_declaration", "emit_module", "render_type"]
