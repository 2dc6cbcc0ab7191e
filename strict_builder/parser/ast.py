# vim: set noexpandtab: -*- indent-tabs-mode: t -*-
"""
Declaration AST consumed by the builder derive.

Nodes are frozen: a declaration is read-only input to a generation pass. The
parser is one producer; callers may also construct these directly.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional, Tuple, Union


@dataclass(frozen=True)
class Located:
	line: int
	column: int


@dataclass(frozen=True)
class AttrToken:
	"""
	One raw token of an attribute argument list.

	kind is one of "ident", "punct", "literal", "group". Literal text keeps its
	quotes (`"friend"`); a group holds the tokens inside nested parentheses.
	"""

	kind: str
	text: str
	children: Tuple["AttrToken", ...] = ()

	def __str__(self) -> str:
		if self.kind == "group":
			return "(" + " ".join(str(c) for c in self.children) + ")"
		return self.text


@dataclass(frozen=True)
class Attribute:
	"""
	Outer attribute `#[path]`, `#[path(tokens...)]` or `#[path = literal]`.

	`tokens` is None unless the attribute has a parenthesized argument list;
	`value` is set only for the `path = literal` form.
	"""

	path: Tuple[str, ...]
	tokens: Optional[Tuple[AttrToken, ...]] = None
	value: Optional[AttrToken] = None
	loc: Optional[Located] = None

	def path_is(self, name: str) -> bool:
		return self.path == (name,)

	def __str__(self) -> str:
		text = "::".join(self.path)
		if self.tokens is not None:
			text += "(" + " ".join(str(t) for t in self.tokens) + ")"
		elif self.value is not None:
			text += f" = {self.value}"
		return f"#[{text}]"


class TypeExpr:
	"""Base class of type expressions; `str()` renders source text."""


@dataclass(frozen=True)
class TypeArg:
	type_expr: TypeExpr

	def __str__(self) -> str:
		return str(self.type_expr)


@dataclass(frozen=True)
class LifetimeArg:
	name: str

	def __str__(self) -> str:
		return self.name


@dataclass(frozen=True)
class ConstArg:
	value: str

	def __str__(self) -> str:
		return self.value


GenericArg = Union[TypeArg, LifetimeArg, ConstArg]


@dataclass(frozen=True)
class PathSegment:
	name: str
	# None when the segment carries no `<...>`; an empty tuple for `Name<>`.
	args: Optional[Tuple[GenericArg, ...]] = None

	def __str__(self) -> str:
		if self.args is None:
			return self.name
		return f"{self.name}<" + ", ".join(str(a) for a in self.args) + ">"


@dataclass(frozen=True)
class PathType(TypeExpr):
	segments: Tuple[PathSegment, ...]

	def __str__(self) -> str:
		return "::".join(str(s) for s in self.segments)


@dataclass(frozen=True)
class RefType(TypeExpr):
	inner: TypeExpr
	mutable: bool = False
	lifetime: Optional[str] = None

	def __str__(self) -> str:
		parts = ["&"]
		if self.lifetime:
			parts.append(f"{self.lifetime} ")
		if self.mutable:
			parts.append("mut ")
		return "".join(parts) + str(self.inner)


@dataclass(frozen=True)
class TupleType(TypeExpr):
	elems: Tuple[TypeExpr, ...]

	def __str__(self) -> str:
		if len(self.elems) == 1:
			return f"({self.elems[0]},)"
		return "(" + ", ".join(str(e) for e in self.elems) + ")"


@dataclass(frozen=True)
class ArrayType(TypeExpr):
	elem: TypeExpr
	length: str

	def __str__(self) -> str:
		return f"[{self.elem}; {self.length}]"


def named_type(name: str, *args: TypeExpr) -> PathType:
	"""Shorthand for a single-segment path type, e.g. `named_type("Vec", named_type("String"))`."""
	seg_args = tuple(TypeArg(a) for a in args) if args else None
	return PathType(segments=(PathSegment(name=name, args=seg_args),))


@dataclass(frozen=True)
class FieldDescriptor:
	"""
	One declared field.

	`name` is None for positional (tuple-record) fields; extraction rejects
	those. Only the first entry of `annotations` is interpreted.
	"""

	name: Optional[str]
	type_expr: TypeExpr
	annotations: Tuple[Attribute, ...] = ()
	loc: Optional[Located] = None


@dataclass(frozen=True)
class TypeDeclaration:
	"""
	A declared type: kind is "struct", "enum" or "union".

	Fields are in declaration order. Enums keep their variant names only; they
	never reach classification.
	"""

	name: str
	fields: Tuple[FieldDescriptor, ...] = ()
	kind: str = "struct"
	attributes: Tuple[Attribute, ...] = ()
	variants: Tuple[str, ...] = ()
	loc: Optional[Located] = None


@dataclass(frozen=True)
class SourceFile:
	declarations: Tuple[TypeDeclaration, ...]


__all__ = [
	"Located",
	"AttrToken",
	"Attribute",
	"TypeExpr",
	"TypeArg",
	"LifetimeArg",
	"ConstArg",
	"GenericArg",
	"PathSegment",
	"PathType",
	"RefType",
	"TupleType",
	"ArrayType",
	"named_type",
	"FieldDescriptor",
	"TypeDeclaration",
	"SourceFile",
]
