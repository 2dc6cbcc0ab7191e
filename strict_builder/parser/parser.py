from __future__ import annotations

from pathlib import Path
from typing import List, Optional

from lark import Lark, Token, Tree

from .ast import (
	ArrayType,
	Attribute,
	AttrToken,
	ConstArg,
	FieldDescriptor,
	GenericArg,
	LifetimeArg,
	Located,
	PathSegment,
	PathType,
	RefType,
	SourceFile,
	TupleType,
	TypeArg,
	TypeDeclaration,
	TypeExpr,
)

_GRAMMAR_PATH = Path(__file__).with_name("grammar.lark")
_GRAMMAR_SRC = _GRAMMAR_PATH.read_text()

_PARSER = Lark(
	_GRAMMAR_SRC,
	parser="lalr",
	lexer="basic",
	start="start",
	propagate_positions=True,
	maybe_placeholders=False,
)

_TYPE_NODES = {"path_type", "ref_type", "tuple_type", "array_type"}


def parse_source(source: str) -> SourceFile:
	"""Parse declaration source text; raises `lark.exceptions.UnexpectedInput`."""
	tree = _PARSER.parse(source)
	return SourceFile(declarations=tuple(_build_declaration(c) for c in _trees(tree)))


def _build_declaration(tree: Tree) -> TypeDeclaration:
	attrs = tuple(_build_attribute(c) for c in _trees(tree, "outer_attr"))
	body = next(c for c in _trees(tree) if _name(c) not in {"outer_attr", "vis"})
	kind = _name(body)
	name_token = _first_token(body, "NAME")
	loc = _loc(body)
	if kind == "enum_decl":
		variants = tuple(_first_token(v, "NAME").value for v in _trees(body, "variant"))
		return TypeDeclaration(name=name_token.value, kind="enum", attributes=attrs, variants=variants, loc=loc)
	fields: tuple[FieldDescriptor, ...] = ()
	if kind in {"struct_named", "union_decl"}:
		fields_node = next(_trees(body, "named_fields"))
		fields = tuple(_build_named_field(f) for f in _trees(fields_node, "named_field"))
	elif kind == "struct_tuple":
		fields_node = next(_trees(body, "tuple_fields"))
		fields = tuple(_build_tuple_field(f) for f in _trees(fields_node, "tuple_field"))
	decl_kind = "union" if kind == "union_decl" else "struct"
	return TypeDeclaration(name=name_token.value, fields=fields, kind=decl_kind, attributes=attrs, loc=loc)


def _build_named_field(tree: Tree) -> FieldDescriptor:
	name_token = _first_token(tree, "NAME")
	return FieldDescriptor(
		name=name_token.value,
		type_expr=_build_type(_type_child(tree)),
		annotations=tuple(_build_attribute(c) for c in _trees(tree, "outer_attr")),
		loc=_loc_from_token(name_token),
	)


def _build_tuple_field(tree: Tree) -> FieldDescriptor:
	return FieldDescriptor(
		name=None,
		type_expr=_build_type(_type_child(tree)),
		annotations=tuple(_build_attribute(c) for c in _trees(tree, "outer_attr")),
		loc=_loc(tree),
	)


def _build_attribute(tree: Tree) -> Attribute:
	path_node = next(_trees(tree, "attr_path"))
	path = tuple(tok.value for tok in path_node.children if isinstance(tok, Token))
	tokens: Optional[tuple[AttrToken, ...]] = None
	value: Optional[AttrToken] = None
	for child in _trees(tree):
		if _name(child) == "attr_args":
			tokens = tuple(_build_attr_token(c) for c in _trees(child))
		elif _name(child) == "attr_value":
			value = _build_attr_token(next(_trees(child)))
	return Attribute(path=path, tokens=tokens, value=value, loc=_loc(tree))


def _build_attr_token(tree: Tree) -> AttrToken:
	kind = _name(tree)
	if kind == "attr_group":
		children = tuple(_build_attr_token(c) for c in _trees(tree))
		return AttrToken(kind="group", text="", children=children)
	tok = tree.children[0]
	assert isinstance(tok, Token)
	if kind == "attr_ident":
		return AttrToken(kind="ident", text=tok.value)
	if kind == "attr_punct":
		return AttrToken(kind="punct", text=tok.value)
	return AttrToken(kind="literal", text=tok.value)


def _build_type(tree: Tree) -> TypeExpr:
	kind = _name(tree)
	if kind == "path_type":
		return PathType(segments=tuple(_build_segment(s) for s in _trees(tree, "path_segment")))
	if kind == "ref_type":
		lifetime = next((c.value for c in tree.children if isinstance(c, Token) and c.type == "LIFETIME"), None)
		mutable = any(_name(c) == "mut" for c in _trees(tree))
		return RefType(inner=_build_type(_type_child(tree)), mutable=mutable, lifetime=lifetime)
	if kind == "tuple_type":
		return TupleType(elems=tuple(_build_type(c) for c in _trees(tree)))
	if kind == "array_type":
		length = _first_token(tree, "NUMBER").value
		return ArrayType(elem=_build_type(_type_child(tree)), length=length)
	raise ValueError(f"unexpected type node '{kind}'")


def _build_segment(tree: Tree) -> PathSegment:
	name = _first_token(tree, "NAME").value
	args_node = next(_trees(tree, "generic_args"), None)
	if args_node is None:
		return PathSegment(name=name)
	args: List[GenericArg] = []
	for arg in _trees(args_node):
		kind = _name(arg)
		if kind == "type_arg":
			args.append(TypeArg(_build_type(_type_child(arg))))
		elif kind == "lifetime_arg":
			args.append(LifetimeArg(arg.children[0].value))  # type: ignore[union-attr]
		else:
			args.append(ConstArg(arg.children[0].value))  # type: ignore[union-attr]
	return PathSegment(name=name, args=tuple(args))


def _type_child(tree: Tree) -> Tree:
	node = next((c for c in _trees(tree) if _name(c) in _TYPE_NODES), None)
	if node is None:
		raise ValueError(f"{_name(tree)} missing type expression")
	return node


def _trees(tree: Tree, name: str | None = None):
	return (c for c in tree.children if isinstance(c, Tree) and (name is None or _name(c) == name))


def _first_token(tree: Tree, token_type: str) -> Token:
	return next(c for c in tree.children if isinstance(c, Token) and c.type == token_type)


def _loc(tree: Tree) -> Optional[Located]:
	meta = tree.meta
	if getattr(meta, "empty", True):
		return None
	return Located(line=meta.line, column=meta.column)


def _loc_from_token(token: Token) -> Located:
	return Located(line=token.line, column=token.column)


def _name(node: Tree | Token) -> str:
	if isinstance(node, Tree):
		data = node.data
		if isinstance(data, Token):
			return data.value
		return data
	if isinstance(node, Token):
		return node.type
	return str(node)
