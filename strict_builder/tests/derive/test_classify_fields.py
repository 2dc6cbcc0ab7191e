# vim: set noexpandtab: -*- indent-tabs-mode: t -*-
from __future__ import annotations

import pytest

from strict_builder.config import GeneratorConfig
from strict_builder.derive.fields import (
	OptionalField,
	RepeatableField,
	RequiredField,
	builder_methods,
	classify_field,
	classify_fields,
	extract_fields,
)
from strict_builder.errors import AnnotationSyntaxError, GenerationError, StructuralError, TypeShapeError
from strict_builder.parser import parse_source
from strict_builder.parser.ast import FieldDescriptor, TypeDeclaration, named_type

CFG = GeneratorConfig()


def _decl(src: str) -> TypeDeclaration:
	return parse_source(src).declarations[0]


def test_precedence_repeatable_optional_required() -> None:
	decl = _decl(
		"""
struct Player {
	name: String,
	#[builder(each = "friend")]
	friends: Vec<String>,
	siblings: Option<Vec<String>>,
	scores: Vec<u8>,
}
"""
	)
	name, friends, siblings, scores = classify_fields(decl, CFG)
	assert isinstance(name, RequiredField) and str(name.type_expr) == "String"
	assert isinstance(friends, RepeatableField)
	assert friends.each_name == "friend" and str(friends.type_expr) == "String"
	assert isinstance(siblings, OptionalField) and str(siblings.type_expr) == "Vec<String>"
	assert str(siblings.declared_type) == "Option<Vec<String>>"
	# Without an annotation a Vec is just a required value.
	assert isinstance(scores, RequiredField)


def test_each_on_optional_vec_is_a_shape_error() -> None:
	decl = _decl('struct S { #[builder(each = "x")] xs: Option<Vec<u8>> }')
	with pytest.raises(TypeShapeError) as exc:
		classify_field(extract_fields(decl)[0], CFG)
	assert exc.value.message == "expected sequence wrapper for repeated field xs"
	assert exc.value.notes == ["declared type is Option<Vec<u8>>; expected Vec<T>"]


def test_each_equal_to_field_name_has_no_bulk_setter() -> None:
	decl = _decl('struct S { #[builder(each = "siblings")] siblings: Vec<String> }')
	(field,) = classify_fields(decl, CFG)
	assert isinstance(field, RepeatableField)
	assert not field.has_bulk_setter
	assert builder_methods(field) == ("siblings",)


def test_programmatic_declaration() -> None:
	decl = TypeDeclaration(
		name="Point",
		fields=(
			FieldDescriptor(name="x", type_expr=named_type("i32")),
			FieldDescriptor(name="label", type_expr=named_type("Option", named_type("String"))),
		),
	)
	x, label = classify_fields(decl, CFG)
	assert isinstance(x, RequiredField)
	assert isinstance(label, OptionalField)


@pytest.mark.parametrize(
	"src, message",
	[
		("enum Shape { Circle, Square }", "expected struct, found enum"),
		("union Bits { a: u32 }", "expected struct, found union"),
		("struct Pair(u8, String);", "expected named field"),
	],
)
def test_structural_errors(src: str, message: str) -> None:
	decl = _decl(src)
	with pytest.raises(StructuralError, match=message):
		extract_fields(decl)
	with pytest.raises(GenerationError) as exc:
		classify_fields(decl, CFG)
	(diag,) = list(exc.value.diagnostics)
	assert diag.message == message
	assert diag.code == "E-STRUCT"
	assert diag.phase == "extract"


def test_errors_from_all_fields_are_aggregated() -> None:
	decl = _decl(
		"""
struct Player {
	name: String,
	#[builder(eahc = "friend")]
	friends: Vec<String>,
	#[builder(each = "sibling")]
	siblings: Option<String>,
	#[serde(default)]
	age: u8,
}
"""
	)
	with pytest.raises(GenerationError) as exc:
		classify_fields(decl, CFG, file="player.rs")
	diags = list(exc.value.diagnostics)
	assert [d.message for d in diags] == [
		'expected builder(each = "...")',
		"expected sequence wrapper for repeated field siblings",
		"expected #[builder(...)] attribute",
	]
	assert [d.field_name for d in diags] == ["friends", "siblings", "age"]
	assert [d.code for d in diags] == ["E-ATTR", "E-SHAPE", "E-ATTR"]
	assert all(d.span.file == "player.rs" for d in diags)
	assert diags[0].span.line == 4
	assert str(exc.value).startswith("3 errors: ")


def test_single_error_message_is_not_prefixed() -> None:
	decl = _decl('struct S { #[builder(each = "v")] v: u8 }')
	with pytest.raises(GenerationError) as exc:
		classify_fields(decl, CFG)
	assert str(exc.value) == "expected sequence wrapper for repeated field v"


@pytest.mark.parametrize(
	"src, message",
	[
		(
			'struct S { name: String, #[builder(each = "name")] names: Vec<String> }',
			"duplicate builder method `name`",
		),
		("struct S { build: bool }", "builder method `build` collides with `SBuilder.build()`"),
		('struct S { #[builder(each = "build")] items: Vec<u8> }', "builder method `build` collides with `SBuilder.build()`"),
		("struct S { builder: bool }", "field `builder` collides with `S.builder()`"),
		("struct S { friends: u8, _friends: u8 }", "builder method `_friends` collides with the storage of field `friends`"),
		("struct S { lambda: u8 }", "`lambda` is a reserved word"),
		("struct S { __init__: u8 }", "`__init__` is a reserved word"),
		('struct S { #[builder(each = "class")] classes: Vec<u8> }', "`class` is a reserved word"),
		("struct Optional { x: u8 }", "`Optional` is a reserved word"),
		("struct S { __secret: u8 }", "`__secret` is a reserved word"),
		('struct S { #[builder(each = "__item")] items: Vec<u8> }', "`__item` is a reserved word"),
		('struct list { #[builder(each = "item")] items: Vec<u8> }', "`list` is a reserved word"),
		("struct _dataclass { x: u8 }", "`_dataclass` is a reserved word"),
		("struct _MissingFieldError { x: u8 }", "`_MissingFieldError` is a reserved word"),
		("struct __Hidden { x: u8 }", "`__Hidden` is a reserved word"),
	],
)
def test_name_collisions(src: str, message: str) -> None:
	with pytest.raises(GenerationError) as exc:
		classify_fields(_decl(src), CFG)
	assert message in exc.value.diagnostics.messages()
	assert all(d.code == "E-NAME" for d in exc.value.diagnostics)


def test_duplicate_method_note_names_first_field() -> None:
	decl = _decl('struct S { name: String, #[builder(each = "name")] names: Vec<String> }')
	with pytest.raises(GenerationError) as exc:
		classify_fields(decl, CFG)
	(diag,) = list(exc.value.diagnostics)
	assert diag.field_name == "names"
	assert diag.notes == ["also generated for field `name`"]


def test_classification_and_name_errors_combine() -> None:
	decl = _decl(
		"""
struct S {
	#[builder(each = "x")]
	a: u8,
	build: bool,
}
"""
	)
	with pytest.raises(GenerationError) as exc:
		classify_fields(decl, CFG)
	assert [d.code for d in exc.value.diagnostics] == ["E-SHAPE", "E-NAME"]


def test_annotation_error_type_is_reported_per_field() -> None:
	decl = _decl('struct S { #[builder] a: Vec<u8> }')
	with pytest.raises(AnnotationSyntaxError):
		classify_field(extract_fields(decl)[0], CFG)


def test_unnamed_descriptor_is_a_structural_error() -> None:
	fd = FieldDescriptor(name=None, type_expr=named_type("u8"))
	with pytest.raises(StructuralError, match="expected named field"):
		classify_field(fd, CFG)
