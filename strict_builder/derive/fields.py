# vim: set noexpandtab: -*- indent-tabs-mode: t -*-
"""
Field extraction and classification.

Every record field is classified exactly once, by ordered probes:

  1. repeatable  - carries `#[builder(each = "...")]` and has type `Vec<T>`
  2. optional    - has type `Option<T>`
  3. required    - everything else

A probe returns None when it does not apply and the next one is tried. A
probe raises when the field is malformed (an `each` annotation on a non-`Vec`
field is an error, not a fallthrough). Errors from all fields of a declaration
are collected into one DiagnosticSet; classification never stops at the first
bad field.
"""

from __future__ import annotations

import keyword
import logging
from dataclasses import dataclass
from typing import Callable, Iterable, Optional, Sequence, Tuple, Union

from strict_builder.config import GeneratorConfig
from strict_builder.core.diagnostics import DiagnosticSet
from strict_builder.errors import (
	BuilderDeriveError,
	GenerationError,
	NameCollisionError,
	StructuralError,
	TypeShapeError,
)
from strict_builder.parser.ast import FieldDescriptor, Located, TypeDeclaration, TypeExpr

from .attrs import parse_each
from .type_shape import match_wrapper

logger = logging.getLogger(__name__)

# Module-level names the generated code looks up at run time (header imports
# and builtins); a record or builder class with one of these names shadows them.
RESERVED_GLOBAL_NAMES = frozenset({"Optional", "_dataclass", "_MissingFieldError", "list", "staticmethod"})


def is_unusable_name(name: str) -> bool:
	"""Keywords, and names Python would mangle or treat as special inside a class body."""
	return keyword.iskeyword(name) or name.startswith("__")


@dataclass(frozen=True)
class RequiredField:
	name: str
	type_expr: TypeExpr
	loc: Optional[Located] = None

	@property
	def declared_type(self) -> TypeExpr:
		return self.type_expr


@dataclass(frozen=True)
class OptionalField:
	"""`type_expr` is the wrapped type; the field itself is `Option<type_expr>`."""

	name: str
	type_expr: TypeExpr
	declared_type: TypeExpr
	loc: Optional[Located] = None


@dataclass(frozen=True)
class RepeatableField:
	"""`type_expr` is the element type; the field itself is `Vec<type_expr>`."""

	name: str
	type_expr: TypeExpr
	declared_type: TypeExpr
	each_name: str
	loc: Optional[Located] = None

	@property
	def has_bulk_setter(self) -> bool:
		# A bulk setter named like the element method would be a second
		# definition of the same method.
		return self.each_name != self.name


Classification = Union[RequiredField, OptionalField, RepeatableField]


def extract_fields(decl: TypeDeclaration) -> Tuple[FieldDescriptor, ...]:
	"""Return the record's fields; raises StructuralError for non-records or unnamed fields."""
	if decl.kind != "struct":
		raise StructuralError(f"expected struct, found {decl.kind}", loc=decl.loc)
	for fd in decl.fields:
		if not fd.name:
			raise StructuralError("expected named field", loc=fd.loc or decl.loc)
	return decl.fields


def _probe_repeatable(name: str, fd: FieldDescriptor, config: GeneratorConfig) -> Optional[Classification]:
	each_name = parse_each(fd.annotations, config, field_name=name)
	if each_name is None:
		return None
	inner = match_wrapper(fd.type_expr, config.sequence_wrapper)
	if inner is None:
		raise TypeShapeError(
			f"expected sequence wrapper for repeated field {name}",
			loc=fd.loc,
			field_name=name,
			notes=[f"declared type is {fd.type_expr}; expected {config.sequence_wrapper}<T>"],
		)
	return RepeatableField(name=name, type_expr=inner, declared_type=fd.type_expr, each_name=each_name, loc=fd.loc)


def _probe_optional(name: str, fd: FieldDescriptor, config: GeneratorConfig) -> Optional[Classification]:
	inner = match_wrapper(fd.type_expr, config.optional_wrapper)
	if inner is None:
		return None
	return OptionalField(name=name, type_expr=inner, declared_type=fd.type_expr, loc=fd.loc)


def _probe_required(name: str, fd: FieldDescriptor, config: GeneratorConfig) -> Optional[Classification]:
	return RequiredField(name=name, type_expr=fd.type_expr, loc=fd.loc)


_PROBES: Tuple[Callable[[str, FieldDescriptor, GeneratorConfig], Optional[Classification]], ...] = (
	_probe_repeatable,
	_probe_optional,
	_probe_required,
)


def classify_field(fd: FieldDescriptor, config: GeneratorConfig) -> Classification:
	"""Classify one named field; raises AnnotationSyntaxError or TypeShapeError."""
	if not fd.name:
		raise StructuralError("expected named field", loc=fd.loc)
	for probe in _PROBES:
		result = probe(fd.name, fd, config)
		if result is not None:
			return result
	raise StructuralError("expected valid field", loc=fd.loc)


def combine_errors(outcomes: Iterable[Union[Classification, BuilderDeriveError]], *, file: str | None = None) -> DiagnosticSet:
	"""Fold the error outcomes into one DiagnosticSet, keeping their order."""
	return DiagnosticSet.combine_all(
		DiagnosticSet([o.to_diagnostic(file=file)]) for o in outcomes if isinstance(o, BuilderDeriveError)
	)


def _try_classify(fd: FieldDescriptor, config: GeneratorConfig) -> Union[Classification, BuilderDeriveError]:
	try:
		return classify_field(fd, config)
	except BuilderDeriveError as err:
		return err


def builder_methods(field: Classification) -> Tuple[str, ...]:
	"""Names of the builder methods generated for a field, in emission order."""
	if isinstance(field, RepeatableField):
		if field.has_bulk_setter:
			return (field.each_name, field.name)
		return (field.each_name,)
	return (field.name,)


def check_member_names(
	decl: TypeDeclaration,
	fields: Sequence[Classification],
	config: GeneratorConfig,
) -> list[BuilderDeriveError]:
	"""
	Report names that would clash in the generated classes.

	Checks Python keywords and `__`-prefixed (mangled) names, shadowed module
	globals, duplicate builder methods, methods
	shadowing `build()` or a storage slot, and record fields shadowing the
	factory method.
	"""
	errors: list[BuilderDeriveError] = []
	builder_name = config.builder_name(decl.name)
	for type_name in (decl.name, builder_name):
		if is_unusable_name(type_name) or type_name in RESERVED_GLOBAL_NAMES:
			errors.append(NameCollisionError(f"`{type_name}` is a reserved word", loc=decl.loc))

	slots = {f"_{f.name}": f.name for f in fields}
	seen: dict[str, str] = {}
	for f in fields:
		if is_unusable_name(f.name):
			errors.append(NameCollisionError(f"`{f.name}` is a reserved word", loc=f.loc, field_name=f.name))
			continue
		if f.name == config.factory_name:
			errors.append(
				NameCollisionError(
					f"field `{f.name}` collides with `{decl.name}.{config.factory_name}()`",
					loc=f.loc,
					field_name=f.name,
				)
			)
		for method in builder_methods(f):
			if method != f.name and is_unusable_name(method):
				errors.append(NameCollisionError(f"`{method}` is a reserved word", loc=f.loc, field_name=f.name))
				continue
			if method == config.build_method:
				errors.append(
					NameCollisionError(
						f"builder method `{method}` collides with `{builder_name}.{config.build_method}()`",
						loc=f.loc,
						field_name=f.name,
					)
				)
			elif method in slots:
				errors.append(
					NameCollisionError(
						f"builder method `{method}` collides with the storage of field `{slots[method]}`",
						loc=f.loc,
						field_name=f.name,
					)
				)
			elif method in seen:
				errors.append(
					NameCollisionError(
						f"duplicate builder method `{method}`",
						loc=f.loc,
						field_name=f.name,
						notes=[f"also generated for field `{seen[method]}`"],
					)
				)
			else:
				seen[method] = f.name
	return errors


def classify_fields(
	decl: TypeDeclaration,
	config: GeneratorConfig,
	*,
	file: str | None = None,
) -> list[Classification]:
	"""
	Classify every field of a record, in declaration order.

	Raises GenerationError with all collected diagnostics if any field fails
	(no partial result), or with the single structural diagnostic when `decl`
	is not a record.
	"""
	try:
		fields = extract_fields(decl)
	except StructuralError as err:
		raise GenerationError(DiagnosticSet([err.to_diagnostic(file=file)])) from err

	outcomes = [_try_classify(fd, config) for fd in fields]
	classified = [o for o in outcomes if not isinstance(o, BuilderDeriveError)]
	diagnostics = combine_errors(outcomes, file=file)
	diagnostics.combine(combine_errors(check_member_names(decl, classified, config), file=file))
	if diagnostics.has_errors():
		raise GenerationError(diagnostics)
	for f in classified:
		logger.debug("%s.%s classified as %s", decl.name, f.name, type(f).__name__)
	return classified


__all__ = [
	"RequiredField",
	"OptionalField",
	"RepeatableField",
	"Classification",
	"extract_fields",
	"classify_field",
	"classify_fields",
	"combine_errors",
	"check_member_names",
	"builder_methods",
	"is_unusable_name",
	"RESERVED_GLOBAL_NAMES",
]
