# vim: set noexpandtab: -*- indent-tabs-mode: t -*-
"""
Builder derive: classify a record's fields, then emit its builder.

Each declaration is processed independently and deterministically; any
classification problem aborts that declaration with a GenerationError carrying
every collected diagnostic, and no source is produced for it.
"""

from __future__ import annotations

import logging
from typing import Iterable, Optional

from strict_builder.config import GeneratorConfig
from strict_builder.core.diagnostics import DiagnosticSet
from strict_builder.errors import GenerationError, NameCollisionError
from strict_builder.parser.ast import TypeDeclaration

from .emit import MODULE_HEADER, emit_declaration, emit_module, render_type
from .fields import (
	Classification,
	OptionalField,
	RepeatableField,
	RequiredField,
	classify_field,
	classify_fields,
	extract_fields,
)
from .type_shape import match_wrapper
from .attrs import parse_each

logger = logging.getLogger(__name__)


def derive_builder(
	decl: TypeDeclaration,
	config: Optional[GeneratorConfig] = None,
	*,
	file: str | None = None,
	with_header: bool = True,
) -> str:
	"""
	Generate the record + builder source for one declaration.

	With `with_header` the result is a complete importable module; without it,
	only the class definitions are returned.
	"""
	config = config or GeneratorConfig()
	fields = classify_fields(decl, config, file=file)
	src = emit_declaration(decl, fields, config)
	return emit_module([src]) if with_header else src


def _namespace_clashes(
	decl: TypeDeclaration,
	namespace: dict[str, TypeDeclaration],
	config: GeneratorConfig,
) -> list[NameCollisionError]:
	"""Check `decl`'s record and builder class names against the module so far, then claim them."""
	errors: list[NameCollisionError] = []
	names = (decl.name, config.builder_name(decl.name))
	for name in names:
		owner = namespace.get(name)
		if owner is None:
			continue
		role = "record" if name == owner.name else f"builder of `{owner.name}`"
		errors.append(
			NameCollisionError(
				f"class `{name}` generated for `{decl.name}` collides with the {role}",
				loc=decl.loc,
				notes=[f"`{owner.name}` declared at line {owner.loc.line}"] if owner.loc is not None else [],
			)
		)
	if not errors:
		for name in names:
			namespace[name] = decl
	return errors


def generate_module(
	decls: Iterable[TypeDeclaration | tuple[TypeDeclaration, str | None]],
	config: Optional[GeneratorConfig] = None,
) -> str:
	"""
	Generate one module for many declarations.

	Items are declarations or `(declaration, file)` pairs. Every declaration is
	attempted; if any fails, the GenerationError carries the diagnostics of all
	failing declarations and no module is produced.
	"""
	config = config or GeneratorConfig()
	chunks: list[str] = []
	diagnostics = DiagnosticSet()
	seen: dict[str, TypeDeclaration] = {}
	# Every module-level class name -> the declaration that generates it.
	namespace: dict[str, TypeDeclaration] = {}
	for item in decls:
		decl, file = item if isinstance(item, tuple) else (item, None)
		prev = seen.get(decl.name)
		if prev is not None:
			err = NameCollisionError(
				f"duplicate declaration `{decl.name}`",
				loc=decl.loc,
				notes=[f"first declared at line {prev.loc.line}"] if prev.loc is not None else [],
			)
			diagnostics.add(err.to_diagnostic(file=file))
			continue
		seen[decl.name] = decl
		clashes = _namespace_clashes(decl, namespace, config)
		if clashes:
			diagnostics.combine(DiagnosticSet(e.to_diagnostic(file=file) for e in clashes))
			continue
		try:
			chunks.append(derive_builder(decl, config, file=file, with_header=False))
		except GenerationError as err:
			diagnostics.combine(err.diagnostics)
	if diagnostics.has_errors():
		raise GenerationError(diagnostics)
	logger.debug("generated module with %d declaration(s)", len(chunks))
	return emit_module(chunks)


__all__ = [
	"Classification",
	"MODULE_HEADER",
	"OptionalField",
	"RepeatableField",
	"RequiredField",
	"classify_field",
	"classify_fields",
	"derive_builder",
	"extract_fields",
	"generate_module",
	"match_wrapper",
	"parse_each",
	"render_type",
]
