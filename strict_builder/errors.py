# vim: set noexpandtab: -*- indent-tabs-mode: t -*-
"""
User-facing errors raised while deriving a builder.

Each error is a `ValueError` carrying a best-effort `loc` and the offending
field name so the driver can convert it into a pinned diagnostic instead of
crashing with a raw Python exception.
"""

from __future__ import annotations

from typing import Iterable

from strict_builder.core.diagnostics import Diagnostic, DiagnosticSet
from strict_builder.core.span import Span


class BuilderDeriveError(ValueError):
	"""Base class for per-declaration derive errors."""

	code = "E-DERIVE"
	phase = "classify"

	def __init__(
		self,
		message: str,
		*,
		loc: object | None = None,
		field_name: str | None = None,
		notes: Iterable[str] = (),
	) -> None:
		super().__init__(message)
		self.message = message
		self.loc = loc
		self.field_name = field_name
		self.notes = list(notes)

	def to_diagnostic(self, *, file: str | None = None) -> Diagnostic:
		return Diagnostic(
			message=self.message,
			code=self.code,
			phase=self.phase,
			severity="error",
			span=Span.from_loc(self.loc, file=file),
			field_name=self.field_name,
			notes=list(self.notes),
		)


class StructuralError(BuilderDeriveError):
	"""Declaration is not a record, or a field lacks a name."""

	code = "E-STRUCT"
	phase = "extract"


class AnnotationSyntaxError(BuilderDeriveError):
	"""Field annotation does not match `builder(each = "...")`."""

	code = "E-ATTR"


class TypeShapeError(BuilderDeriveError):
	"""`each` annotation on a field whose type is not a sequence wrapper."""

	code = "E-SHAPE"


class NameCollisionError(BuilderDeriveError):
	"""Two generated members would share a name, or a name is reserved."""

	code = "E-NAME"


class GenerationError(ValueError):
	"""
	Generation aborted; carries every diagnostic collected for the input.

	No partial output accompanies this error, even when some fields (or some
	declarations) were fine.
	"""

	def __init__(self, diagnostics: DiagnosticSet) -> None:
		self.diagnostics = diagnostics
		messages = diagnostics.messages()
		if len(messages) == 1:
			summary = messages[0]
		else:
			summary = f"{len(messages)} errors: " + "; ".join(messages)
		super().__init__(summary)


__all__ = [
	"BuilderDeriveError",
	"StructuralError",
	"AnnotationSyntaxError",
	"TypeShapeError",
	"NameCollisionError",
	"GenerationError",
]
