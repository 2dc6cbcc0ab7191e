# vim: set noexpandtab: -*- indent-tabs-mode: t -*-
"""
Diagnostic structure shared by the parser, the field classifier and the CLI.

A `Diagnostic` is one reported problem (message plus location/metadata). A
`DiagnosticSet` is the ordered collection produced by one generation pass;
sets from independent sources are combined by appending, never reordering or
deduplicating, so the reader sees problems in field declaration order.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Iterable, Iterator

from .span import Span


@dataclass
class Diagnostic:
	"""Represents a generator diagnostic (error/warning/etc.)."""

	message: str
	code: str | None = None
	# Pipeline phase that produced the diagnostic ("parser", "extract",
	# "classify", "emit"); the CLI falls back to its own label when unset.
	phase: str | None = None
	severity: str = "error"
	span: Span = field(default_factory=Span)  # Source location (Span() denotes unknown).
	# Name of the record field the diagnostic refers to, when there is one.
	field_name: str | None = None
	notes: list[str] = field(default_factory=list)

	def __post_init__(self) -> None:
		# Normalize missing spans to the sentinel Span() so downstream tooling
		# can rely on a structured object instead of None.
		if self.span is None:  # type: ignore[unreachable]
			self.span = Span()

	def format_human(self) -> str:
		lines = [f"{self.span.format()}: {self.severity}: {self.message}"]
		lines.extend(f"  note: {note}" for note in self.notes)
		return "\n".join(lines)

	def to_dict(self) -> dict:
		return {
			"phase": self.phase,
			"code": self.code,
			"message": self.message,
			"severity": self.severity,
			"file": self.span.file,
			"line": self.span.line,
			"column": self.span.column,
			"field": self.field_name,
			"notes": list(self.notes),
		}


class DiagnosticSet:
	"""
	Ordered, append-only collection of diagnostics.

	`combine` is associative with the empty set as identity, which lets callers
	fold any number of independent per-field results into one set.
	"""

	def __init__(self, diagnostics: Iterable[Diagnostic] = ()) -> None:
		self._items: list[Diagnostic] = list(diagnostics)

	@classmethod
	def combine_all(cls, sets: Iterable["DiagnosticSet"]) -> "DiagnosticSet":
		acc = cls()
		for s in sets:
			acc.combine(s)
		return acc

	def add(self, diag: Diagnostic) -> None:
		self._items.append(diag)

	def combine(self, other: "DiagnosticSet") -> "DiagnosticSet":
		"""Append all of `other` after the current contents; returns self."""
		self._items.extend(other._items)
		return self

	def has_errors(self) -> bool:
		return any(d.severity == "error" for d in self._items)

	def messages(self) -> list[str]:
		return [d.message for d in self._items]

	def __iter__(self) -> Iterator[Diagnostic]:
		return iter(self._items)

	def __len__(self) -> int:
		return len(self._items)

	def __bool__(self) -> bool:
		return bool(self._items)

	def __repr__(self) -> str:
		return f"DiagnosticSet({self._items!r})"


__all__ = ["Diagnostic", "DiagnosticSet"]
