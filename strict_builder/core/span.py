# vim: set noexpandtab: -*- indent-tabs-mode: t -*-
"""
Source span attached to diagnostics.

Declarations may come from the bundled parser (which knows line/column) or be
constructed directly in Python (which knows nothing). A Span therefore carries
optional file/line/column info and `Span()` denotes an unknown location.
"""

from __future__ import annotations

from dataclasses import dataclass, replace
from typing import Any, Optional


@dataclass(frozen=True)
class Span:
	"""Represents a source span (best-effort file/line/column)."""

	file: Optional[str] = None
	line: Optional[int] = None
	column: Optional[int] = None

	@classmethod
	def from_loc(cls, loc: Any, *, file: Optional[str] = None) -> "Span":
		"""
		Construct a Span from a parser location object.

		If `loc` is already a Span it is returned unchanged (with `file` filled
		in when it was missing); otherwise the common `line`/`column` attributes
		are read best-effort.
		"""
		if loc is None:
			return cls(file=file)
		if isinstance(loc, cls):
			if loc.file is None and file is not None:
				return replace(loc, file=file)
			return loc
		return cls(
			file=file or getattr(loc, "file", None),
			line=getattr(loc, "line", None),
			column=getattr(loc, "column", None),
		)

	def format(self) -> str:
		"""Render as `file:line:column`, using `?` for unknown parts."""
		file = self.file if self.file is not None else "<input>"
		line = self.line if self.line is not None else "?"
		column = self.column if self.column is not None else "?"
		return f"{file}:{line}:{column}"


__all__ = ["Span"]
