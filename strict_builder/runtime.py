# vim: set noexpandtab: -*- indent-tabs-mode: t -*-
"""
Runtime support imported by generated builder modules.
"""

from __future__ import annotations


class MissingFieldError(ValueError):
	"""
	Raised by a generated `build()` when a required field was never set.

	Only the first unset required field (in declaration order) is reported.
	"""

	def __init__(self, field_name: str) -> None:
		super().__init__(f"missing required field: {field_name}")
		self.field_name = field_name


__all__ = ["MissingFieldError"]
