# vim: set noexpandtab: -*- indent-tabs-mode: t -*-
"""
Single-argument wrapper matching for type expressions.
"""

from __future__ import annotations

from typing import Optional

from strict_builder.parser.ast import PathType, TypeArg, TypeExpr


def match_wrapper(type_expr: TypeExpr, wrapper_name: str) -> Optional[TypeExpr]:
	"""
	Return `T` when `type_expr` is `<wrapper_name><T>`, else None.

	Matching is purely structural: the expression must be a path whose *first*
	segment is named `wrapper_name` and carries exactly one angle-bracketed
	argument, and that argument must be a type (not a lifetime or a const).
	A fully qualified `std::vec::Vec<T>` therefore does not match `Vec`.
	"""
	if not isinstance(type_expr, PathType) or not type_expr.segments:
		return None
	segment = type_expr.segments[0]
	if segment.name != wrapper_name:
		return None
	if segment.args is None or len(segment.args) != 1:
		return None
	arg = segment.args[0]
	if not isinstance(arg, TypeArg):
		return None
	return arg.type_expr


__all__ = ["match_wrapper"]
