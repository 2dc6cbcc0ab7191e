# vim: set noexpandtab: -*- indent-tabs-mode: t -*-
"""
Parsing of the per-field `#[builder(each = "...")]` annotation.

The accepted argument list is exactly three tokens: the identifier `each`, the
punctuation `=`, and a string literal naming the element-append method.
"""

from __future__ import annotations

from typing import Optional, Sequence

from strict_builder.config import GeneratorConfig
from strict_builder.errors import AnnotationSyntaxError
from strict_builder.parser.ast import Attribute, AttrToken


def parse_each(
	annotations: Sequence[Attribute],
	config: GeneratorConfig,
	*,
	field_name: str | None = None,
) -> Optional[str]:
	"""
	Return the element-method name from the first annotation, or None.

	Only `annotations[0]` is inspected; further entries are ignored. Raises
	`AnnotationSyntaxError` when the first annotation is not a well-formed
	`builder(each = "...")`.
	"""
	if not annotations:
		return None
	attr = annotations[0]
	attr_name = config.attribute_name

	if not attr.path_is(attr_name) or attr.tokens is None:
		raise AnnotationSyntaxError(
			f"expected #[{attr_name}(...)] attribute",
			loc=attr.loc,
			field_name=field_name,
			notes=[f"found {attr}"],
		)

	shape_msg = f'expected {attr_name}({config.each_key} = "...")'
	tokens = iter(attr.tokens)

	def _expect(check) -> AttrToken:
		tok = next(tokens, None)
		if tok is None or not check(tok):
			raise AnnotationSyntaxError(shape_msg, loc=attr.loc, field_name=field_name, notes=[f"found {attr}"])
		return tok

	_expect(lambda t: t.kind == "ident" and t.text == config.each_key)
	_expect(lambda t: t.kind == "punct" and t.text == "=")
	literal = _expect(lambda t: t.kind == "literal" and t.text.startswith('"'))
	if next(tokens, None) is not None:
		raise AnnotationSyntaxError(shape_msg, loc=attr.loc, field_name=field_name, notes=[f"found {attr}"])

	method_name = literal.text.strip('"')
	if not method_name.isidentifier():
		raise AnnotationSyntaxError(
			f'invalid method name "{method_name}" in {attr_name}({config.each_key} = "...")',
			loc=attr.loc,
			field_name=field_name,
		)
	return method_name


__all__ = ["parse_each"]
