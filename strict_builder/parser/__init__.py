"""
Declaration front-end: parses declaration files into the frozen AST in
`strict_builder.parser.ast`, reporting syntax errors as diagnostics.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import List, Tuple

from lark.exceptions import UnexpectedInput

from . import ast as parser_ast
from . import parser as _parser
from .parser import parse_source
from strict_builder.core.diagnostics import Diagnostic
from strict_builder.core.span import Span

logger = logging.getLogger(__name__)


def parse_declarations(path: Path) -> Tuple[List[parser_ast.TypeDeclaration], List[Diagnostic]]:
	"""
	Parse a declaration file.

	Collects syntax errors as parser-phase diagnostics instead of throwing, so
	callers can report them alongside diagnostics from other files.
	"""
	source = path.read_text(encoding="utf-8")
	try:
		parsed = _parser.parse_source(source)
	except UnexpectedInput as err:
		span = Span(
			file=str(path),
			line=getattr(err, "line", None),
			column=getattr(err, "column", None),
		)
		first_line = str(err).strip().splitlines()[0] if str(err).strip() else "syntax error"
		return [], [Diagnostic(message=first_line, code="E-PARSE", phase="parser", severity="error", span=span)]
	logger.debug("parsed %d declaration(s) from %s", len(parsed.declarations), path)
	return list(parsed.declarations), []


__all__ = ["parse_declarations", "parse_source", "parser_ast"]
