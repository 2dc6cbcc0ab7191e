# vim: set noexpandtab: -*- indent-tabs-mode: t -*-
from __future__ import annotations

import argparse
import json
import logging
import sys
from pathlib import Path

from strict_builder.config import GeneratorConfig, load_config_json
from strict_builder.core.diagnostics import Diagnostic
from strict_builder.core.span import Span
from strict_builder.derive import generate_module
from strict_builder.errors import GenerationError
from strict_builder.parser import parse_declarations

logger = logging.getLogger(__name__)


def _build_parser() -> argparse.ArgumentParser:
	p = argparse.ArgumentParser(
		prog="strict-builder",
		description="Generate Python builder classes from record declarations",
	)
	p.add_argument("source", type=Path, nargs="+", help="Path(s) to declaration source file(s)")
	p.add_argument("-o", "--output", type=Path, default=None, help="Write the generated module here (default: stdout)")
	p.add_argument("--config", type=Path, default=None, help="Path to a strict-builder-config JSON file")
	p.add_argument("--check", action="store_true", help="Validate declarations only; do not emit code")
	p.add_argument(
		"--json",
		action="store_true",
		help="Emit diagnostics as JSON (phase/code/message/severity/file/line/column/field/notes)",
	)
	p.add_argument("-v", "--verbose", action="count", default=0, help="Increase log verbosity (repeatable)")
	return p


def _report(diagnostics: list[Diagnostic], *, as_json: bool) -> int:
	if as_json:
		print(json.dumps({"exit_code": 1, "diagnostics": [d.to_dict() for d in diagnostics]}))
	else:
		for d in diagnostics:
			print(d.format_human(), file=sys.stderr)
	return 1


def main(argv: list[str] | None = None) -> int:
	"""
	Parse declaration files, derive builders, and write one Python module.

	Exit code 0 on success, 1 if any diagnostic was produced. With --json,
	prints `{"exit_code", "diagnostics"}`; otherwise human-readable messages
	go to stderr.
	"""
	args = _build_parser().parse_args(argv)
	logging.basicConfig(
		level=logging.DEBUG if args.verbose > 1 else logging.INFO if args.verbose else logging.WARNING,
		format="%(levelname)s %(name)s: %(message)s",
	)

	config = GeneratorConfig()
	if args.config is not None:
		try:
			config = load_config_json(args.config)
		except (OSError, ValueError) as err:
			diag = Diagnostic(message=str(err), code="E-CONFIG", phase="config", span=Span(file=str(args.config)))
			return _report([diag], as_json=args.json)

	items = []
	parse_diags: list[Diagnostic] = []
	for path in args.source:
		try:
			decls, diags = parse_declarations(path)
		except OSError as err:
			parse_diags.append(Diagnostic(message=str(err), code="E-IO", phase="parser", span=Span(file=str(path))))
			continue
		parse_diags.extend(diags)
		items.extend((d, str(path)) for d in decls)
	if parse_diags:
		return _report(parse_diags, as_json=args.json)

	try:
		module_src = generate_module(items, config)
	except GenerationError as err:
		return _report(list(err.diagnostics), as_json=args.json)

	if args.check:
		logger.info("%d declaration(s) OK", len(items))
	elif args.output is not None:
		args.output.write_text(module_src, encoding="utf-8")
		logger.info("wrote %s", args.output)
	else:
		# The module itself is the stdout payload.
		sys.stdout.write(module_src)
		return 0

	if args.json:
		print(json.dumps({"exit_code": 0, "diagnostics": []}))
	return 0


__all__ = ["main"]
