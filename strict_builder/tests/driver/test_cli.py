# vim: set noexpandtab: -*- indent-tabs-mode: t -*-
from __future__ import annotations

import ast
import json
from pathlib import Path

from strict_builder.cli import main

GOOD = """
struct Player {
	name: String,
	#[builder(each = "friend")]
	friends: Vec<String>,
}
"""

BAD = """
struct Player {
	#[builder(eahc = "friend")]
	friends: Vec<String>,
	#[builder(each = "sibling")]
	siblings: Option<String>,
}
"""


def _write(tmp_path: Path, name: str, text: str) -> Path:
	path = tmp_path / name
	path.write_text(text, encoding="utf-8")
	return path


def test_writes_module_to_stdout(tmp_path: Path, capsys) -> None:
	src = _write(tmp_path, "player.rs", GOOD)
	assert main([str(src)]) == 0
	out = capsys.readouterr().out
	tree = ast.parse(out)
	assert [n.name for n in tree.body if isinstance(n, ast.ClassDef)] == ["Player", "PlayerBuilder"]


def test_writes_module_to_output_file(tmp_path: Path, capsys) -> None:
	src = _write(tmp_path, "player.rs", GOOD)
	out_path = tmp_path / "player_builder.py"
	assert main([str(src), "-o", str(out_path), "--json"]) == 0
	assert "class PlayerBuilder:" in out_path.read_text(encoding="utf-8")
	assert json.loads(capsys.readouterr().out) == {"exit_code": 0, "diagnostics": []}


def test_check_only_emits_nothing(tmp_path: Path, capsys) -> None:
	src = _write(tmp_path, "player.rs", GOOD)
	assert main([str(src), "--check"]) == 0
	assert capsys.readouterr().out == ""


def test_aggregated_diagnostics_human(tmp_path: Path, capsys) -> None:
	src = _write(tmp_path, "player.rs", BAD)
	assert main([str(src)]) == 1
	captured = capsys.readouterr()
	assert captured.out == ""
	assert f'{src}:3:2: error: expected builder(each = "...")' in captured.err
	assert "error: expected sequence wrapper for repeated field siblings" in captured.err
	assert "  note: declared type is Option<String>; expected Vec<T>" in captured.err


def test_aggregated_diagnostics_json(tmp_path: Path, capsys) -> None:
	src = _write(tmp_path, "player.rs", BAD)
	assert main([str(src), "--json"]) == 1
	payload = json.loads(capsys.readouterr().out)
	assert payload["exit_code"] == 1
	assert [(d["code"], d["field"]) for d in payload["diagnostics"]] == [("E-ATTR", "friends"), ("E-SHAPE", "siblings")]
	assert all(d["file"] == str(src) for d in payload["diagnostics"])


def test_parse_error_is_a_diagnostic(tmp_path: Path, capsys) -> None:
	src = _write(tmp_path, "broken.rs", "struct Broken { name String }")
	assert main([str(src), "--json"]) == 1
	(diag,) = json.loads(capsys.readouterr().out)["diagnostics"]
	assert diag["phase"] == "parser"
	assert diag["line"] == 1


def test_missing_source_file(tmp_path: Path, capsys) -> None:
	assert main([str(tmp_path / "nope.rs"), "--json"]) == 1
	(diag,) = json.loads(capsys.readouterr().out)["diagnostics"]
	assert diag["code"] == "E-IO"


def test_config_file(tmp_path: Path, capsys) -> None:
	src = _write(tmp_path, "player.rs", GOOD)
	cfg = _write(
		tmp_path,
		"cfg.json",
		json.dumps({"format": "strict-builder-config", "version": 0, "build_method": "finish"}),
	)
	assert main([str(src), "--config", str(cfg)]) == 0
	assert "def finish(self) -> Player:" in capsys.readouterr().out


def test_bad_config_file(tmp_path: Path, capsys) -> None:
	src = _write(tmp_path, "player.rs", GOOD)
	cfg = _write(tmp_path, "cfg.json", json.dumps({"format": "nope"}))
	assert main([str(src), "--config", str(cfg)]) == 1
	assert "unsupported generator config format/version" in capsys.readouterr().err
