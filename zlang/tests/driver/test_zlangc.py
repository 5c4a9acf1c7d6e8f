# vim: set noexpandtab: -*- indent-tabs-mode: t -*-
from __future__ import annotations

import json
from pathlib import Path

from zlang import zlangc
from zlang.parser import ast as A
from zlang.parser import parse_zlang_file


def _write(tmp_path: Path, name: str, text: str) -> Path:
	path = tmp_path / name
	path.write_text(text)
	return path


def test_parse_zlang_file_ok(tmp_path: Path) -> None:
	src = _write(tmp_path, "main.z", "x = f(1, , 2);\n")
	prog, diags = parse_zlang_file(src)
	assert diags == []
	assert prog is not None
	assert isinstance(prog.body[0], A.ExpressionStatement)


def test_parse_zlang_file_reports_lexical_error(tmp_path: Path) -> None:
	src = _write(tmp_path, "bad.z", "a;\nb = 'open\n")
	prog, diags = parse_zlang_file(src)
	assert prog is None
	assert len(diags) == 1
	diag = diags[0]
	assert diag.message == "Got unexpected string"
	assert diag.phase == "parser"
	assert diag.file == str(src)
	assert (diag.line, diag.column) == (2, 5)


def test_parse_zlang_file_reports_grammar_error(tmp_path: Path) -> None:
	src = _write(tmp_path, "bad.z", "if (a) else b;")
	prog, diags = parse_zlang_file(src)
	assert prog is None
	assert diags[0].message.startswith("unexpected token 'else'")
	assert (diags[0].line, diags[0].column) == (1, 8)


def test_cli_success_exit_code(tmp_path: Path, capsys) -> None:
	src = _write(tmp_path, "ok.z", "a = 1;")
	assert zlangc.main([str(src)]) == 0
	captured = capsys.readouterr()
	assert captured.err == ""


def test_cli_human_diagnostics(tmp_path: Path, capsys) -> None:
	src = _write(tmp_path, "bad.z", "x = #;")
	assert zlangc.main([str(src)]) == 1
	err = capsys.readouterr().err
	assert f"{src}:1:5: error: Got unexpected token #" in err


def test_cli_json_diagnostics(tmp_path: Path, capsys) -> None:
	good = _write(tmp_path, "good.z", "a;")
	bad = _write(tmp_path, "bad.z", "function f(a = 1, b) {};")
	assert zlangc.main([str(good), str(bad), "--json"]) == 1
	payload = json.loads(capsys.readouterr().out)
	assert payload["exit_code"] == 1
	assert payload["diagnostics"] == [
		{
			"phase": "parser",
			"message": "non-default argument follows default argument",
			"severity": "error",
			"file": str(bad),
			"line": 1,
			"column": 19,
			"notes": [],
		}
	]
	assert "ast" not in payload


def test_cli_json_dump_ast(tmp_path: Path, capsys) -> None:
	src = _write(tmp_path, "main.z", "for each (x in xs) { f(x); }")
	assert zlangc.main([str(src), "--json", "--dump-ast"]) == 0
	payload = json.loads(capsys.readouterr().out)
	assert payload["exit_code"] == 0
	assert payload["diagnostics"] == []
	tree = payload["ast"][str(src)]
	assert tree["type"] == "Program"
	loop = tree["body"][0]
	assert loop["type"] == "ForInStatement"
	assert loop["each"] is True


def test_cli_print_round_trips(tmp_path: Path, capsys) -> None:
	src = _write(tmp_path, "main.z", "if(a){b;}else c;")
	assert zlangc.main([str(src), "--print"]) == 0
	out = capsys.readouterr().out
	assert out == "if (a) {\n    b;\n} else c;\n"


def test_cli_missing_file(tmp_path: Path, capsys) -> None:
	missing = tmp_path / "nope.z"
	assert zlangc.main([str(missing), "--json"]) == 1
	payload = json.loads(capsys.readouterr().out)
	diag = payload["diagnostics"][0]
	assert diag["phase"] == "driver"
	assert diag["file"] == str(missing)
	assert diag["message"].startswith("cannot read source")


def test_cli_reports_non_ascii_digit(tmp_path: Path, capsys) -> None:
	src = _write(tmp_path, "digits.z", "x = ²;")
	assert zlangc.main([str(src)]) == 1
	assert f"{src}:1:5: error: Got unexpected token ²" in capsys.readouterr().err
