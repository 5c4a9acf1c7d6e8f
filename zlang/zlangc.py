# vim: set noexpandtab: -*- indent-tabs-mode: t -*-
"""
zlangc: command-line driver for the zlang front-end.

Parses each source file, reports diagnostics, and optionally prints the
resulting tree (as zlang source or as JSON). Nothing past parsing happens
here; the front-end stops at the AST.
"""

from __future__ import annotations

import argparse
import json
import logging
import sys
from pathlib import Path
from typing import List, Optional

from zlang.core.diagnostics import Diagnostic
from zlang.parser import parse_zlang_file
from zlang.parser.printer import format_program, to_json_dict

logger = logging.getLogger(__name__)


def _configure_logging(verbose: bool) -> None:
	logging.basicConfig(
		level=logging.DEBUG if verbose else logging.WARNING,
		format="%(levelname)s %(name)s: %(message)s",
		stream=sys.stderr,
	)


def main(argv: Optional[List[str]] = None) -> int:
	"""
	Parse zlang files and report diagnostics.

	With --json, prints structured diagnostics (phase/message/severity/file/line/column)
	and an exit_code; otherwise prints human-readable messages to stderr.
	Returns 0 when every file parses, 1 otherwise.
	"""
	parser = argparse.ArgumentParser(prog="zlangc", description="zlang front-end driver")
	parser.add_argument("source", type=Path, nargs="+", help="Path(s) to zlang source file(s)")
	parser.add_argument(
		"--json",
		action="store_true",
		help="Emit diagnostics as JSON (phase/message/severity/file/line/column)",
	)
	parser.add_argument(
		"--dump-ast",
		action="store_true",
		help="Include the parsed AST in the output (JSON object per file)",
	)
	parser.add_argument(
		"--print",
		dest="print_source",
		action="store_true",
		help="Print each parsed program back as zlang source",
	)
	parser.add_argument("-v", "--verbose", action="store_true", help="Enable debug logging")
	args = parser.parse_args(argv)

	_configure_logging(args.verbose)

	diagnostics: list[Diagnostic] = []
	asts: dict[str, dict] = {}
	printed: list[tuple[Path, str]] = []
	for source_path in args.source:
		try:
			program, diags = parse_zlang_file(source_path)
		except OSError as err:
			msg = f"cannot read source: {err.strerror or err}"
			diagnostics.append(Diagnostic(message=msg, phase="driver", file=str(source_path)))
			continue
		diagnostics.extend(diags)
		if program is None:
			continue
		if args.dump_ast:
			asts[str(source_path)] = to_json_dict(program)
		if args.print_source:
			printed.append((source_path, format_program(program)))

	exit_code = 1 if any(d.severity == "error" for d in diagnostics) else 0
	logger.debug("processed %d file(s), %d diagnostic(s)", len(args.source), len(diagnostics))

	if args.json:
		payload: dict = {
			"exit_code": exit_code,
			"diagnostics": [d.to_json() for d in diagnostics],
		}
		if args.dump_ast:
			payload["ast"] = asts
		print(json.dumps(payload))
	else:
		for d in diagnostics:
			print(d.render(), file=sys.stderr)
		if args.dump_ast:
			for name, tree in asts.items():
				print(json.dumps({"file": name, "ast": tree}, indent=2))
	if args.print_source:
		for source_path, text in printed:
			if len(args.source) > 1:
				print(f"// {source_path}")
			sys.stdout.write(text)
	return exit_code


if __name__ == "__main__":
	sys.exit(main())
