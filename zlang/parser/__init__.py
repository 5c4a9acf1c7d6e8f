# vim: set noexpandtab: -*- indent-tabs-mode: t -*-
"""
zlang parser package.

`parse_program` turns source text into an immutable `Program` and raises
`ParseError` on failure. `parse_zlang_file` is the driver-facing wrapper: it
collects failures as diagnostics instead of raising, so callers can report
them alongside everything else.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import List, Optional, Tuple

from zlang.core.diagnostics import Diagnostic

from .ast import Program
from .errors import LexicalError, ParseError, UserError
from .lexer import tokenize
from .parser import parse_program

logger = logging.getLogger(__name__)


def _diagnostic_from_error(err: ParseError, path: Path) -> Diagnostic:
	"""Helper to create a parser-phase Diagnostic from an engine error."""
	if isinstance(err, UserError) and isinstance(err.error, LexicalError):
		# Lifted lexical errors report exactly their fixed message.
		message = err.error.message
	else:
		message = str(err)
	return Diagnostic(
		message=message,
		phase="parser",
		severity="error",
		file=str(path),
		location=err.location,
	)


def parse_zlang_file(path: Path) -> Tuple[Optional[Program], List[Diagnostic]]:
	"""
	Parse a zlang source file.

	Returns the program and an empty list on success, or None and the parser
	diagnostics on failure. I/O errors propagate.
	"""
	path = Path(path)
	source = path.read_text()
	try:
		program = parse_program(source)
	except ParseError as err:
		diag = _diagnostic_from_error(err, path)
		logger.info("%s: parse failed: %s", path, diag.message)
		return None, [diag]
	logger.debug("%s: parsed %d statements", path, len(program.body))
	return program, []


__all__ = ["parse_program", "parse_zlang_file", "tokenize"]
