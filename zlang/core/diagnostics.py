"""
Common diagnostic structure for the parser driver and CLI.

A diagnostic is a message plus an optional location and file. The driver
produces them from parse errors; the CLI renders them as text or JSON.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Optional

from .location import SourceLocation


@dataclass
class Diagnostic:
	"""Represents a front-end diagnostic (error/warning/etc.)."""

	message: str
	# Phase label ("parser" for everything this front-end emits today).
	phase: Optional[str] = None
	severity: str = "error"
	file: Optional[str] = None
	location: Optional[SourceLocation] = None  # None denotes unknown.
	notes: list[str] = field(default_factory=list)

	@property
	def line(self) -> Optional[int]:
		return self.location.line if self.location is not None else None

	@property
	def column(self) -> Optional[int]:
		return self.location.column if self.location is not None else None

	def render(self) -> str:
		"""Render as `file:line:column: severity: message`."""
		file = self.file or "<input>"
		loc = str(self.location) if self.location is not None else "?:?"
		return f"{file}:{loc}: {self.severity}: {self.message}"

	def to_json(self) -> dict:
		"""Render to a structured JSON-friendly dict."""
		return {
			"phase": self.phase,
			"message": self.message,
			"severity": self.severity,
			"file": self.file,
			"line": self.line,
			"column": self.column,
			"notes": list(self.notes),
		}
