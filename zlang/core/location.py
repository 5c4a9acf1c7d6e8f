# vim: set noexpandtab: -*- indent-tabs-mode: t -*-
"""
Source locations attached to tokens, AST nodes and errors.

A SourceLocation is a position in the source text (0-based offset, 1-based
line/column, matching lark's token conventions). It may also carry the end of
a span. Locations are immutable and order by offset.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Optional


@dataclass(frozen=True, order=True)
class SourceLocation:
	"""Position (or span) in a zlang source text."""

	offset: int
	line: int
	column: int
	end_offset: Optional[int] = None
	end_line: Optional[int] = None
	end_column: Optional[int] = None

	@classmethod
	def start(cls) -> "SourceLocation":
		"""Location of the first character of a source text."""
		return cls(offset=0, line=1, column=1)

	@classmethod
	def from_token(cls, token: Any) -> "SourceLocation":
		"""
		Construct a location from a lark-style token.

		Only `start_pos`, `line` and `column` are required; the end fields are
		copied when the token carries them.
		"""
		return cls(
			offset=token.start_pos,
			line=token.line,
			column=token.column,
			end_offset=getattr(token, "end_pos", None),
			end_line=getattr(token, "end_line", None),
			end_column=getattr(token, "end_column", None),
		)

	@property
	def is_span(self) -> bool:
		return self.end_offset is not None

	def span_to(self, other: "SourceLocation") -> "SourceLocation":
		"""Return a span starting here and ending where `other` ends."""
		if other.end_offset is None:
			return SourceLocation(
				self.offset,
				self.line,
				self.column,
				end_offset=other.offset,
				end_line=other.line,
				end_column=other.column,
			)
		return SourceLocation(
			self.offset,
			self.line,
			self.column,
			end_offset=other.end_offset,
			end_line=other.end_line,
			end_column=other.end_column,
		)

	def __str__(self) -> str:
		return f"{self.line}:{self.column}"


__all__ = ["SourceLocation"]
