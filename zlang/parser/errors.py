# vim: set noexpandtab: -*- indent-tabs-mode: t -*-
"""
Lexical errors and the parse-engine error channel.

Two layers:

- `LexicalError`: raised by the lexer (and by parameter validation in the
  tree builder). It pairs one `LexicalErrorType` variant with the source
  location where scanning failed. Every variant renders to one fixed message.
- `ParseError`: the parsing engine's generic error, parameterized by
  location, token and user-error types. Grammar failures become one of its
  built-in variants; lexical failures travel as the payload of `UserError`.

`lift_lexical_error` is the only bridge between the two. It is called
explicitly at the lexer/parser boundary; nothing converts implicitly.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Generic, Mapping, Optional, Tuple, TypeVar, Union

from lark.exceptions import UnexpectedCharacters, UnexpectedEOF, UnexpectedToken

from zlang.core.location import SourceLocation


# Lexical error kinds. Plain data, not exceptions; the fixed message is the
# str() of each variant.


@dataclass(frozen=True)
class StringError:
	"""Malformed string literal (unterminated or bad escape)."""

	def __str__(self) -> str:
		return "Got unexpected string"


@dataclass(frozen=True)
class UnicodeSequenceError:
	"""Invalid unicode escape or code point."""

	def __str__(self) -> str:
		return "Got unexpected unicode"


@dataclass(frozen=True)
class DefaultArgumentError:
	def __str__(self) -> str:
		return "non-default argument follows default argument"


@dataclass(frozen=True)
class PositionalArgumentError:
	def __str__(self) -> str:
		return "positional argument follows keyword argument"


@dataclass(frozen=True)
class DuplicateKeywordArgumentError:
	def __str__(self) -> str:
		return "keyword argument repeated"


@dataclass(frozen=True)
class UnrecognizedToken:
	"""A character that starts no token."""

	tok: str

	def __str__(self) -> str:
		return f"Got unexpected token {self.tok}"


@dataclass(frozen=True)
class OtherError:
	"""Anything not otherwise classified; rendered verbatim."""

	msg: str

	def __str__(self) -> str:
		return self.msg


LexicalErrorType = Union[
	StringError,
	UnicodeSequenceError,
	DefaultArgumentError,
	PositionalArgumentError,
	DuplicateKeywordArgumentError,
	UnrecognizedToken,
	OtherError,
]

LEXICAL_ERROR_TYPES: Tuple[type, ...] = LexicalErrorType.__args__


class LexicalError(ValueError):
	"""
	Scan failure at a source location.

	This is a `ValueError` subclass like the other user-facing parse errors,
	but it also behaves as a value: two lexical errors are equal when their
	kind and location are equal.
	"""

	def __init__(self, error: LexicalErrorType, location: SourceLocation) -> None:
		super().__init__(str(error))
		self.error = error
		self.location = location

	@property
	def message(self) -> str:
		return str(self.error)

	def __eq__(self, other: object) -> bool:
		if not isinstance(other, LexicalError):
			return NotImplemented
		return self.error == other.error and self.location == other.location

	def __hash__(self) -> int:
		return hash((self.error, self.location))

	def __repr__(self) -> str:
		return f"LexicalError(error={self.error!r}, location={self.location!r})"


# Parse-engine error channel.

L = TypeVar("L")
T = TypeVar("T")
E = TypeVar("E")


class ParseError(Exception, Generic[L, T, E]):
	"""
	Generic error of the parsing engine.

	Exactly one of the variants below is ever raised. Variants compare by
	value so tests (and recovery code) can match on them.
	"""

	def _key(self) -> tuple:
		raise NotImplementedError

	@property
	def location(self) -> Optional[Any]:
		raise NotImplementedError

	def __eq__(self, other: object) -> bool:
		if not isinstance(other, ParseError):
			return NotImplemented
		return type(self) is type(other) and self._key() == other._key()

	def __hash__(self) -> int:
		return hash((type(self).__name__, self._key()))


def _expected_suffix(expected: Tuple[str, ...]) -> str:
	if not expected:
		return ""
	return ", expected one of: " + ", ".join(expected)


class InvalidTokenError(ParseError[L, T, E]):
	"""The engine could not form any token at `location`."""

	def __init__(self, location: L) -> None:
		super().__init__(f"invalid token at {location}")
		self._location = location

	@property
	def location(self) -> L:
		return self._location

	def _key(self) -> tuple:
		return (self._location,)


class UnrecognizedEofError(ParseError[L, T, E]):
	"""Input ended where more tokens were required."""

	def __init__(self, location: L, expected: Tuple[str, ...] = ()) -> None:
		super().__init__("unexpected end of input" + _expected_suffix(tuple(expected)))
		self._location = location
		self.expected = tuple(expected)

	@property
	def location(self) -> L:
		return self._location

	def _key(self) -> tuple:
		return (self._location, self.expected)


class UnrecognizedTokenError(ParseError[L, T, E]):
	"""A token the grammar does not allow here. `token` is (start, token, end)."""

	def __init__(self, token: Tuple[L, T, L], expected: Tuple[str, ...] = ()) -> None:
		_start, tok, _end = token
		value = getattr(tok, "value", tok)
		super().__init__(f"unexpected token {value!r}" + _expected_suffix(tuple(expected)))
		self.token = token
		self.expected = tuple(expected)

	@property
	def location(self) -> L:
		return self.token[0]

	def _key(self) -> tuple:
		return (self.token, self.expected)


class ExtraTokenError(ParseError[L, T, E]):
	"""
	A complete parse was followed by a stray token.

	Part of the engine error shape for callers that build their own parsers.
	`from_lark_error` never produces it: lark's LALR engine reports a token
	after the end of a complete program as `UnexpectedToken` expecting end of
	input, which becomes `UnrecognizedTokenError`.
	"""

	def __init__(self, token: Tuple[L, T, L]) -> None:
		_start, tok, _end = token
		value = getattr(tok, "value", tok)
		super().__init__(f"extra token {value!r}")
		self.token = token

	@property
	def location(self) -> L:
		return self.token[0]

	def _key(self) -> tuple:
		return (self.token,)


class UserError(ParseError[L, T, E]):
	"""Error produced outside the grammar (for zlang: a LexicalError)."""

	def __init__(self, error: E) -> None:
		super().__init__(str(error))
		self.error = error

	@property
	def location(self) -> Optional[Any]:
		return getattr(self.error, "location", None)

	def _key(self) -> tuple:
		return (self.error,)


def lift_lexical_error(err: LexicalError) -> "UserError[SourceLocation, Any, LexicalError]":
	"""
	Lift a lexical error into the parse-engine error type.

	The lexical error is stored unchanged (the same object) as the user-error
	payload, so `lift_lexical_error(err).error is err`.
	"""
	return UserError(err)


def _eof_location(source: Optional[str], fallback: SourceLocation) -> SourceLocation:
	if source is None:
		return fallback
	line = source.count("\n") + 1
	last_nl = source.rfind("\n")
	column = len(source) - last_nl
	return SourceLocation(offset=len(source), line=line, column=column)


def from_lark_error(
	exc: Any,
	*,
	source: Optional[str] = None,
	display: Optional[Mapping[str, str]] = None,
) -> ParseError:
	"""
	Translate a lark `UnexpectedInput` into the matching engine variant.

	`display` maps terminal names to human spellings for the `expected` list;
	`source` lets end-of-input errors point just past the last character.
	"""
	names = display or {}

	def _expected(raw: Any) -> Tuple[str, ...]:
		return tuple(sorted({names.get(t, t) for t in (raw or ())}))

	if isinstance(exc, UnexpectedToken):
		tok = exc.token
		if tok.type == "$END":
			fallback = SourceLocation(
				offset=getattr(tok, "start_pos", None) or 0,
				line=getattr(tok, "line", None) or 1,
				column=getattr(tok, "column", None) or 1,
			)
			return UnrecognizedEofError(_eof_location(source, fallback), _expected(exc.expected))
		start = SourceLocation.from_token(tok)
		end = SourceLocation(
			offset=tok.end_pos if tok.end_pos is not None else tok.start_pos,
			line=tok.end_line if tok.end_line is not None else tok.line,
			column=tok.end_column if tok.end_column is not None else tok.column,
		)
		return UnrecognizedTokenError((start, tok, end), _expected(exc.expected))
	if isinstance(exc, UnexpectedEOF):
		return UnrecognizedEofError(_eof_location(source, SourceLocation.start()), _expected(exc.expected))
	if isinstance(exc, UnexpectedCharacters):
		return InvalidTokenError(
			SourceLocation(offset=exc.pos_in_stream, line=exc.line, column=exc.column),
		)
	raise TypeError(f"not a lark parse error: {exc!r}")


__all__ = [
	"DefaultArgumentError",
	"DuplicateKeywordArgumentError",
	"ExtraTokenError",
	"InvalidTokenError",
	"LEXICAL_ERROR_TYPES",
	"LexicalError",
	"LexicalErrorType",
	"OtherError",
	"ParseError",
	"PositionalArgumentError",
	"StringError",
	"UnicodeSequenceError",
	"UnrecognizedEofError",
	"UnrecognizedToken",
	"UnrecognizedTokenError",
	"UserError",
	"from_lark_error",
	"lift_lexical_error",
]
