# vim: set noexpandtab: -*- indent-tabs-mode: t -*-
"""
zlang lexer.

Scans source text into lark `Token`s for the LALR grammar in `grammar.lark`.
The lexer never recovers: the first scan failure raises `LexicalError` with
the location where it happened. The parser entry point lifts that error into
the parse-engine error channel (see `zlang.parser.errors`).

Token type names match the grammar's `%declare` list. Names with a leading
underscore are punctuation the grammar filters out of the parse tree; every
other token stays in the tree, either because it carries a value or because
it anchors the location of the node that starts with it.
"""

from __future__ import annotations

from typing import Any, Iterator, Optional

from lark import Token
from lark.lexer import Lexer as LarkLexer

from zlang.core.location import SourceLocation

from .errors import (
	LexicalError,
	LexicalErrorType,
	OtherError,
	StringError,
	UnicodeSequenceError,
	UnrecognizedToken,
)

KEYWORDS = {
	"function": "FUNCTION",
	"if": "IF",
	"else": "_ELSE",
	"return": "RETURN",
	"while": "WHILE",
	"for": "FOR",
	"each": "_EACH",
	"in": "_IN",
	"true": "TRUE",
	"false": "FALSE",
	"null": "NULL",
	"typeof": "TYPEOF",
}

# Longest lexemes first so `<<=` wins over `<<` and `<`.
PUNCTUATION = (
	("<<=", "AUG_ASSIGN"),
	(">>=", "AUG_ASSIGN"),
	("+=", "AUG_ASSIGN"),
	("-=", "AUG_ASSIGN"),
	("*=", "AUG_ASSIGN"),
	("/=", "AUG_ASSIGN"),
	("%=", "AUG_ASSIGN"),
	("|=", "AUG_ASSIGN"),
	("^=", "AUG_ASSIGN"),
	("&=", "AUG_ASSIGN"),
	("&&", "ANDAND"),
	("||", "OROR"),
	("==", "EQ_OP"),
	("!=", "EQ_OP"),
	("<=", "REL_OP"),
	(">=", "REL_OP"),
	("<<", "SHIFT_OP"),
	(">>", "SHIFT_OP"),
	("=", "EQUAL"),
	("+", "ADD_OP"),
	("-", "ADD_OP"),
	("*", "MUL_OP"),
	("/", "MUL_OP"),
	("%", "MUL_OP"),
	("&", "AMPERSAND"),
	("|", "BAR"),
	("^", "CARET"),
	("!", "BANG"),
	("<", "REL_OP"),
	(">", "REL_OP"),
	("(", "_LPAR"),
	(")", "_RPAR"),
	("{", "LBRACE"),
	("}", "_RBRACE"),
	("[", "LSQB"),
	("]", "_RSQB"),
	(",", "_COMMA"),
	(";", "SEMICOLON"),
)

SIMPLE_ESCAPES = {
	"n": "\n",
	"t": "\t",
	"r": "\r",
	"b": "\b",
	"f": "\f",
	"v": "\v",
	"0": "\0",
	"\\": "\\",
	"'": "'",
	'"': '"',
	"/": "/",
}

_DIGITS = frozenset("0123456789")
_HEX_DIGITS = frozenset("0123456789abcdefABCDEF")


def _is_digit(ch: Optional[str]) -> bool:
	# ASCII only: str.isdigit also accepts superscripts that float() rejects.
	return ch is not None and ch in _DIGITS


def _is_name_start(ch: str) -> bool:
	return ch.isalpha() or ch == "_" or ch == "$"


def _is_name_char(ch: str) -> bool:
	return ch.isalnum() or ch == "_" or ch == "$"


class Lexer:
	"""
	Single-pass scanner over one source text.

	Each instance owns its position/line/column counters, so independent
	sources can be scanned concurrently with separate lexers.
	"""

	def __init__(self, source: str) -> None:
		self.source = source
		self.pos = 0
		self.line = 1
		self.column = 1

	# Position bookkeeping

	def _peek(self, ahead: int = 0) -> Optional[str]:
		idx = self.pos + ahead
		if idx >= len(self.source):
			return None
		return self.source[idx]

	def _advance(self, count: int = 1) -> None:
		for _ in range(count):
			if self.pos >= len(self.source):
				return
			if self.source[self.pos] == "\n":
				self.line += 1
				self.column = 1
			else:
				self.column += 1
			self.pos += 1

	def _here(self) -> SourceLocation:
		return SourceLocation(offset=self.pos, line=self.line, column=self.column)

	def _fail(self, error: LexicalErrorType, location: Optional[SourceLocation] = None) -> LexicalError:
		return LexicalError(error, location or self._here())

	def _token(self, type_: str, value: Any, start: SourceLocation) -> Token:
		return Token(
			type_,
			value,
			start_pos=start.offset,
			line=start.line,
			column=start.column,
			end_line=self.line,
			end_column=self.column,
			end_pos=self.pos,
		)

	# Scanning

	def tokens(self) -> Iterator[Token]:
		"""Yield tokens until end of input; raise LexicalError on the first bad input."""
		while True:
			self._skip_trivia()
			ch = self._peek()
			if ch is None:
				return
			start = self._here()
			if _is_name_start(ch):
				yield self._scan_name(start)
			elif _is_digit(ch):
				yield self._scan_number(start)
			elif ch == '"' or ch == "'":
				yield self._scan_string(start)
			else:
				yield self._scan_punctuation(start)

	def _skip_trivia(self) -> None:
		while True:
			ch = self._peek()
			if ch is None:
				return
			if ch in " \t\r\n\f":
				self._advance()
			elif ch == "/" and self._peek(1) == "/":
				while self._peek() is not None and self._peek() != "\n":
					self._advance()
			elif ch == "/" and self._peek(1) == "*":
				start = self._here()
				self._advance(2)
				while not (self._peek() == "*" and self._peek(1) == "/"):
					if self._peek() is None:
						raise self._fail(OtherError("unterminated block comment"), start)
					self._advance()
				self._advance(2)
			else:
				return

	def _scan_name(self, start: SourceLocation) -> Token:
		begin = self.pos
		while self._peek() is not None and _is_name_char(self._peek()):
			self._advance()
		text = self.source[begin : self.pos]
		return self._token(KEYWORDS.get(text, "NAME"), text, start)

	def _consume_digits(self) -> None:
		while _is_digit(self._peek()):
			self._advance()

	def _scan_number(self, start: SourceLocation) -> Token:
		begin = self.pos
		self._consume_digits()
		nxt = self._peek(1)
		if self._peek() == "." and _is_digit(nxt):
			self._advance()
			self._consume_digits()
		if self._peek() in ("e", "E"):
			sign = self._peek(1)
			digit_at = 2 if sign in ("+", "-") else 1
			first = self._peek(digit_at)
			if _is_digit(first):
				self._advance(digit_at)
				self._consume_digits()
		if self._peek() is not None and _is_name_char(self._peek()):
			while self._peek() is not None and _is_name_char(self._peek()):
				self._advance()
			bad = self.source[begin : self.pos]
			raise self._fail(OtherError(f"invalid number literal '{bad}'"), start)
		return self._token("NUMBER", self.source[begin : self.pos], start)

	def _scan_string(self, start: SourceLocation) -> Token:
		quote = self._peek()
		self._advance()
		chars: list[str] = []
		while True:
			ch = self._peek()
			if ch is None or ch == "\n":
				raise self._fail(StringError(), start)
			if ch == quote:
				self._advance()
				return self._token("STRING", "".join(chars), start)
			if ch == "\\":
				chars.append(self._scan_escape(start))
				continue
			chars.append(ch)
			self._advance()

	def _scan_escape(self, string_start: SourceLocation) -> str:
		escape_start = self._here()
		self._advance()  # backslash
		ch = self._peek()
		if ch is None or ch == "\n":
			raise self._fail(StringError(), string_start)
		if ch in SIMPLE_ESCAPES:
			self._advance()
			return SIMPLE_ESCAPES[ch]
		if ch == "x":
			self._advance()
			digits = self._take_hex(2)
			if digits is None:
				raise self._fail(StringError(), escape_start)
			return chr(int(digits, 16))
		if ch == "u":
			self._advance()
			code = self._scan_unicode_code_point(escape_start)
			if 0xD800 <= code <= 0xDBFF:
				return self._combine_surrogates(code, escape_start)
			if 0xDC00 <= code <= 0xDFFF:
				raise self._fail(UnicodeSequenceError(), escape_start)
			return chr(code)
		raise self._fail(StringError(), escape_start)

	def _take_hex(self, count: int) -> Optional[str]:
		text = self.source[self.pos : self.pos + count]
		if len(text) != count or not all(c in _HEX_DIGITS for c in text):
			return None
		self._advance(count)
		return text

	def _scan_unicode_code_point(self, escape_start: SourceLocation) -> int:
		if self._peek() == "{":
			self._advance()
			begin = self.pos
			while self._peek() is not None and self._peek() in _HEX_DIGITS:
				self._advance()
			digits = self.source[begin : self.pos]
			if self._peek() != "}" or not digits or len(digits) > 6:
				raise self._fail(UnicodeSequenceError(), escape_start)
			self._advance()
			code = int(digits, 16)
			if code > 0x10FFFF:
				raise self._fail(UnicodeSequenceError(), escape_start)
			return code
		digits = self._take_hex(4)
		if digits is None:
			raise self._fail(UnicodeSequenceError(), escape_start)
		return int(digits, 16)

	def _combine_surrogates(self, high: int, escape_start: SourceLocation) -> str:
		if self._peek() != "\\" or self._peek(1) != "u":
			raise self._fail(UnicodeSequenceError(), escape_start)
		low_start = self._here()
		self._advance(2)
		low = self._scan_unicode_code_point(low_start)
		if not 0xDC00 <= low <= 0xDFFF:
			raise self._fail(UnicodeSequenceError(), escape_start)
		return chr(0x10000 + ((high - 0xD800) << 10) + (low - 0xDC00))

	def _scan_punctuation(self, start: SourceLocation) -> Token:
		for lexeme, type_ in PUNCTUATION:
			if self.source.startswith(lexeme, self.pos):
				self._advance(len(lexeme))
				return self._token(type_, lexeme, start)
		raise self._fail(UnrecognizedToken(tok=self._peek()), start)


def tokenize(source: str) -> Iterator[Token]:
	"""Scan `source` into tokens. Raises LexicalError on the first bad input."""
	return Lexer(source).tokens()


class LarkLexerAdapter(LarkLexer):
	"""Hooks `Lexer` into lark as a custom lexer."""

	def __init__(self, lexer_conf: Any) -> None:
		pass

	def lex(self, data: Any) -> Iterator[Token]:
		# Depending on the lark version the wrapper hands us either the text or
		# a slice object exposing it as `.text`.
		source = data if isinstance(data, str) else data.text
		return tokenize(source)


__all__ = ["KEYWORDS", "LarkLexerAdapter", "Lexer", "PUNCTUATION", "tokenize"]
