# vim: set noexpandtab: -*- indent-tabs-mode: t -*-
"""
Operator lexemes.

Maps surface lexemes to operator values (used by the tree builder) and back
(used by the printer). `operator_lexeme` is a total match over every family:
adding an enum member without a lexeme is caught by the type checker through
`assert_never` and at runtime by the table check below.
"""

from __future__ import annotations

from typing import assert_never

from .ast import (
	AnyOperator,
	AssignmentOperator,
	BinaryOperator,
	LogicalOperator,
	UnaryOperator,
)

_ASSIGNMENT_LEXEMES: dict[AssignmentOperator, str] = {
	AssignmentOperator.ASSIGN: "=",
	AssignmentOperator.PLUS_ASSIGN: "+=",
	AssignmentOperator.MINUS_ASSIGN: "-=",
	AssignmentOperator.TIMES_ASSIGN: "*=",
	AssignmentOperator.DIV_ASSIGN: "/=",
	AssignmentOperator.MOD_ASSIGN: "%=",
	AssignmentOperator.LSHIFT_ASSIGN: "<<=",
	AssignmentOperator.RSHIFT_ASSIGN: ">>=",
	AssignmentOperator.OR_ASSIGN: "|=",
	AssignmentOperator.XOR_ASSIGN: "^=",
	AssignmentOperator.AND_ASSIGN: "&=",
}

_LOGICAL_LEXEMES: dict[LogicalOperator, str] = {
	LogicalOperator.LOGICAL_AND: "&&",
	LogicalOperator.LOGICAL_OR: "||",
}

_UNARY_LEXEMES: dict[UnaryOperator, str] = {
	UnaryOperator.NOT: "!",
	UnaryOperator.XOR: "^",
	UnaryOperator.TYPEOF: "typeof",
}

_BINARY_LEXEMES: dict[BinaryOperator, str] = {
	BinaryOperator.ADD: "+",
	BinaryOperator.MINUS: "-",
	BinaryOperator.TIMES: "*",
	BinaryOperator.DIV: "/",
	BinaryOperator.MOD: "%",
	BinaryOperator.BITWISE_AND: "&",
	BinaryOperator.BITWISE_OR: "|",
	BinaryOperator.BITWISE_XOR: "^",
	BinaryOperator.EQUAL: "==",
	BinaryOperator.NOT_EQUAL: "!=",
	BinaryOperator.GREATER: ">",
	BinaryOperator.GREATER_EQUAL: ">=",
	BinaryOperator.LESS: "<",
	BinaryOperator.LESS_EQUAL: "<=",
	BinaryOperator.BITWISE_LSHIFT: "<<",
	BinaryOperator.BITWISE_RSHIFT: ">>",
}

for _family, _table in (
	(AssignmentOperator, _ASSIGNMENT_LEXEMES),
	(LogicalOperator, _LOGICAL_LEXEMES),
	(UnaryOperator, _UNARY_LEXEMES),
	(BinaryOperator, _BINARY_LEXEMES),
):
	_missing = set(_family) - set(_table)
	if _missing:
		raise AssertionError(f"{_family.__name__} members without a lexeme: {sorted(m.name for m in _missing)}")

_ASSIGNMENT_BY_LEXEME = {lexeme: op for op, lexeme in _ASSIGNMENT_LEXEMES.items()}
_LOGICAL_BY_LEXEME = {lexeme: op for op, lexeme in _LOGICAL_LEXEMES.items()}
_UNARY_BY_LEXEME = {lexeme: op for op, lexeme in _UNARY_LEXEMES.items()}
_BINARY_BY_LEXEME = {lexeme: op for op, lexeme in _BINARY_LEXEMES.items()}


def assignment_operator_from_lexeme(lexeme: str) -> AssignmentOperator:
	try:
		return _ASSIGNMENT_BY_LEXEME[lexeme]
	except KeyError:
		raise ValueError(f"unknown assignment operator {lexeme!r}") from None


def logical_operator_from_lexeme(lexeme: str) -> LogicalOperator:
	try:
		return _LOGICAL_BY_LEXEME[lexeme]
	except KeyError:
		raise ValueError(f"unknown logical operator {lexeme!r}") from None


def unary_operator_from_lexeme(lexeme: str) -> UnaryOperator:
	try:
		return _UNARY_BY_LEXEME[lexeme]
	except KeyError:
		raise ValueError(f"unknown unary operator {lexeme!r}") from None


def binary_operator_from_lexeme(lexeme: str) -> BinaryOperator:
	try:
		return _BINARY_BY_LEXEME[lexeme]
	except KeyError:
		raise ValueError(f"unknown binary operator {lexeme!r}") from None


def operator_lexeme(op: AnyOperator) -> str:
	"""Return the surface lexeme of any operator value."""
	if isinstance(op, AssignmentOperator):
		return _ASSIGNMENT_LEXEMES[op]
	if isinstance(op, LogicalOperator):
		return _LOGICAL_LEXEMES[op]
	if isinstance(op, UnaryOperator):
		return _UNARY_LEXEMES[op]
	if isinstance(op, BinaryOperator):
		return _BINARY_LEXEMES[op]
	assert_never(op)


# Binding strength used by the printer to decide where parentheses are
# needed. Mirrors the grammar's precedence ladder (higher binds tighter).
ASSIGNMENT_PRECEDENCE = 1
LOGICAL_OR_PRECEDENCE = 2
LOGICAL_AND_PRECEDENCE = 3
UNARY_PRECEDENCE = 13
POSTFIX_PRECEDENCE = 14
PRIMARY_PRECEDENCE = 15


def binary_precedence(op: BinaryOperator) -> int:
	if op is BinaryOperator.BITWISE_OR:
		return 4
	if op is BinaryOperator.BITWISE_XOR:
		return 5
	if op is BinaryOperator.BITWISE_AND:
		return 6
	if op is BinaryOperator.EQUAL or op is BinaryOperator.NOT_EQUAL:
		return 7
	if op in (
		BinaryOperator.GREATER,
		BinaryOperator.GREATER_EQUAL,
		BinaryOperator.LESS,
		BinaryOperator.LESS_EQUAL,
	):
		return 8
	if op is BinaryOperator.BITWISE_LSHIFT or op is BinaryOperator.BITWISE_RSHIFT:
		return 9
	if op is BinaryOperator.ADD or op is BinaryOperator.MINUS:
		return 10
	if op is BinaryOperator.TIMES or op is BinaryOperator.DIV or op is BinaryOperator.MOD:
		return 11
	raise AssertionError(f"unhandled binary operator {op!r}")


def logical_precedence(op: LogicalOperator) -> int:
	if op is LogicalOperator.LOGICAL_OR:
		return LOGICAL_OR_PRECEDENCE
	if op is LogicalOperator.LOGICAL_AND:
		return LOGICAL_AND_PRECEDENCE
	assert_never(op)


__all__ = [
	"ASSIGNMENT_PRECEDENCE",
	"POSTFIX_PRECEDENCE",
	"PRIMARY_PRECEDENCE",
	"UNARY_PRECEDENCE",
	"assignment_operator_from_lexeme",
	"binary_operator_from_lexeme",
	"binary_precedence",
	"logical_operator_from_lexeme",
	"logical_precedence",
	"operator_lexeme",
	"unary_operator_from_lexeme",
]
