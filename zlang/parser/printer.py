# vim: set noexpandtab: -*- indent-tabs-mode: t -*-
"""
Source printer and JSON serializer for zlang ASTs.

`format_program` renders a tree back to zlang source that reparses to an equal
tree (locations aside). Dispatch is a total isinstance chain over the
statement and expression unions; adding a variant without a case here is a
type error at the `assert_never` calls.

`to_json_dict` renders any entity as plain JSON-friendly data, tagging each
object with its kind name.
"""

from __future__ import annotations

import math
from dataclasses import fields
from typing import Any, List, assert_never

from .ast import (
	AnyExpression,
	AnyStatement,
	ArrayExpression,
	AssignmentExpression,
	BinaryExpression,
	BlockStatement,
	CallExpression,
	EmptyStatement,
	ExpressionStatement,
	ForInStatement,
	Function,
	Identifier,
	IfStatement,
	Literal,
	LiteralType,
	LogicalExpression,
	Node,
	OPERATOR_TYPES,
	Program,
	Property,
	ReturnStatement,
	UnaryExpression,
	UnaryOperator,
	WhileStatement,
	literal_type,
)
from .operators import (
	ASSIGNMENT_PRECEDENCE,
	POSTFIX_PRECEDENCE,
	PRIMARY_PRECEDENCE,
	UNARY_PRECEDENCE,
	binary_precedence,
	logical_precedence,
	operator_lexeme,
)

INDENT = "    "

_STRING_ESCAPES = {
	"\\": "\\\\",
	'"': '\\"',
	"\n": "\\n",
	"\t": "\\t",
	"\r": "\\r",
	"\b": "\\b",
	"\f": "\\f",
	"\v": "\\v",
}


# Literals


def format_string(value: str) -> str:
	out = ['"']
	for ch in value:
		if ch in _STRING_ESCAPES:
			out.append(_STRING_ESCAPES[ch])
		elif ord(ch) < 0x20 or ord(ch) == 0x7F:
			out.append(f"\\x{ord(ch):02x}")
		else:
			out.append(ch)
	out.append('"')
	return "".join(out)


def format_number(value: float) -> str:
	# zlang has no unary minus and no NaN spelling.
	if math.isnan(value) or value < 0:
		raise ValueError(f"number {value!r} has no zlang literal spelling")
	if math.isinf(value):
		return "1e999"
	if value.is_integer() and value < 1e16:
		return str(int(value))
	return repr(value)


def format_literal(lit: Literal) -> str:
	lt = literal_type(lit)
	if lt is LiteralType.STRING:
		return format_string(lit.value)
	if lt is LiteralType.BOOLEAN:
		return "true" if lit.value else "false"
	if lt is LiteralType.NUMBER:
		return format_number(lit.value)
	if lt is LiteralType.NONE:
		return "null"
	assert_never(lt)


# Expressions


def _precedence(expr: AnyExpression) -> int:
	if isinstance(expr, AssignmentExpression):
		return ASSIGNMENT_PRECEDENCE
	if isinstance(expr, LogicalExpression):
		return logical_precedence(expr.operator)
	if isinstance(expr, BinaryExpression):
		return binary_precedence(expr.operator)
	if isinstance(expr, UnaryExpression):
		return UNARY_PRECEDENCE
	if isinstance(expr, CallExpression):
		return POSTFIX_PRECEDENCE
	if isinstance(expr, (ArrayExpression, Identifier, Literal, Function)):
		return PRIMARY_PRECEDENCE
	assert_never(expr)


def format_expr(expr: AnyExpression, min_prec: int = 0) -> str:
	"""Render `expr`, parenthesized when it binds looser than `min_prec`."""
	text = _format_expr(expr)
	if _precedence(expr) < min_prec:
		return f"({text})"
	return text


def _format_expr(expr: AnyExpression) -> str:
	if isinstance(expr, AssignmentExpression):
		# Only a unary-level expression may stand left of an assignment.
		left = format_expr(expr.left, UNARY_PRECEDENCE)
		right = format_expr(expr.right, ASSIGNMENT_PRECEDENCE)
		return f"{left} {operator_lexeme(expr.operator)} {right}"
	if isinstance(expr, (LogicalExpression, BinaryExpression)):
		prec = _precedence(expr)
		left = format_expr(expr.left, prec)
		right = format_expr(expr.right, prec + 1)
		return f"{left} {operator_lexeme(expr.operator)} {right}"
	if isinstance(expr, UnaryExpression):
		arg = format_expr(expr.argument, UNARY_PRECEDENCE)
		if expr.operator is UnaryOperator.TYPEOF:
			return f"typeof {arg}"
		return f"{operator_lexeme(expr.operator)}{arg}"
	if isinstance(expr, CallExpression):
		callee = format_expr(expr.callee, POSTFIX_PRECEDENCE)
		if len(expr.arguments) == 1 and expr.arguments[0] is None:
			# `f()` has no slots and `f(,)` has two; one elided slot has no spelling.
			raise ValueError("call with a single elided argument slot cannot be printed")
		slots = ["" if arg is None else format_expr(arg) for arg in expr.arguments]
		return f"{callee}({', '.join(slots)})"
	if isinstance(expr, ArrayExpression):
		return "[" + ", ".join(format_expr(el) for el in expr.elements) + "]"
	if isinstance(expr, Identifier):
		return expr.name
	if isinstance(expr, Literal):
		return format_literal(expr)
	if isinstance(expr, Function):
		return format_function(expr)
	assert_never(expr)


def format_param(param: Property) -> str:
	if param.default is None:
		return param.id.name
	return f"{param.id.name} = {format_expr(param.default)}"


def format_function(fn: Function) -> str:
	name = f" {fn.id.name}" if fn.id is not None else ""
	params = ", ".join(format_param(p) for p in fn.params)
	# Functions are expressions, so the body is kept on one line.
	body = " ".join(line.strip() for line in _stmt_lines(fn.body))
	return f"function{name}({params}) {body}"


# Statements


def _open_if(stmt: AnyStatement) -> bool:
	"""True when an `else` printed after `stmt` would attach inside it."""
	while isinstance(stmt, IfStatement):
		if stmt.alternate is None:
			return True
		stmt = stmt.alternate
	return False


def _indent(lines: List[str]) -> List[str]:
	return [INDENT + line for line in lines]


def _attach(head: str, lines: List[str]) -> List[str]:
	return [head + lines[0]] + lines[1:]


def _stmt_lines(stmt: AnyStatement) -> List[str]:
	if isinstance(stmt, EmptyStatement):
		return [";"]
	if isinstance(stmt, BlockStatement):
		if not stmt.body:
			return ["{}"]
		inner: List[str] = []
		for child in stmt.body:
			inner.extend(_stmt_lines(child))
		return ["{"] + _indent(inner) + ["}"]
	if isinstance(stmt, ExpressionStatement):
		return [format_expr(stmt.expression) + ";"]
	if isinstance(stmt, IfStatement):
		consequent = stmt.consequent
		if stmt.alternate is not None and _open_if(consequent):
			consequent = BlockStatement((consequent,))
		lines = _attach(f"if ({format_expr(stmt.test)}) ", _stmt_lines(consequent))
		if stmt.alternate is not None:
			alt = _stmt_lines(stmt.alternate)
			lines[-1] = lines[-1] + " else " + alt[0]
			lines.extend(alt[1:])
		return lines
	if isinstance(stmt, ReturnStatement):
		if stmt.argument is None:
			return ["return;"]
		return [f"return {format_expr(stmt.argument)};"]
	if isinstance(stmt, WhileStatement):
		return _attach(f"while ({format_expr(stmt.test)}) ", _stmt_lines(stmt.body))
	if isinstance(stmt, ForInStatement):
		keyword = "for each" if stmt.each else "for"
		head = f"{keyword} ({format_expr(stmt.left)} in {format_expr(stmt.right)}) "
		return _attach(head, _stmt_lines(stmt.body))
	assert_never(stmt)


def format_statement(stmt: AnyStatement) -> str:
	return "\n".join(_stmt_lines(stmt))


def format_program(program: Program) -> str:
	lines: List[str] = []
	for stmt in program.body:
		lines.extend(_stmt_lines(stmt))
	return "\n".join(lines) + "\n" if lines else ""


# JSON


def _json_value(value: Any) -> Any:
	if isinstance(value, Node):
		return to_json_dict(value)
	if isinstance(value, OPERATOR_TYPES):
		return operator_lexeme(value)
	if isinstance(value, tuple):
		return [_json_value(item) for item in value]
	return value


def to_json_dict(node: Node) -> dict:
	"""
	Render an entity as a JSON-friendly dict.

	`type` is the kind name; fields follow in declaration order, absent optional
	slots as null, operators as their lexemes and `loc` (when known) as
	line/column/offset.
	"""
	out: dict = {"type": node.kind.value}
	for f in fields(node):
		if f.name == "loc":
			continue
		out[f.name] = _json_value(getattr(node, f.name))
	if node.loc is not None:
		out["loc"] = {"line": node.loc.line, "column": node.loc.column, "offset": node.loc.offset}
	return out


__all__ = [
	"INDENT",
	"format_expr",
	"format_function",
	"format_literal",
	"format_number",
	"format_program",
	"format_statement",
	"format_string",
	"to_json_dict",
]
