# vim: set noexpandtab: -*- indent-tabs-mode: t -*-
from __future__ import annotations

import dataclasses
import math

import pytest

from zlang.core.location import SourceLocation
from zlang.parser import ast as A
from zlang.parser import parse_program
from zlang.parser.errors import (
	DefaultArgumentError,
	LexicalError,
	ParseError,
	StringError,
	UnrecognizedEofError,
	UnrecognizedToken,
	UnrecognizedTokenError,
	UserError,
)

a = A.Identifier("a")
b = A.Identifier("b")
c = A.Identifier("c")
d = A.Identifier("d")
x = A.Identifier("x")
y = A.Identifier("y")


def _expr(source: str) -> A.Expression:
	prog = parse_program(source + ";")
	assert len(prog.body) == 1
	stmt = prog.body[0]
	assert isinstance(stmt, A.ExpressionStatement)
	return stmt.expression


def _stmt(source: str) -> A.Statement:
	prog = parse_program(source)
	assert len(prog.body) == 1
	return prog.body[0]


def _bin(op: A.BinaryOperator, left: A.Expression, right: A.Expression) -> A.BinaryExpression:
	return A.BinaryExpression(op, left, right)


def test_empty_program() -> None:
	prog = parse_program("")
	assert prog == A.Program()
	assert len(prog.body) == 0


def test_statement_forms() -> None:
	prog = parse_program("a = 1; ; { b; } return; return a;")
	assert prog.body == (
		A.ExpressionStatement(A.AssignmentExpression(A.AssignmentOperator.ASSIGN, a, A.Literal.number(1))),
		A.EmptyStatement(),
		A.BlockStatement((A.ExpressionStatement(b),)),
		A.ReturnStatement(),
		A.ReturnStatement(a),
	)


def test_empty_block() -> None:
	assert _stmt("{}") == A.BlockStatement(())


def test_literals() -> None:
	assert _expr("1.5") == A.Literal.number(1.5)
	assert _expr("1e3") == A.Literal.number(1000.0)
	assert _expr('"hi\\n"') == A.Literal.string("hi\n")
	assert _expr("'q'") == A.Literal.string("q")
	assert _expr("true") == A.Literal.boolean(True)
	assert _expr("false") == A.Literal.boolean(False)
	assert _expr("null") == A.Literal.none()
	assert _expr("true") != A.Literal.number(1.0)


def test_huge_number_is_infinite() -> None:
	lit = _expr("1e999")
	assert isinstance(lit, A.Literal)
	assert math.isinf(lit.value)


@pytest.mark.parametrize(
	"source, expected",
	[
		("a + b * c", _bin(A.BinaryOperator.ADD, a, _bin(A.BinaryOperator.TIMES, b, c))),
		("a - b - c", _bin(A.BinaryOperator.MINUS, _bin(A.BinaryOperator.MINUS, a, b), c)),
		("(a + b) * c", _bin(A.BinaryOperator.TIMES, _bin(A.BinaryOperator.ADD, a, b), c)),
		(
			"a | b ^ c & d",
			_bin(
				A.BinaryOperator.BITWISE_OR,
				a,
				_bin(A.BinaryOperator.BITWISE_XOR, b, _bin(A.BinaryOperator.BITWISE_AND, c, d)),
			),
		),
		("a < b << c", _bin(A.BinaryOperator.LESS, a, _bin(A.BinaryOperator.BITWISE_LSHIFT, b, c))),
		("a == b >= c", _bin(A.BinaryOperator.EQUAL, a, _bin(A.BinaryOperator.GREATER_EQUAL, b, c))),
		("a % b / c", _bin(A.BinaryOperator.DIV, _bin(A.BinaryOperator.MOD, a, b), c)),
		("a >> b != c", _bin(A.BinaryOperator.NOT_EQUAL, _bin(A.BinaryOperator.BITWISE_RSHIFT, a, b), c)),
	],
)
def test_binary_precedence(source: str, expected: A.Expression) -> None:
	assert _expr(source) == expected


def test_logical_precedence() -> None:
	assert _expr("a || b && c") == A.LogicalExpression(
		A.LogicalOperator.LOGICAL_OR,
		a,
		A.LogicalExpression(A.LogicalOperator.LOGICAL_AND, b, c),
	)
	assert _expr("a && b == c") == A.LogicalExpression(
		A.LogicalOperator.LOGICAL_AND,
		a,
		_bin(A.BinaryOperator.EQUAL, b, c),
	)


def test_assignment_is_right_associative() -> None:
	assert _expr("a = b += c") == A.AssignmentExpression(
		A.AssignmentOperator.ASSIGN,
		a,
		A.AssignmentExpression(A.AssignmentOperator.PLUS_ASSIGN, b, c),
	)


def test_assignment_binds_loosest() -> None:
	assert _expr("a <<= b || c") == A.AssignmentExpression(
		A.AssignmentOperator.LSHIFT_ASSIGN,
		a,
		A.LogicalExpression(A.LogicalOperator.LOGICAL_OR, b, c),
	)


def test_unary_operators() -> None:
	assert _expr("!a == b") == _bin(A.BinaryOperator.EQUAL, A.UnaryExpression(A.UnaryOperator.NOT, a), b)
	assert _expr("^a") == A.UnaryExpression(A.UnaryOperator.XOR, a)
	assert _expr("a ^ ^b") == _bin(A.BinaryOperator.BITWISE_XOR, a, A.UnaryExpression(A.UnaryOperator.XOR, b))
	assert _expr("typeof typeof a") == A.UnaryExpression(
		A.UnaryOperator.TYPEOF,
		A.UnaryExpression(A.UnaryOperator.TYPEOF, a),
	)


def test_name_without_parens_is_not_a_call() -> None:
	assert _expr("f") == A.Identifier("f")


def test_empty_parens_is_call_without_slots() -> None:
	call = _expr("f()")
	assert isinstance(call, A.CallExpression)
	assert call.callee == A.Identifier("f")
	assert call.arguments == ()


def test_elided_middle_argument_keeps_its_slot() -> None:
	call = _expr("f(x,,y)")
	assert isinstance(call, A.CallExpression)
	assert len(call.arguments) == 3
	assert call.arguments == (x, None, y)


@pytest.mark.parametrize(
	"source, slots",
	[
		("f(a)", (a,)),
		("f(a, b)", (a, b)),
		("f(a,)", (a, None)),
		("f(,)", (None, None)),
		("f(,a)", (None, a)),
		("f(, , a)", (None, None, a)),
	],
)
def test_call_argument_slots(source: str, slots: tuple) -> None:
	call = _expr(source)
	assert isinstance(call, A.CallExpression)
	assert call.arguments == slots


def test_chained_calls() -> None:
	inner = A.CallExpression(A.Identifier("f"), (a,))
	assert _expr("f(a)(b)") == A.CallExpression(inner, (b,))


def test_arrays() -> None:
	assert _expr("[]") == A.ArrayExpression(())
	assert _expr("[1, [a], f()]") == A.ArrayExpression(
		(
			A.Literal.number(1),
			A.ArrayExpression((a,)),
			A.CallExpression(A.Identifier("f"), ()),
		)
	)


def test_if_without_else() -> None:
	stmt = _stmt("if (a) b;")
	assert stmt == A.IfStatement(a, A.ExpressionStatement(b))
	assert stmt.alternate is None


def test_if_with_else() -> None:
	stmt = _stmt("if (a) { b; } else c;")
	assert stmt == A.IfStatement(
		a,
		A.BlockStatement((A.ExpressionStatement(b),)),
		A.ExpressionStatement(c),
	)


def test_dangling_else_binds_to_nearest_if() -> None:
	stmt = _stmt("if (a) if (b) x; else y;")
	assert stmt == A.IfStatement(
		a,
		A.IfStatement(b, A.ExpressionStatement(x), A.ExpressionStatement(y)),
	)


def test_while_statement() -> None:
	stmt = _stmt("while (a < 3) { a += 1; }")
	assert isinstance(stmt, A.WhileStatement)
	assert stmt.test == _bin(A.BinaryOperator.LESS, a, A.Literal.number(3))
	assert stmt.body == A.BlockStatement(
		(A.ExpressionStatement(A.AssignmentExpression(A.AssignmentOperator.PLUS_ASSIGN, a, A.Literal.number(1))),)
	)


def test_for_in_and_for_each() -> None:
	classic = _stmt("for (x in y) {}")
	each = _stmt("for each (x in y) {}")
	assert classic == A.ForInStatement(x, y, A.BlockStatement(()), each=False)
	assert each == A.ForInStatement(x, y, A.BlockStatement(()), each=True)


def test_named_function_statement() -> None:
	fn = _expr("function f(a, b = 1) { return a; }")
	assert fn == A.Function(
		(A.Property(a), A.Property(b, A.Literal.number(1))),
		A.BlockStatement((A.ReturnStatement(a),)),
		id=A.Identifier("f"),
	)


def test_anonymous_function_expression() -> None:
	expr = _expr("g = function() {}")
	assert isinstance(expr, A.AssignmentExpression)
	fn = expr.right
	assert isinstance(fn, A.Function)
	assert fn.id is None
	assert fn.params == ()
	assert fn.body == A.BlockStatement(())


def test_statement_locations() -> None:
	prog = parse_program("a;\n  b = 1;")
	second = prog.body[1]
	assert second.loc is not None
	assert (second.loc.offset, second.loc.line, second.loc.column) == (5, 2, 3)
	assert second.loc.end_offset == 11
	assert prog.loc is not None
	assert prog.loc.offset == 0


def test_identifier_location() -> None:
	expr = _expr("  abc")
	assert expr.loc == SourceLocation(2, 1, 3, end_offset=5, end_line=1, end_column=6)


_OPTIONAL_SLOTS = {
	("Function", "id"),
	("Property", "default"),
	("IfStatement", "alternate"),
	("ReturnStatement", "argument"),
}


def test_parsed_tree_has_no_missing_required_fields() -> None:
	source = """
	function f(p, q = [1, 2]) {
		if (p) return; else { q(,p); }
		while (!p) { p = typeof q; }
		for each (k in q) { k; }
		return f(p, q) || null;
	};
	if (true) ;
	g = function() { return; };
	"""
	prog = parse_program(source)
	seen = set()
	absent = set()
	for node in A.walk(prog):
		seen.add(type(node))
		for f in dataclasses.fields(node):
			if f.name == "loc":
				continue
			if isinstance(node, A.Literal) and f.name == "value":
				# A null literal carries None as its payload.
				continue
			value = getattr(node, f.name)
			if value is None:
				slot = (type(node).__name__, f.name)
				assert slot in _OPTIONAL_SLOTS
				absent.add(slot)
			elif isinstance(value, tuple) and not isinstance(node, A.CallExpression):
				assert None not in value
	assert A.IfStatement in seen
	assert A.ForInStatement in seen
	assert A.UnaryExpression in seen
	assert absent == _OPTIONAL_SLOTS


def test_lexical_error_is_lifted() -> None:
	with pytest.raises(ParseError) as excinfo:
		parse_program('x = "abc')
	err = excinfo.value
	assert isinstance(err, UserError)
	assert err.error == LexicalError(StringError(), SourceLocation(offset=4, line=1, column=5))
	assert str(err) == "Got unexpected string"
	assert isinstance(err.__cause__, LexicalError)
	assert err.error is err.__cause__


def test_unrecognized_character_is_lifted() -> None:
	with pytest.raises(UserError) as excinfo:
		parse_program("a;\n#")
	assert excinfo.value.error.error == UnrecognizedToken(tok="#")
	assert excinfo.value.location == SourceLocation(offset=3, line=2, column=1)


def test_default_argument_order_is_lifted() -> None:
	with pytest.raises(UserError) as excinfo:
		parse_program("function f(a = 1, b) {};")
	lexical = excinfo.value.error
	assert isinstance(lexical, LexicalError)
	assert lexical.error == DefaultArgumentError()
	assert (lexical.location.offset, lexical.location.line, lexical.location.column) == (18, 1, 19)
	assert str(excinfo.value) == "non-default argument follows default argument"


def test_unexpected_token() -> None:
	with pytest.raises(UnrecognizedTokenError) as excinfo:
		parse_program("a b;")
	err = excinfo.value
	start, tok, _end = err.token
	assert tok.value == "b"
	assert (start.line, start.column) == (1, 3)
	assert "';'" in err.expected


def test_else_without_statement_is_unexpected() -> None:
	with pytest.raises(UnrecognizedTokenError) as excinfo:
		parse_program("if (a) else b;")
	assert excinfo.value.token[1].value == "else"


@pytest.mark.parametrize("source", ["a = 1", "f(", "if (a)", "{ a;"])
def test_unexpected_end_of_input(source: str) -> None:
	with pytest.raises(UnrecognizedEofError) as excinfo:
		parse_program(source)
	err = excinfo.value
	assert err.location.offset == len(source)
	assert err.expected


def test_function_statement_needs_semicolon() -> None:
	with pytest.raises(ParseError):
		parse_program("function f() {} a;")


def test_token_after_complete_program_is_unrecognized() -> None:
	with pytest.raises(UnrecognizedTokenError) as excinfo:
		parse_program("a; }")
	assert excinfo.value.token[1].value == "}"
	assert excinfo.value.location.offset == 3


@pytest.mark.parametrize("source", ["x = ²;", "x = 1²;"])
def test_non_ascii_digit_is_a_lexical_error(source: str) -> None:
	with pytest.raises(UserError) as excinfo:
		parse_program(source)
	assert isinstance(excinfo.value.error, LexicalError)
	assert excinfo.value.location == SourceLocation(offset=4, line=1, column=5)
