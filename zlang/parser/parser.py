# vim: set noexpandtab: -*- indent-tabs-mode: t -*-
"""
zlang parser: lark LALR grammar plus the AST builder.

`parse_program` is the lexer/parser boundary. Lexical failures (raised by the
lexer, or by parameter validation while building) are lifted into the
parse-engine error channel with `lift_lexical_error`; lark's own grammar
errors are translated with `from_lark_error`. Callers therefore only ever see
`ParseError`.

The builder walks the lark tree bottom-up and fills the transient builders of
`zlang.parser.builders`, so every node it returns is complete.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import List, Optional

from lark import Lark, Token, Tree
from lark.exceptions import UnexpectedInput

from zlang.core.location import SourceLocation

from .ast import (
	EmptyStatement,
	Expression,
	Function,
	Identifier,
	Literal,
	Program,
	Property,
	Statement,
)
from .builders import (
	ArrayExpressionBuilder,
	AssignmentExpressionBuilder,
	BinaryExpressionBuilder,
	BlockStatementBuilder,
	CallExpressionBuilder,
	ExpressionStatementBuilder,
	ForInStatementBuilder,
	FunctionBuilder,
	IfStatementBuilder,
	LogicalExpressionBuilder,
	ProgramBuilder,
	ReturnStatementBuilder,
	UnaryExpressionBuilder,
	WhileStatementBuilder,
)
from .errors import LexicalError, ParseError, from_lark_error, lift_lexical_error
from .lexer import LarkLexerAdapter
from .operators import (
	assignment_operator_from_lexeme,
	binary_operator_from_lexeme,
	logical_operator_from_lexeme,
	unary_operator_from_lexeme,
)

logger = logging.getLogger(__name__)

_GRAMMAR_PATH = Path(__file__).with_name("grammar.lark")
_GRAMMAR_SRC = _GRAMMAR_PATH.read_text()

# Human spellings for terminal names in "expected one of" messages.
TERMINAL_DISPLAY = {
	"NAME": "identifier",
	"NUMBER": "number",
	"STRING": "string",
	"FUNCTION": "'function'",
	"IF": "'if'",
	"_ELSE": "'else'",
	"RETURN": "'return'",
	"WHILE": "'while'",
	"FOR": "'for'",
	"_EACH": "'each'",
	"_IN": "'in'",
	"TRUE": "'true'",
	"FALSE": "'false'",
	"NULL": "'null'",
	"TYPEOF": "'typeof'",
	"LBRACE": "'{'",
	"_RBRACE": "'}'",
	"LSQB": "'['",
	"_RSQB": "']'",
	"_LPAR": "'('",
	"_RPAR": "')'",
	"_COMMA": "','",
	"SEMICOLON": "';'",
	"EQUAL": "'='",
	"AUG_ASSIGN": "compound assignment",
	"OROR": "'||'",
	"ANDAND": "'&&'",
	"BAR": "'|'",
	"CARET": "'^'",
	"AMPERSAND": "'&'",
	"EQ_OP": "equality operator",
	"REL_OP": "comparison operator",
	"SHIFT_OP": "shift operator",
	"ADD_OP": "'+' or '-'",
	"MUL_OP": "'*', '/' or '%'",
	"BANG": "'!'",
	"$END": "end of input",
}

_PARSER = Lark(
	_GRAMMAR_SRC,
	parser="lalr",
	lexer=LarkLexerAdapter,
	start="program",
	maybe_placeholders=False,
)
logger.debug("loaded zlang grammar from %s", _GRAMMAR_PATH)


def parse_program(source: str) -> Program:
	"""
	Parse a complete zlang source text.

	Raises `ParseError`: `UserError` wrapping the `LexicalError` for scan
	failures, one of the grammar variants otherwise. No partial tree is ever
	returned.
	"""
	try:
		tree = _PARSER.parse(source)
		program = _build_program(tree)
	except LexicalError as err:
		logger.debug("lexical error at %s: %s", err.location, err.message)
		raise lift_lexical_error(err) from err
	except UnexpectedInput as err:
		raise from_lark_error(err, source=source, display=TERMINAL_DISPLAY) from err
	logger.debug("parsed %d characters into %d top-level statements", len(source), len(program.body))
	return program


# Tree helpers


def _name(node: Tree) -> str:
	return str(node.data)


def _trees(node: Tree) -> List[Tree]:
	return [child for child in node.children if isinstance(child, Tree)]


def _first_token(node: object) -> Optional[Token]:
	if isinstance(node, Token):
		return node
	if isinstance(node, Tree):
		for child in node.children:
			tok = _first_token(child)
			if tok is not None:
				return tok
	return None


def _last_token(node: object) -> Optional[Token]:
	if isinstance(node, Token):
		return node
	if isinstance(node, Tree):
		for child in reversed(node.children):
			tok = _last_token(child)
			if tok is not None:
				return tok
	return None


def _loc(node: object) -> Optional[SourceLocation]:
	"""Span from the first to the last token kept in `node`'s subtree."""
	first = _first_token(node)
	if first is None:
		return None
	last = _last_token(node)
	start = SourceLocation.from_token(first)
	if last is None or last is first:
		return start
	return start.span_to(SourceLocation.from_token(last))


# Program and statements


def _build_program(tree: Tree) -> Program:
	builder = ProgramBuilder(loc=_loc(tree))
	for child in _trees(tree):
		builder.add(_build_stmt(child))
	return builder.finish()


def _build_stmt(tree: Tree) -> Statement:
	kind = _name(tree)
	if kind == "block":
		return _build_block(tree)
	if kind == "empty_stmt":
		return EmptyStatement(loc=_loc(tree))
	if kind == "expr_stmt":
		stmt = ExpressionStatementBuilder(loc=_loc(tree))
		stmt.expression = _build_expr(_trees(tree)[0])
		return stmt.finish()
	if kind == "if_stmt":
		return _build_if_stmt(tree)
	if kind == "return_stmt":
		ret = ReturnStatementBuilder(loc=_loc(tree))
		parts = _trees(tree)
		if parts:
			ret.argument = _build_expr(parts[0])
		return ret.finish()
	if kind == "while_stmt":
		test, body = _trees(tree)
		loop = WhileStatementBuilder(loc=_loc(tree))
		loop.test = _build_expr(test)
		loop.body = _build_block(body)
		return loop.finish()
	if kind in ("for_in_stmt", "for_each_stmt"):
		return _build_for_in_stmt(tree)
	raise ValueError(f"Unsupported statement node: {kind}")


def _build_block(tree: Tree) -> Statement:
	block = BlockStatementBuilder(loc=_loc(tree))
	block.body = [_build_stmt(child) for child in _trees(tree)]
	return block.finish()


def _build_if_stmt(tree: Tree) -> Statement:
	parts = _trees(tree)
	if len(parts) not in (2, 3):
		raise ValueError("malformed if statement")
	stmt = IfStatementBuilder(loc=_loc(tree))
	stmt.test = _build_expr(parts[0])
	stmt.consequent = _build_stmt(parts[1])
	if len(parts) == 3:
		stmt.alternate = _build_stmt(parts[2])
	return stmt.finish()


def _build_for_in_stmt(tree: Tree) -> Statement:
	left, right, body = _trees(tree)
	stmt = ForInStatementBuilder(loc=_loc(tree))
	stmt.left = _build_expr(left)
	stmt.right = _build_expr(right)
	stmt.body = _build_block(body)
	if _name(tree) == "for_in_stmt":
		# Classic for-in; for-each keeps the builder default.
		stmt.each = False
	return stmt.finish()


# Expressions


def _build_expr(node: object) -> Expression:
	if not isinstance(node, Tree):
		raise TypeError(f"Unexpected node type: {type(node)}")
	kind = _name(node)
	if kind == "number":
		tok = node.children[0]
		return Literal.number(float(tok.value), loc=_loc(node))
	if kind == "string":
		return Literal.string(str(node.children[0].value), loc=_loc(node))
	if kind == "true":
		return Literal.boolean(True, loc=_loc(node))
	if kind == "false":
		return Literal.boolean(False, loc=_loc(node))
	if kind == "null":
		return Literal.none(loc=_loc(node))
	if kind == "identifier":
		return Identifier(str(node.children[0].value), loc=_loc(node))
	if kind == "assign":
		left, op, right = node.children
		expr = AssignmentExpressionBuilder(loc=_loc(node))
		expr.left = _build_expr(left)
		expr.operator = assignment_operator_from_lexeme(op.value)
		expr.right = _build_expr(right)
		return expr.finish()
	if kind == "logical":
		left, op, right = node.children
		expr = LogicalExpressionBuilder(loc=_loc(node))
		expr.left = _build_expr(left)
		expr.operator = logical_operator_from_lexeme(op.value)
		expr.right = _build_expr(right)
		return expr.finish()
	if kind == "binary":
		left, op, right = node.children
		expr = BinaryExpressionBuilder(loc=_loc(node))
		expr.left = _build_expr(left)
		expr.operator = binary_operator_from_lexeme(op.value)
		expr.right = _build_expr(right)
		return expr.finish()
	if kind == "unary_expr":
		op, operand = node.children
		expr = UnaryExpressionBuilder(loc=_loc(node))
		expr.operator = unary_operator_from_lexeme(op.value)
		expr.argument = _build_expr(operand)
		return expr.finish()
	if kind == "call":
		callee, args = node.children
		expr = CallExpressionBuilder(loc=_loc(node))
		expr.callee = _build_expr(callee)
		expr.arguments = _build_call_args(args)
		return expr.finish()
	if kind == "array":
		expr = ArrayExpressionBuilder(loc=_loc(node))
		expr.elements = [_build_expr(child) for child in _trees(node)]
		return expr.finish()
	if kind == "function":
		return _build_function(node)
	raise ValueError(f"Unsupported expression node: {kind}")


def _build_call_args(tree: Tree) -> List[Optional[Expression]]:
	"""Argument slots in order; elided slots are None and keep their position."""
	slots: List[Optional[Expression]] = []
	if _name(tree) == "elided_call_args":
		slots.append(None)
	for child in _trees(tree):
		if _name(child) == "arg_slot":
			inner = _trees(child)
			slots.append(_build_expr(inner[0]) if inner else None)
		else:
			slots.append(_build_expr(child))
	return slots


def _build_function(tree: Tree) -> Function:
	fn = FunctionBuilder(loc=_loc(tree))
	fn.params = []
	for child in tree.children:
		if isinstance(child, Token):
			if child.type == "NAME":
				fn.id = Identifier(str(child.value), loc=SourceLocation.from_token(child))
			continue
		kind = _name(child)
		if kind == "params":
			fn.params = [_build_param(param) for param in _trees(child)]
		elif kind == "block":
			fn.body = _build_block(child)
		else:
			raise ValueError(f"unexpected function child: {kind}")
	return fn.finish()


def _build_param(tree: Tree) -> Property:
	name_tok = tree.children[0]
	default_trees = _trees(tree)
	default = _build_expr(default_trees[0]) if default_trees else None
	return Property(
		Identifier(str(name_tok.value), loc=SourceLocation.from_token(name_tok)),
		default,
		loc=_loc(tree),
	)


__all__ = ["ParseError", "TERMINAL_DISPLAY", "parse_program"]
