# vim: set noexpandtab: -*- indent-tabs-mode: t -*-
"""
Under-construction counterparts of the AST entities.

The tree builder fills these incrementally as grammar productions reduce.
Every field starts absent (None); `finish()` checks that every required slot
was filled and returns the immutable entity from `zlang.parser.ast`. An absent
field on a builder therefore always means "not reduced yet", and an absent
field on a finished entity always means valid syntax.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import List, Optional, TypeVar

from zlang.core.location import SourceLocation

from .ast import (
	ArrayExpression,
	AssignmentExpression,
	AssignmentOperator,
	BinaryExpression,
	BinaryOperator,
	BlockStatement,
	CallExpression,
	Expression,
	ExpressionStatement,
	ForInStatement,
	Function,
	Identifier,
	IfStatement,
	Kind,
	LogicalExpression,
	LogicalOperator,
	Program,
	Property,
	ReturnStatement,
	Statement,
	UnaryExpression,
	UnaryOperator,
	WhileStatement,
)
from .errors import DefaultArgumentError, LexicalError

_V = TypeVar("_V")


class IncompleteNodeError(ValueError):
	"""
	A builder was finished while a required slot was still absent.

	This signals a grammar/builder bug, not a user error: a successful parse
	always fills every required slot.
	"""

	def __init__(self, kind: Kind, field_name: str) -> None:
		super().__init__(f"{kind.value}.{field_name} is required but was never set")
		self.kind = kind
		self.field_name = field_name


def _require(value: Optional[_V], kind: Kind, field_name: str) -> _V:
	if value is None:
		raise IncompleteNodeError(kind, field_name)
	return value


@dataclass
class ProgramBuilder:
	body: List[Statement] = field(default_factory=list)
	loc: Optional[SourceLocation] = None

	def add(self, stmt: Statement) -> None:
		self.body.append(stmt)

	def finish(self) -> Program:
		return Program(tuple(self.body), loc=self.loc)


@dataclass
class FunctionBuilder:
	id: Optional[Identifier] = None
	params: Optional[List[Property]] = None
	body: Optional[BlockStatement] = None
	loc: Optional[SourceLocation] = None

	def finish(self) -> Function:
		params = _require(self.params, Kind.FUNCTION, "params")
		seen_default = False
		for param in params:
			if param.default is not None:
				seen_default = True
			elif seen_default:
				raise LexicalError(DefaultArgumentError(), param.loc or self.loc or SourceLocation.start())
		return Function(
			tuple(params),
			_require(self.body, Kind.FUNCTION, "body"),
			id=self.id,
			loc=self.loc,
		)


@dataclass
class BlockStatementBuilder:
	# None: no body reduced yet. []: an explicitly empty block.
	body: Optional[List[Statement]] = None
	loc: Optional[SourceLocation] = None

	def finish(self) -> BlockStatement:
		return BlockStatement(tuple(_require(self.body, Kind.BLOCK_STATEMENT, "body")), loc=self.loc)


@dataclass
class ExpressionStatementBuilder:
	expression: Optional[Expression] = None
	loc: Optional[SourceLocation] = None

	def finish(self) -> ExpressionStatement:
		return ExpressionStatement(
			_require(self.expression, Kind.EXPRESSION_STATEMENT, "expression"),
			loc=self.loc,
		)


@dataclass
class IfStatementBuilder:
	test: Optional[Expression] = None
	consequent: Optional[Statement] = None
	alternate: Optional[Statement] = None
	loc: Optional[SourceLocation] = None

	def finish(self) -> IfStatement:
		return IfStatement(
			_require(self.test, Kind.IF_STATEMENT, "test"),
			_require(self.consequent, Kind.IF_STATEMENT, "consequent"),
			self.alternate,
			loc=self.loc,
		)


@dataclass
class ReturnStatementBuilder:
	argument: Optional[Expression] = None
	loc: Optional[SourceLocation] = None

	def finish(self) -> ReturnStatement:
		return ReturnStatement(self.argument, loc=self.loc)


@dataclass
class WhileStatementBuilder:
	test: Optional[Expression] = None
	body: Optional[BlockStatement] = None
	loc: Optional[SourceLocation] = None

	def finish(self) -> WhileStatement:
		return WhileStatement(
			_require(self.test, Kind.WHILE_STATEMENT, "test"),
			_require(self.body, Kind.WHILE_STATEMENT, "body"),
			loc=self.loc,
		)


@dataclass
class ForInStatementBuilder:
	left: Optional[Expression] = None
	right: Optional[Expression] = None
	body: Optional[BlockStatement] = None
	# for-each until a production says otherwise.
	each: bool = True
	loc: Optional[SourceLocation] = None

	def finish(self) -> ForInStatement:
		return ForInStatement(
			_require(self.left, Kind.FOR_IN_STATEMENT, "left"),
			_require(self.right, Kind.FOR_IN_STATEMENT, "right"),
			_require(self.body, Kind.FOR_IN_STATEMENT, "body"),
			each=self.each,
			loc=self.loc,
		)


@dataclass
class ArrayExpressionBuilder:
	elements: Optional[List[Expression]] = None
	loc: Optional[SourceLocation] = None

	def finish(self) -> ArrayExpression:
		return ArrayExpression(tuple(_require(self.elements, Kind.ARRAY_EXPRESSION, "elements")), loc=self.loc)


@dataclass
class AssignmentExpressionBuilder:
	operator: Optional[AssignmentOperator] = None
	left: Optional[Expression] = None
	right: Optional[Expression] = None
	loc: Optional[SourceLocation] = None

	def finish(self) -> AssignmentExpression:
		return AssignmentExpression(
			_require(self.operator, Kind.ASSIGNMENT_EXPRESSION, "operator"),
			_require(self.left, Kind.ASSIGNMENT_EXPRESSION, "left"),
			_require(self.right, Kind.ASSIGNMENT_EXPRESSION, "right"),
			loc=self.loc,
		)


@dataclass
class LogicalExpressionBuilder:
	operator: Optional[LogicalOperator] = None
	left: Optional[Expression] = None
	right: Optional[Expression] = None
	loc: Optional[SourceLocation] = None

	def finish(self) -> LogicalExpression:
		return LogicalExpression(
			_require(self.operator, Kind.LOGICAL_EXPRESSION, "operator"),
			_require(self.left, Kind.LOGICAL_EXPRESSION, "left"),
			_require(self.right, Kind.LOGICAL_EXPRESSION, "right"),
			loc=self.loc,
		)


@dataclass
class CallExpressionBuilder:
	callee: Optional[Expression] = None
	# None: argument list not reduced yet. Slots inside may be None (elided).
	arguments: Optional[List[Optional[Expression]]] = None
	loc: Optional[SourceLocation] = None

	def finish(self) -> CallExpression:
		return CallExpression(
			_require(self.callee, Kind.CALL_EXPRESSION, "callee"),
			tuple(_require(self.arguments, Kind.CALL_EXPRESSION, "arguments")),
			loc=self.loc,
		)


@dataclass
class BinaryExpressionBuilder:
	operator: Optional[BinaryOperator] = None
	left: Optional[Expression] = None
	right: Optional[Expression] = None
	loc: Optional[SourceLocation] = None

	def finish(self) -> BinaryExpression:
		return BinaryExpression(
			_require(self.operator, Kind.BINARY_EXPRESSION, "operator"),
			_require(self.left, Kind.BINARY_EXPRESSION, "left"),
			_require(self.right, Kind.BINARY_EXPRESSION, "right"),
			loc=self.loc,
		)


@dataclass
class UnaryExpressionBuilder:
	operator: Optional[UnaryOperator] = None
	argument: Optional[Expression] = None
	loc: Optional[SourceLocation] = None

	def finish(self) -> UnaryExpression:
		return UnaryExpression(
			_require(self.operator, Kind.UNARY_EXPRESSION, "operator"),
			_require(self.argument, Kind.UNARY_EXPRESSION, "argument"),
			loc=self.loc,
		)


__all__ = [
	"ArrayExpressionBuilder",
	"AssignmentExpressionBuilder",
	"BinaryExpressionBuilder",
	"BlockStatementBuilder",
	"CallExpressionBuilder",
	"ExpressionStatementBuilder",
	"ForInStatementBuilder",
	"FunctionBuilder",
	"IfStatementBuilder",
	"IncompleteNodeError",
	"LogicalExpressionBuilder",
	"ProgramBuilder",
	"ReturnStatementBuilder",
	"UnaryExpressionBuilder",
	"WhileStatementBuilder",
]
