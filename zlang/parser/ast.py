# vim: set noexpandtab: -*- indent-tabs-mode: t -*-
"""
zlang AST.

Finished, immutable tree entities produced by the parser. Every concrete
class is one variant of a closed union (`AnyStatement`, `AnyExpression`) and
its kind tag is a class-level constant, so a node's tag can never disagree
with its shape. Consumers dispatch on the class, never on `kind`; the tag is
only there for serialization and debugging.

Nodes under construction live in `zlang.parser.builders`; an entity of this
module is always complete. The only fields that may be absent are the
legitimately optional grammar slots: `Function.id`, `Property.default`,
`IfStatement.alternate`, `ReturnStatement.argument` and individual
`CallExpression.arguments` slots.

Pipeline placement:
  source -> tokens (lexer) -> lark tree (grammar) -> AST (this file)
"""

from __future__ import annotations

import enum
from dataclasses import dataclass, field, fields
from typing import ClassVar, Iterator, Optional, Tuple, Union

from zlang.core.location import SourceLocation


class Kind(enum.Enum):
	"""Closed set of node shapes. Values are the shape names."""

	PROGRAM = "Program"
	FUNCTION = "Function"
	EMPTY_STATEMENT = "EmptyStatement"
	BLOCK_STATEMENT = "BlockStatement"
	EXPRESSION_STATEMENT = "ExpressionStatement"
	IF_STATEMENT = "IfStatement"
	RETURN_STATEMENT = "ReturnStatement"
	WHILE_STATEMENT = "WhileStatement"
	FOR_IN_STATEMENT = "ForInStatement"
	ARRAY_EXPRESSION = "ArrayExpression"
	ASSIGNMENT_EXPRESSION = "AssignmentExpression"
	LOGICAL_EXPRESSION = "LogicalExpression"
	CALL_EXPRESSION = "CallExpression"
	BINARY_EXPRESSION = "BinaryExpression"
	UNARY_EXPRESSION = "UnaryExpression"
	ASSIGNMENT_OPERATOR = "AssignmentOperator"
	IDENTIFIER = "Identifier"
	LITERAL = "Literal"
	LOGICAL_OPERATOR = "LogicalOperator"
	PROPERTY = "Property"
	UNARY_OPERATOR = "UnaryOperator"
	BINARY_OPERATOR = "BinaryOperator"


# Operator families. Each is a flat value set; behaviour (lexemes, printing)
# lives in zlang.parser.operators so every consumer matches totally.


class AssignmentOperator(enum.Enum):
	ASSIGN = enum.auto()
	PLUS_ASSIGN = enum.auto()
	MINUS_ASSIGN = enum.auto()
	TIMES_ASSIGN = enum.auto()
	DIV_ASSIGN = enum.auto()
	MOD_ASSIGN = enum.auto()
	LSHIFT_ASSIGN = enum.auto()
	RSHIFT_ASSIGN = enum.auto()
	OR_ASSIGN = enum.auto()
	XOR_ASSIGN = enum.auto()
	AND_ASSIGN = enum.auto()

	@property
	def kind(self) -> Kind:
		return Kind.ASSIGNMENT_OPERATOR


class LogicalOperator(enum.Enum):
	LOGICAL_AND = enum.auto()
	LOGICAL_OR = enum.auto()

	@property
	def kind(self) -> Kind:
		return Kind.LOGICAL_OPERATOR


class UnaryOperator(enum.Enum):
	NOT = enum.auto()
	XOR = enum.auto()  # bitwise complement
	TYPEOF = enum.auto()

	@property
	def kind(self) -> Kind:
		return Kind.UNARY_OPERATOR


class BinaryOperator(enum.Enum):
	ADD = enum.auto()
	MINUS = enum.auto()
	TIMES = enum.auto()
	DIV = enum.auto()
	MOD = enum.auto()
	BITWISE_AND = enum.auto()
	BITWISE_OR = enum.auto()
	BITWISE_XOR = enum.auto()
	EQUAL = enum.auto()
	NOT_EQUAL = enum.auto()
	GREATER = enum.auto()
	GREATER_EQUAL = enum.auto()
	LESS = enum.auto()
	LESS_EQUAL = enum.auto()
	BITWISE_LSHIFT = enum.auto()
	BITWISE_RSHIFT = enum.auto()

	@property
	def kind(self) -> Kind:
		return Kind.BINARY_OPERATOR


AnyOperator = Union[AssignmentOperator, LogicalOperator, UnaryOperator, BinaryOperator]


# Base classes


@dataclass(frozen=True, slots=True)
class Node:
	"""
	Base class for all AST entities.

	`loc` is keyword-only and excluded from equality: two trees with the same
	structure compare equal wherever they were parsed.

	`Node`, `Statement` and `Expression` are abstract: only classes that bind
	a `kind` tag can be instantiated.
	"""

	kind: ClassVar[Kind]

	loc: Optional[SourceLocation] = field(default=None, compare=False, repr=False, kw_only=True)

	def __post_init__(self) -> None:
		if getattr(type(self), "kind", None) is None:
			raise TypeError(f"{type(self).__name__} is an abstract AST base")


@dataclass(frozen=True, slots=True)
class Statement(Node):
	"""Base class for statements; never instantiated."""


@dataclass(frozen=True, slots=True)
class Expression(Node):
	"""Base class for expressions; never instantiated."""


# Leaves


@dataclass(frozen=True, slots=True)
class Identifier(Expression):
	"""Name reference or binding."""

	kind = Kind.IDENTIFIER

	name: str


class LiteralType(enum.Enum):
	STRING = enum.auto()
	BOOLEAN = enum.auto()
	NUMBER = enum.auto()
	NONE = enum.auto()


LiteralValue = Union[str, bool, float, None]


@dataclass(frozen=True, slots=True)
class Literal(Expression):
	"""
	Literal value: string, boolean, number (double precision) or none.

	Use the named constructors; `value` must already be one of the four
	payload types (a plain int is rejected so `1` and `1.0` cannot diverge).
	"""

	kind = Kind.LITERAL

	value: LiteralValue

	def __post_init__(self) -> None:
		if self.value is None or isinstance(self.value, (str, bool, float)):
			return
		raise TypeError(f"invalid literal payload {self.value!r} ({type(self.value).__name__})")

	def __eq__(self, other: object) -> bool:
		# True == 1.0 in Python; literals of different types never compare equal.
		if not isinstance(other, Literal):
			return NotImplemented
		return literal_type(self) is literal_type(other) and self.value == other.value

	@classmethod
	def string(cls, value: str, *, loc: Optional[SourceLocation] = None) -> "Literal":
		return cls(value, loc=loc)

	@classmethod
	def boolean(cls, value: bool, *, loc: Optional[SourceLocation] = None) -> "Literal":
		return cls(bool(value), loc=loc)

	@classmethod
	def number(cls, value: float, *, loc: Optional[SourceLocation] = None) -> "Literal":
		return cls(float(value), loc=loc)

	@classmethod
	def none(cls, *, loc: Optional[SourceLocation] = None) -> "Literal":
		return cls(None, loc=loc)


def literal_type(lit: Literal) -> LiteralType:
	"""Classify a literal's payload. bool is tested before float on purpose."""
	value = lit.value
	if value is None:
		return LiteralType.NONE
	if isinstance(value, bool):
		return LiteralType.BOOLEAN
	if isinstance(value, str):
		return LiteralType.STRING
	return LiteralType.NUMBER


@dataclass(frozen=True, slots=True)
class Property(Node):
	"""Formal parameter binding, with an optional default value."""

	kind = Kind.PROPERTY

	id: Identifier
	default: Optional[Expression] = None


# Statements


@dataclass(frozen=True, slots=True)
class EmptyStatement(Statement):
	"""Lone `;`."""

	kind = Kind.EMPTY_STATEMENT


@dataclass(frozen=True, slots=True)
class BlockStatement(Statement):
	"""Braced statement list: `{ ... }`."""

	kind = Kind.BLOCK_STATEMENT

	body: Tuple[Statement, ...] = ()


@dataclass(frozen=True, slots=True)
class ExpressionStatement(Statement):
	kind = Kind.EXPRESSION_STATEMENT

	expression: Expression


@dataclass(frozen=True, slots=True)
class IfStatement(Statement):
	"""`if (test) consequent [else alternate]`; no alternate means no else-branch."""

	kind = Kind.IF_STATEMENT

	test: Expression
	consequent: Statement
	alternate: Optional[Statement] = None


@dataclass(frozen=True, slots=True)
class ReturnStatement(Statement):
	"""`return [argument];`; no argument is a bare return."""

	kind = Kind.RETURN_STATEMENT

	argument: Optional[Expression] = None


@dataclass(frozen=True, slots=True)
class WhileStatement(Statement):
	kind = Kind.WHILE_STATEMENT

	test: Expression
	body: BlockStatement


@dataclass(frozen=True, slots=True)
class ForInStatement(Statement):
	"""
	`for each (left in right) body` (each=True) or `for (left in right) body`
	(each=False, classic for-in over keys).
	"""

	kind = Kind.FOR_IN_STATEMENT

	left: Expression
	right: Expression
	body: BlockStatement
	each: bool = True


# Expressions


@dataclass(frozen=True, slots=True)
class ArrayExpression(Expression):
	"""Array literal: `[a, b, c]`."""

	kind = Kind.ARRAY_EXPRESSION

	elements: Tuple[Expression, ...] = ()


@dataclass(frozen=True, slots=True)
class AssignmentExpression(Expression):
	kind = Kind.ASSIGNMENT_EXPRESSION

	operator: AssignmentOperator
	left: Expression
	right: Expression


@dataclass(frozen=True, slots=True)
class LogicalExpression(Expression):
	kind = Kind.LOGICAL_EXPRESSION

	operator: LogicalOperator
	left: Expression
	right: Expression


@dataclass(frozen=True, slots=True)
class CallExpression(Expression):
	"""
	Call: `callee(arg, ...)`.

	Argument slots are individually optional: `f(a, , b)` keeps the elided
	middle slot as None at its position. `f()` has no slots.
	"""

	kind = Kind.CALL_EXPRESSION

	callee: Expression
	arguments: Tuple[Optional[Expression], ...] = ()


@dataclass(frozen=True, slots=True)
class BinaryExpression(Expression):
	kind = Kind.BINARY_EXPRESSION

	operator: BinaryOperator
	left: Expression
	right: Expression


@dataclass(frozen=True, slots=True)
class UnaryExpression(Expression):
	"""Prefix operator application: `!x`, `^x`, `typeof x`."""

	kind = Kind.UNARY_EXPRESSION

	operator: UnaryOperator
	argument: Expression


@dataclass(frozen=True, slots=True)
class Function(Expression):
	"""Function expression: `function [id](params) { body }`."""

	kind = Kind.FUNCTION

	params: Tuple[Property, ...]
	body: BlockStatement
	id: Optional[Identifier] = None


@dataclass(frozen=True, slots=True)
class Program(Node):
	"""Root of a compiled unit; statements in source order."""

	kind = Kind.PROGRAM

	body: Tuple[Statement, ...] = ()


AnyStatement = Union[
	EmptyStatement,
	BlockStatement,
	ExpressionStatement,
	IfStatement,
	ReturnStatement,
	WhileStatement,
	ForInStatement,
]

AnyExpression = Union[
	ArrayExpression,
	AssignmentExpression,
	LogicalExpression,
	CallExpression,
	BinaryExpression,
	UnaryExpression,
	Identifier,
	Literal,
	Function,
]

AnyNode = Union[Program, Property, AnyStatement, AnyExpression]

STATEMENT_TYPES: Tuple[type, ...] = AnyStatement.__args__
EXPRESSION_TYPES: Tuple[type, ...] = AnyExpression.__args__
NODE_TYPES: Tuple[type, ...] = (Program, Property) + STATEMENT_TYPES + EXPRESSION_TYPES
OPERATOR_TYPES: Tuple[type, ...] = AnyOperator.__args__


def kind_of(obj: Union[AnyNode, AnyOperator]) -> Kind:
	"""Return the kind tag of an entity or operator value."""
	return obj.kind


def iter_child_nodes(node: Node) -> Iterator[Node]:
	"""
	Yield the direct child entities of `node` in field order.

	Absent optional slots (None) are skipped; operators and literal payloads
	are not nodes and are never yielded.
	"""
	for f in fields(node):
		if f.name == "loc":
			continue
		value = getattr(node, f.name)
		if isinstance(value, Node):
			yield value
		elif isinstance(value, tuple):
			for item in value:
				if isinstance(item, Node):
					yield item


def walk(node: Node) -> Iterator[Node]:
	"""Yield `node` and all of its descendants, depth-first, pre-order."""
	stack = [node]
	while stack:
		current = stack.pop()
		yield current
		stack.extend(reversed(list(iter_child_nodes(current))))


__all__ = [
	"AnyExpression",
	"AnyNode",
	"AnyOperator",
	"AnyStatement",
	"ArrayExpression",
	"AssignmentExpression",
	"AssignmentOperator",
	"BinaryExpression",
	"BinaryOperator",
	"BlockStatement",
	"CallExpression",
	"EXPRESSION_TYPES",
	"EmptyStatement",
	"Expression",
	"ExpressionStatement",
	"ForInStatement",
	"Function",
	"Identifier",
	"IfStatement",
	"Kind",
	"Literal",
	"LiteralType",
	"LogicalExpression",
	"LogicalOperator",
	"NODE_TYPES",
	"Node",
	"OPERATOR_TYPES",
	"Program",
	"Property",
	"ReturnStatement",
	"STATEMENT_TYPES",
	"Statement",
	"UnaryExpression",
	"UnaryOperator",
	"WhileStatement",
	"iter_child_nodes",
	"kind_of",
	"literal_type",
	"walk",
]
