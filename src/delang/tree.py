"""AST node classes produced by the parser and walked by the evaluator.

Nodes are frozen dataclasses holding tuples, so a parsed Program is immutable
and two parses of the same tokens compare equal by value.
"""
from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Iterator, Optional, Tuple, Union
from typing_extensions import TypeAlias

from .token_types import TT


class BinaryOperator(Enum):
    GreaterThan = '>'
    LessThan = '<'
    GreaterThanOrEqual = '>='
    LessThanOrEqual = '<='
    Equal = '=='
    NotEqual = '!='
    Add = '+'
    Subtract = '-'
    Multiply = '*'
    Divide = '/'

    @property
    def is_relational(self) -> bool:
        return self in _RELATIONAL

    @classmethod
    def from_token(cls, token_type: TT) -> BinaryOperator:
        return _TOKEN_OPERATORS[token_type]


_RELATIONAL = frozenset({
    BinaryOperator.GreaterThan,
    BinaryOperator.LessThan,
    BinaryOperator.GreaterThanOrEqual,
    BinaryOperator.LessThanOrEqual,
    BinaryOperator.Equal,
    BinaryOperator.NotEqual,
})

_TOKEN_OPERATORS = {
    TT.GT: BinaryOperator.GreaterThan,
    TT.LT: BinaryOperator.LessThan,
    TT.GTE: BinaryOperator.GreaterThanOrEqual,
    TT.LTE: BinaryOperator.LessThanOrEqual,
    TT.EQ: BinaryOperator.Equal,
    TT.NEQ: BinaryOperator.NotEqual,
    TT.PLUS: BinaryOperator.Add,
    TT.MINUS: BinaryOperator.Subtract,
    TT.STAR: BinaryOperator.Multiply,
    TT.SLASH: BinaryOperator.Divide,
}

# ---------- Expressions ----------

@dataclass(frozen=True)
class Number:
    value: float

@dataclass(frozen=True)
class String:
    value: str

@dataclass(frozen=True)
class Identifier:
    name: str

@dataclass(frozen=True)
class BinaryOp:
    left: Expression
    operator: BinaryOperator
    right: Expression

@dataclass(frozen=True)
class FunctionCall:
    name: str
    arguments: Tuple[Expression, ...] = ()

Expression: TypeAlias = Union[Number, String, Identifier, BinaryOp, FunctionCall]

# ---------- Statements ----------

@dataclass(frozen=True)
class Let:
    identifier: str
    value: Expression

@dataclass(frozen=True)
class Show:
    value: Expression

@dataclass(frozen=True)
class When:
    condition: Expression
    then_block: Tuple[Statement, ...]
    otherwise_block: Optional[Tuple[Statement, ...]] = None

@dataclass(frozen=True)
class FunctionDef:
    name: str
    parameters: Tuple[str, ...]
    body: Tuple[Statement, ...]

@dataclass(frozen=True)
class ExprStmt:
    """A bare expression evaluated for its side effects."""
    value: Expression

Statement: TypeAlias = Union[Let, Show, When, FunctionDef, ExprStmt]

@dataclass(frozen=True)
class Program:
    statements: Tuple[Statement, ...] = ()

    def __iter__(self) -> Iterator[Statement]:
        return iter(self.statements)

    def __len__(self) -> int:
        return len(self.statements)


Node: TypeAlias = Union[Program, Statement, Expression]


def walk(node: Node) -> Iterator[Node]:
    """Yield `node` and every node below it, depth first."""
    yield node

    match node:
        case Program(statements=stmts):
            for stmt in stmts:
                yield from walk(stmt)
        case Let(value=value) | Show(value=value) | ExprStmt(value=value):
            yield from walk(value)
        case When(condition=cond, then_block=then_block, otherwise_block=otherwise_block):
            yield from walk(cond)
            for stmt in then_block:
                yield from walk(stmt)
            for stmt in otherwise_block or ():
                yield from walk(stmt)
        case FunctionDef(body=body):
            for stmt in body:
                yield from walk(stmt)
        case BinaryOp(left=left, right=right):
            yield from walk(left)
            yield from walk(right)
        case FunctionCall(arguments=args):
            for arg in args:
                yield from walk(arg)
