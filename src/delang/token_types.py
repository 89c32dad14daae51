"""
Token Types for the De lexer and parser

Shared between lexer and parser to avoid circular dependencies.
"""

from typing import Any
from dataclasses import dataclass
from enum import Enum, auto


class TT(Enum):
    """Token Types - mirrors grammar terminals"""

    # Literals
    NUMBER = auto()
    STRING = auto()
    IDENT = auto()

    # Keywords
    LET = auto()
    BE = auto()
    WHEN = auto()
    THEN = auto()
    OTHERWISE = auto()
    SHOW = auto()
    DEFINE = auto()
    WITH = auto()
    END = auto()

    # Comparison (lexed from natural-language phrases)
    GT = auto()
    LT = auto()
    GTE = auto()
    LTE = auto()
    EQ = auto()
    NEQ = auto()

    # Arithmetic
    PLUS = auto()
    MINUS = auto()
    STAR = auto()
    SLASH = auto()

    # Punctuation
    LPAR = auto()
    RPAR = auto()
    COMMA = auto()

    # Special
    NEWLINE = auto()
    INDENT = auto()
    DEDENT = auto()
    EOF = auto()


COMPARATORS = frozenset({TT.GT, TT.LT, TT.GTE, TT.LTE, TT.EQ, TT.NEQ})


@dataclass(frozen=True)
class Tok:
    """Token with position info"""

    type: TT
    value: Any
    line: int = 0
    column: int = 0

    def __repr__(self):
        return f"Tok({self.type.name}, {self.value!r}, {self.line}:{self.column})"
