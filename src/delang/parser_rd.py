"""
Recursive Descent Parser for De

Structure:
- Lexer: Token stream from source
- Parser: Recursive descent, one token of lookahead, no backtracking
- AST: frozen dataclasses from .tree

Grammar:
    program       := (statement NEWLINE*)* EOF
    statement     := let_stmt | show_stmt | when_stmt | define_stmt | expr_stmt
    let_stmt      := 'let' IDENT 'be' expression
    show_stmt     := 'show' expression
    when_stmt     := 'when' expression 'then' NEWLINE INDENT statement*
                     (DEDENT | 'otherwise' | EOF)
                     ['otherwise' NEWLINE INDENT statement* DEDENT]
    define_stmt   := 'define' IDENT ['with' IDENT*] NEWLINE INDENT statement*
                     ('end' | DEDENT)
    expression    := comparison
    comparison    := additive (COMPARATOR additive)*
    additive      := multiplicative (('+'|'-') multiplicative)*
    multiplicative:= primary (('*'|'/') primary)*
    primary       := NUMBER | STRING | '(' expression ')'
                   | IDENT ['(' [expression (',' expression)*] ')']
"""

import logging
from typing import List, Optional, Tuple

from .lexer_rd import tokenize
from .token_types import COMPARATORS, TT, Tok
from .tree import (
    BinaryOp,
    BinaryOperator,
    Expression,
    ExprStmt,
    FunctionCall,
    FunctionDef,
    Identifier,
    Let,
    Number,
    Program,
    Show,
    Statement,
    String,
    When,
)

logger = logging.getLogger(__name__)

# ============================================================================
# Parser
# ============================================================================

class ParseError(Exception):
    """Parse error with position info"""
    def __init__(self, message: str, token: Optional[Tok] = None):
        self.message = message
        self.token = token
        self.line = token.line if token else None
        self.column = token.column if token else None
        super().__init__(
            f"{message} at line {token.line}, col {token.column}" if token else message
        )

class MissingIdentifierError(ParseError):
    pass

class Parser:
    """
    Recursive descent parser for De.

    Expression precedence (lowest to highest):
    1. compare (phrase comparators, left-associative chain)
    2. add (+, -)
    3. mul (*, /)
    4. primary (literals, identifiers, calls, parens)
    """

    def __init__(self, tokens: List[Tok]):
        self.tokens = tokens
        self.pos = 0
        self.current = tokens[0] if tokens else Tok(TT.EOF, None, 0, 0)

    # ========================================================================
    # Token Navigation
    # ========================================================================

    def advance(self) -> Tok:
        """Consume current token and move to next"""
        prev = self.current
        self.pos += 1
        if self.pos < len(self.tokens):
            self.current = self.tokens[self.pos]
        else:
            self.current = Tok(TT.EOF, None, prev.line, prev.column)
        return prev

    def check(self, *types: TT) -> bool:
        """Check if current token matches any of the given types"""
        return self.current.type in types

    def match(self, *types: TT) -> bool:
        """Check and consume if current token matches"""
        if self.check(*types):
            self.advance()
            return True
        return False

    def expect(self, token_type: TT, message: Optional[str] = None) -> Tok:
        """Consume token of expected type or raise error"""
        if not self.check(token_type):
            msg = message or f"Expected {token_type.name}, got {self.current.type.name}"
            raise ParseError(msg, self.current)
        return self.advance()

    def expect_ident(self, context: str) -> str:
        if not self.check(TT.IDENT):
            raise MissingIdentifierError(
                f"Expected IDENT after '{context}', got {self.current.type.name}",
                self.current,
            )
        return self.advance().value

    def skip_newlines(self):
        while self.match(TT.NEWLINE):
            pass

    # ========================================================================
    # Top-Level Parsing
    # ========================================================================

    def parse(self) -> Program:
        """Parse entire program"""
        stmts: List[Statement] = []
        self.skip_newlines()

        while not self.check(TT.EOF):
            stmts.append(self.parse_statement())
            self.skip_newlines()

        logger.debug("parsed %d top-level statements", len(stmts))
        return Program(tuple(stmts))

    # ========================================================================
    # Statements
    # ========================================================================

    def parse_statement(self) -> Statement:
        if self.check(TT.LET):
            return self.parse_let_stmt()
        if self.check(TT.SHOW):
            return self.parse_show_stmt()
        if self.check(TT.WHEN):
            return self.parse_when_stmt()
        if self.check(TT.DEFINE):
            return self.parse_define_stmt()

        return ExprStmt(self.parse_expression())

    def parse_let_stmt(self) -> Let:
        """let_stmt := 'let' IDENT 'be' expression"""
        self.expect(TT.LET)
        name = self.expect_ident('let')
        self.expect(TT.BE)
        return Let(name, self.parse_expression())

    def parse_show_stmt(self) -> Show:
        self.expect(TT.SHOW)
        return Show(self.parse_expression())

    def parse_when_stmt(self) -> When:
        """
        when COND then NEWLINE INDENT stmts (DEDENT | otherwise | EOF)
        [otherwise NEWLINE INDENT stmts DEDENT]
        """
        self.expect(TT.WHEN)
        condition = self.parse_expression()
        self.expect(TT.THEN)
        then_block = self.parse_block_body((TT.DEDENT, TT.OTHERWISE, TT.EOF))
        self.match(TT.DEDENT)

        otherwise_block: Optional[Tuple[Statement, ...]] = None
        if self.match(TT.OTHERWISE):
            otherwise_block = self.parse_block_body((TT.DEDENT, TT.EOF))
            self.expect(TT.DEDENT)

        return When(condition, then_block, otherwise_block)

    def parse_define_stmt(self) -> FunctionDef:
        """define NAME [with PARAM*] NEWLINE INDENT stmts (end | DEDENT)"""
        self.expect(TT.DEFINE)
        name = self.expect_ident('define')

        params: List[str] = []
        if self.match(TT.WITH):
            while self.check(TT.IDENT):
                params.append(self.advance().value)
                self.match(TT.COMMA)

        body = self.parse_block_body((TT.END, TT.DEDENT, TT.EOF))

        if self.match(TT.END):
            # `end` written inside the indented body: swallow the block's DEDENT
            self.skip_newlines()
            self.match(TT.DEDENT)
        else:
            self.expect(TT.DEDENT)
            self.match(TT.END)

        return FunctionDef(name, tuple(params), body)

    def parse_block_body(self, closers: Tuple[TT, ...]) -> Tuple[Statement, ...]:
        """NEWLINE INDENT statement*, stopping before any of `closers`."""
        self.expect(TT.NEWLINE)
        self.skip_newlines()
        self.expect(TT.INDENT)

        stmts: List[Statement] = []
        self.skip_newlines()

        while not self.check(*closers):
            stmts.append(self.parse_statement())
            self.skip_newlines()

        return tuple(stmts)

    # ========================================================================
    # Expressions
    # ========================================================================

    def parse_expression(self) -> Expression:
        return self.parse_comparison()

    def parse_comparison(self) -> Expression:
        left = self.parse_additive()

        while self.current.type in COMPARATORS:
            op = BinaryOperator.from_token(self.advance().type)
            left = BinaryOp(left, op, self.parse_additive())

        return left

    def parse_additive(self) -> Expression:
        left = self.parse_multiplicative()

        while self.check(TT.PLUS, TT.MINUS):
            op = BinaryOperator.from_token(self.advance().type)
            left = BinaryOp(left, op, self.parse_multiplicative())

        return left

    def parse_multiplicative(self) -> Expression:
        left = self.parse_primary()

        while self.check(TT.STAR, TT.SLASH):
            op = BinaryOperator.from_token(self.advance().type)
            left = BinaryOp(left, op, self.parse_primary())

        return left

    def parse_primary(self) -> Expression:
        tok = self.current

        if tok.type == TT.NUMBER:
            self.advance()
            return Number(tok.value)

        if tok.type == TT.STRING:
            self.advance()
            return String(tok.value)

        if tok.type == TT.LPAR:
            self.advance()
            expr = self.parse_expression()
            self.expect(TT.RPAR)
            return expr

        if tok.type == TT.IDENT:
            self.advance()
            if self.match(TT.LPAR):
                return FunctionCall(tok.value, self.parse_call_args())
            return Identifier(tok.value)

        raise ParseError(f"Expected expression, got {tok.type.name}", tok)

    def parse_call_args(self) -> Tuple[Expression, ...]:
        """Arguments after '(' up to and including ')'."""
        args: List[Expression] = []

        if not self.check(TT.RPAR):
            args.append(self.parse_expression())
            while self.match(TT.COMMA):
                args.append(self.parse_expression())

        self.expect(TT.RPAR)
        return tuple(args)

# ============================================================================
# Convenience
# ============================================================================

def parse_source(source: str, strict_numbers: bool = False) -> Program:
    """Tokenize and parse `source` into a Program."""
    return Parser(tokenize(source, strict_numbers=strict_numbers)).parse()
