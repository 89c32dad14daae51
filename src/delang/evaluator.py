from __future__ import annotations

import logging
import sys
from dataclasses import dataclass, field
from typing import Callable, Optional, TextIO

from .tree import (
    BinaryOp,
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
from .types import DeNumber, DeRuntimeError, DeText, DeValue, Environment
from .utils import Settings

from .eval.blocks import block_scope, exec_block
from .eval.common import stringify
from .eval.expr import eval_binary, eval_identifier
from .eval.fn import eval_call, eval_fn_def
from .eval.helpers import is_truthy

logger = logging.getLogger(__name__)

@dataclass
class Context:
    """State owned by one evaluation run."""
    env: Environment = field(default_factory=Environment)
    out: Optional[TextIO] = None
    settings: Settings = field(default_factory=Settings)

    def write_line(self, text: str) -> None:
        out = self.out if self.out is not None else sys.stdout
        out.write(text + "\n")

# ---------------- Public API ----------------

def eval_program(program: Program, ctx: Optional[Context] = None) -> Environment:
    """Execute every statement of `program`, returning the environment it built."""
    if ctx is None:
        ctx = Context()

    exec_block(program.statements, ctx, exec_stmt)
    logger.debug(
        "ran %d statements; %d bindings, %d functions",
        len(program), len(ctx.env.bindings()), len(ctx.env.functions),
    )
    return ctx.env

# ---------------- Statements ----------------

def exec_stmt(stmt: Statement, ctx: Context) -> None:
    handler = _STMT_DISPATCH.get(type(stmt))
    if handler is None:
        raise DeRuntimeError(f"Unknown statement: {type(stmt).__name__}")
    handler(stmt, ctx)

def _exec_let(stmt: Let, ctx: Context) -> None:
    ctx.env.set(stmt.identifier, eval_expr(stmt.value, ctx.env))

def _exec_show(stmt: Show, ctx: Context) -> None:
    ctx.write_line(stringify(eval_expr(stmt.value, ctx.env)))

def _exec_when(stmt: When, ctx: Context) -> None:
    if is_truthy(eval_expr(stmt.condition, ctx.env)):
        block = stmt.then_block
    elif stmt.otherwise_block is not None:
        block = stmt.otherwise_block
    else:
        return

    with block_scope(ctx.env, ctx.settings.block_scopes):
        exec_block(block, ctx, exec_stmt)

def _exec_define(stmt: FunctionDef, ctx: Context) -> None:
    eval_fn_def(stmt, ctx.env)

def _exec_expr_stmt(stmt: ExprStmt, ctx: Context) -> None:
    eval_expr(stmt.value, ctx.env)

_STMT_DISPATCH: dict[type, Callable[[Statement, Context], None]] = {
    Let: _exec_let,
    Show: _exec_show,
    When: _exec_when,
    FunctionDef: _exec_define,
    ExprStmt: _exec_expr_stmt,
}

# ---------------- Expressions ----------------

def eval_expr(node: Expression, env: Environment) -> DeValue:
    handler = _EXPR_DISPATCH.get(type(node))
    if handler is None:
        raise DeRuntimeError(f"Unknown expression: {type(node).__name__}")
    return handler(node, env)

_EXPR_DISPATCH: dict[type, Callable[[Expression, Environment], DeValue]] = {
    Number: lambda n, _: DeNumber(n.value),
    String: lambda n, _: DeText(n.value),
    Identifier: eval_identifier,
    BinaryOp: lambda n, env: eval_binary(n, env, eval_expr),
    FunctionCall: eval_call,
}
