from __future__ import annotations

from contextlib import contextmanager
from typing import Callable, Iterator, Sequence, TypeVar

from ..tree import Statement
from ..types import Environment

C = TypeVar("C")
ExecFunc = Callable[[Statement, C], None]

@contextmanager
def block_scope(env: Environment, enabled: bool) -> Iterator[None]:
    """Push a binding frame for the duration of a block when scoping is on."""
    if not enabled:
        yield
        return

    env.push_frame()
    try:
        yield
    finally:
        env.pop_frame()

def exec_block(stmts: Sequence[Statement], ctx: C, exec_func: ExecFunc) -> None:
    """Run statements in order; the first failure propagates."""
    for stmt in stmts:
        exec_func(stmt, ctx)
