from __future__ import annotations

import logging
import operator
from typing import Callable, Dict

from ..tree import BinaryOp, BinaryOperator, Expression, Identifier
from ..types import DeDivisionByZeroError, DeText, DeUndefined, DeValue, Environment
from .common import as_number, boolean, number, stringify

logger = logging.getLogger(__name__)

EvalFunc = Callable[[Expression, Environment], DeValue]

_RELATIONAL: Dict[BinaryOperator, Callable[[float, float], bool]] = {
    BinaryOperator.GreaterThan: operator.gt,
    BinaryOperator.LessThan: operator.lt,
    BinaryOperator.GreaterThanOrEqual: operator.ge,
    BinaryOperator.LessThanOrEqual: operator.le,
    BinaryOperator.Equal: operator.eq,
    BinaryOperator.NotEqual: operator.ne,
}

_ARITHMETIC: Dict[BinaryOperator, Callable[[float, float], float]] = {
    BinaryOperator.Add: operator.add,
    BinaryOperator.Subtract: operator.sub,
    BinaryOperator.Multiply: operator.mul,
}

def eval_identifier(node: Identifier, env: Environment) -> DeValue:
    val = env.get(node.name)

    if val is None:
        logger.debug("identifier '%s' is not bound", node.name)
        return DeUndefined(node.name)

    return val

def eval_binary(node: BinaryOp, env: Environment, eval_func: EvalFunc) -> DeValue:
    lhs = eval_func(node.left, env)
    rhs = eval_func(node.right, env)
    return apply_binary_operator(node.operator, lhs, rhs)

def apply_binary_operator(op: BinaryOperator, lhs: DeValue, rhs: DeValue) -> DeValue:
    a = as_number(lhs)
    b = as_number(rhs)

    if a is None or b is None:
        return DeText(f"({stringify(lhs)} {op.name} {stringify(rhs)})")

    if op.is_relational:
        return boolean(_RELATIONAL[op](a, b))

    if op is BinaryOperator.Divide:
        if b == 0:
            raise DeDivisionByZeroError()
        return number(a / b)

    return number(_ARITHMETIC[op](a, b))
