from __future__ import annotations

import logging

from ..tree import FunctionCall, FunctionDef
from ..types import DePlaceholder, DeValue, Environment

logger = logging.getLogger(__name__)

def eval_fn_def(node: FunctionDef, env: Environment) -> None:
    """Record the definition; the body is kept on the tree and never run."""
    env.define_function(node.name, node.parameters)
    logger.debug(
        "registered function '%s' (%d params, %d body statements)",
        node.name, len(node.parameters), len(node.body),
    )

def eval_call(node: FunctionCall, env: Environment) -> DeValue:
    # Arguments are not evaluated.
    if node.name not in env.functions:
        logger.debug("call to undeclared function '%s'", node.name)
    return DePlaceholder(node.name)
