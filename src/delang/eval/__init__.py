"""Evaluator helpers split by concern (expressions, blocks, functions)."""

__all__ = [
    "blocks",
    "common",
    "expr",
    "fn",
    "helpers",
]
