from __future__ import annotations

import dataclasses
from textwrap import dedent
from typing import List

import pytest

from tests.support.harness import TT, Parser, parse_source, tokenize
from delang.tree import BinaryOp, BinaryOperator, Let, Number, When, walk

SAMPLE_PROGRAMS: List[str] = [
    "let x be 5",
    "show 1 + 2 * 3 is greater than or equal 7",
    dedent(
        """\
        let limit be 10
        when limit is greater than 5 then
            show "big"
            when limit is equal to 10 then
                show "ten"
        otherwise
            show "small"
        define greet with who
            show who
        end
        greet("Ada")
        """
    ),
]


@pytest.mark.parametrize("source", SAMPLE_PROGRAMS)
def test_same_tokens_parse_to_equal_trees(source: str) -> None:
    tokens = tokenize(source)

    first = Parser(tokens).parse()
    second = Parser(tokens).parse()

    assert first == second
    assert first is not second
    assert hash(first) == hash(second)


def test_parser_does_not_consume_token_list() -> None:
    tokens = tokenize("show 1")
    before = list(tokens)
    Parser(tokens).parse()
    assert tokens == before


def test_let_x_be_5_shape() -> None:
    program = Parser(tokenize("let x be 5")).parse()
    assert program.statements == (Let("x", Number(5.0)),)


def test_nodes_are_immutable() -> None:
    program = parse_source("let x be 1 + 2")
    stmt = program.statements[0]

    with pytest.raises(dataclasses.FrozenInstanceError):
        stmt.identifier = "y"  # type: ignore[misc]

    assert isinstance(stmt.value, BinaryOp)
    with pytest.raises(dataclasses.FrozenInstanceError):
        stmt.value.operator = BinaryOperator.Subtract  # type: ignore[misc]


def test_blocks_are_tuples() -> None:
    stmt = parse_source("when 1 then\n    show 1\notherwise\n    show 2\n").statements[0]
    assert isinstance(stmt, When)
    assert isinstance(stmt.then_block, tuple)
    assert isinstance(stmt.otherwise_block, tuple)


def test_walk_visits_every_node() -> None:
    program = parse_source("let x be 1 + f(2)\nshow x")
    kinds = [type(node).__name__ for node in walk(program)]

    assert kinds == [
        "Program",
        "Let",
        "BinaryOp",
        "Number",
        "FunctionCall",
        "Number",
        "Show",
        "Identifier",
    ]


def test_operator_table_matches_comparator_tokens() -> None:
    relational = {op for op in BinaryOperator if op.is_relational}
    assert len(relational) == 6
    assert len(BinaryOperator) == 10
    for token_type in (TT.GT, TT.LT, TT.GTE, TT.LTE, TT.EQ, TT.NEQ):
        assert BinaryOperator.from_token(token_type) in relational
