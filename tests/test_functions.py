from __future__ import annotations

from textwrap import dedent

from tests.support.harness import DePlaceholder, run_lines, run_program


def test_define_registers_name_and_params() -> None:
    result = run_program("define greet with name, greeting\n    show greeting\nend\n")

    info = result.env.functions["greet"]
    assert info.name == "greet"
    assert info.params == ("name", "greeting")
    assert result.lines == []


def test_define_body_never_runs() -> None:
    source = dedent(
        """\
        define noisy
            show "inside"
            let leaked be 1
        noisy()
        show leaked
        """
    )
    assert run_lines(source) == ["<undefined: leaked>"]


def test_call_yields_placeholder() -> None:
    source = dedent(
        """\
        define greet with name
            show name
        end
        show greet("Ada")
        """
    )
    assert run_lines(source) == ["<function call: greet>"]


def test_call_arguments_are_not_evaluated() -> None:
    assert run_lines("show f(1 / 0)") == ["<function call: f>"]


def test_undeclared_call_still_yields_placeholder() -> None:
    result = run_program("let r be mystery(1, 2)")
    assert result.env.get("r") == DePlaceholder("mystery")
    assert "mystery" not in result.env.functions


def test_redefinition_replaces_registry_entry() -> None:
    source = "define f with a\n    show a\ndefine f with a b\n    show b\n"
    result = run_program(source)
    assert result.env.functions["f"].params == ("a", "b")


def test_expression_statement_discards_value() -> None:
    assert run_lines("1 + 2\nlog(3)\nshow 4") == ["4"]
