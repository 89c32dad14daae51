from __future__ import annotations

import pytest

from tests.support.harness import (
    InvalidEscapeError,
    UnterminatedStringError,
    run_failure,
    run_program,
)

SHOW_CASES = [
    pytest.param('show "hello"', "hello\n", id="plain"),
    pytest.param('show ""', "\n", id="empty"),
    pytest.param(r'show "a\tb"', "a\tb\n", id="tab"),
    pytest.param(r'show "one\ntwo"', "one\ntwo\n", id="newline"),
    pytest.param(r'show "say \"hi\""', 'say "hi"\n', id="quotes"),
    pytest.param(r'show "C:\\temp"', "C:\\temp\n", id="backslash"),
    pytest.param('show "is greater than"', "is greater than\n", id="phrase-inside-text"),
    pytest.param('show "let x be 1"', "let x be 1\n", id="keywords-inside-text"),
]


@pytest.mark.parametrize("source, expected", SHOW_CASES)
def test_show_renders_text_verbatim(source: str, expected: str) -> None:
    result = run_program(source)
    assert "\n".join(result.lines) + "\n" == expected


def test_text_binding_roundtrip() -> None:
    result = run_program('let name be "Ada"\nshow name')
    assert result.lines == ["Ada"]


def test_unterminated_text_fails_before_any_output() -> None:
    lines, err = run_failure('show "ok"\nshow "abc', UnterminatedStringError)
    assert lines == []
    assert err.line == 2


def test_invalid_escape_fails_before_any_output() -> None:
    lines, _ = run_failure('show 1\nshow "bad \\x escape"', InvalidEscapeError)
    assert lines == []
