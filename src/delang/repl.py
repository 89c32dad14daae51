"""Interactive REPL for De, powered by prompt_toolkit."""

from __future__ import annotations

import os
import re
import sys
import traceback
from typing import Callable

from prompt_toolkit import PromptSession
from prompt_toolkit.completion import Completer, Completion
from prompt_toolkit.history import InMemoryHistory
from prompt_toolkit.key_binding import KeyBindings
from prompt_toolkit.shortcuts import clear

from .lexer_rd import TAB_WIDTH, LexError, tokenize
from .repl_highlight import DeLexer
from .runner import PROGRAM_ERRORS, repl_eval
from .token_types import TT
from .types import Environment
from .utils import ENV_DEBUG_PY_TRACE, Settings, debug_py_trace_enabled

# Zero-width and invisible characters to strip from input.
_INVISIBLE_RE = re.compile("[\u200b\u200c\u200d\ufeff\u00a0\r]")

_LAYOUT = {TT.NEWLINE, TT.INDENT, TT.DEDENT, TT.EOF}
_ON_WORDS = {"on", "1", "true", "yes"}
_OFF_WORDS = {"off", "0", "false", "no"}


def _is_block_header(line: str) -> bool:
    """Return True if *line* opens an indented block."""
    try:
        tokens = [tok for tok in tokenize(line) if tok.type not in _LAYOUT]
    except LexError:
        return False

    if not tokens:
        return False

    if tokens[0].type == TT.DEFINE:
        return True

    return tokens[-1].type in (TT.THEN, TT.OTHERWISE)


def _cmd_clear(arg: str, env_box: list[Environment]) -> None:
    clear()


def _cmd_py_traceback(arg: str, env_box: list[Environment]) -> None:
    word = arg.lower()
    if word in _ON_WORDS:
        enable = True
    elif word in _OFF_WORDS:
        enable = False
    elif not word:
        enable = not debug_py_trace_enabled()
    else:
        print("Usage: /py-traceback [on|off]", file=sys.stderr)
        return

    if enable:
        os.environ[ENV_DEBUG_PY_TRACE] = "1"
    else:
        os.environ.pop(ENV_DEBUG_PY_TRACE, None)
    print(f"Python traceback: {'on' if enable else 'off'}")


def _cmd_reset(arg: str, env_box: list[Environment]) -> None:
    env_box[0] = Environment()
    print("Environment reset.")


# name => (handler, description shown by the completer)
_SLASH_CMDS: dict[str, tuple[Callable[[str, list[Environment]], None], str]] = {
    "/clear": (_cmd_clear, "Clear the terminal screen"),
    "/py-traceback": (_cmd_py_traceback, "Toggle Python traceback on errors [on|off]"),
    "/reset": (_cmd_reset, "Drop every binding and function"),
}


class _SlashCompleter(Completer):
    """Complete slash command names typed at the start of an entry."""

    def get_completions(self, document, complete_event):
        text = document.text_before_cursor
        if not text.startswith("/"):
            return

        for name, (_, desc) in _SLASH_CMDS.items():
            if name.startswith(text):
                yield Completion(name, start_position=-len(text), display_meta=desc)


def _handle_slash(line: str, env_box: list[Environment]) -> bool:
    """Run a slash command. Returns False when *line* is De source."""
    name, _, arg = line.strip().partition(" ")
    if not name.startswith("/"):
        return False

    entry = _SLASH_CMDS.get(name)
    if entry is None:
        print(f"Unknown command: {name}", file=sys.stderr)
        return True

    handler, _ = entry
    handler(arg.strip(), env_box)
    return True


def _normalize(text: str) -> str:
    return _INVISIBLE_RE.sub("", text)


def _leading_width(line: str) -> int:
    return len(line) - len(line.lstrip(" \t"))


def _compute_indent(text: str) -> str:
    """Indent for the line after *text*: one level deeper after a block header."""
    last = text.rsplit("\n", 1)[-1]
    if not last.strip():
        return ""

    width = _leading_width(last)
    if _is_block_header(last):
        width += TAB_WIDTH
    return " " * width


def _accept_or_continue(buf) -> None:
    """Enter key: submit a complete entry, otherwise open the next line.

    A single line is complete unless it is a block header. A multi-line entry
    is complete once its last line is left blank.
    """
    text = buf.text
    lines = text.split("\n")

    if len(lines) == 1 and not _is_block_header(text):
        buf.validate_and_handle()
        return

    if len(lines) > 1 and not lines[-1].strip():
        buf.text = "\n".join(lines[:-1])
        buf.cursor_position = len(buf.text)
        buf.validate_and_handle()
        return

    buf.insert_text("\n" + _compute_indent(text))


def _build_session() -> PromptSession:
    keys = KeyBindings()

    @keys.add("enter")
    def _(event):
        _accept_or_continue(event.app.current_buffer)

    return PromptSession(
        history=InMemoryHistory(),
        lexer=DeLexer(),
        completer=_SlashCompleter(),
        complete_while_typing=True,
        key_bindings=keys,
        multiline=True,
        prompt_continuation="... ",
    )


def _run_entry(text: str, env: Environment) -> None:
    try:
        repl_eval(text, env, settings=Settings.from_env())
    except PROGRAM_ERRORS as exc:
        print(f"Error: {exc}", file=sys.stderr)
        if debug_py_trace_enabled():
            traceback.print_exception(exc, file=sys.stderr)


def repl() -> None:
    # Boxed so /reset can replace the environment in place.
    env_box: list[Environment] = [Environment()]
    session = _build_session()

    print("de repl - Ctrl-D to exit, / for commands")

    while True:
        try:
            entry = _normalize(session.prompt("de> "))
        except KeyboardInterrupt:
            print("KeyboardInterrupt")
            continue
        except EOFError:
            print()
            return

        if not entry.strip() or _handle_slash(entry, env_box):
            continue

        _run_entry(entry, env_box[0])


def main() -> None:
    repl()


if __name__ == "__main__":
    main()
