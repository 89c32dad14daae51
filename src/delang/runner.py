from __future__ import annotations

import logging
import sys
import traceback
from pathlib import Path
from typing import List, Optional, TextIO

from .evaluator import Context, eval_program
from .lexer_rd import LexError
from .parser_rd import ParseError, parse_source
from .tree import walk
from .types import DeRuntimeError, Environment
from .utils import Settings, parse_log_level

logger = logging.getLogger(__name__)

USAGE = "usage: delang [--strict-numbers] [--block-scopes] [--py-traceback] [--log-level LEVEL] <source.de | ->"

# Errors a De program can fail with; anything else is an interpreter bug.
PROGRAM_ERRORS = (LexError, ParseError, DeRuntimeError)

def run(
    src: str,
    out: Optional[TextIO] = None,
    settings: Optional[Settings] = None,
    env: Optional[Environment] = None,
) -> Environment:
    """Lex, parse and evaluate `src`; each stage completes before the next."""
    if settings is None:
        settings = Settings()

    program = parse_source(src, strict_numbers=settings.strict_numbers)
    logger.debug("program has %d nodes", sum(1 for _ in walk(program)))

    ctx = Context(env=env if env is not None else Environment(), out=out, settings=settings)
    return eval_program(program, ctx)

def repl_eval(
    src: str,
    env: Environment,
    out: Optional[TextIO] = None,
    settings: Optional[Settings] = None,
) -> Environment:
    """Run one REPL entry against a persistent environment."""
    return run(src, out=out, settings=settings, env=env)

def _load_source(arg: Optional[str]) -> str:
    """
    Resolve CLI input into source text.
    - None or "-" => read stdin.
    - Otherwise => read the file at that path.
    """
    if arg is None or arg == "-":
        return sys.stdin.read()

    try:
        return Path(arg).read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as exc:
        reason = getattr(exc, "strerror", None) or exc
        raise SystemExit(f"Error: cannot read '{arg}': {reason}") from None

def _parse_args(argv: List[str]) -> tuple[Settings, Optional[str]]:
    settings = Settings.from_env()
    arg = None
    it = iter(argv)

    for token in it:
        if token == "--strict-numbers":
            settings = settings.with_overrides(strict_numbers=True)
            continue

        if token == "--block-scopes":
            settings = settings.with_overrides(block_scopes=True)
            continue

        if token == "--py-traceback":
            settings = settings.with_overrides(debug_py_trace=True)
            continue

        if token.startswith("--log-level=") or token == "--log-level":
            if "=" in token:
                raw = token.split("=", 1)[1]
            else:
                try:
                    raw = next(it)
                except StopIteration:
                    raise SystemExit("--log-level flag requires a value") from None
            try:
                settings = settings.with_overrides(log_level=parse_log_level(raw))
            except ValueError as exc:
                raise SystemExit(str(exc)) from None
            continue

        if token in ("-h", "--help"):
            print(USAGE)
            raise SystemExit(0)

        if token.startswith("--"):
            raise SystemExit(f"Unknown flag: {token}\n{USAGE}")

        if arg is None:
            arg = token
        else:
            raise SystemExit(f"Unexpected argument: {token}\n{USAGE}")

    return settings, arg

def main(argv: Optional[List[str]] = None) -> None:
    settings, arg = _parse_args(sys.argv[1:] if argv is None else argv)
    logging.basicConfig(
        level=settings.log_level,
        stream=sys.stderr,
        format="%(levelname)s %(name)s: %(message)s",
    )

    source = _load_source(arg)

    try:
        run(source, settings=settings)
    except PROGRAM_ERRORS as exc:
        sys.stdout.flush()
        print(f"Error: {exc}", file=sys.stderr)
        if settings.debug_py_trace:
            print("\nPython traceback:", file=sys.stderr)
            traceback.print_exception(exc, file=sys.stderr)
        raise SystemExit(1) from None

if __name__ == "__main__":
    main()
