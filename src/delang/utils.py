from __future__ import annotations

import logging
import os as _os
from dataclasses import dataclass, replace
from typing import Mapping, Optional

_TRUE_WORDS = {"1", "true", "yes", "on"}

ENV_STRICT_NUMBERS = "DELANG_STRICT_NUMBERS"
ENV_BLOCK_SCOPES = "DELANG_BLOCK_SCOPES"
ENV_DEBUG_PY_TRACE = "DELANG_DEBUG_PY_TRACE"
ENV_LOG_LEVEL = "DELANG_LOG_LEVEL"


def env_flag(name: str, env: Optional[Mapping[str, str]] = None) -> bool:
    """Read a boolean switch from the environment."""
    source = _os.environ if env is None else env
    raw = source.get(name)
    if raw is None:
        return False
    return raw.strip().lower() in _TRUE_WORDS


def debug_py_trace_enabled() -> bool:
    return env_flag(ENV_DEBUG_PY_TRACE)


def parse_log_level(raw: Optional[str]) -> int:
    if not raw:
        return logging.WARNING

    raw = raw.strip()
    if raw.isdigit():
        return int(raw)

    level = logging.getLevelName(raw.upper())
    if isinstance(level, int):
        return level

    raise ValueError(f"Unknown log level '{raw}'")


@dataclass(frozen=True)
class Settings:
    """Per-run switches for the lexer, evaluator and CLI."""

    strict_numbers: bool = False
    block_scopes: bool = False
    debug_py_trace: bool = False
    log_level: int = logging.WARNING

    @classmethod
    def from_env(cls, env: Optional[Mapping[str, str]] = None) -> Settings:
        source = _os.environ if env is None else env
        return cls(
            strict_numbers=env_flag(ENV_STRICT_NUMBERS, source),
            block_scopes=env_flag(ENV_BLOCK_SCOPES, source),
            debug_py_trace=env_flag(ENV_DEBUG_PY_TRACE, source),
            log_level=parse_log_level(source.get(ENV_LOG_LEVEL)),
        )

    def with_overrides(self, **changes: object) -> Settings:
        """Copy with every non-None override applied."""
        return replace(self, **{k: v for k, v in changes.items() if v is not None})
