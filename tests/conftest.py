from __future__ import annotations

from collections import Counter
from typing import List

import pytest

from delang.utils import (
    ENV_BLOCK_SCOPES,
    ENV_DEBUG_PY_TRACE,
    ENV_LOG_LEVEL,
    ENV_STRICT_NUMBERS,
    Settings,
)

DELANG_ENV_VARS = (ENV_STRICT_NUMBERS, ENV_BLOCK_SCOPES, ENV_DEBUG_PY_TRACE, ENV_LOG_LEVEL)


@pytest.fixture(autouse=True)
def _isolate_delang_env(monkeypatch: pytest.MonkeyPatch) -> None:
    """Keep the caller's DELANG_* switches out of Settings.from_env()."""
    for name in DELANG_ENV_VARS:
        monkeypatch.delenv(name, raising=False)


@pytest.fixture
def scoped_settings() -> Settings:
    return Settings(block_scopes=True)


@pytest.fixture
def strict_settings() -> Settings:
    return Settings(strict_numbers=True)


def pytest_collection_modifyitems(items: List[pytest.Item]) -> None:
    counts = Counter(item.nodeid for item in items)
    clashes = sorted(nodeid for nodeid, n in counts.items() if n > 1)
    if clashes:
        listing = "\n".join(f"  {nodeid}" for nodeid in clashes)
        raise pytest.UsageError(f"case ids collide, rename them:\n{listing}")
