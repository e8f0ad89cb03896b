"""Shared test fixtures for modkit.

Provides a clean environment for every test (no ``MODKIT_*`` overrides
leaking in from the shell), resets the global output manager, and creates
fresh server contexts. These fixtures are discovered by pytest and
available to all test modules without explicit imports.
"""

from __future__ import annotations

import pytest

from modkit.output import reset_output
from modkit.server import Server


# ---------------------------------------------------------------------------
# Auto-reset global state between tests
# ---------------------------------------------------------------------------


@pytest.fixture(autouse=True)
def _reset_output_between_tests() -> None:
    """Reset the global OutputManager after every test.

    The OutputManager caches references to sys.stdout/sys.stderr at
    creation time. Typer's CliRunner swaps those streams during a test, so
    a cached manager would write to closed files afterwards.
    """
    yield
    reset_output()


@pytest.fixture(autouse=True)
def _isolated_env(monkeypatch: pytest.MonkeyPatch) -> None:
    """Remove environment variables that change config resolution."""
    for name in ("MODKIT_ENV", "MODKIT_HOST", "MODKIT_PORT", "NO_COLOR"):
        monkeypatch.delenv(name, raising=False)


# ---------------------------------------------------------------------------
# Server context
# ---------------------------------------------------------------------------


@pytest.fixture
def server() -> Server:
    """A fresh, unstarted server with the default config tree."""
    return Server()
