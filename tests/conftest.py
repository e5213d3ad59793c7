"""Shared test fixtures for routeclient.

Provides reusable fixtures for building route collections, loading manifest
fixtures, creating isolated config environments, managing output state, and
running CLI commands. These fixtures are automatically discovered by pytest
and available to all test modules without explicit imports.
"""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any

import pytest

from routeclient.models import HTTPMethod, RouteDescriptor
from routeclient.output import OutputFormat, OutputManager, reset_output, set_output


FIXTURES_DIR = Path(__file__).parent / "fixtures"


def _route(method: str, path: str, return_type: str = "any") -> RouteDescriptor:
    return RouteDescriptor(method=method, path=path, return_type=return_type)


def _declare(*routes: RouteDescriptor) -> dict[HTTPMethod, RouteDescriptor]:
    """Index *routes* by method, the way one declaration key exports them."""
    return {r.method: r for r in routes}


# ---------------------------------------------------------------------------
# Auto-reset global state between tests
# ---------------------------------------------------------------------------


@pytest.fixture(autouse=True)
def _reset_output_between_tests() -> None:
    """Reset the global OutputManager after every test.

    The OutputManager caches references to sys.stdout/sys.stderr at
    creation time.  When Typer's CliRunner redirects those streams during
    a test and the test finishes, the cached references become stale
    ("I/O operation on closed file").  Resetting forces a fresh manager
    to be created on next use.
    """
    yield
    reset_output()


@pytest.fixture(autouse=True)
def _reset_package_logger() -> None:
    """Drop the stderr handler the CLI installs and restore the logger level."""
    yield
    package_logger = logging.getLogger("routeclient")
    for handler in list(package_logger.handlers):
        if getattr(handler, "_routeclient_cli", False):
            package_logger.removeHandler(handler)
    package_logger.setLevel(logging.NOTSET)


# ---------------------------------------------------------------------------
# Route collections
# ---------------------------------------------------------------------------


@pytest.fixture
def users_routes() -> dict[str, dict[HTTPMethod, RouteDescriptor]]:
    """A small collection with a static resource, a required and an optional parameter."""
    return {
        "src/routes/users/+server.ts": _declare(
            _route("GET", "/users", "User[]"),
            _route("POST", "/users", "User"),
        ),
        "src/routes/users/[id]/+server.ts": _declare(
            _route("GET", "/users/[id]", "User"),
        ),
        "src/routes/posts/[[page]]/+server.ts": _declare(
            _route("GET", "/posts/[[page]]", "Post[]"),
        ),
    }


# ---------------------------------------------------------------------------
# Manifest fixtures
# ---------------------------------------------------------------------------


@pytest.fixture
def manifest_path() -> Path:
    """Path to the JSON manifest fixture (``routes`` wrapper form)."""
    return FIXTURES_DIR / "routes.json"


@pytest.fixture
def manifest_raw(manifest_path: Path) -> dict[str, Any]:
    """Raw dict of the JSON manifest fixture."""
    with open(manifest_path) as f:
        return json.load(f)


# ---------------------------------------------------------------------------
# Config isolation fixture
# ---------------------------------------------------------------------------


@pytest.fixture
def isolated_config(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    """Isolate configuration to a temporary directory.

    Sets XDG_CONFIG_HOME and XDG_DATA_HOME to subdirectories of tmp_path so
    that tests never touch real user config, clears the ROUTECLIENT_*
    environment variables, and changes the working directory to tmp_path.

    Returns:
        The tmp_path root directory for additional file creation.
    """
    monkeypatch.setenv("XDG_CONFIG_HOME", str(tmp_path / "config"))
    monkeypatch.setenv("XDG_DATA_HOME", str(tmp_path / "data"))
    monkeypatch.setattr("routeclient.config._is_xdg_platform", lambda: True)

    for var in ["ROUTECLIENT_ROUTES_ROOT", "ROUTECLIENT_DIALECT"]:
        monkeypatch.delenv(var, raising=False)

    monkeypatch.chdir(tmp_path)
    return tmp_path


# ---------------------------------------------------------------------------
# Output fixtures
# ---------------------------------------------------------------------------


@pytest.fixture
def quiet_output() -> OutputManager:
    """Install a PLAIN-format, quiet OutputManager as the global output."""
    output = OutputManager(format=OutputFormat.PLAIN, quiet=True)
    set_output(output)
    yield output
    reset_output()


# ---------------------------------------------------------------------------
# CLI runner fixture
# ---------------------------------------------------------------------------


@pytest.fixture
def cli_runner():
    """Typer CLI test runner."""
    from typer.testing import CliRunner

    return CliRunner()
