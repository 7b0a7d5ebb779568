"""Shared test fixtures for spectest.

Provides reusable fixtures for loading spec fixtures, creating isolated
config environments, managing output state, and running CLI commands.
These fixtures are automatically discovered by pytest and available to
all test modules without explicit imports.
"""

from __future__ import annotations

import json
import shutil
from pathlib import Path
from typing import Any

import pytest
import yaml

from spectest.models import ParsedSpec
from spectest.output import OutputFormat, OutputManager, reset_output, set_output


FIXTURES_DIR = Path(__file__).parent / "fixtures"


# ---------------------------------------------------------------------------
# Auto-reset global output state between tests
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


# ---------------------------------------------------------------------------
# Raw spec fixtures (plain dicts loaded from fixture files)
# ---------------------------------------------------------------------------


@pytest.fixture
def users_raw() -> dict[str, Any]:
    """Load the raw users API spec (OpenAPI 3.0, YAML)."""
    with open(FIXTURES_DIR / "users.yaml", encoding="utf-8") as f:
        return yaml.safe_load(f)


@pytest.fixture
def petstore_raw() -> dict[str, Any]:
    """Load the raw petstore spec (OpenAPI 3.1, JSON)."""
    with open(FIXTURES_DIR / "petstore.json", encoding="utf-8") as f:
        return json.load(f)


# ---------------------------------------------------------------------------
# Parsed spec fixtures
# ---------------------------------------------------------------------------


@pytest.fixture
def users_spec(users_raw: dict[str, Any]) -> ParsedSpec:
    """Parsed users API spec."""
    from spectest.parser.extractor import extract_spec

    return extract_spec(users_raw, "3.0.3", source=str(FIXTURES_DIR / "users.yaml"))


@pytest.fixture
def petstore_spec(petstore_raw: dict[str, Any]) -> ParsedSpec:
    """Parsed petstore spec."""
    from spectest.parser.extractor import extract_spec

    return extract_spec(petstore_raw, "3.1.0", source=str(FIXTURES_DIR / "petstore.json"))


# ---------------------------------------------------------------------------
# Config isolation fixture
# ---------------------------------------------------------------------------


@pytest.fixture
def isolated_config(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    """Isolate configuration to a temporary directory.

    Sets XDG_CONFIG_HOME and XDG_DATA_HOME to subdirectories of tmp_path
    so that tests never touch real user config. Clears all SPECTEST_*
    environment variables and changes the working directory to tmp_path.

    Returns:
        The tmp_path root directory for additional file creation.
    """
    monkeypatch.setattr("spectest.config._is_xdg_platform", lambda: True)
    monkeypatch.setenv("XDG_CONFIG_HOME", str(tmp_path / "config"))
    monkeypatch.setenv("XDG_DATA_HOME", str(tmp_path / "data"))

    for var in [
        "SPECTEST_OPENAPI_PATH",
        "SPECTEST_NAMESPACE",
        "SPECTEST_TESTS_DIR",
    ]:
        monkeypatch.delenv(var, raising=False)

    monkeypatch.chdir(tmp_path)
    return tmp_path


@pytest.fixture
def project_dir(isolated_config: Path) -> Path:
    """An isolated project with ``openapi.yaml`` and a ``spectest.json`` pointing at it."""
    shutil.copy(FIXTURES_DIR / "users.yaml", isolated_config / "openapi.yaml")
    (isolated_config / "spectest.json").write_text(
        json.dumps({"openapi_path": "openapi.yaml"}), encoding="utf-8"
    )
    return isolated_config


# ---------------------------------------------------------------------------
# Output fixtures
# ---------------------------------------------------------------------------


@pytest.fixture
def quiet_output() -> OutputManager:
    """Set up a quiet output manager for tests that don't care about output.

    Installs a PLAIN-format, quiet OutputManager as the global output
    and resets it after the test completes.
    """
    output = OutputManager(format=OutputFormat.PLAIN, quiet=True)
    set_output(output)
    yield output
    reset_output()


@pytest.fixture
def plain_output() -> OutputManager:
    """Set up uncoloured plain output so diagnostics can be matched with capsys.

    Warnings are printed verbatim as ``Warning: <message>`` on stderr.
    """
    output = OutputManager(format=OutputFormat.PLAIN, no_color=True)
    set_output(output)
    yield output
    reset_output()


# ---------------------------------------------------------------------------
# CLI runner fixture
# ---------------------------------------------------------------------------


@pytest.fixture
def cli_runner():
    """Typer CLI test runner.

    Returns a CliRunner instance that captures stdout/stderr and
    provides a consistent interface for invoking Typer apps in tests.
    """
    from typer.testing import CliRunner

    return CliRunner()
