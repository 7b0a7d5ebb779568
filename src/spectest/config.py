"""Where spectest settings live and how the effective settings are chosen.

This module handles all persistent configuration for spectest:

* **Directory layout** -- XDG Base Directory compliant on Linux/BSD,
  ``~/.spectest/`` on macOS and Windows. See :func:`get_config_dir` and
  :func:`get_data_dir`.
* **User config** -- a :class:`~spectest.models.GeneratorConfig` JSON file
  storing personal defaults.
* **Project config** -- ``./spectest.json``, written by ``spectest init``,
  typically committed next to the test suite.
* **Precedence resolution** -- :func:`resolve_config` merges CLI flags,
  environment variables, project config and user config into the effective
  configuration.

All file writes, generated test modules included, use an atomic
temp-file-then-rename strategy (:func:`atomic_write`).
"""

from __future__ import annotations

import json
import os
import platform
import tempfile
from pathlib import Path
from typing import Any, Optional

from pydantic import ValidationError

from spectest.exceptions import ConfigError
from spectest.models import GeneratorConfig

_APP_NAME = "spectest"
_CONFIG_FILENAME = "config.json"
PROJECT_CONFIG_FILENAME = "spectest.json"

# Environment variables, keyed by the GeneratorConfig field they override.
ENV_VARS: dict[str, str] = {
    "openapi_path": "SPECTEST_OPENAPI_PATH",
    "namespace": "SPECTEST_NAMESPACE",
    "tests_dir": "SPECTEST_TESTS_DIR",
}


# --- XDG path resolution ---


def _is_xdg_platform() -> bool:
    """Linux and the BSDs keep config and data under XDG directories."""
    return platform.system() == "Linux" or platform.system().endswith("BSD")


def _fallback_base_dir() -> Path:
    """``~/.spectest``, used where XDG directories are not conventional."""
    return Path.home() / f".{_APP_NAME}"


def _xdg_base(env_var: str, default_segments: tuple[str, ...]) -> Path:
    """Return ``$<env_var>``, or ``$HOME/<default_segments>`` when it is unset or empty."""
    env_value = os.environ.get(env_var, "")
    if env_value:
        return Path(env_value)
    base = Path.home()
    for seg in default_segments:
        base = base / seg
    return base


def get_config_dir() -> Path:
    """Return the configuration directory, creating it if necessary.

    On Linux/BSD: ``$XDG_CONFIG_HOME/spectest/`` (default ``~/.config/spectest/``).
    On macOS/Windows: ``~/.spectest/``.
    """
    if _is_xdg_platform():
        path = _xdg_base("XDG_CONFIG_HOME", (".config",)) / _APP_NAME
    else:
        path = _fallback_base_dir()
    path.mkdir(parents=True, exist_ok=True)
    return path


def get_data_dir() -> Path:
    """Return the data directory (crash logs), creating it if necessary.

    On Linux/BSD: ``$XDG_DATA_HOME/spectest/`` (default ``~/.local/share/spectest/``).
    On macOS/Windows: ``~/.spectest/logs/``.
    """
    if _is_xdg_platform():
        path = _xdg_base("XDG_DATA_HOME", (".local", "share")) / _APP_NAME
    else:
        path = _fallback_base_dir() / "logs"
    path.mkdir(parents=True, exist_ok=True)
    return path


# --- Atomic file writes ---


def atomic_write(path: Path, data: str) -> None:
    """Replace *path* with *data* so readers never observe a partial file.

    The temporary file is created in the same directory as *path* so that
    ``os.replace`` is an atomic rename on POSIX systems. Parent directories
    are created. On any failure the temp file is removed and *path* is left
    untouched.
    """
    path.parent.mkdir(parents=True, exist_ok=True)

    fd = None
    tmp_path: Optional[str] = None
    try:
        fd = tempfile.NamedTemporaryFile(
            mode="w",
            dir=path.parent,
            prefix=f".{path.name}.",
            suffix=".tmp",
            delete=False,
            encoding="utf-8",
        )
        tmp_path = fd.name
        fd.write(data)
        fd.flush()
        os.fsync(fd.fileno())
        fd.close()
        fd = None
        os.replace(tmp_path, path)
    except BaseException:
        if fd is not None:
            fd.close()
        if tmp_path is not None:
            try:
                os.unlink(tmp_path)
            except OSError:
                pass
        raise


def _read_json_object(path: Path, label: str) -> Optional[dict[str, Any]]:
    """Read a JSON object from *path*, or ``None`` if the file does not exist."""
    if not path.is_file():
        return None
    try:
        data = json.loads(path.read_text(encoding="utf-8"))
    except (OSError, ValueError) as exc:
        raise ConfigError(f"Invalid {label} at {path}: {exc}") from exc
    if not isinstance(data, dict):
        raise ConfigError(f"Invalid {label} at {path}: expected a JSON object")
    return data


# --- User config ---


def user_config_path() -> Path:
    """Path to the user-wide config file."""
    return get_config_dir() / _CONFIG_FILENAME


def load_user_config() -> GeneratorConfig:
    """Load the user-wide configuration.

    Returns:
        The stored :class:`~spectest.models.GeneratorConfig`, or defaults when
        the file does not exist.

    Raises:
        ConfigError: If the file contains invalid JSON or fails validation.
    """
    path = user_config_path()
    data = _read_json_object(path, "user config")
    if data is None:
        return GeneratorConfig()
    try:
        return GeneratorConfig.model_validate(data)
    except ValidationError as exc:
        raise ConfigError(f"Invalid user config at {path}: {exc}") from exc


def save_user_config(config: GeneratorConfig) -> None:
    """Persist the user-wide configuration atomically."""
    data = config.model_dump(mode="json")
    atomic_write(user_config_path(), json.dumps(data, indent=2) + "\n")


# --- Project-local config ---


def project_config_path() -> Path:
    """Path to ``./spectest.json`` in the current working directory."""
    return Path.cwd() / PROJECT_CONFIG_FILENAME


def load_project_config() -> Optional[dict[str, Any]]:
    """Load project-local configuration from ``./spectest.json``.

    Returns:
        The parsed JSON object, or ``None`` if the file does not exist.

    Raises:
        ConfigError: If the file exists but is not a JSON object.
    """
    return _read_json_object(project_config_path(), "project config")


def save_project_config(config: GeneratorConfig) -> Path:
    """Write *config* to ``./spectest.json`` and return the file path."""
    path = project_config_path()
    data = config.model_dump(mode="json", exclude_none=True)
    atomic_write(path, json.dumps(data, indent=2) + "\n")
    return path


# --- Precedence resolution ---


def resolve_config(cli_openapi_path: Optional[str] = None) -> GeneratorConfig:
    """Resolve the effective configuration.

    Precedence (high to low):
        1. CLI flags (``--openapi-path``)
        2. Environment variables (``SPECTEST_OPENAPI_PATH``,
           ``SPECTEST_NAMESPACE``, ``SPECTEST_TESTS_DIR``)
        3. Project config (``./spectest.json``)
        4. User config (``~/.config/spectest/config.json``)
        5. Defaults

    Raises:
        ConfigError: If any layer is invalid.
    """
    data: dict[str, Any] = load_user_config().model_dump()

    project = load_project_config()
    if project is not None:
        data.update({key: value for key, value in project.items() if key in ENV_VARS})

    for field, var in ENV_VARS.items():
        value = os.environ.get(var)
        if value:
            data[field] = value

    if cli_openapi_path:
        data["openapi_path"] = cli_openapi_path

    try:
        return GeneratorConfig.model_validate(data)
    except ValidationError as exc:
        raise ConfigError(f"Invalid configuration: {exc}") from exc


def require_openapi_path(config: GeneratorConfig) -> str:
    """Return the configured spec location or raise :class:`ConfigError`."""
    if not config.openapi_path:
        raise ConfigError(
            "No OpenAPI path configured. Use --openapi-path, set "
            f"{ENV_VARS['openapi_path']}, or run 'spectest init'."
        )
    return config.openapi_path
