"""Configuration management with XDG paths, atomic writes, and precedence resolution.

This module handles all persistent configuration for routeclient:

* **Directory layout** -- XDG Base Directory compliant on Linux/BSD,
  ``~/.routeclient/`` on macOS and Windows. See :func:`get_config_dir` and
  :func:`get_data_dir`.
* **Global config** -- A single :class:`~routeclient.models.GlobalConfig`
  JSON file storing user-wide generator and output defaults.
* **Project config** -- An optional ``routeclient.json`` in the working
  directory holding :class:`~routeclient.models.GeneratorConfig` fields for
  one repository.
* **Precedence resolution** -- :func:`resolve_config` merges CLI flags,
  environment variables, project-local config, and global config into the
  effective :class:`~routeclient.models.GeneratorConfig`.

All file writes use an atomic temp-file-then-rename strategy
(:func:`atomic_write`) so a crash never leaves a half-written config or
generated client behind.
"""

from __future__ import annotations

import json
import logging
import os
import platform
import tempfile
from pathlib import Path
from typing import Any, Mapping, Optional

from pydantic import ValidationError

from routeclient.exceptions import ConfigError
from routeclient.models import GeneratorConfig, GlobalConfig

logger = logging.getLogger(__name__)

_APP_NAME = "routeclient"
_CONFIG_FILENAME = "config.json"
PROJECT_CONFIG_FILENAME = "routeclient.json"

ENV_ROUTES_ROOT = "ROUTECLIENT_ROUTES_ROOT"
ENV_DIALECT = "ROUTECLIENT_DIALECT"


# --- XDG path resolution ---


def _is_xdg_platform() -> bool:
    """Return True on platforms that follow the XDG Base Directory layout."""
    return platform.system() == "Linux" or platform.system().endswith("BSD")


def _fallback_base_dir() -> Path:
    return Path.home() / f".{_APP_NAME}"


def _xdg_base(env_var: str, default_segments: tuple[str, ...]) -> Path:
    """Resolve an XDG base directory from an env var with fallback segments under $HOME."""
    env_value = os.environ.get(env_var, "")
    if env_value:
        return Path(env_value)
    base = Path.home()
    for seg in default_segments:
        base = base / seg
    return base


def get_config_dir() -> Path:
    """Return the configuration directory, creating it if necessary.

    On Linux/BSD: ``$XDG_CONFIG_HOME/routeclient/`` (default
    ``~/.config/routeclient/``). On macOS/Windows: ``~/.routeclient/``.
    """
    if _is_xdg_platform():
        path = _xdg_base("XDG_CONFIG_HOME", (".config",)) / _APP_NAME
    else:
        path = _fallback_base_dir()
    path.mkdir(parents=True, exist_ok=True)
    return path


def get_data_dir() -> Path:
    """Return the data directory used for crash logs, creating it if necessary.

    On Linux/BSD: ``$XDG_DATA_HOME/routeclient/`` (default
    ``~/.local/share/routeclient/``). On macOS/Windows: ``~/.routeclient/logs/``.
    """
    if _is_xdg_platform():
        path = _xdg_base("XDG_DATA_HOME", (".local", "share")) / _APP_NAME
    else:
        path = _fallback_base_dir() / "logs"
    path.mkdir(parents=True, exist_ok=True)
    return path


# --- Atomic file writes ---


def atomic_write(path: Path, data: str) -> None:
    """Write *data* to *path* atomically using a temp file and rename.

    The temporary file is created in the same directory as *path* so that
    ``os.replace`` is an atomic rename on POSIX systems. On any failure the
    temp file is removed and the exception propagates; *path* is untouched.
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


# --- Global config ---


def global_config_path() -> Path:
    """Path to the global config file."""
    return get_config_dir() / _CONFIG_FILENAME


def load_global_config() -> GlobalConfig:
    """Load the global configuration from the config directory.

    Returns:
        The deserialised :class:`~routeclient.models.GlobalConfig`, or a
        default instance when the file does not exist.

    Raises:
        ConfigError: If the file exists but contains invalid JSON or fails
            validation.
    """
    path = global_config_path()
    if not path.is_file():
        return GlobalConfig()
    try:
        data = json.loads(path.read_text(encoding="utf-8"))
        return GlobalConfig.model_validate(data)
    except (json.JSONDecodeError, ValueError) as exc:
        raise ConfigError(f"Invalid global config at {path}: {exc}") from exc


def save_global_config(config: GlobalConfig) -> None:
    """Persist the global configuration atomically to disk."""
    data = config.model_dump(mode="json")
    atomic_write(global_config_path(), json.dumps(data, indent=2) + "\n")


def reset_global_config() -> bool:
    """Delete the global config file.

    Returns:
        ``True`` if a file was removed, ``False`` if none existed.
    """
    path = global_config_path()
    if not path.is_file():
        return False
    path.unlink()
    return True


def set_config_value(config: GlobalConfig, key: str, value: str) -> GlobalConfig:
    """Return a copy of *config* with the dotted *key* set to *value*.

    *value* is parsed as JSON when possible (so ``2``, ``false`` and
    ``["+server.ts"]`` keep their types) and used as a plain string
    otherwise. The result is re-validated as a whole.

    Example::

        cfg = set_config_value(GlobalConfig(), "generator.format.indent_width", "2")
        cfg.generator.format.indent_width  # 2

    Raises:
        ConfigError: If *key* does not name an existing setting or the new
            value fails validation.
    """
    data = config.model_dump(mode="json")
    parts = key.split(".")
    target: Any = data
    for part in parts[:-1]:
        if not isinstance(target, dict) or not isinstance(target.get(part), dict):
            raise ConfigError(f"Unknown config key: {key}")
        target = target[part]
    if not isinstance(target, dict) or parts[-1] not in target:
        raise ConfigError(f"Unknown config key: {key}")

    try:
        parsed: Any = json.loads(value)
    except json.JSONDecodeError:
        parsed = value
    target[parts[-1]] = parsed

    try:
        return GlobalConfig.model_validate(data)
    except ValidationError as exc:
        raise ConfigError(f"Invalid value for {key}: {exc}") from exc


# --- Project-local config ---


def load_project_config() -> Optional[dict[str, Any]]:
    """Load project-local generator settings from ``./routeclient.json``.

    The file holds :class:`~routeclient.models.GeneratorConfig` fields, for
    example ``{"routes_root": "app/routes", "format": {"indent_width": 2}}``.

    Returns:
        The parsed JSON object, or ``None`` if the file does not exist.

    Raises:
        ConfigError: If the file exists but is not a JSON object.
    """
    path = Path.cwd() / PROJECT_CONFIG_FILENAME
    if not path.is_file():
        return None
    try:
        data = json.loads(path.read_text(encoding="utf-8"))
    except (json.JSONDecodeError, ValueError) as exc:
        raise ConfigError(f"Invalid project config at {path}: {exc}") from exc
    if not isinstance(data, dict):
        raise ConfigError(f"Project config at {path} must be a JSON object")
    logger.debug("Loaded project config from %s", path)
    return data


# --- Precedence resolution ---


def _merge(base: dict[str, Any], overrides: Mapping[str, Any]) -> dict[str, Any]:
    """Deep-merge *overrides* into a copy of *base*, skipping ``None`` values."""
    merged = dict(base)
    for key, value in overrides.items():
        if value is None:
            continue
        if isinstance(value, Mapping) and isinstance(merged.get(key), dict):
            merged[key] = _merge(merged[key], value)
        else:
            merged[key] = value
    return merged


def _env_overrides() -> dict[str, Any]:
    overrides: dict[str, Any] = {}
    routes_root = os.environ.get(ENV_ROUTES_ROOT)
    if routes_root:
        overrides["routes_root"] = routes_root
    dialect = os.environ.get(ENV_DIALECT)
    if dialect:
        overrides["format"] = {"dialect": dialect.lower()}
    return overrides


def resolve_config(cli_overrides: Optional[Mapping[str, Any]] = None) -> GeneratorConfig:
    """Resolve the effective generator configuration.

    Precedence (high to low):
        1. CLI flags (*cli_overrides*, a partial ``GeneratorConfig`` dict;
           ``None`` values mean "not given")
        2. Environment variables (``ROUTECLIENT_ROUTES_ROOT``,
           ``ROUTECLIENT_DIALECT``)
        3. Project config (``./routeclient.json``)
        4. User config (``~/.config/routeclient/config.json``)
        5. Defaults

    Raises:
        ConfigError: If any layer holds a value that fails validation.
    """
    merged = load_global_config().generator.model_dump(mode="json")

    project = load_project_config()
    if project is not None:
        merged = _merge(merged, project)

    merged = _merge(merged, _env_overrides())

    if cli_overrides:
        merged = _merge(merged, cli_overrides)

    try:
        return GeneratorConfig.model_validate(merged)
    except ValidationError as exc:
        raise ConfigError(f"Invalid generator configuration: {exc}") from exc
