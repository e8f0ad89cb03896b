"""Configuration loading, environment selection, and settings resolution.

This module handles every configuration concern of the server:

* **Defaults** -- :func:`default_config` builds the base config tree.
* **Files** -- :func:`load_config_file` reads one JSON or YAML file;
  :func:`load_configs` reads files and whole directories and deep-merges
  them with :func:`~modkit.merge.merge`.
* **Environments** -- files inside a directory named ``env`` (configurable)
  are only loaded when their stem matches the active environment, and are
  applied after the other files of the same directory.
* **Settings** -- :func:`resolve_core_settings` validates the ``core``
  section and applies environment variable overrides.

Precedence of the active environment (high to low):
    1. Explicit ``environment`` argument / ``core.configuration.environment``
    2. ``MODKIT_ENV``
    3. ``"development"``
"""

from __future__ import annotations

import json
import os
from collections.abc import Iterable
from pathlib import Path
from typing import Any, Optional, Union

import yaml
from pydantic import ValidationError

from modkit.exceptions import ConfigError
from modkit.merge import merge
from modkit.models import CoreSettings

DEFAULT_ENVIRONMENT = "development"
DEFAULT_ENVIRONMENT_DIR = "env"
CONFIG_SUFFIXES = (".json", ".yaml", ".yml")

ENV_ENVIRONMENT = "MODKIT_ENV"
ENV_HOSTNAME = "MODKIT_HOST"
ENV_PORT = "MODKIT_PORT"


def default_config() -> dict[str, Any]:
    """Return a fresh config tree holding only the defaults."""
    return {
        "core": CoreSettings().model_dump(mode="json", by_alias=True),
        "modules": {},
        "services": {},
    }


def get_environment(environment: Optional[str] = None) -> str:
    """Return the active environment name, lower-cased."""
    if environment:
        return environment.lower()
    return os.environ.get(ENV_ENVIRONMENT, "").lower() or DEFAULT_ENVIRONMENT


# --- Files ---


def load_config_file(path: Union[str, Path]) -> dict[str, Any]:
    """Load a single JSON or YAML configuration file.

    The format is taken from the extension; files with an unknown extension
    are tried as JSON, then as YAML.

    Raises:
        ConfigError: If the file cannot be read, does not parse, or does not
            contain a mapping at the top level.
    """
    file_path = Path(path)
    try:
        content = file_path.read_text(encoding="utf-8")
    except OSError as exc:
        raise ConfigError(f"Cannot read config file {file_path}: {exc}") from exc

    if not content.strip():
        return {}

    suffix = file_path.suffix.lower()
    try:
        if suffix == ".json":
            data = json.loads(content)
        elif suffix in (".yaml", ".yml"):
            data = yaml.safe_load(content)
        else:
            data = _parse_unknown(content)
    except (json.JSONDecodeError, yaml.YAMLError) as exc:
        raise ConfigError(f"Invalid config file {file_path}: {exc}") from exc

    if data is None:
        return {}
    if not isinstance(data, dict):
        raise ConfigError(
            f"Config file {file_path} must contain a mapping (got {type(data).__name__})"
        )
    return data


def _parse_unknown(content: str) -> Any:
    # Valid JSON is also valid YAML, but JSON parsing is stricter.
    try:
        return json.loads(content)
    except json.JSONDecodeError:
        return yaml.safe_load(content)


def load_configs(
    paths: Union[str, Path, Iterable[Union[str, Path]], None],
    environment: Optional[str] = None,
    environment_dir: str = DEFAULT_ENVIRONMENT_DIR,
) -> dict[str, Any]:
    """Load and merge configuration from files and directories.

    Single files are always loaded. Directories are searched recursively for
    ``.json``, ``.yaml`` and ``.yml`` files in sorted order; files below a
    directory named *environment_dir* are loaded last and only when their
    stem equals the active environment.

    Args:
        paths: A file or directory path, an iterable of them, or ``None``.
        environment: Active environment; see :func:`get_environment`.
        environment_dir: Name of the per-environment directory.

    Returns:
        The merged config tree (``{}`` when *paths* is ``None``).

    Raises:
        ConfigError: If a path does not exist or a file is invalid.
    """
    if paths is None:
        return {}
    if isinstance(paths, (str, Path)):
        paths = [paths]

    active = get_environment(environment)
    loaded: dict[str, Any] = {}
    for entry in paths:
        path = Path(entry)
        if path.is_file():
            merge(loaded, load_config_file(path))
        elif path.is_dir():
            for file_path in _directory_files(path, active, environment_dir.lower()):
                merge(loaded, load_config_file(file_path))
        else:
            raise ConfigError(f"Config path not found: {path}")
    return loaded


def _directory_files(directory: Path, environment: str, environment_dir: str) -> list[Path]:
    selected: list[tuple[bool, Path]] = []
    for file_path in sorted(directory.rglob("*")):
        if not file_path.is_file() or file_path.suffix.lower() not in CONFIG_SUFFIXES:
            continue
        in_env_dir = file_path.parent.name.lower() == environment_dir
        if in_env_dir and file_path.stem.lower() != environment:
            continue
        selected.append((in_env_dir, file_path))
    # Stable: environment files move behind the shared ones, each group keeps path order.
    selected.sort(key=lambda item: item[0])
    return [file_path for _, file_path in selected]


# --- Settings ---


def resolve_core_settings(config: dict[str, Any]) -> CoreSettings:
    """Validate the ``core`` section of *config* and apply env overrides.

    ``MODKIT_HOST`` and ``MODKIT_PORT`` override ``core.server.hostname``
    and ``core.server.port``.

    Raises:
        ConfigError: If the section fails validation.
    """
    core = merge({}, config.get("core"))
    server = core.setdefault("server", {})
    if os.environ.get(ENV_HOSTNAME):
        server["hostname"] = os.environ[ENV_HOSTNAME]
    if os.environ.get(ENV_PORT):
        server["port"] = os.environ[ENV_PORT]
    try:
        return CoreSettings.model_validate(core)
    except ValidationError as exc:
        raise ConfigError(f"Invalid core configuration: {exc}") from exc
