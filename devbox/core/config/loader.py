"""
Configuration loader — reads devbox.yml and catalog files into models.

Both files are YAML, validated against Pydantic schemas. Any problem
(missing file, bad YAML, schema mismatch) surfaces as ``ConfigError``.
"""

from __future__ import annotations

import logging
import os
from pathlib import Path
from typing import Any

import yaml
from pydantic import ValidationError

from devbox.core.models.settings import Settings
from devbox.core.models.tool import InstallerCatalog

logger = logging.getLogger(__name__)

CONFIG_FILE = "devbox.yml"
CONFIG_ENV_VAR = "DEVBOX_CONFIG"


class ConfigError(Exception):
    """Raised when a configuration or catalog file is invalid or missing."""


def user_config_path() -> Path:
    base = os.environ.get("XDG_CONFIG_HOME") or str(Path.home() / ".config")
    return Path(base) / "devbox" / CONFIG_FILE


def find_config_file(start_dir: Path | None = None) -> Path | None:
    """Locate devbox.yml.

    Order: ``$DEVBOX_CONFIG``, then a walk up from ``start_dir`` (default
    cwd), then the user config directory.

    Returns:
        Path to the config file, or None if there is none.
    """
    env_path = os.environ.get(CONFIG_ENV_VAR)
    if env_path:
        return Path(env_path)

    current = (start_dir or Path.cwd()).resolve()
    for _ in range(20):  # safety limit
        candidate = current / CONFIG_FILE
        if candidate.is_file():
            return candidate
        parent = current.parent
        if parent == current:
            break
        current = parent

    user_path = user_config_path()
    if user_path.is_file():
        return user_path
    return None


def _read_yaml_mapping(path: Path, kind: str) -> dict[str, Any]:
    """Parse ``path`` as a YAML mapping; an empty file is an empty mapping."""
    try:
        with path.open(encoding="utf-8") as fh:
            data = yaml.safe_load(fh)
    except FileNotFoundError as e:
        raise ConfigError(f"{kind} file not found: {path}") from e
    except (OSError, UnicodeDecodeError) as e:
        raise ConfigError(f"Cannot read {kind.lower()} file {path}: {e}") from e
    except yaml.YAMLError as e:
        raise ConfigError(f"Invalid YAML in {path}: {e}") from e

    if data is None:
        return {}
    if isinstance(data, dict):
        return data
    raise ConfigError(f"{path}: top level must be a mapping, not a {type(data).__name__}")


def load_settings(path: Path | None = None) -> tuple[Settings, Path | None]:
    """Load devbox.yml, or defaults when there is no config file.

    Args:
        path: Explicit config path. If None, searched with ``find_config_file``.

    Returns:
        (settings, path it was loaded from or None).

    Raises:
        ConfigError: If the file exists but is invalid, or an explicit
            path does not exist.
    """
    if path is None:
        path = find_config_file()
    if path is None:
        logger.debug("No %s found, using defaults", CONFIG_FILE)
        return Settings(), None

    logger.debug("Loading settings from %s", path)
    data = _read_yaml_mapping(path, "Config")
    try:
        settings = Settings.model_validate(data)
    except ValidationError as e:
        raise ConfigError(f"Invalid configuration in {path}: {e}") from e
    return settings, path


def load_catalog(path: Path) -> InstallerCatalog:
    """Load and validate an installer catalog YAML file.

    Raises:
        ConfigError: If the file is missing or invalid.
    """
    data = _read_yaml_mapping(path, "Catalog")
    try:
        catalog = InstallerCatalog.model_validate(data)
    except ValidationError as e:
        raise ConfigError(f"Invalid catalog in {path}: {e}") from e

    logger.info(
        "Loaded catalog %s: %d tools, %d extensions",
        path, len(catalog.tools), len(catalog.extensions),
    )
    return catalog


def resolve_relative(path: str, config_path: Path | None) -> Path:
    """Resolve a path from devbox.yml relative to the file's directory."""
    candidate = Path(path).expanduser()
    if candidate.is_absolute() or config_path is None:
        return candidate
    return config_path.parent / candidate
