"""
Configuration loader — reads installer.yml into InstallerSettings.

The file is optional: without one the installer uses the defaults
baked into InstallerSettings. It reads YAML, validates against the
Pydantic model, and applies environment overrides.
"""

from __future__ import annotations

import logging
import os
from pathlib import Path

import yaml

from mlinstall.core.models.settings import InstallerSettings

logger = logging.getLogger(__name__)

# Default config filename
INSTALLER_CONFIG_FILE = "installer.yml"

# Environment override for the template/manifest source tree
SOURCE_DIR_ENV = "MLI_SOURCE_DIR"


class ConfigError(Exception):
    """Raised when installer configuration is invalid or unreadable."""


def find_config_file(start_dir: Path | None = None) -> Path | None:
    """Search for installer.yml starting from the given directory, walking up.

    Args:
        start_dir: Directory to start searching from (default: cwd).

    Returns:
        Path to installer.yml, or None if not found.
    """
    current = (start_dir or Path.cwd()).resolve()

    for _ in range(20):  # safety limit
        candidate = current / INSTALLER_CONFIG_FILE
        if candidate.is_file():
            return candidate
        parent = current.parent
        if parent == current:
            break  # filesystem root
        current = parent

    return None


def load_settings(path: Path | None = None, *, search: bool = True) -> InstallerSettings:
    """Load and validate installer settings.

    Args:
        path: Explicit path to installer.yml. If None and ``search`` is
            set, searches upward from the working directory.
        search: Whether to look for a config file when ``path`` is None.

    Returns:
        Validated InstallerSettings (defaults when no file exists).

    Raises:
        ConfigError: If an explicit file is missing, or any file is invalid.
    """
    if path is None and search:
        path = find_config_file()

    data: dict = {}
    if path is not None:
        data = _read_yaml(path)

    env_source = os.environ.get(SOURCE_DIR_ENV)
    if env_source:
        data["source_dir"] = env_source

    # The YAML may wrap everything under an "installer" key or be flat
    if "installer" in data and isinstance(data["installer"], dict):
        nested = dict(data.pop("installer"))
        nested.update(data)
        data = nested

    try:
        settings = InstallerSettings.model_validate(data)
    except Exception as e:
        raise ConfigError(f"Invalid installer configuration: {e}") from e

    logger.info(
        "Loaded settings for %s %s (source=%s)",
        settings.app_name,
        settings.app_version,
        settings.source_dir,
    )
    return settings


def _read_yaml(path: Path) -> dict:
    if not path.is_file():
        raise ConfigError(f"Config file not found: {path}")

    logger.debug("Loading installer config from %s", path)

    try:
        raw = path.read_text(encoding="utf-8")
    except OSError as e:
        raise ConfigError(f"Cannot read {path}: {e}") from e

    try:
        data = yaml.safe_load(raw)
    except yaml.YAMLError as e:
        raise ConfigError(f"Invalid YAML in {path}: {e}") from e

    if data is None:
        return {}
    if not isinstance(data, dict):
        raise ConfigError(f"Expected a YAML mapping in {path}, got {type(data).__name__}")

    # Relative source_dir is relative to the config file, not the cwd
    source = data.get("source_dir")
    if isinstance(source, str) and source and not Path(source).expanduser().is_absolute():
        data["source_dir"] = str((path.parent / source).resolve())

    return data
