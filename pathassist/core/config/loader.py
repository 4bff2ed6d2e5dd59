"""
Configuration loader — reads path.yml into a PathConfig.

Searches upward from the working directory unless an explicit path
is given, parses YAML and validates it against the pydantic schema.
"""

from __future__ import annotations

import logging
from pathlib import Path

import yaml
from pydantic import ValidationError

from pathassist.core.models.config import PathConfig

logger = logging.getLogger(__name__)

# Default config filename
PATH_CONFIG_FILE = "path.yml"


class ConfigError(Exception):
    """Raised when path configuration is invalid or missing."""


def find_config_file(start_dir: Path | None = None) -> Path | None:
    """Search for path.yml starting from the given directory, walking up.

    Args:
        start_dir: Directory to start searching from (default: cwd).

    Returns:
        Path to path.yml, or None if not found.
    """
    current = (start_dir or Path.cwd()).resolve()

    for _ in range(20):  # safety limit
        candidate = current / PATH_CONFIG_FILE
        if candidate.is_file():
            return candidate
        parent = current.parent
        if parent == current:
            break  # filesystem root
        current = parent

    return None


def load_config(path: Path | None = None) -> PathConfig:
    """Load and validate path configuration.

    Args:
        path: Explicit path to path.yml. If None, searches upward.

    Returns:
        Validated PathConfig model.

    Raises:
        ConfigError: If the file is missing or invalid.
    """
    if path is None:
        path = find_config_file()

    if path is None:
        raise ConfigError(f"No {PATH_CONFIG_FILE} found. Specify one with --config.")

    if not path.is_file():
        raise ConfigError(f"Config file not found: {path}")

    logger.debug("Loading path config from %s", path)

    try:
        raw = path.read_text(encoding="utf-8")
    except OSError as e:
        raise ConfigError(f"Cannot read {path}: {e}") from e

    try:
        data = yaml.safe_load(raw)
    except yaml.YAMLError as e:
        raise ConfigError(f"Invalid YAML in {path}: {e}") from e

    if not isinstance(data, dict):
        raise ConfigError(f"Expected a YAML mapping in {path}, got {type(data).__name__}")

    # The YAML may wrap everything under a "path" key or be flat
    config_data = data.get("path", data) if isinstance(data.get("path"), dict) else data

    try:
        config = PathConfig.model_validate(config_data)
    except ValidationError as e:
        raise ConfigError(f"Invalid path configuration: {e}") from e

    logger.info(
        "Loaded path for %s.%s on record %s",
        config.object_name,
        config.picklist_field,
        config.record_id,
    )
    return config


def resolve_data_file(config: PathConfig, config_path: Path) -> Path:
    """Resolve the org data file relative to the config file."""
    data_file = Path(config.data_file)
    if data_file.is_absolute():
        return data_file
    return (config_path.parent / data_file).resolve()
