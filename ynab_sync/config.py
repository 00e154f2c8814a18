"""Configuration loading for the YNAB sync."""

import json
import os
from pathlib import Path

from loguru import logger
from pydantic import ValidationError

from ynab_sync.models import SyncConfig

# Default config path
DEFAULT_CONFIG_PATH = Path.home() / ".config" / "ynab-sync" / "config.json"

# Checked in order; YNAB_KEY is the older name
API_KEY_ENV_VARS = ("YNAB_API_KEY", "YNAB_KEY")


class ConfigError(Exception):
    """Missing or invalid configuration."""

    pass


def load_config(config_path: Path | None = None) -> SyncConfig:
    """Load sync configuration from a JSON file.

    Args:
        config_path: Path to config JSON file, or None for the default

    Returns:
        Validated SyncConfig
    """
    config_path = config_path or DEFAULT_CONFIG_PATH
    if not config_path.exists():
        raise ConfigError(f"Config file not found: {config_path}")

    try:
        with open(config_path) as f:
            data = json.load(f)
        config = SyncConfig.model_validate(data)
    except (json.JSONDecodeError, ValidationError) as e:
        raise ConfigError(f"Failed to parse config file {config_path}: {e}") from e

    logger.debug(f"Loaded {len(config.accounts)} account mappings from {config_path}")
    return config


def get_api_key(explicit: str | None = None) -> str:
    """Get the YNAB API key from an explicit value or the environment."""
    if explicit:
        return explicit
    for name in API_KEY_ENV_VARS:
        value = os.environ.get(name)
        if value:
            return value
    raise ConfigError(f"No YNAB API key found. Set {API_KEY_ENV_VARS[0]}.")
