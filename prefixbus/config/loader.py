"""Configuration loading utilities."""

import json
from pathlib import Path

from loguru import logger
from pydantic import ValidationError

from prefixbus.config.schema import BusConfig


def get_config_path() -> Path:
    """Get the default configuration file path."""
    return Path.home() / ".prefixbus" / "config.json"


def load_config(config_path: Path | None = None) -> BusConfig:
    """
    Load configuration from file or create default.

    Environment variables (``PREFIXBUS_*``) still apply to keys the file
    does not set.

    Args:
        config_path: Optional path to config file. Uses default if not provided.

    Returns:
        Loaded configuration object.
    """
    path = config_path or get_config_path()

    if path.exists():
        try:
            with open(path) as f:
                data = json.load(f)
            return BusConfig(**data)
        except (json.JSONDecodeError, ValidationError, TypeError) as e:
            logger.warning(f"Failed to load config from {path}: {e}. Using default configuration.")

    return BusConfig()


def save_config(config: BusConfig, config_path: Path | None = None) -> None:
    """
    Save configuration to file.

    Args:
        config: Configuration to save.
        config_path: Optional path to save to. Uses default if not provided.
    """
    path = config_path or get_config_path()
    path.parent.mkdir(parents=True, exist_ok=True)

    data = config.model_dump()

    with open(path, "w") as f:
        json.dump(data, f, indent=2)

    logger.debug(f"Config saved: {path}")
