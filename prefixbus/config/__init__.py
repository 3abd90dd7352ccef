"""Configuration module for prefixbus."""

from prefixbus.config.loader import get_config_path, load_config, save_config
from prefixbus.config.schema import BusConfig

__all__ = ["BusConfig", "load_config", "save_config", "get_config_path"]
