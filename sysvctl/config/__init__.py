"""Configuration module for sysvctl."""

from sysvctl.config.loader import get_config_path, load_config
from sysvctl.config.schema import Config

__all__ = ["Config", "load_config", "get_config_path"]
