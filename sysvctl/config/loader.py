"""Configuration loading utilities."""

import json
import os
from pathlib import Path

from loguru import logger
from pydantic import ValidationError

from sysvctl.config.schema import Config

DEFAULT_CONFIG_PATH = Path("/etc/sysvctl/config.json")


def get_config_path() -> Path:
    """Get the configuration file path (``$SYSVCTL_CONFIG`` wins)."""
    override = os.environ.get("SYSVCTL_CONFIG")
    if override:
        return Path(override)
    return DEFAULT_CONFIG_PATH


def load_config(config_path: Path | None = None) -> Config:
    """
    Load configuration from file or create default.

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
            return Config.model_validate(data)
        except (json.JSONDecodeError, ValidationError) as e:
            logger.warning(f"Failed to load config from {path}: {e}")
            logger.warning("Using default configuration.")

    return Config()


def save_config(config: Config, config_path: Path | None = None) -> None:
    """Save configuration to file."""
    path = config_path or get_config_path()
    path.parent.mkdir(parents=True, exist_ok=True)

    with open(path, "w") as f:
        json.dump(config.model_dump(mode="json"), f, indent=2)
