"""
Process configuration, read from <config dir>/seaf-fuse.json.
"""
import logging
import os
from typing import Optional

from serde import SerdeError, serde
from serde.json import from_json

from seafobj import ConfigError

CONFIG_FILE = "seaf-fuse.json"


@serde
class Config:
    database_url: Optional[str] = None
    pool_size: int = 5
    log_file: Optional[str] = None
    log_level: str = "info"
    verify_blocks: bool = False


def load_config(config_dir: str) -> Config:
    """
    Load the configuration in config_dir. A missing file gives the defaults.

    Raises:
        ConfigError: if the directory is missing or the file is unreadable or invalid
    """
    if not os.path.isdir(config_dir):
        raise ConfigError(f"Config directory {config_dir} does not exist")
    path = os.path.join(config_dir, CONFIG_FILE)
    try:
        with open(path, "r") as f:
            config = from_json(Config, f.read())
    except FileNotFoundError:
        return Config()
    except (OSError, ValueError, TypeError, KeyError, SerdeError) as e:
        raise ConfigError(f"Failed to read {path}: {e}") from e

    if config.pool_size < 1:
        raise ConfigError(f"pool_size must be at least 1, got {config.pool_size}")
    if not isinstance(logging.getLevelName(config.log_level.upper()), int):
        raise ConfigError(f"Unknown log_level {config.log_level!r}")
    return config
