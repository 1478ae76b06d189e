"""Configuration for refmap-core."""

from rules.config import (
    CONFIG_FILENAME,
    ConfigError,
    RefMapConfig,
    load_config,
)

__all__ = [
    "CONFIG_FILENAME",
    "ConfigError",
    "RefMapConfig",
    "load_config",
]
