"""Utility functions and helpers for mermend."""

from mermend.utils.errors import (
    ConfigError,
    InvalidConfigError,
    MermendError,
    NotFoundError,
    ValidationError,
)
from mermend.utils.paths import get_config_dir, get_config_file

__all__ = [
    # Errors
    "MermendError",
    "ConfigError",
    "InvalidConfigError",
    "NotFoundError",
    "ValidationError",
    # Paths
    "get_config_dir",
    "get_config_file",
]
