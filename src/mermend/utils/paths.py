"""Filesystem locations used by mermend."""

from pathlib import Path

from platformdirs import user_config_dir

APP_NAME = "mermend"


def get_config_dir() -> Path:
    """Get the configuration directory (XDG config dir on Linux)."""
    return Path(user_config_dir(APP_NAME))


def get_config_file() -> Path:
    """Get the path of config.yaml."""
    return get_config_dir() / "config.yaml"
