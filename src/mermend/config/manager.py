"""Configuration manager for loading and saving mermend config."""

import logging
from pathlib import Path
from typing import Any

import yaml
from pydantic import ValidationError as PydanticValidationError

from mermend.config.defaults import DEFAULT_GLOBAL_CONFIG, get_default_config_content
from mermend.config.schema import GlobalConfig
from mermend.utils.errors import InvalidConfigError, ValidationError
from mermend.utils.paths import get_config_dir, get_config_file

logger = logging.getLogger(__name__)


class ConfigManager:
    """Manages the mermend configuration file."""

    def __init__(self, config_dir: Path | None = None) -> None:
        """Initialize the config manager.

        Args:
            config_dir: Optional custom config directory. Defaults to the
                platform config dir.
        """
        if config_dir is None:
            self.config_dir = get_config_dir()
            self.config_file = get_config_file()
        else:
            self.config_dir = config_dir
            self.config_file = config_dir / "config.yaml"

    def load_config(self) -> GlobalConfig:
        """Load and validate global configuration.

        Returns:
            Validated GlobalConfig instance

        Raises:
            InvalidConfigError: If config is invalid
        """
        if not self.config_file.exists():
            self._create_default_config()
            return DEFAULT_GLOBAL_CONFIG.model_copy(deep=True)

        try:
            with open(self.config_file) as f:
                data = yaml.safe_load(f) or {}
            return GlobalConfig(**data)
        except Exception as e:
            raise InvalidConfigError(
                f"Invalid configuration in {self.config_file}: {e}"
            ) from e

    def save_config(self, config: GlobalConfig) -> None:
        """Save global configuration.

        Args:
            config: GlobalConfig instance to save
        """
        data = config.model_dump(mode="json")

        self.config_dir.mkdir(parents=True, exist_ok=True)

        with open(self.config_file, "w") as f:
            yaml.safe_dump(data, f, default_flow_style=False, sort_keys=False)
        logger.debug(f"Saved configuration to {self.config_file}")

    def set_value(self, key: str, value: str) -> GlobalConfig:
        """Set a single configuration value and save it.

        Nested keys use dots, e.g. ``repair.node_passes``. The value is
        coerced by the schema, so "3" becomes 3 and "true" becomes True.

        Args:
            key: Dotted config key
            value: New value as typed on the command line

        Returns:
            The updated configuration

        Raises:
            ValidationError: If the key is unknown or the value is rejected
        """
        config = self.load_config()
        data: dict[str, Any] = config.model_dump(mode="json")

        parts = key.split(".")
        target = data
        for part in parts[:-1]:
            if not isinstance(target.get(part), dict):
                raise ValidationError(
                    f"Unknown config key: {key}",
                    suggestion=f"Available keys: {', '.join(self.available_keys())}",
                )
            target = target[part]
        if parts[-1] not in target or isinstance(target[parts[-1]], dict):
            raise ValidationError(
                f"Unknown config key: {key}",
                suggestion=f"Available keys: {', '.join(self.available_keys())}",
            )
        target[parts[-1]] = value

        try:
            updated = GlobalConfig(**data)
        except PydanticValidationError as e:
            raise ValidationError(f"Invalid value for {key}: {value}") from e

        self.save_config(updated)
        return updated

    def available_keys(self) -> list[str]:
        """List every settable dotted key."""
        return sorted(_flatten(DEFAULT_GLOBAL_CONFIG.model_dump(mode="json")))

    def _create_default_config(self) -> None:
        """Create default config.yaml file."""
        self.config_dir.mkdir(parents=True, exist_ok=True)
        self.config_file.write_text(get_default_config_content())


def _flatten(data: dict[str, Any], prefix: str = "") -> dict[str, Any]:
    flat: dict[str, Any] = {}
    for name, value in data.items():
        key = f"{prefix}{name}"
        if isinstance(value, dict):
            flat.update(_flatten(value, f"{key}."))
        else:
            flat[key] = value
    return flat
