"""Configuration management for mermend."""

from mermend.config.manager import ConfigManager
from mermend.config.schema import GlobalConfig, OutputConfig, RepairConfig

__all__ = ["ConfigManager", "GlobalConfig", "OutputConfig", "RepairConfig"]
