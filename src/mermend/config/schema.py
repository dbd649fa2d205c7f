"""Configuration schema models using Pydantic."""

from typing import Literal

from pydantic import BaseModel, Field

LogLevel = Literal["DEBUG", "INFO", "WARNING", "ERROR"]
ThemeName = Literal["auto", "light", "dark"]


class RepairConfig(BaseModel):
    """Tuning knobs for the repair engine."""

    edge_label_passes: int = Field(default=2, ge=1, le=5)
    node_passes: int = Field(default=3, ge=1, le=5)
    quote_reserved_chars: bool = True  # quote any label containing % or #
    regex_timeout: float = Field(default=1.0, gt=0, le=30)


class OutputConfig(BaseModel):
    """Terminal output and file-writing preferences."""

    theme: ThemeName = "auto"
    show_diff: bool = True
    backup: bool = False  # Write PATH.bak before fixing a file in place


class GlobalConfig(BaseModel):
    """Global mermend configuration."""

    version: str = "1"
    log_level: LogLevel = "INFO"
    repair: RepairConfig = Field(default_factory=RepairConfig)
    output: OutputConfig = Field(default_factory=OutputConfig)
