"""Mermaid syntax repair engine."""

from mermend.repair.engine import (
    RepairEngine,
    analyze_code,
    auto_fix_mermaid_code,
    detect_special_shapes,
)
from mermend.repair.models import DiagramType, Fix, FixResult, FixType, Issue

__all__ = [
    "RepairEngine",
    "auto_fix_mermaid_code",
    "analyze_code",
    "detect_special_shapes",
    "DiagramType",
    "Fix",
    "FixResult",
    "FixType",
    "Issue",
]
