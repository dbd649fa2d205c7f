"""mermend - detect and repair broken Mermaid diagram syntax."""

from mermend.repair import (
    FixResult,
    RepairEngine,
    analyze_code,
    auto_fix_mermaid_code,
    detect_special_shapes,
)

__version__ = "0.1.0"

__all__ = [
    "__version__",
    "RepairEngine",
    "FixResult",
    "auto_fix_mermaid_code",
    "analyze_code",
    "detect_special_shapes",
]
