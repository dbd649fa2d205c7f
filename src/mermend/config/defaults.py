"""Default configuration values."""

from mermend.config.schema import GlobalConfig

DEFAULT_GLOBAL_CONFIG = GlobalConfig()

DEFAULT_CONFIG_CONTENT = """\
# mermend configuration
version: "1"

# Logging level: DEBUG, INFO, WARNING, ERROR
log_level: INFO

repair:
  # Scans of a line for edge labels closed with ], } or ) instead of |
  edge_label_passes: 2
  # Scans of a line for node definitions that need quoting
  node_passes: 3
  # Quote any node or edge label that contains % or #
  quote_reserved_chars: true
  # Seconds allowed for a single pattern match before the line is skipped
  regex_timeout: 1.0

output:
  # Color theme: auto, light, dark
  theme: auto
  # Print a table of every change after fixing
  show_diff: true
  # Keep a PATH.bak copy when fixing a file in place
  backup: false
"""


def get_default_config_content() -> str:
    """Get the commented default config.yaml content."""
    return DEFAULT_CONFIG_CONTENT
