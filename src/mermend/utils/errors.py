"""Custom exceptions for mermend.

The repair engine itself never raises for malformed diagram text; these
cover the application layer around it (configuration, input files, CLI
arguments).
"""


class MermendError(Exception):
    """Base exception for all mermend errors."""

    pass


class ConfigError(MermendError):
    """Configuration-related errors."""

    pass


class InvalidConfigError(ConfigError):
    """Invalid configuration data."""

    pass


class NotFoundError(MermendError):
    """An input file or resource does not exist."""

    def __init__(self, resource_type: str, resource_id: str) -> None:
        self.resource_type = resource_type
        self.resource_id = resource_id
        super().__init__(f"{resource_type} not found: {resource_id}")


class ValidationError(MermendError):
    """User input failed validation."""

    def __init__(self, message: str, suggestion: str | None = None) -> None:
        self.suggestion = suggestion
        super().__init__(message)
