"""Custom exceptions for chart composition and rendering."""


from __future__ import annotations

from panelchart.core.constants import NO_DATA_MESSAGE


class ChartError(Exception):
    """Base exception for the project."""


class NoDataError(ChartError):
    """Raised when the root chart has nothing to show."""

    def __init__(self, message: str = NO_DATA_MESSAGE) -> None:
        super().__init__(message)


class ArgumentRequiredError(ChartError):
    """Raised when a required argument is missing (e.g. a child chart's data engine)."""

    def __init__(self, arg_name: str) -> None:
        self.arg_name = arg_name
        super().__init__(f"Required argument '{arg_name}'.")


class ArgumentInvalidError(ChartError):
    """Raised for invalid argument values (e.g. an undefined role name)."""

    def __init__(self, arg_name: str, message: str) -> None:
        self.arg_name = arg_name
        super().__init__(f"Invalid argument '{arg_name}'. {message}")


class OperationInvalidError(ChartError):
    """Raised when an operation is not allowed in the chart's current position."""


class ConfigError(ChartError):
    """Raised when configuration files are missing/invalid."""
