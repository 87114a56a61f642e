"""Output formatters for advisory-scan."""

from .formatters import CommandsFormatter, ConsoleFormatter, JSONFormatter

__all__ = [
    "CommandsFormatter",
    "ConsoleFormatter",
    "JSONFormatter",
]
