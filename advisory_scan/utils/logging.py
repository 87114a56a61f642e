"""Logging utilities for advisory-scan."""

import logging
from typing import Any
from rich.console import Console
from rich.logging import RichHandler
from rich.theme import Theme


# Status output goes to stderr so stdout only carries scan results.
stderr_console = Console(stderr=True, theme=Theme({
    "info": "cyan",
    "warning": "yellow",
    "error": "red",
    "critical": "red bold",
    "debug": "dim",
}))


class ScanLogger:
    """Logger wrapper with rich formatting on stderr."""

    def __init__(self, name: str, level: int = logging.INFO) -> None:
        self.logger = logging.getLogger(name)
        if self.logger.level == logging.NOTSET:
            self.logger.setLevel(level)
        self._setup_handlers()

    def _setup_handlers(self) -> None:
        """Attach a single rich handler to the underlying logger."""
        handler = RichHandler(
            console=stderr_console,
            show_time=True,
            show_path=False,
            markup=False,
        )
        handler.setFormatter(logging.Formatter(
            fmt="%(name)s: %(message)s",
            datefmt="[%X]"
        ))

        # Remove existing handlers to avoid duplicates
        self.logger.handlers.clear()
        self.logger.addHandler(handler)
        self.logger.propagate = False

    def info(self, msg: str, **kwargs: Any) -> None:
        """Log info message."""
        self.logger.info(msg, extra=kwargs)

    def warning(self, msg: str, **kwargs: Any) -> None:
        """Log warning message."""
        self.logger.warning(msg, extra=kwargs)

    def error(self, msg: str, **kwargs: Any) -> None:
        """Log error message."""
        self.logger.error(msg, extra=kwargs)

    def debug(self, msg: str, **kwargs: Any) -> None:
        """Log debug message."""
        self.logger.debug(msg, extra=kwargs)


LOGGER_NAMES = (
    "AdvisoryDatabase",
    "AdvisoryIndexBuilder",
    "ManifestScanner",
    "ParserRegistry",
    "JSONFormatter",
    "CLI",
)


def setup_logging(level: int = logging.INFO, verbose: bool = False) -> None:
    """Configure logging levels for advisory-scan.

    Args:
        level: Logging level
        verbose: Enable debug logging
    """
    if verbose:
        level = logging.DEBUG

    for name in LOGGER_NAMES:
        get_logger(name).logger.setLevel(level)


def get_logger(name: str) -> ScanLogger:
    """Get an advisory-scan logger instance.

    Args:
        name: Logger name

    Returns:
        Configured logger instance
    """
    return ScanLogger(name)
