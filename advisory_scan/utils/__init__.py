"""Utility functions and helpers for advisory-scan."""

from .logging import setup_logging, get_logger
from .performance import PerformanceMonitor
from .path_utils import ManifestEntry, ManifestFinder, PathFilter

__all__ = [
    "setup_logging",
    "get_logger",
    "PerformanceMonitor",
    "ManifestEntry",
    "ManifestFinder",
    "PathFilter",
]
