"""Manifest parsing and repository scanning for advisory-scan."""

from .parsers import ManifestParser, ParsedManifest, ParserRegistry
from .scanner import ManifestScanner, ScanResult

__all__ = [
    "ManifestParser",
    "ParsedManifest",
    "ParserRegistry",
    "ManifestScanner",
    "ScanResult",
]
