"""Manifest parsers for the supported ecosystems."""

from .base import BaseParser, ParsedManifest
from .cargo import CargoTomlParser
from .gomod import GoModParser
from .gradle import GradleParser
from .registry import ParserRegistry


def create_default_registry() -> ParserRegistry:
    """Build a registry holding the built-in parsers."""
    registry = ParserRegistry()
    registry.register(GoModParser())
    registry.register(CargoTomlParser())
    registry.register(GradleParser())
    return registry


# Register built-in parsers
registry = create_default_registry()

# Convenience exports
ManifestParser = registry
__all__ = [
    "BaseParser",
    "ParsedManifest",
    "GoModParser",
    "CargoTomlParser",
    "GradleParser",
    "ManifestParser",
    "ParserRegistry",
    "create_default_registry",
    "registry",
]
