"""Mapping between manifest package managers and advisory database ecosystems."""

from typing import Dict, Tuple

# Ecosystems indexed from the advisory database.
SUPPORTED_ECOSYSTEMS: Tuple[str, ...] = ("Go", "crates.io", "Maven")

ECOSYSTEM_MAPPING: Dict[str, str] = {
    "go_modules": "Go",
    "gomod": "Go",
    "cargo": "crates.io",
    "maven": "Maven",
    "gradle": "Maven",
}


def canonicalize(manifest_ecosystem: str) -> str:
    """Translate a package manager name into the advisory database vocabulary.

    Unknown names are returned unchanged, so an ecosystem that is already in
    database form (e.g. ``"Go"``) maps to itself.
    """
    return ECOSYSTEM_MAPPING.get(manifest_ecosystem, manifest_ecosystem)


def is_supported(ecosystem: str) -> bool:
    return ecosystem in SUPPORTED_ECOSYSTEMS
