"""Rust (Cargo.toml) parser."""

import re
from pathlib import Path
from typing import Set

from .base import BaseParser

DEPENDENCY_SECTION = re.compile(r'^\[(dependencies|dev-dependencies|build-dependencies)\]')
SECTION_HEADER = re.compile(r'^\[')
DEPENDENCY_KEY = re.compile(r'^([a-zA-Z0-9_-]+)\s*=')


class CargoTomlParser(BaseParser):
    """Extracts crate names from the dependency tables of Cargo.toml files.

    The file is scanned line by line rather than loaded as TOML so that
    manifests which are not strictly valid TOML still yield their crates.
    """

    def __init__(self) -> None:
        super().__init__()
        self.ecosystem = "cargo"
        self.file_patterns = ["**/Cargo.toml"]

    def extract(self, file_path: Path) -> Set[str]:
        content = self.read(file_path)
        return self.extract_from_text(content)

    def extract_from_text(self, content: str) -> Set[str]:
        packages = set()
        in_dependencies = False

        for line in content.splitlines():
            if DEPENDENCY_SECTION.match(line):
                in_dependencies = True
                continue

            if SECTION_HEADER.match(line):
                in_dependencies = False
                continue

            if in_dependencies:
                match = DEPENDENCY_KEY.match(line)
                if match:
                    packages.add(match.group(1))

        return packages
