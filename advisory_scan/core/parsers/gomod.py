"""Go modules (go.mod) parser."""

import re
from pathlib import Path
from typing import Set

from .base import BaseParser

# require ( ... ) blocks
REQUIRE_BLOCK = re.compile(r'require\s+\(([^)]+)\)')
# one "path version" pair per line inside a block
BLOCK_LINE = re.compile(r'^\s*([^\s]+)\s+v?[\d.]+', re.MULTILINE)
# require path version
REQUIRE_LINE = re.compile(r'^\s*require\s+([^\s]+)\s+v?[\d.]+', re.MULTILINE)


class GoModParser(BaseParser):
    """Extracts required module paths from go.mod files."""

    def __init__(self) -> None:
        super().__init__()
        self.ecosystem = "go_modules"
        self.file_patterns = ["**/go.mod"]

    def extract(self, file_path: Path) -> Set[str]:
        content = self.read(file_path)
        return self.extract_from_text(content)

    def extract_from_text(self, content: str) -> Set[str]:
        """Extract module paths from go.mod content.

        Both the block form and single-line ``require`` directives are
        recognized; only the module path is kept.

        Args:
            content: go.mod file content

        Returns:
            Set of module paths
        """
        packages = set()

        for block in REQUIRE_BLOCK.findall(content):
            for module_path in BLOCK_LINE.findall(block):
                packages.add(module_path.strip())

        for module_path in REQUIRE_LINE.findall(content):
            packages.add(module_path.strip())

        return packages
