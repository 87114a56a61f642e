"""Gradle (build.gradle / build.gradle.kts) parser."""

import re
from pathlib import Path
from typing import Set

from .base import BaseParser

CONFIGURATIONS = (
    "implementation",
    "api",
    "compile",
    "testImplementation",
    "testCompile",
    "runtimeOnly",
)

# implementation 'group:artifact:version', implementation("group:artifact:version")
DEPENDENCY_DECLARATION = re.compile(
    r'(?:' + '|'.join(CONFIGURATIONS) + r')'
    r'\s*(?:\(\s*)?["\']'
    r'([^:"\'\s]+:[^:"\'\s]+):'
)


class GradleParser(BaseParser):
    """Extracts Maven ``group:artifact`` coordinates from Gradle build scripts."""

    def __init__(self) -> None:
        super().__init__()
        self.ecosystem = "gradle"
        self.file_patterns = ["**/build.gradle", "**/build.gradle.kts"]

    def extract(self, file_path: Path) -> Set[str]:
        content = self.read(file_path)
        return self.extract_from_text(content)

    def extract_from_text(self, content: str) -> Set[str]:
        """Extract ``group:artifact`` identifiers from build script content.

        Args:
            content: Build script content

        Returns:
            Set of coordinates without their version
        """
        return {match.strip() for match in DEPENDENCY_DECLARATION.findall(content)}
