"""Base parser class and result model for manifest parsing."""

import fnmatch
import os
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from pathlib import Path
from typing import List, Optional, Set

from ...utils.path_utils import ManifestEntry


@dataclass
class ParsedManifest:
    """Packages extracted from one manifest, or the reason there are none."""

    entry: ManifestEntry
    packages: Set[str] = field(default_factory=set)
    error: Optional[str] = None

    @property
    def ok(self) -> bool:
        return self.error is None

    def sorted_packages(self) -> List[str]:
        return sorted(self.packages)


class BaseParser(ABC):
    """Abstract base class for manifest parsers."""

    def __init__(self) -> None:
        """Initialize the parser."""
        self.ecosystem: str = ""
        self.file_patterns: List[str] = []

    @property
    def file_names(self) -> List[str]:
        """Bare file names matched by the glob patterns."""
        return [pattern.rsplit("/", 1)[-1] for pattern in self.file_patterns]

    def can_parse(self, file_path: Path) -> bool:
        """Check if this parser can handle the given file.

        Args:
            file_path: Path to the file to check

        Returns:
            True if the file name matches one of the parser's patterns
        """
        return any(fnmatch.fnmatchcase(file_path.name, name) for name in self.file_names)

    @abstractmethod
    def extract(self, file_path: Path) -> Set[str]:
        """Extract declared package identifiers from a manifest.

        Args:
            file_path: Path to the manifest

        Returns:
            Set of package identifiers
        """

    def read(self, file_path: Path) -> str:
        """Validate and read a manifest as UTF-8 text.

        Raises:
            FileNotFoundError: If file doesn't exist
            PermissionError: If file is not readable
            ValueError: If the path is not a regular file
        """
        if not file_path.exists():
            raise FileNotFoundError(f"File not found: {file_path}")

        if not file_path.is_file():
            raise ValueError(f"Path is not a file: {file_path}")

        if not os.access(file_path, os.R_OK):
            raise PermissionError(f"File is not readable: {file_path}")

        with open(file_path, 'r', encoding='utf-8') as f:
            return f.read()
