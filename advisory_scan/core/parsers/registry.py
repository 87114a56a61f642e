"""Registry of manifest parsers keyed by ecosystem."""

import re
from pathlib import Path
from typing import Dict, List, Optional, Sequence, Tuple

from ...utils.logging import get_logger
from ...utils.path_utils import ManifestEntry
from .base import BaseParser, ParsedManifest


class ParserRegistry:
    """Registry for manifest parsers with plugin support."""

    def __init__(self) -> None:
        """Initialize the parser registry."""
        self._parsers: Dict[str, BaseParser] = {}
        self.logger = get_logger("ParserRegistry")

    def register(self, parser: BaseParser) -> None:
        """Register a parser under its ecosystem.

        Args:
            parser: Parser instance to register; replaces any parser already
                registered for the same ecosystem
        """
        self._parsers[parser.ecosystem] = parser

    def get_parser(self, ecosystem: str) -> Optional[BaseParser]:
        """Get the parser for an ecosystem.

        Args:
            ecosystem: Ecosystem name (e.g. 'go_modules', 'cargo')

        Returns:
            Parser instance or None if not found
        """
        return self._parsers.get(ecosystem)

    def find_parser_for_file(self, file_path: Path) -> Optional[BaseParser]:
        """Find a parser that can handle the given file.

        Args:
            file_path: Path to the file

        Returns:
            Parser that can handle the file or None
        """
        for parser in self._parsers.values():
            if parser.can_parse(file_path):
                return parser
        return None

    def get_supported_ecosystems(self) -> List[str]:
        return list(self._parsers.keys())

    def get_patterns(self) -> Sequence[Tuple[str, Sequence[str]]]:
        """Glob patterns per ecosystem, in registration order."""
        return [(parser.ecosystem, list(parser.file_patterns)) for parser in self._parsers.values()]

    def parse_manifest(self, entry: ManifestEntry) -> ParsedManifest:
        """Parse a discovered manifest.

        A manifest that cannot be read or parsed yields an outcome with
        ``error`` set and no packages, so one bad file never stops a scan.

        Args:
            entry: Manifest to parse

        Returns:
            Parsed manifest outcome
        """
        parser = self.get_parser(entry.ecosystem)
        if parser is None:
            error = f"No parser registered for ecosystem '{entry.ecosystem}'"
            self.logger.warning(f"Failed to parse {entry.relative_path}: {error}")
            return ParsedManifest(entry=entry, error=error)

        try:
            packages = parser.extract(entry.file_path)
        except (OSError, UnicodeDecodeError, re.error, ValueError) as e:
            self.logger.warning(f"Failed to parse {entry.relative_path}: {e}")
            return ParsedManifest(entry=entry, error=str(e))

        return ParsedManifest(entry=entry, packages=set(packages))
