"""Repository scanning: manifest discovery, parsing and advisory lookup."""

from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Optional

from ..advisories.index import AdvisoryLookup, AdvisoryRecord
from ..errors import RepositoryPathError
from ..utils.logging import get_logger
from ..utils.path_utils import ManifestEntry, ManifestFinder
from .parsers import ParsedManifest, ParserRegistry, create_default_registry


@dataclass
class ScanResult:
    """Advisories found for the packages declared in one manifest."""

    ecosystem: str
    directory: str
    file: str
    package_count: int = 0
    advisory_count: int = 0
    advisories: List[AdvisoryRecord] = field(default_factory=list)
    error: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        return {
            "ecosystem": self.ecosystem,
            "directory": self.directory,
            "file": self.file,
            "package_count": self.package_count,
            "advisory_count": self.advisory_count,
            "advisories": [advisory.to_dict() for advisory in self.advisories],
        }


class ManifestScanner:
    """Scans a repository's manifests against the advisory index."""

    def __init__(
        self,
        lookup: AdvisoryLookup,
        registry: Optional[ParserRegistry] = None,
        finder: Optional[ManifestFinder] = None
    ) -> None:
        """Initialize the scanner.

        Args:
            lookup: Advisory lookup used for every extracted package
            registry: Parser registry (defaults to the built-in parsers)
            finder: Manifest finder (defaults to one without extra ignores)
        """
        self.lookup = lookup
        self.registry = registry or create_default_registry()
        self.finder = finder or ManifestFinder()
        self.logger = get_logger("ManifestScanner")

    def find_manifests(self, repo_path: Path) -> List[ManifestEntry]:
        """Discover manifests for every registered ecosystem.

        Raises:
            RepositoryPathError: If the repository path is not a directory
        """
        repo_path = Path(repo_path)
        if not repo_path.is_dir():
            raise RepositoryPathError(repo_path)
        return self.finder.find_manifests(repo_path, self.registry.get_patterns())

    def scan(self, repo_path: Path) -> List[ScanResult]:
        """Scan every manifest in a repository.

        Args:
            repo_path: Repository root

        Returns:
            One result per discovered manifest, including manifests with no advisories

        Raises:
            RepositoryPathError: If the repository path is not a directory
        """
        return [self.scan_manifest(entry) for entry in self.find_manifests(repo_path)]

    def scan_manifest(self, entry: ManifestEntry) -> ScanResult:
        """Parse one manifest and collect the advisories of its packages."""
        self.logger.info(f"{entry.relative_path} ({entry.ecosystem}, directory {entry.directory})")

        parsed = self.registry.parse_manifest(entry)
        advisories = self._collect_advisories(parsed)

        self.logger.info(
            f"{entry.relative_path}: {len(parsed.packages)} packages, "
            f"{len(advisories)} advisories"
        )
        return ScanResult(
            ecosystem=entry.ecosystem,
            directory=entry.directory,
            file=entry.relative_path,
            package_count=len(parsed.packages),
            advisory_count=len(advisories),
            advisories=advisories,
            error=parsed.error,
        )

    def _collect_advisories(self, parsed: ParsedManifest) -> List[AdvisoryRecord]:
        advisories: List[AdvisoryRecord] = []

        for package in parsed.sorted_packages():
            package_advisories = self.lookup.fetch(parsed.entry.ecosystem, package)
            if package_advisories:
                self.logger.warning(f"{package}: {len(package_advisories)} advisory(ies)")
                advisories.extend(package_advisories)

        return advisories
