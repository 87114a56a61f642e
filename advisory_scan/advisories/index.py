"""In-memory advisory index built from the local advisory database."""

import json
import threading
from dataclasses import dataclass, field
from pathlib import Path
from types import MappingProxyType
from typing import Any, Dict, Iterator, List, Mapping, Optional, Tuple
from rich.progress import BarColumn, MofNCompleteColumn, Progress, SpinnerColumn, TextColumn

from ..errors import CorpusNotFoundError
from ..utils.logging import get_logger, stderr_console
from ..utils.performance import PerformanceMonitor
from .database import AdvisoryDatabaseConfig
from .ecosystems import SUPPORTED_ECOSYSTEMS, canonicalize, is_supported
from .ranges import extract_affected_versions

PROGRESS_INTERVAL = 5000


@dataclass(frozen=True)
class AdvisoryRecord:
    """One advisory as it applies to a single affected package."""

    package_name: str
    advisory_id: str
    affected_versions: Tuple[str, ...] = ()
    patched_versions: Tuple[str, ...] = ()
    unaffected_versions: Tuple[str, ...] = ()
    cve_id: Optional[str] = None
    severity: str = "UNKNOWN"
    title: Optional[str] = None
    description: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        """Render the record with the keys expected by the update runner."""
        return {
            "dependency-name": self.package_name,
            "affected-versions": list(self.affected_versions),
            "patched-versions": list(self.patched_versions),
            "unaffected-versions": list(self.unaffected_versions),
            "ghsa-id": self.advisory_id,
            "cve-id": self.cve_id,
            "severity": self.severity,
            "title": self.title,
            "description": self.description,
        }


@dataclass
class AdvisoryFileOutcome:
    """Result of loading a single advisory file."""

    path: Path
    records: List[Tuple[str, AdvisoryRecord]] = field(default_factory=list)
    skipped_reason: Optional[str] = None

    @property
    def skipped(self) -> bool:
        return self.skipped_reason is not None


class AdvisoryIndex:
    """Read-only ecosystem -> package -> advisories mapping."""

    def __init__(
        self,
        buckets: Mapping[str, Mapping[str, List[AdvisoryRecord]]],
        files_scanned: int = 0,
        files_skipped: int = 0
    ) -> None:
        self._buckets: Mapping[str, Mapping[str, Tuple[AdvisoryRecord, ...]]] = MappingProxyType({
            ecosystem: MappingProxyType({
                package: tuple(records) for package, records in packages.items()
            })
            for ecosystem, packages in buckets.items()
        })
        self.files_scanned = files_scanned
        self.files_skipped = files_skipped

    def get(self, ecosystem: str, package_name: str) -> Tuple[AdvisoryRecord, ...]:
        """Return the bucket for an already canonical ecosystem and package."""
        return self._buckets.get(ecosystem, MappingProxyType({})).get(package_name.lower(), ())

    def ecosystems(self) -> List[str]:
        return list(self._buckets.keys())

    def packages(self, ecosystem: str) -> List[str]:
        return list(self._buckets.get(ecosystem, {}).keys())

    @property
    def package_count(self) -> int:
        return sum(len(packages) for packages in self._buckets.values())

    @property
    def record_count(self) -> int:
        return sum(
            len(records)
            for packages in self._buckets.values()
            for records in packages.values()
        )

    def get_stats(self) -> Dict[str, Any]:
        """Get index statistics.

        Returns:
            Dictionary with per-ecosystem package and record counts
        """
        return {
            "files_scanned": self.files_scanned,
            "files_skipped": self.files_skipped,
            "total_packages": self.package_count,
            "total_advisories": self.record_count,
            "ecosystems": {
                ecosystem: len(packages) for ecosystem, packages in self._buckets.items()
            },
        }


def resolve_severity(data: Mapping[str, Any]) -> str:
    """Pick the advisory severity.

    The top-level ``severity`` wins when it is a plain string; otherwise the
    ``database_specific.severity`` field is used, falling back to UNKNOWN.
    """
    severity = data.get("severity")
    if isinstance(severity, str) and severity:
        return severity

    database_specific = data.get("database_specific")
    if isinstance(database_specific, Mapping):
        nested = database_specific.get("severity")
        if isinstance(nested, str) and nested:
            return nested

    return "UNKNOWN"


def parse_advisory(data: Mapping[str, Any]) -> List[Tuple[str, AdvisoryRecord]]:
    """Turn one OSV advisory document into indexable records.

    Args:
        data: Decoded advisory JSON

    Returns:
        (ecosystem, record) pairs, one per supported affected package

    Raises:
        ValueError: If the document structure is not usable
    """
    if not isinstance(data, Mapping):
        raise ValueError("advisory is not a JSON object")

    advisory_id = data.get("id")
    if not isinstance(advisory_id, str) or not advisory_id:
        raise ValueError("advisory has no string 'id'")

    affected = data.get("affected") or []
    if not isinstance(affected, list):
        raise ValueError("'affected' is not a list")

    aliases = data.get("aliases") or []
    if not isinstance(aliases, list):
        raise ValueError("'aliases' is not a list")

    cve_id = aliases[0] if aliases else None
    if cve_id is not None and not isinstance(cve_id, str):
        raise ValueError("alias is not a string")
    severity = resolve_severity(data)

    records = []
    for affected_package in affected:
        if not isinstance(affected_package, Mapping):
            raise ValueError("affected entry is not an object")

        package = affected_package.get("package") or {}
        if not isinstance(package, Mapping):
            raise ValueError("affected package is not an object")

        ecosystem = package.get("ecosystem")
        package_name = package.get("name")
        if not is_supported(ecosystem) or not package_name:
            continue
        if not isinstance(package_name, str):
            raise ValueError("package name is not a string")

        ranges = affected_package.get("ranges") or []
        if not isinstance(ranges, list):
            raise ValueError("'ranges' is not a list")

        records.append((ecosystem, AdvisoryRecord(
            package_name=package_name,
            advisory_id=advisory_id,
            affected_versions=tuple(extract_affected_versions(ranges)),
            cve_id=cve_id,
            severity=severity,
            title=data.get("summary"),
            description=data.get("details"),
        )))

    return records


def load_advisory_file(path: Path) -> AdvisoryFileOutcome:
    """Load one advisory file into an outcome instead of raising.

    Args:
        path: Path to the advisory JSON file

    Returns:
        Outcome holding either the records or the reason the file was skipped
    """
    try:
        with open(path, 'r', encoding='utf-8') as f:
            data = json.load(f)
        return AdvisoryFileOutcome(path=path, records=parse_advisory(data))
    except (json.JSONDecodeError, UnicodeDecodeError, OSError, ValueError, TypeError) as e:
        return AdvisoryFileOutcome(path=path, skipped_reason=str(e))


class AdvisoryIndexBuilder:
    """Scans the advisory database once and caches the resulting index."""

    def __init__(
        self,
        config: Optional[AdvisoryDatabaseConfig] = None,
        show_progress: bool = False,
        performance_monitor: Optional[PerformanceMonitor] = None
    ) -> None:
        """Initialize the builder.

        Args:
            config: Database configuration (defaults to the environment)
            show_progress: Show a progress bar while loading files
            performance_monitor: Monitor receiving the build timing
        """
        self.config = config or AdvisoryDatabaseConfig.from_env()
        self.show_progress = show_progress
        self.performance_monitor = performance_monitor or PerformanceMonitor()
        self.logger = get_logger("AdvisoryIndexBuilder")
        self._index: Optional[AdvisoryIndex] = None
        self._lock = threading.Lock()

    @property
    def is_built(self) -> bool:
        return self._index is not None

    def build(self) -> AdvisoryIndex:
        """Build the index, or return the cached one.

        Returns:
            The advisory index

        Raises:
            CorpusNotFoundError: If the reviewed advisories directory is missing
        """
        if self._index is not None:
            return self._index

        with self._lock:
            if self._index is None:
                with self.performance_monitor.measure("build_advisory_index"):
                    self._index = self._build()
            return self._index

    def _build(self) -> AdvisoryIndex:
        advisories_path = self.config.advisories_path
        if not advisories_path.is_dir():
            raise CorpusNotFoundError(advisories_path)

        self.logger.info("Loading advisories into memory...")
        advisory_files = sorted(advisories_path.rglob("*.json"))
        total_files = len(advisory_files)
        self.logger.info(f"Found {total_files} advisory files")
        self.logger.info(f"Filtering for ecosystems: {', '.join(SUPPORTED_ECOSYSTEMS)}")

        buckets: Dict[str, Dict[str, List[AdvisoryRecord]]] = {}
        loaded = 0
        skipped = 0

        for outcome in self._load_files(advisory_files):
            if outcome.skipped:
                skipped += 1
                self.logger.debug(f"Skipping {outcome.path}: {outcome.skipped_reason}")
                continue

            for ecosystem, record in outcome.records:
                packages = buckets.setdefault(ecosystem, {})
                packages.setdefault(record.package_name.lower(), []).append(record)
                loaded += 1

        index = AdvisoryIndex(buckets, files_scanned=total_files, files_skipped=skipped)
        self.logger.info(
            f"Loaded {loaded} advisories for {index.package_count} packages "
            f"({skipped} malformed files skipped)"
        )
        return index

    def _load_files(self, advisory_files: List[Path]) -> Iterator[AdvisoryFileOutcome]:
        if self.show_progress:
            with Progress(
                SpinnerColumn(),
                TextColumn("[progress.description]{task.description}"),
                BarColumn(),
                MofNCompleteColumn(),
                console=stderr_console,
                transient=True
            ) as progress:
                task = progress.add_task("Loading advisories...", total=len(advisory_files))
                for advisory_file in advisory_files:
                    yield load_advisory_file(advisory_file)
                    progress.update(task, advance=1)
            return

        for position, advisory_file in enumerate(advisory_files, 1):
            if position % PROGRESS_INTERVAL == 0:
                self.logger.info(f"Progress: {position}/{len(advisory_files)} files processed...")
            yield load_advisory_file(advisory_file)


class AdvisoryLookup:
    """Query surface over an advisory index.

    The index is taken from the injected builder the first time it is
    needed; tests can hand in a ready index with :meth:`from_index`.
    """

    def __init__(
        self,
        builder: Optional[AdvisoryIndexBuilder] = None,
        index: Optional[AdvisoryIndex] = None
    ) -> None:
        if builder is None and index is None:
            raise ValueError("AdvisoryLookup needs a builder or an index")
        self._builder = builder
        self._index = index

    @classmethod
    def from_index(cls, index: AdvisoryIndex) -> "AdvisoryLookup":
        return cls(index=index)

    @property
    def index(self) -> AdvisoryIndex:
        if self._index is None:
            self._index = self._builder.build()
        return self._index

    def fetch(self, ecosystem: str, package_name: str) -> List[AdvisoryRecord]:
        """Find advisories for a package.

        Args:
            ecosystem: Package manager name (``go_modules``, ``cargo``, ...) or
                database ecosystem name
            package_name: Package name, matched case-insensitively

        Returns:
            Advisories for the package, empty when none are known
        """
        return list(self.index.get(canonicalize(ecosystem), package_name.lower()))
