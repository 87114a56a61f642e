"""advisory-scan - match repository dependencies against a local GitHub Advisory Database mirror."""

__version__ = "0.1.0"

from .advisories import (
    AdvisoryDatabaseConfig,
    AdvisoryIndexBuilder,
    AdvisoryLookup,
    AdvisoryRecord,
    canonicalize,
    extract_affected_versions,
)
from .core import ManifestParser, ManifestScanner, ScanResult
from .errors import CorpusNotFoundError, FatalSetupError, RepositoryPathError
from .output.formatters import CommandsFormatter, ConsoleFormatter, JSONFormatter

__all__ = [
    "AdvisoryDatabaseConfig",
    "AdvisoryIndexBuilder",
    "AdvisoryLookup",
    "AdvisoryRecord",
    "canonicalize",
    "extract_affected_versions",
    "ManifestParser",
    "ManifestScanner",
    "ScanResult",
    "CorpusNotFoundError",
    "FatalSetupError",
    "RepositoryPathError",
    "CommandsFormatter",
    "ConsoleFormatter",
    "JSONFormatter",
]
