"""Local advisory database: location, ecosystem mapping and index."""

from .database import AdvisoryDatabaseConfig, clone_database
from .ecosystems import SUPPORTED_ECOSYSTEMS, canonicalize
from .index import AdvisoryIndex, AdvisoryIndexBuilder, AdvisoryLookup, AdvisoryRecord
from .ranges import extract_affected_versions

__all__ = [
    "AdvisoryDatabaseConfig",
    "clone_database",
    "SUPPORTED_ECOSYSTEMS",
    "canonicalize",
    "AdvisoryIndex",
    "AdvisoryIndexBuilder",
    "AdvisoryLookup",
    "AdvisoryRecord",
    "extract_affected_versions",
]
