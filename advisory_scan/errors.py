"""Fatal setup errors for advisory-scan."""

from pathlib import Path


class FatalSetupError(Exception):
    """Raised when the run cannot proceed at all."""


class CorpusNotFoundError(FatalSetupError):
    """Raised when the mirrored advisory database is missing."""

    def __init__(self, path: Path) -> None:
        self.path = path
        super().__init__(f"Advisory database not found at {path}")


class RepositoryPathError(FatalSetupError):
    """Raised when the repository to scan is missing or not a directory."""

    def __init__(self, path: Path) -> None:
        self.path = path
        super().__init__(f"Repository path does not exist: {path}")
