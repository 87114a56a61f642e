"""Path utilities for discovering manifest files and filtering paths."""

import fnmatch
from dataclasses import dataclass
from pathlib import Path, PurePosixPath
from typing import Iterable, Iterator, List, Optional, Sequence, Tuple


@dataclass(frozen=True)
class ManifestEntry:
    """A discovered dependency manifest."""

    ecosystem: str
    file_path: Path
    relative_path: str
    directory: str

    @classmethod
    def from_path(cls, ecosystem: str, file_path: Path, repo_path: Path) -> "ManifestEntry":
        """Describe ``file_path`` relative to the repository root.

        Args:
            ecosystem: Package manager the file belongs to
            file_path: Absolute path of the manifest
            repo_path: Repository root

        Returns:
            Manifest entry whose directory starts with ``/``
        """
        relative = PurePosixPath(file_path.relative_to(repo_path).as_posix())
        parent = relative.parent.as_posix()
        directory = "/" if parent == "." else f"/{parent}"

        return cls(
            ecosystem=ecosystem,
            file_path=file_path,
            relative_path=relative.as_posix(),
            directory=directory,
        )


class PathFilter:
    """Filters paths based on glob patterns."""

    DEFAULT_IGNORE_PATTERNS = [
        "*/.git/*",
    ]

    def __init__(self, ignore_patterns: Optional[List[str]] = None) -> None:
        """Initialize path filter.

        Args:
            ignore_patterns: Additional glob patterns to ignore
        """
        self.ignore_patterns = self.DEFAULT_IGNORE_PATTERNS + list(ignore_patterns or [])

    def is_ignored(self, path: Path) -> bool:
        """Check if a path should be ignored.

        Args:
            path: Path to check

        Returns:
            True if path should be ignored
        """
        path_str = path.as_posix()
        return any(fnmatch.fnmatch(path_str, pattern) for pattern in self.ignore_patterns)

    def filter_paths(self, paths: Iterable[Path]) -> Iterator[Path]:
        for path in paths:
            if not self.is_ignored(path):
                yield path


class ManifestFinder:
    """Finds manifest files in a repository by glob pattern."""

    def __init__(self, ignore_patterns: Optional[List[str]] = None) -> None:
        self.path_filter = PathFilter(ignore_patterns)

    @staticmethod
    def in_hidden_directory(file_path: Path, repo_path: Path) -> bool:
        """Check whether a file sits below a dot-directory of the repository."""
        parents = file_path.relative_to(repo_path).parts[:-1]
        return any(part.startswith(".") for part in parents)

    def find_manifests(
        self,
        repo_path: Path,
        patterns: Sequence[Tuple[str, Sequence[str]]]
    ) -> List[ManifestEntry]:
        """Find manifests for each ecosystem.

        Args:
            repo_path: Repository root
            patterns: (ecosystem, glob patterns) pairs, searched in order

        Returns:
            Discovered manifests, grouped by ecosystem then pattern, paths sorted.
            Files below dot-directories such as ``.git`` or ``.github`` are skipped.
        """
        repo_path = repo_path.resolve()
        entries: List[ManifestEntry] = []

        for ecosystem, globs in patterns:
            for pattern in globs:
                hits = sorted(
                    hit for hit in repo_path.glob(pattern)
                    if hit.is_file() and not self.in_hidden_directory(hit, repo_path)
                )
                for file_path in self.path_filter.filter_paths(hits):
                    entries.append(ManifestEntry.from_path(ecosystem, file_path, repo_path))

        return entries
