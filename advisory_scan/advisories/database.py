"""Location and mirroring of the local GitHub Advisory Database."""

import os
import shutil
import subprocess
from dataclasses import dataclass, field
from pathlib import Path
from typing import Mapping, Optional

from ..errors import FatalSetupError
from ..utils.logging import get_logger

GITHUB_ADVISORY_REPO = "https://github.com/github/advisory-database.git"
DEFAULT_DB_PATH = Path("~/.dependabot/advisory-database").expanduser()
DB_PATH_ENV_VAR = "ADVISORY_DB_PATH"

logger = get_logger("AdvisoryDatabase")


@dataclass
class AdvisoryDatabaseConfig:
    """Configuration for the mirrored advisory database."""

    database_path: Path = field(default_factory=lambda: DEFAULT_DB_PATH)
    repository_url: str = GITHUB_ADVISORY_REPO

    def __post_init__(self) -> None:
        self.database_path = Path(self.database_path).expanduser()

    @property
    def advisories_path(self) -> Path:
        """Directory holding the reviewed advisories."""
        return self.database_path / "advisories" / "github-reviewed"

    @classmethod
    def from_env(cls, environ: Optional[Mapping[str, str]] = None) -> "AdvisoryDatabaseConfig":
        """Build a configuration honouring ``ADVISORY_DB_PATH``.

        Args:
            environ: Environment mapping (defaults to ``os.environ``)

        Returns:
            Database configuration
        """
        environ = os.environ if environ is None else environ
        override = environ.get(DB_PATH_ENV_VAR)
        if override:
            return cls(database_path=Path(override))
        return cls()


def clone_database(config: AdvisoryDatabaseConfig) -> bool:
    """Shallow-clone the advisory database unless it is already present.

    Args:
        config: Database configuration

    Returns:
        True if a clone was performed, False if the mirror already existed

    Raises:
        FatalSetupError: If git is unavailable or the clone fails
    """
    if config.database_path.exists():
        logger.info(f"Advisory database already exists at {config.database_path}")
        logger.info(f"To re-clone, delete it first: rm -rf {config.database_path}")
        return False

    git = shutil.which("git")
    if git is None:
        raise FatalSetupError("Failed to clone advisory database: git executable not found")

    logger.info("Cloning GitHub Advisory Database, this may take a few minutes...")
    config.database_path.parent.mkdir(parents=True, exist_ok=True)

    try:
        subprocess.run(
            [git, "clone", "--depth", "1", config.repository_url, str(config.database_path)],
            check=True,
        )
    except (subprocess.CalledProcessError, OSError) as e:
        raise FatalSetupError(f"Failed to clone advisory database: {e}") from e

    logger.info(f"Advisory database cloned successfully to {config.database_path}")
    return True
