"""Shared fixtures: a small advisory database and a sample repository."""

import json

import pytest

from advisory_scan.advisories.database import AdvisoryDatabaseConfig


GO_CRYPTO_ADVISORY = {
    "id": "GHSA-45x7-px36-x8w8",
    "summary": "Prefix Truncation Attack against ChaCha20-Poly1305 and Encrypt-then-MAC aka Terrapin",
    "details": "Many SSH cryptographic primitives are vulnerable.",
    "aliases": ["CVE-2023-48795"],
    "database_specific": {"severity": "MODERATE"},
    "affected": [
        {
            "package": {"ecosystem": "Go", "name": "golang.org/x/crypto"},
            "ranges": [
                {"type": "SEMVER", "events": [{"introduced": "0.0.0", "fixed": "0.17.0"}]}
            ],
        }
    ],
}

SERDE_ADVISORY = {
    "id": "GHSA-serd-0000-0001",
    "summary": "Stack overflow in serde",
    "details": "Deeply nested input overflows the stack.",
    "aliases": [],
    "severity": "HIGH",
    "database_specific": {"severity": "LOW"},
    "affected": [
        {
            "package": {"ecosystem": "crates.io", "name": "serde"},
            "ranges": [
                {"type": "SEMVER", "events": [{"introduced": "0"}, {"fixed": "1.0.100"}]},
                {"type": "SEMVER", "events": [{"introduced": "1.0.150"}, {"fixed": "1.0.160"}]},
            ],
        }
    ],
}

COMMONS_ADVISORY = {
    "id": "GHSA-comm-0000-0002",
    "summary": "Uncontrolled recursion in commons-lang3",
    "aliases": ["CVE-2025-00001", "GHSA-other-alias"],
    "affected": [
        {
            "package": {"ecosystem": "Maven", "name": "org.apache.commons:commons-lang3"},
            "ranges": [{"type": "ECOSYSTEM", "events": [{"introduced": "3.0"}, {"fixed": "3.18.0"}]}],
        },
        {
            "package": {"ecosystem": "npm", "name": "commons-lang3-js"},
            "ranges": [{"type": "SEMVER", "events": [{"introduced": "0"}, {"fixed": "1.0.0"}]}],
        },
    ],
}


def write_advisory(database_path, data, name=None):
    """Write one advisory JSON file into the reviewed advisories tree."""
    name = name or data["id"]
    advisory_dir = database_path / "advisories" / "github-reviewed" / "2024" / "01" / name
    advisory_dir.mkdir(parents=True, exist_ok=True)
    advisory_file = advisory_dir / f"{name}.json"
    if isinstance(data, str):
        advisory_file.write_text(data)
    else:
        advisory_file.write_text(json.dumps(data))
    return advisory_file


@pytest.fixture
def database_path(tmp_path):
    """Create an advisory database mirror with a handful of advisories."""
    path = tmp_path / "advisory-database"
    write_advisory(path, GO_CRYPTO_ADVISORY)
    write_advisory(path, SERDE_ADVISORY)
    write_advisory(path, COMMONS_ADVISORY)
    return path


@pytest.fixture
def database_config(database_path):
    return AdvisoryDatabaseConfig(database_path=database_path)


@pytest.fixture
def sample_repo(tmp_path):
    """Create a repository with one manifest per supported ecosystem."""
    repo = tmp_path / "repo"
    repo.mkdir()

    (repo / "go.mod").write_text(
        "module example.com/app\n"
        "\n"
        "go 1.21\n"
        "\n"
        "require (\n"
        "\tgithub.com/pkg/errors v0.9.1\n"
        "\tgolang.org/x/crypto v0.14.0\n"
        ")\n"
    )

    rust = repo / "crates" / "core"
    rust.mkdir(parents=True)
    (rust / "Cargo.toml").write_text(
        "[package]\n"
        "name = \"core\"\n"
        "version = \"0.1.0\"\n"
        "\n"
        "[dependencies]\n"
        "serde = \"1.0\"\n"
        "\n"
        "[dev-dependencies]\n"
        "mockall = \"0.11\"\n"
    )

    java = repo / "service"
    java.mkdir()
    (java / "build.gradle.kts").write_text(
        "dependencies {\n"
        "    implementation(\"org.apache.commons:commons-lang3:3.12.0\")\n"
        "    testImplementation(\"junit:junit:4.13.2\")\n"
        "}\n"
    )

    return repo
