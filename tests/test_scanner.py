"""Tests for manifest discovery, repository scanning and output formatting."""

import json
import shlex

import pytest

from advisory_scan.advisories.index import AdvisoryIndex, AdvisoryIndexBuilder, AdvisoryLookup, AdvisoryRecord
from advisory_scan.core.scanner import ManifestScanner, ScanResult
from advisory_scan.errors import RepositoryPathError
from advisory_scan.output.formatters import CommandsFormatter, JSONFormatter
from advisory_scan.utils.path_utils import ManifestEntry, ManifestFinder, PathFilter


@pytest.fixture
def scanner(database_config):
    return ManifestScanner(AdvisoryLookup(AdvisoryIndexBuilder(database_config)))


class TestManifestDiscovery:
    """Test finding manifests and computing their directories."""

    def test_root_manifest_directory(self, tmp_path):
        entry = ManifestEntry.from_path("go_modules", tmp_path / "go.mod", tmp_path)
        assert entry.relative_path == "go.mod"
        assert entry.directory == "/"

    def test_nested_manifest_directory(self, tmp_path):
        entry = ManifestEntry.from_path("cargo", tmp_path / "crates" / "core" / "Cargo.toml", tmp_path)
        assert entry.relative_path == "crates/core/Cargo.toml"
        assert entry.directory == "/crates/core"

    def test_find_manifests(self, scanner, sample_repo):
        entries = scanner.find_manifests(sample_repo)

        assert [(entry.ecosystem, entry.relative_path, entry.directory) for entry in entries] == [
            ("go_modules", "go.mod", "/"),
            ("cargo", "crates/core/Cargo.toml", "/crates/core"),
            ("gradle", "service/build.gradle.kts", "/service"),
        ]

    def test_both_gradle_flavours_found(self, scanner, tmp_path):
        (tmp_path / "a").mkdir()
        (tmp_path / "b").mkdir()
        (tmp_path / "a" / "build.gradle").write_text("")
        (tmp_path / "b" / "build.gradle.kts").write_text("")

        files = [entry.relative_path for entry in scanner.find_manifests(tmp_path)]
        assert files == ["a/build.gradle", "b/build.gradle.kts"]

    def test_ignore_patterns(self, sample_repo):
        finder = ManifestFinder(ignore_patterns=["*/crates/*"])
        entries = finder.find_manifests(sample_repo, [("cargo", ["**/Cargo.toml"])])
        assert entries == []

    def test_git_directory_ignored(self, tmp_path):
        assert PathFilter().is_ignored(tmp_path / ".git" / "modules" / "go.mod")
        assert not PathFilter().is_ignored(tmp_path / "go.mod")

    def test_dot_directories_skipped(self, scanner, sample_repo):
        for hidden in (".github/actions/tool", ".cargo/registry/src"):
            (sample_repo / hidden).mkdir(parents=True)
        (sample_repo / ".github" / "actions" / "tool" / "go.mod").write_text("require a.b/c v1.0.0\n")
        (sample_repo / ".cargo" / "registry" / "src" / "Cargo.toml").write_text('[dependencies]\nserde = "1"\n')

        files = [entry.relative_path for entry in scanner.find_manifests(sample_repo)]
        assert files == ["go.mod", "crates/core/Cargo.toml", "service/build.gradle.kts"]

    def test_missing_repository(self, scanner, tmp_path):
        with pytest.raises(RepositoryPathError):
            scanner.find_manifests(tmp_path / "missing")


class TestManifestScanner:
    """Test the end-to-end scan."""

    def test_scan_sample_repo(self, scanner, sample_repo):
        results = scanner.scan(sample_repo)
        by_file = {result.file: result for result in results}

        go = by_file["go.mod"]
        assert go.ecosystem == "go_modules"
        assert go.directory == "/"
        assert go.package_count == 2
        assert go.advisory_count == 1
        assert go.advisories[0].advisory_id == "GHSA-45x7-px36-x8w8"

        cargo = by_file["crates/core/Cargo.toml"]
        assert cargo.package_count == 2
        assert cargo.advisory_count == 1
        assert cargo.advisories[0].package_name == "serde"

        gradle = by_file["service/build.gradle.kts"]
        assert gradle.package_count == 2
        assert gradle.advisory_count == 1
        assert gradle.advisories[0].cve_id == "CVE-2025-00001"

    def test_result_emitted_without_advisories(self, scanner, tmp_path):
        (tmp_path / "go.mod").write_text("require example.com/safe v1.0.0\n")

        results = scanner.scan(tmp_path)

        assert len(results) == 1
        assert results[0].package_count == 1
        assert results[0].advisory_count == 0
        assert results[0].advisories == []

    def test_unparsable_manifest_does_not_abort(self, scanner, sample_repo):
        (sample_repo / "broken").mkdir()
        (sample_repo / "broken" / "go.mod").write_bytes(b"\xff\xfe\xfa")

        results = scanner.scan(sample_repo)
        broken = next(result for result in results if result.file == "broken/go.mod")

        assert len(results) == 4
        assert broken.error is not None
        assert broken.package_count == 0
        assert broken.advisory_count == 0

    def test_advisories_accumulate_per_package(self):
        first = AdvisoryRecord(package_name="a", advisory_id="GHSA-1")
        second = AdvisoryRecord(package_name="a", advisory_id="GHSA-2")
        third = AdvisoryRecord(package_name="b", advisory_id="GHSA-3")
        index = AdvisoryIndex({"crates.io": {"a": [first, second], "b": [third]}})
        scanner = ManifestScanner(AdvisoryLookup.from_index(index))

        entry = ManifestEntry(ecosystem="cargo", file_path=None, relative_path="Cargo.toml", directory="/")
        scanner.registry.get_parser("cargo").extract = lambda path: {"b", "a", "c"}

        result = scanner.scan_manifest(entry)
        assert result.package_count == 3
        assert [advisory.advisory_id for advisory in result.advisories] == ["GHSA-1", "GHSA-2", "GHSA-3"]

    def test_empty_repository(self, scanner, tmp_path):
        assert scanner.scan(tmp_path) == []


class TestFormatters:
    """Test JSON and command output."""

    @pytest.fixture
    def results(self, scanner, sample_repo):
        (sample_repo / "tools").mkdir()
        (sample_repo / "tools" / "go.mod").write_text("require example.com/safe v1.0.0\n")
        return scanner.scan(sample_repo)

    def test_result_to_dict(self):
        record = AdvisoryRecord(package_name="serde", advisory_id="GHSA-1", affected_versions=("< 1.0",))
        result = ScanResult(
            ecosystem="cargo",
            directory="/",
            file="Cargo.toml",
            package_count=1,
            advisory_count=1,
            advisories=[record],
            error=None,
        )

        assert result.to_dict() == {
            "ecosystem": "cargo",
            "directory": "/",
            "file": "Cargo.toml",
            "package_count": 1,
            "advisory_count": 1,
            "advisories": [record.to_dict()],
        }

    def test_json_render(self, results):
        data = json.loads(JSONFormatter().render(results))

        assert len(data) == 4
        assert set(data[0]) == {"ecosystem", "directory", "file", "package_count", "advisory_count", "advisories"}
        assert data[0]["advisories"][0]["ghsa-id"] == "GHSA-45x7-px36-x8w8"

    def test_json_save(self, results, tmp_path):
        output = tmp_path / "out.json"
        JSONFormatter(output).save_results(results)
        assert json.loads(output.read_text()) == JSONFormatter().format_scan_results(results)

    def test_json_save_requires_path(self, results):
        with pytest.raises(ValueError):
            JSONFormatter().save_results(results)

    def test_commands_only_for_results_with_advisories(self, results, sample_repo):
        rendered = CommandsFormatter(sample_repo).render(results)

        assert rendered.count("--security-updates-only") == 3
        assert "tools/go.mod" not in rendered
        assert "# go.mod (1 advisories)" in rendered
        assert f"ruby bin/runner.rb go_modules {shlex.quote(str(sample_repo))} \\" in rendered
        assert "--dir /crates/core \\" in rendered

    def test_command_embeds_advisories(self, results, sample_repo):
        go = next(result for result in results if result.file == "go.mod")
        command = CommandsFormatter(sample_repo, runner="./runner").render_command(go)

        assignment = command.splitlines()[1]
        assert assignment.startswith("SECURITY_ADVISORIES=")
        value = shlex.split(assignment[len("SECURITY_ADVISORIES="):-2])[0]
        assert json.loads(value) == [advisory.to_dict() for advisory in go.advisories]
        assert "  ./runner go_modules" in command

    def test_commands_when_nothing_found(self, sample_repo):
        rendered = CommandsFormatter(sample_repo).render([
            ScanResult(ecosystem="cargo", directory="/", file="Cargo.toml"),
        ])
        assert "# No advisories found - no commands to run" in rendered
