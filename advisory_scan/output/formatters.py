"""Output formatters for advisory-scan results."""

import json
import shlex
from pathlib import Path
from typing import Any, Dict, List, Optional, Sequence

from rich.console import Console
from rich.panel import Panel
from rich.table import Table
from rich.text import Text

from ..core.scanner import ScanResult
from ..utils.logging import get_logger, stderr_console

DEFAULT_RUNNER = "ruby bin/runner.rb"


class JSONFormatter:
    """JSON formatter for scan results."""

    def __init__(self, output_file: Optional[Path] = None) -> None:
        """Initialize the JSON formatter.

        Args:
            output_file: Optional output file path
        """
        self.output_file = output_file
        self.logger = get_logger("JSONFormatter")

    def format_scan_results(self, results: Sequence[ScanResult]) -> List[Dict[str, Any]]:
        return [result.to_dict() for result in results]

    def render(self, results: Sequence[ScanResult]) -> str:
        """Render results as a pretty-printed JSON array."""
        return json.dumps(self.format_scan_results(results), indent=2, ensure_ascii=False)

    def save_results(
        self,
        results: Sequence[ScanResult],
        output_file: Optional[Path] = None
    ) -> None:
        """Save results to a JSON file.

        Args:
            results: Scan results
            output_file: Output file path (uses instance default if None)
        """
        file_path = output_file or self.output_file
        if not file_path:
            raise ValueError("No output file specified")

        try:
            with open(file_path, 'w', encoding='utf-8') as f:
                f.write(self.render(results))
                f.write("\n")

            self.logger.info(f"Results saved to {file_path}")
        except IOError as e:
            self.logger.error(f"Failed to save results to {file_path}: {e}")
            raise


class CommandsFormatter:
    """Renders one update-runner command per manifest with advisories.

    Each command passes the manifest's advisories to the runner through the
    ``SECURITY_ADVISORIES`` environment variable.
    """

    def __init__(self, repo_path: Path, runner: str = DEFAULT_RUNNER) -> None:
        self.repo_path = repo_path
        self.runner = runner

    def render_command(self, result: ScanResult) -> str:
        advisories_json = json.dumps(
            [advisory.to_dict() for advisory in result.advisories],
            separators=(",", ":"),
            ensure_ascii=False,
        )
        return "\n".join([
            f"# {result.file} ({result.advisory_count} advisories)",
            f"SECURITY_ADVISORIES={shlex.quote(advisories_json)} \\",
            f"  {self.runner} {shlex.quote(result.ecosystem)} {shlex.quote(str(self.repo_path))} \\",
            f"  --dir {shlex.quote(result.directory)} \\",
            "  --security-updates-only",
        ])

    def render(self, results: Sequence[ScanResult]) -> str:
        lines = ["# Run these commands to update dependencies with security advisories:", ""]

        with_advisories = [result for result in results if result.advisory_count > 0]
        for result in with_advisories:
            lines.append(self.render_command(result))
            lines.append("")

        if not with_advisories:
            lines.append("# No advisories found - no commands to run")

        return "\n".join(lines)


class ConsoleFormatter:
    """Rich console summary of scan results, written to stderr."""

    def __init__(self, console: Optional[Console] = None) -> None:
        self.console = console or stderr_console

    def format_scan_summary(self, results: Sequence[ScanResult], scan_time: float) -> None:
        """Display a per-manifest summary table.

        Args:
            results: Scan results
            scan_time: Time taken for the scan in seconds
        """
        table = Table(title="Dependency Files")
        table.add_column("File", style="cyan", no_wrap=True)
        table.add_column("Ecosystem", style="blue")
        table.add_column("Directory")
        table.add_column("Packages", justify="right")
        table.add_column("Advisories", justify="right")

        for result in results:
            if result.error:
                advisories = Text("parse error", style="yellow")
            elif result.advisory_count:
                advisories = Text(str(result.advisory_count), style="red bold")
            else:
                advisories = Text("0", style="green")

            table.add_row(
                result.file,
                result.ecosystem,
                result.directory,
                str(result.package_count),
                advisories,
            )

        self.console.print(table)

        total = sum(result.advisory_count for result in results)
        style = "red" if total else "green"
        self.console.print(Panel(
            f"Manifests scanned: {len(results)}\n"
            f"Total advisories: {total}\n"
            f"Scan time: {scan_time:.2f}s",
            title=f"Found {total} advisories" if total else "No advisories found",
            style=style,
        ))

    def format_error(self, error: str) -> None:
        self.console.print(Text(f"Error: {error}", style="red"))
