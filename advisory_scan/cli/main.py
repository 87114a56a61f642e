"""Main CLI interface for advisory-scan."""

import time
from pathlib import Path
from typing import List, Optional

import typer
from rich.console import Console
from rich.panel import Panel
from rich.table import Table

from ..advisories.database import DB_PATH_ENV_VAR, AdvisoryDatabaseConfig, clone_database
from ..advisories.ecosystems import ECOSYSTEM_MAPPING, SUPPORTED_ECOSYSTEMS
from ..advisories.index import AdvisoryIndexBuilder, AdvisoryLookup
from ..core.parsers import ManifestParser
from ..core.scanner import ManifestScanner
from ..errors import FatalSetupError
from ..output.formatters import DEFAULT_RUNNER, CommandsFormatter, ConsoleFormatter, JSONFormatter
from ..utils.logging import get_logger, setup_logging, stderr_console
from ..utils.path_utils import ManifestFinder
from ..utils.performance import PerformanceMonitor

app = typer.Typer(
    name="advisory-scan",
    help="Match repository dependencies against a local GitHub Advisory Database mirror",
    add_completion=False
)

# Results go to stdout, everything else to stderr.
console = Console()
status = ConsoleFormatter(stderr_console)
logger = get_logger("CLI")

OUTPUT_FORMATS = ("json", "commands")


def _database_config(database_path: Optional[Path]) -> AdvisoryDatabaseConfig:
    if database_path:
        return AdvisoryDatabaseConfig(database_path=database_path)
    return AdvisoryDatabaseConfig.from_env()


@app.command()
def scan(
    path: Optional[Path] = typer.Argument(
        None,
        help="Path to the repository to scan"
    ),
    output_format: str = typer.Option(
        "json",
        "--format",
        "-f",
        help="Output format: 'json' (default) or 'commands'"
    ),
    database_path: Optional[Path] = typer.Option(
        None,
        "--database",
        envvar=DB_PATH_ENV_VAR,
        help="Path to the local advisory database mirror"
    ),
    clone_only: bool = typer.Option(
        False,
        "--clone-only",
        help="Only clone the database, don't scan"
    ),
    no_clone: bool = typer.Option(
        False,
        "--no-clone",
        help="Never clone; fail if the database is missing"
    ),
    ignore_patterns: Optional[List[str]] = typer.Option(
        None,
        "--ignore",
        help="Additional glob patterns of paths to ignore"
    ),
    runner: str = typer.Option(
        DEFAULT_RUNNER,
        "--runner",
        help="Update runner invoked by the generated commands"
    ),
    output: Optional[Path] = typer.Option(
        None,
        "--output",
        "-o",
        help="Also write JSON results to this file"
    ),
    verbose: bool = typer.Option(
        False,
        "--verbose",
        "-v",
        help="Enable verbose logging"
    ),
    performance: bool = typer.Option(
        False,
        "--performance",
        help="Show performance summary"
    )
) -> None:
    """Scan a repository's dependency files for known advisories."""
    setup_logging(verbose=verbose)

    if output_format not in OUTPUT_FORMATS:
        status.format_error(f"Unknown output format '{output_format}', expected one of: {', '.join(OUTPUT_FORMATS)}")
        raise typer.Exit(1)

    config = _database_config(database_path)
    logger.debug(f"Using advisory database at {config.database_path}")
    monitor = PerformanceMonitor()

    try:
        if not no_clone:
            clone_database(config)

        if clone_only:
            stderr_console.print("Database ready. Run without --clone-only to scan for advisories.")
            return

        if path is None:
            status.format_error("Please provide a repository path")
            stderr_console.print("Usage: advisory-scan scan REPO_PATH")
            raise typer.Exit(1)

        if not path.is_dir():
            status.format_error(f"Repository path does not exist: {path}")
            raise typer.Exit(1)

        repo_path = path.resolve()
        builder = AdvisoryIndexBuilder(config, show_progress=True, performance_monitor=monitor)
        scanner = ManifestScanner(
            AdvisoryLookup(builder),
            registry=ManifestParser,
            finder=ManifestFinder(ignore_patterns)
        )

        stderr_console.print(f"Scanning for dependency files in {repo_path}...")
        manifests = scanner.find_manifests(repo_path)

        if not manifests:
            ecosystems = ", ".join(ManifestParser.get_supported_ecosystems())
            stderr_console.print(f"No dependency files found for supported ecosystems ({ecosystems})")
            return

        stderr_console.print(f"Found {len(manifests)} dependency file(s)")
        builder.build()

        start_time = time.perf_counter()
        with monitor.measure("scan_manifests"):
            results = [scanner.scan_manifest(entry) for entry in manifests]
        scan_time = time.perf_counter() - start_time

    except FatalSetupError as e:
        status.format_error(str(e))
        raise typer.Exit(1)

    status.format_scan_summary(results, scan_time)

    if output:
        JSONFormatter(output).save_results(results)

    if output_format == "commands":
        typer.echo(CommandsFormatter(repo_path, runner).render(results))
    else:
        typer.echo(JSONFormatter().render(results))

    if performance:
        monitor.print_summary()


@app.command()
def clone(
    database_path: Optional[Path] = typer.Option(
        None,
        "--database",
        envvar=DB_PATH_ENV_VAR,
        help="Path to the local advisory database mirror"
    )
) -> None:
    """Clone the GitHub Advisory Database if it is not present yet."""
    setup_logging()
    try:
        clone_database(_database_config(database_path))
    except FatalSetupError as e:
        status.format_error(str(e))
        raise typer.Exit(1)


@app.command()
def lookup(
    ecosystem: str = typer.Argument(..., help="Ecosystem, e.g. go_modules, cargo, gradle or Go"),
    package: str = typer.Argument(..., help="Package name"),
    database_path: Optional[Path] = typer.Option(
        None,
        "--database",
        envvar=DB_PATH_ENV_VAR,
        help="Path to the local advisory database mirror"
    )
) -> None:
    """Show the advisories indexed for one package."""
    setup_logging()
    builder = AdvisoryIndexBuilder(_database_config(database_path))

    try:
        advisories = AdvisoryLookup(builder).fetch(ecosystem, package)
    except FatalSetupError as e:
        status.format_error(str(e))
        raise typer.Exit(1)

    if not advisories:
        console.print(f"No advisories found for {package} ({ecosystem})")
        return

    table = Table(title=f"Advisories for {package}")
    table.add_column("GHSA", style="red", no_wrap=True)
    table.add_column("CVE")
    table.add_column("Severity", style="yellow")
    table.add_column("Affected versions", style="cyan")
    table.add_column("Title")

    for advisory in advisories:
        table.add_row(
            advisory.advisory_id or "",
            advisory.cve_id or "",
            advisory.severity,
            ", ".join(advisory.affected_versions),
            advisory.title or "",
        )

    console.print(table)


@app.command()
def info() -> None:
    """Show supported ecosystems and manifest patterns."""
    console.print(Panel.fit(
        "[bold blue]advisory-scan[/bold blue]\n"
        "Matches dependency manifests against a local GitHub Advisory Database mirror",
        title="Information"
    ))

    table = Table(title="Supported Manifests")
    table.add_column("Ecosystem", style="cyan")
    table.add_column("Patterns")
    table.add_column("Advisory ecosystem", style="green")

    for ecosystem, patterns in ManifestParser.get_patterns():
        table.add_row(ecosystem, ", ".join(patterns), ECOSYSTEM_MAPPING.get(ecosystem, ecosystem))

    console.print(table)
    console.print(f"[bold]Indexed advisory ecosystems:[/bold] {', '.join(SUPPORTED_ECOSYSTEMS)}")


def main() -> None:
    """Main entry point for the advisory-scan CLI."""
    app()


if __name__ == "__main__":
    main()
