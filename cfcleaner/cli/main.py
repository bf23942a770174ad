"""Main CLI entry point using Typer."""

import asyncio
import logging
import sys
from datetime import datetime
from typing import Optional

import typer
from rich.console import Console
from rich.table import Table

from ..cleanup.audit import AuditStorage
from ..cleanup.orchestrator import CLEANUP_ORDER, CloudFoundryCleaner
from ..cleanup.reporter import CleanupReporter
from ..exceptions import CleanupError
from ..models.resource import ResourceRecord
from ..utils.logging import setup_logging
from .config import Config
from .factory import audit_dir, create_cleaner, create_clients

logger = logging.getLogger(__name__)

# Create Typer app
app = typer.Typer(
    name="cfclean",
    help="Cloud Foundry test environment cleaner - delete fixtures left behind by integration tests",
    add_completion=False,
)

# Create Rich console for output
console = Console()

# Global config
config: Optional[Config] = None


@app.callback()
def main(
    config_path: Optional[str] = typer.Option(
        None,
        "--config",
        "-c",
        help="Config file (default: $CF_CLEANER_CONFIG or ~/.cfcleaner/config.yaml)",
    ),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Enable verbose logging"),
    quiet: bool = typer.Option(False, "--quiet", "-q", help="Suppress output except errors"),
    no_color: bool = typer.Option(False, "--no-color", help="Disable colored output"),
):
    """Cloud Foundry test environment cleaner."""
    global config

    # Load configuration
    try:
        config = Config.load(config_path)
    except (OSError, ValueError) as e:
        console.print(f"✗ Error loading configuration: {e}", style="bold red")
        raise typer.Exit(code=2)

    # Setup logging
    log_level = "ERROR" if quiet else ("DEBUG" if verbose else config.log_level)
    setup_logging(level=log_level, verbose=verbose)

    # Disable colors if requested
    if no_color:
        console.no_color = True


@app.command()
def version():
    """Show version information."""
    import httpx

    from .. import __version__

    console.print(f"cf-test-cleaner version {__version__}")
    console.print(f"Python {sys.version.split()[0]}")
    console.print(f"httpx {httpx.__version__}")


def _loaded_config() -> Config:
    """Return the global config, loading it when no callback has run."""
    global config

    if config is None:
        try:
            config = Config.load()
        except (OSError, ValueError) as e:
            console.print(f"✗ Error loading configuration: {e}", style="bold red")
            raise typer.Exit(code=2)
    return config


def _require_config() -> Config:
    cfg = _loaded_config()
    try:
        cfg.validate()
    except ValueError as e:
        console.print(f"✗ {e}", style="bold red")
        raise typer.Exit(code=2)
    return cfg


async def _run_clean(cfg: Config) -> tuple[CloudFoundryCleaner, Optional[CleanupError]]:
    cloudfoundry, uaa = await create_clients(cfg)
    cleaner = create_cleaner(cfg, cloudfoundry, uaa)

    try:
        await cleaner.clean()
    except CleanupError as e:
        return cleaner, e
    finally:
        await cloudfoundry.aclose()
        await uaa.aclose()

    return cleaner, None


async def _run_preview(cfg: Config) -> dict[str, list[ResourceRecord]]:
    cloudfoundry, uaa = await create_clients(cfg)
    cleaner = create_cleaner(cfg, cloudfoundry, uaa)

    try:
        return await cleaner.preview()
    finally:
        await cloudfoundry.aclose()
        await uaa.aclose()


@app.command()
def clean(
    yes: bool = typer.Option(False, "--yes", "-y", help="Skip the confirmation prompt"),
):
    """Delete every test fixture and reset feature flags to their defaults."""
    cfg = _require_config()

    if not yes:
        console.print(f"[bold yellow]⚠ This deletes every test fixture on {cfg.api_url}[/bold yellow]")
        console.print(f"  Kinds (in order): {', '.join(CLEANUP_ORDER)}")
        typer.confirm("Continue?", abort=True)

    try:
        cleaner, error = asyncio.run(_run_clean(cfg))
    except CleanupError as e:
        console.print(f"✗ Unable to connect: {e}", style="bold red")
        raise typer.Exit(code=2)

    reporter = CleanupReporter(console)
    if cleaner.last_operation is not None:
        reporter.display_operation(cleaner.last_operation, cleaner.last_records)

    if error is not None:
        raise typer.Exit(code=1)


@app.command()
def preview(
    details: bool = typer.Option(False, "--details", "-d", help="List every fixture by name"),
):
    """Show what a cleanup would delete without changing anything."""
    cfg = _require_config()

    try:
        plan = asyncio.run(_run_preview(cfg))
    except CleanupError as e:
        console.print(f"✗ Error during preview: {e}", style="bold red")
        raise typer.Exit(code=1)

    CleanupReporter(console).display_plan(plan, show_details=details)


# Audit commands group
audit_app = typer.Typer(help="Cleanup audit log commands")
app.add_typer(audit_app, name="audit")


def _audit_storage() -> AuditStorage:
    return AuditStorage(audit_dir(_loaded_config()))


@audit_app.command("list")
def audit_list(
    since: Optional[str] = typer.Option(None, "--since", help="Only runs started on or after this date (YYYY-MM-DD)"),
):
    """List recorded cleanup runs."""
    since_date = None
    if since:
        try:
            since_date = datetime.strptime(since, "%Y-%m-%d")
        except ValueError:
            console.print("✗ Invalid date format. Use YYYY-MM-DD", style="bold red")
            raise typer.Exit(code=1)

    operations = _audit_storage().query_operations(since=since_date)
    if not operations:
        console.print("No cleanup runs recorded", style="yellow")
        return

    table = Table(show_header=True, header_style="bold magenta")
    table.add_column("Operation", style="cyan")
    table.add_column("Started")
    table.add_column("Status")
    table.add_column("Attempts", justify="right")
    table.add_column("Succeeded", justify="right", style="green")
    table.add_column("Failed", justify="right", style="red")

    for data in operations:
        op = data["operation"]
        table.add_row(
            op["operation_id"],
            op["started_at"] or "-",
            op["status"],
            str(op["attempts"]),
            str(op["succeeded_count"]),
            str(op["failed_count"]),
        )

    console.print()
    console.print(table)
    console.print()
    console.print(f"Total Runs: {len(operations)}")


@audit_app.command("show")
def audit_show(
    operation_id: str = typer.Argument(..., help="Operation ID to display"),
):
    """Show the records of one cleanup run."""
    data = _audit_storage().get_operation(operation_id)
    if data is None:
        console.print(f"✗ Operation '{operation_id}' not found", style="bold red")
        raise typer.Exit(code=1)

    op = data["operation"]
    console.print(f"[bold]Operation:[/bold] {op['operation_id']}")
    console.print(f"  Target: {op['api_url']}")
    console.print(f"  Status: {op['status']}")
    console.print(f"  Started: {op['started_at']}  Completed: {op['completed_at']}")
    if op.get("error"):
        console.print(f"  Error: {op['error']}", style="red")

    table = Table(show_header=True, header_style="bold magenta")
    table.add_column("Kind", style="cyan")
    table.add_column("Name / ID")
    table.add_column("Action")
    table.add_column("Status")
    table.add_column("Error", style="red")

    for record in data["records"]:
        table.add_row(
            record["kind"],
            record["name"] or record["resource_id"],
            record["action"],
            record["status"],
            record["error_message"] or "",
        )

    console.print(table)


def cli_main():
    """Console script entry point."""
    app()


if __name__ == "__main__":
    cli_main()
