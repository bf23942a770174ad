"""Cleanup report formatting and display."""

from __future__ import annotations

from collections import Counter
from typing import Optional

from rich.console import Console
from rich.panel import Panel
from rich.table import Table

from ..models.cleanup_operation import CleanupOperation, OperationStatus
from ..models.cleanup_record import CleanupRecord, RecordStatus
from ..models.resource import ResourceRecord

STATUS_STYLES = {
    OperationStatus.COMPLETED: "green",
    OperationStatus.PARTIAL: "yellow",
    OperationStatus.FAILED: "bold red",
    OperationStatus.RUNNING: "cyan",
    OperationStatus.PLANNED: "cyan",
}


class CleanupReporter:
    """Format and display cleanup plans and results."""

    def __init__(self, console: Optional[Console] = None):
        """Initialize cleanup reporter.

        Args:
            console: Rich console instance (creates new one if not provided)
        """
        self.console = console or Console()

    def display_plan(self, plan: dict[str, list[ResourceRecord]], show_details: bool = False) -> None:
        """Display the fixtures a cleanup would act on.

        Args:
            plan: Kind -> records, in cleanup order
            show_details: List every record instead of counts only
        """
        total = sum(len(records) for records in plan.values())

        self.console.print()
        self.console.print(Panel(f"[bold]Cleanup Preview[/bold]\nFixtures found: {total}", style="cyan"))

        if total == 0:
            self.console.print("[green]✓ Environment is clean - nothing to delete[/green]")
            return

        table = Table(show_header=True, header_style="bold magenta")
        table.add_column("#", justify="right", style="dim", width=3)
        table.add_column("Kind", style="cyan")
        table.add_column("Count", justify="right", style="yellow")
        if show_details:
            table.add_column("Names")

        for position, (kind, records) in enumerate(plan.items(), start=1):
            if not records:
                continue
            row = [str(position), kind, str(len(records))]
            if show_details:
                row.append("\n".join(record.label for record in records))
            table.add_row(*row)

        self.console.print(table)

    def display_operation(self, operation: CleanupOperation, records: Optional[list[CleanupRecord]] = None) -> None:
        """Display the outcome of a cleanup run.

        Args:
            operation: Finished operation
            records: Item records to summarize per kind (optional)
        """
        style = STATUS_STYLES.get(operation.status, "white")
        duration = f"{operation.duration_seconds:.1f}s" if operation.duration_seconds is not None else "-"

        self.console.print()
        self.console.print(
            Panel(
                f"[bold]Cleanup {operation.status.value}[/bold]\n"
                f"Operation: {operation.operation_id}\n"
                f"Target: {operation.api_url or '-'}\n"
                f"Attempts: {operation.attempts}  Duration: {duration}",
                style=style,
            )
        )

        if records:
            self._display_summary(records)

        if operation.error:
            self.console.print(f"[bold red]✗ {operation.error}[/bold red]")

    def _display_summary(self, records: list[CleanupRecord]) -> None:
        succeeded = Counter(r.kind for r in records if r.status == RecordStatus.SUCCEEDED)
        failed = Counter(r.kind for r in records if r.status == RecordStatus.FAILED)

        table = Table(title="Summary", show_header=True, header_style="bold magenta")
        table.add_column("Kind", style="cyan")
        table.add_column("Succeeded", justify="right", style="green")
        table.add_column("Failed", justify="right", style="red")

        for kind in dict.fromkeys(r.kind for r in records):
            table.add_row(kind, str(succeeded[kind]), str(failed[kind]))

        self.console.print(table)

        failures = [r for r in records if r.status == RecordStatus.FAILED]
        for record in failures:
            self.console.print(
                f"  [red]✗[/red] {record.kind} {record.name or record.resource_id}: {record.error_message}"
            )
