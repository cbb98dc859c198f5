from __future__ import annotations

from typing import Optional, Sequence

from rich import box
from rich.console import Console
from rich.markup import escape
from rich.table import Table

from eligibility.domain.models import ReportConfig, ReportingRecord
from eligibility.orchestrator import ReportOutcome

_STATUS_STYLES = {
    "success": "bold green",
    "partial": "yellow",
    "failed": "bold red",
}


def print_outcomes(outcomes: Sequence[ReportOutcome], console: Optional[Console] = None) -> None:
    """
    Render report outcomes as a rich table, in execution order.
    """
    console = console or Console()

    if not outcomes:
        console.print("[yellow]No reports were run.[/yellow]")
        return

    failed = sum(1 for o in outcomes if o.get("status") == "failed")
    table = Table(
        title="Eligibility Reports",
        box=box.ROUNDED,
        caption=f"{len(outcomes) - failed}/{len(outcomes)} written",
    )
    table.add_column("Report", style="cyan", no_wrap=True)
    table.add_column("Status")
    table.add_column("Students", justify="right", style="magenta")
    table.add_column("Failed", justify="right", style="red")
    table.add_column("Duration (s)", justify="right", style="green")
    table.add_column("Output / Error")

    for outcome in outcomes:
        status = outcome.get("status", "unknown")
        style = _STATUS_STYLES.get(status, "")
        detail = outcome.get("output_path") or outcome.get("error") or ""
        table.add_row(
            escape(outcome.get("report", "Unknown")),
            f"[{style}]{status}[/{style}]" if style else status,
            str(outcome.get("students", 0)),
            str(len(outcome.get("failures", []))),
            f"{outcome.get('duration_seconds', 0.0):.2f}",
            escape(detail),
        )

    console.print(table)


def print_students(label: str, records: Sequence[ReportingRecord], console: Optional[Console] = None) -> None:
    """
    List a report's students in report order with the flags they met.
    """
    console = console or Console()
    table = Table(title=escape(label), box=box.SIMPLE)
    table.add_column("#", justify="right", style="dim")
    table.add_column("Student", style="cyan")
    table.add_column("GPA", justify="right", style="green")
    table.add_column("Priority", justify="right", style="magenta")
    table.add_column("Flags met")

    for position, record in enumerate(records, start=1):
        flags = escape(", ".join(record.matched_labels)) if record.matched_labels else "[dim]No flags met[/dim]"
        table.add_row(
            str(position),
            escape(record.full_name),
            f"{record.score:.2f}",
            str(record.priority),
            flags,
        )

    console.print(table)


def print_reports(config: ReportConfig, console: Optional[Console] = None) -> None:
    """
    Render the configured report definitions.
    """
    console = console or Console()

    if not config.reports:
        console.print("[yellow]No reports configured.[/yellow]")
        return

    table = Table(title="Configured Reports", box=box.ROUNDED)
    table.add_column("Report", style="cyan", no_wrap=True)
    table.add_column("Every")
    table.add_column("Template", style="green")
    table.add_column("Recipients")
    table.add_column("Rules", justify="right", style="magenta")
    table.add_column("Students", justify="right", style="magenta")

    for report in config.reports:
        table.add_row(
            escape(report.label),
            escape(report.schedule),
            escape(report.template_name),
            escape(", ".join(report.recipients)),
            str(len(report.rules)),
            str(len(report.student_ids)),
        )

    console.print(table)
