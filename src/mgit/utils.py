from __future__ import annotations

from rich.console import Console
from rich.markup import escape
from rich.table import Table

from .models import LogBundle, WorkflowResult

console = Console()


def display_logs(package_name: str, logs: LogBundle):
    """Print one package's transcript, info lines first"""
    console.print(f"[bold]{escape(package_name)}[/bold]")
    for line in logs.info:
        console.print(f"  [dim]{escape(line)}[/dim]")
    for line in logs.error:
        console.print(f"  [red]{escape(line)}[/red]")


def display_results_table(results: dict[str, WorkflowResult]):
    """Display per-package outcomes in a formatted table"""
    table = Table(title="Updated packages")
    table.add_column("Package", style="cyan", no_wrap=True)
    table.add_column("Status")
    table.add_column("Details", style="yellow")

    for name, result in sorted(results.items()):
        status = "[green]ok[/green]" if result.succeeded else "[red]failed[/red]"
        details = str(result.error) if result.error else ""
        table.add_row(name, status, escape(details))

    console.print(table)
