"""
CLI output helpers for Volcop

Rich-based helpers for the status lines and the summary table printed
after a backup run.
"""

from typing import List, Tuple

from rich.console import Console
from rich.markup import escape
from rich.panel import Panel
from rich.table import Table

from volcop.types import BackupResult

console = Console()


def print_header(title: str, subtitle: str = ""):
    """Print styled header with optional subtitle"""
    content = f"[bold cyan]{escape(title)}[/bold cyan]"
    if subtitle:
        content += f"\n[dim]{escape(subtitle)}[/dim]"

    console.print(Panel(content, border_style="cyan"))


def print_success(message: str):
    """Print success message with green checkmark"""
    console.print(f"[green]✓[/green] {escape(message)}")


def print_error(message: str):
    """Print error message with red X"""
    console.print(f"[red]✗[/red] {escape(message)}")


def print_warning(message: str):
    """Print warning message with yellow warning symbol"""
    console.print(f"[yellow]⚠[/yellow]  {escape(message)}")


def print_info(message: str):
    """Print info message with cyan arrow"""
    console.print(f"[cyan]→[/cyan] {escape(message)}")


def create_table(title: str, columns: List[Tuple[str, str, int]]) -> Table:
    """
    Create a styled Rich table

    Args:
        title: Table title
        columns: List of (name, style, width) tuples

    Returns:
        Rich Table instance
    """
    table = Table(title=title, show_header=True, header_style="bold cyan")
    for name, style, width in columns:
        table.add_column(name, style=style, width=width)
    return table


def print_backup_summary(result: BackupResult) -> None:
    """Print the archives written by a run and any warnings."""
    if result.archives:
        table = create_table(
            "Volume Archives",
            [
                ("Mount", "cyan", 30),
                ("Archive", "white", 45),
                ("Size", "green", 12),
            ]
        )
        for archive in result.archives:
            table.add_row(
                escape(archive.destination),
                escape(str(archive.path)),
                f"{archive.size_bytes} B",
            )
        console.print(table)
    else:
        print_info("No volumes to archive")

    for warning in result.warnings:
        print_warning(warning)
