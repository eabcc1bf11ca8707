"""Rich-based console output."""

from typing import Optional

from rich import box
from rich.console import Console
from rich.markup import escape
from rich.panel import Panel
from rich.table import Table


# Global console instances; errors and logs go to stderr
console = Console()
err_console = Console(stderr=True)

# Headless mode flag
_headless = False


def set_headless(headless: bool):
    """Set headless mode (disables rich output)."""
    global _headless
    _headless = headless


def print_header(title: str, subtitle: Optional[str] = None):
    """Print a styled header."""
    if _headless:
        console.print(f"\n=== {title} ===")
        if subtitle:
            console.print(f"    {subtitle}")
        return

    content = f"[bold magenta]{title}[/bold magenta]"
    if subtitle:
        content += f"\n[dim]{subtitle}[/dim]"

    console.print(Panel(content, box=box.DOUBLE_EDGE, padding=(0, 2)))


def print_settings_table(title: str, rows: dict):
    """Print a two-column settings table."""
    table = Table(title=title, box=box.ROUNDED if not _headless else None)
    table.add_column("Setting", style="cyan")
    table.add_column("Value", style="green")

    for key, value in rows.items():
        table.add_row(key, str(value))

    console.print(table)


def print_success(message: str):
    """Print a success message."""
    console.print(f"[bold green]✓[/bold green] {escape(message)}")


def print_error(message: str):
    """Print an error message."""
    err_console.print(f"[bold red]✗[/bold red] {escape(message)}", highlight=False)


def print_warning(message: str):
    """Print a warning message."""
    err_console.print(f"[bold yellow]⚠[/bold yellow] {escape(message)}")


def print_info(message: str):
    """Print an info message."""
    console.print(f"[bold blue]ℹ[/bold blue] {escape(message)}")
