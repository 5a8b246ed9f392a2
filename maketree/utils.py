"""
Utility functions for maketree.

Includes:
- Console output helpers (normal and diagnostic streams)
- Verbosity-gated tracing
- Input reading
"""

import sys
from pathlib import Path
from typing import TextIO, TYPE_CHECKING

from rich.console import Console
from rich.markup import escape
from rich.panel import Panel
from rich.table import Table

from .errors import InputReadError

if TYPE_CHECKING:
    from .builder import BuildReport

# Normal output: confirmations and dry-run previews
console = Console(highlight=False, soft_wrap=True, emoji=False)

# Diagnostic output: leveled trace lines and errors
err_console = Console(stderr=True, highlight=False, soft_wrap=True, emoji=False)

# Verbosity levels
INFO = 1
DEBUG = 2
MAX_VERBOSITY = 3


def print_header(title: str, subtitle: str = ""):
    """Print a styled header."""
    console.print(Panel(f"[bold blue]{title}[/bold blue]\n[italic]{subtitle}[/italic]", expand=False))


def print_report(report: "BuildReport"):
    """Print a summary table of a build."""
    title = "Dry-Run Summary" if report.dry_run else "Build Summary"
    table = Table(title=title)
    table.add_column("Metric", style="cyan")
    table.add_column("Count", style="magenta")

    table.add_row("Directories created", str(report.created_dirs))
    table.add_row("Files created", str(report.created_files))
    table.add_row("Removed (forced)", str(report.removed))
    table.add_row("Already present", str(report.unchanged))

    console.print(table)


def print_error(msg: str):
    err_console.print(f"[bold red]ERROR:[/bold red] {escape(msg)}")


def print_warning(msg: str):
    err_console.print(f"[bold yellow]WARNING:[/bold yellow] {escape(msg)}")


def print_success(msg: str):
    console.print(f"[bold green]✅[/bold green] {escape(msg)}")


def emit(msg: str):
    """Print a plain line on the normal output stream (no markup)."""
    console.print(msg, markup=False)


def trace(verbosity: int, level: int, msg: str):
    """
    Print a diagnostic line if the verbosity allows it.

    Args:
        verbosity: Current verbosity (0-3).
        level: Level of this message (INFO=1, DEBUG=2).
        msg: The line to print.
    """
    if verbosity >= level:
        err_console.print(msg, markup=False)


def read_input(path: Path | None = None, stream: TextIO | None = None) -> str:
    """
    Read the whole tree description before any parsing starts.

    Args:
        path: Input file. Takes precedence over the stream.
        stream: Input stream, read to EOF. Defaults to stdin.

    Returns:
        The complete input text.

    Raises:
        InputReadError: If the source could not be read.
    """
    if path is not None:
        try:
            with open(path, 'r', encoding='utf-8') as f:
                return f.read()
        except (OSError, UnicodeDecodeError) as e:
            raise InputReadError(str(path), e) from e

    if stream is None:
        stream = sys.stdin
    try:
        return stream.read()
    except (OSError, UnicodeDecodeError) as e:
        raise InputReadError("stdin", e) from e
