"""Central UI handler for zerofriction.

Single source of truth for Rich console styling. Import this instead of
instantiating Console() in every command file.

Usage:
    from zerofriction.pipeline.ui import console, print_header, friction_table

    console.print("[success]No friction found[/success]")
    print_header("DEPENDENCY FRICTION")
"""

import sys

from rich.console import Console
from rich.panel import Panel
from rich.table import Table
from rich.text import Text
from rich.theme import Theme

ZF_THEME = Theme({
    "info": "bold cyan",
    "warning": "bold yellow",
    "error": "bold red",
    "success": "bold green",
    "critical": "bold red",
    "high": "bold yellow",
    "medium": "bold blue",
    "low": "cyan",
    "cmd": "bold magenta",
    "path": "bold cyan",
    "dim": "dim white",
})

# Single console instance - import this, don't create your own
console = Console(
    theme=ZF_THEME,
    force_terminal=sys.stdout.isatty()
)


def print_header(title: str) -> None:
    """Print a styled section header with horizontal rules."""
    console.rule(f"[bold]{title}[/bold]")


def severity_style(severity: float) -> str:
    """Map a 0-1 friction severity onto a theme style."""
    if severity >= 0.9:
        return "critical"
    if severity >= 0.7:
        return "high"
    if severity >= 0.5:
        return "medium"
    return "low"


def friction_table(points) -> Table:
    """Table of dependency friction points, one row per point."""
    table = Table(show_header=True, header_style="bold", box=None, padding=(0, 2, 0, 0))
    table.add_column("Severity", width=8)
    table.add_column("Package", style="cmd")
    table.add_column("Location", style="path")
    table.add_column("Auto", width=4)
    table.add_column("Fix")

    for point in points:
        loc = point.location
        where = f"{loc.file}:{loc.line}:{loc.column}" if loc else ""
        style = severity_style(point.severity)
        table.add_row(
            f"[{style}]{point.severity:.1f}[/{style}]",
            point.dependency_name,
            where,
            "yes" if point.auto_installable else "no",
            point.install_command or "",
        )

    return table


def print_status_panel(
    status: str,
    message: str,
    detail: str,
    level: str = "info"
) -> None:
    """Print a status panel with colored border.

    Args:
        status: Status label (e.g., "CLEAN", "FRICTION")
        message: Main message line
        detail: Additional detail line
        level: One of "critical", "high", "medium", "low", "success", "info"
    """
    style_map = {
        "critical": ("bold red", "red"),
        "high": ("bold yellow", "yellow"),
        "medium": ("bold blue", "blue"),
        "low": ("cyan", "cyan"),
        "success": ("bold green", "green"),
        "info": ("bold cyan", "cyan"),
    }
    text_style, border_style = style_map.get(level, ("white", "white"))

    panel = Panel(
        Text.assemble(
            (f"STATUS: [{status}]\n", text_style),
            (f"{message}\n", border_style),
            (detail, border_style)
        ),
        border_style=border_style,
        expand=False
    )
    console.print(panel)
