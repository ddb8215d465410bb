# typesynth/cli_theme.py
"""Terminal theme for the typesynth CLI.

Teal & sand palette:
  - Compact brand line instead of a block banner
  - Numbered section headers ("01 · SECTION NAME")
  - Rounded tables with sand borders
  - Status lines and reverse-styled badges
"""

from __future__ import annotations

from rich import box
from rich.console import Console
from rich.table import Table
from rich.text import Text

# ── Brand ─────────────────────────────────────────────────────────

BRAND = "T Y P E S Y N T H"
TAGLINE = "OpenAPI component schemas from type descriptors"

# ── Palette ───────────────────────────────────────────────────────

TEAL = "#2A9D8F"
SAND = "#C9B79C"
MUTED = "dim"


def print_banner(version: str, console: Console) -> None:
    """Print the brand line and tagline."""
    console.print()
    console.print(f"  [bold {TEAL}]{BRAND}[/bold {TEAL}]")
    console.print(f"  [{SAND}]{TAGLINE}[/{SAND}]")
    console.print(f"  [{MUTED}]v{version}[/{MUTED}]")
    console.print()


def print_version(version: str, console: Console) -> None:
    """Print a compact branded version line."""
    t = Text()
    t.append(BRAND, style=f"bold {TEAL}")
    t.append(f"  v{version}", style=MUTED)
    console.print(t)


# ── Section headers ──────────────────────────────────────────────


def section(
    title: str,
    console: Console,
    number: str | None = None,
    uppercase: bool = True,
) -> None:
    """Print a numbered section header."""
    console.print()
    t = Text()
    if number:
        t.append(f"  {number}", style=f"bold {TEAL}")
        t.append(" · ", style=MUTED)
    else:
        t.append("  ", style="")
    t.append(title.upper() if uppercase else title, style="bold")
    console.print(t)
    console.print(f"  {'─' * len(TAGLINE)}", style=SAND)


# ── Tables ───────────────────────────────────────────────────────


def make_table(title: str | None = None, **kwargs: object) -> Table:
    """Create a table with rounded sand borders."""
    return Table(
        title=title,
        box=box.ROUNDED,
        border_style=SAND,
        title_style=f"bold {TEAL}",
        header_style="bold",
        padding=(0, 1),
        **kwargs,
    )


def make_kv_table() -> Table:
    """Create a headerless two-column key–value table."""
    t = make_table(show_header=False)
    t.add_column("Key", style=f"bold {TEAL}", no_wrap=True)
    t.add_column("Value")
    return t


# ── Inline badges ────────────────────────────────────────────────


def badge(label: str, variant: str = "default") -> str:
    """Return Rich markup for a filled status badge."""
    colors = {
        "default": TEAL,
        "warn": "yellow",
        "error": "red",
    }
    c = colors.get(variant, TEAL)
    return f"[reverse {c}] {label} [/reverse {c}]"


# ── Status lines ─────────────────────────────────────────────────


def info(msg: str) -> str:
    return f"  [{TEAL}]›[/{TEAL}] [{MUTED}]{msg}[/{MUTED}]"


def ok(msg: str) -> str:
    return f"  [bold green]✓[/bold green] {msg}"


def warn(msg: str) -> str:
    return f"  [bold yellow]![/bold yellow] [yellow]{msg}[/yellow]"
