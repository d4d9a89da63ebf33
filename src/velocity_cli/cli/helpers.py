"""Shared console and banner helpers for CLI commands."""

from __future__ import annotations

from rich.align import Align
from rich.console import Console
from rich.text import Text

console = Console()

TAGLINE = "Velocity - Astro starter kit tooling"


def show_banner() -> None:
    """Display the tagline banner."""
    console.print(Align.center(Text(TAGLINE, style="italic bright_cyan")))
    console.print()


__all__ = ["TAGLINE", "console", "show_banner"]
