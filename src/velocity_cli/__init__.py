"""
Velocity CLI - upgrade tooling for projects generated from the Velocity template.

Usage:
    velocity upgrade
    velocity upgrade --dry-run
    velocity upgrade --yes
"""

from importlib.metadata import PackageNotFoundError, version as _package_version
from typing import Optional

import typer
from rich.align import Align

try:
    __version__ = _package_version("velocity-cli")
except PackageNotFoundError:  # pragma: no cover - running from a source checkout
    __version__ = "1.6.0"

from velocity_cli.cli.helpers import console, show_banner  # noqa: E402
from velocity_cli.cli.commands.upgrade import upgrade  # noqa: E402

app = typer.Typer(
    name="velocity",
    help="Upgrade tool for Velocity Astro projects",
    add_completion=False,
    invoke_without_command=True,
)


def _version_callback(value: bool) -> None:
    if value:
        console.print(f"velocity-cli {__version__}")
        raise typer.Exit()


@app.callback()
def callback(
    ctx: typer.Context,
    version: Optional[bool] = typer.Option(
        None,
        "--version",
        help="Show the velocity-cli version and exit",
        callback=_version_callback,
        is_eager=True,
    ),
):
    """Show banner when no subcommand is provided."""
    if ctx.invoked_subcommand is None:
        show_banner()
        console.print(Align.center("[dim]Run 'velocity --help' for usage information[/dim]"))
        console.print()


app.command()(upgrade)


def main():
    app()


if __name__ == "__main__":
    main()
