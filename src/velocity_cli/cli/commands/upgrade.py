"""Upgrade command implementation for velocity-cli."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Optional

import typer
from rich.logging import RichHandler
from rich.markup import escape

from velocity_cli.cli.helpers import console
from velocity_cli.core.config import UpgradeSettings
from velocity_cli.template.download import download_template
from velocity_cli.upgrade.errors import UpgradeError
from velocity_cli.upgrade.report import ConsoleReporter
from velocity_cli.upgrade.runner import UpgradeRunner


def _configure_logging(verbose: bool) -> None:
    if not verbose:
        return
    logging.basicConfig(
        level=logging.DEBUG,
        format="%(message)s",
        handlers=[RichHandler(console=console, show_path=False)],
        force=True,
    )


def upgrade(
    dry_run: bool = typer.Option(
        False, "--dry-run", help="Preview changes without applying"
    ),
    yes: bool = typer.Option(
        False, "--yes", "-y", help="Skip confirmation prompts, including the dirty git warning"
    ),
    template: Optional[str] = typer.Option(
        None,
        "--template",
        help="Template repository as owner/name[#ref] (defaults to $VELOCITY_TEMPLATE_REPO or the official template)",
    ),
    directory: Path = typer.Option(
        Path("."), "--dir", help="Project directory to upgrade", file_okay=False
    ),
    verbose: bool = typer.Option(
        False, "--verbose", "-v", help="Show debug logging"
    ),
) -> None:
    """Upgrade a Velocity project to the latest template version.

    Replaces framework files the template marks as safe, merges
    package.json dependency changes and lists manual migration steps.

    Examples:
        velocity upgrade              # Upgrade the current directory
        velocity upgrade --dry-run    # Preview changes
        velocity upgrade --yes        # Do not ask for confirmation
    """
    _configure_logging(verbose)

    settings = UpgradeSettings.from_env(template)
    runner = UpgradeRunner(
        project_path=directory.resolve(),
        reporter=ConsoleReporter(console),
        template_source=download_template,
        settings=settings,
    )

    try:
        runner.run(dry_run=dry_run, assume_yes=yes)
    except UpgradeError as exc:
        console.print(f"[red]Error:[/red] {escape(str(exc))}")
        raise typer.Exit(1)


__all__ = ["upgrade"]
