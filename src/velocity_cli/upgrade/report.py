"""Console reporting and prompts for the upgrade command."""

from __future__ import annotations

from collections.abc import Iterator, Mapping, Sequence
from contextlib import AbstractContextManager, contextmanager
from typing import Protocol

import typer
from rich.console import Console
from rich.markup import escape
from rich.panel import Panel
from rich.table import Table

from .diff import DiffSummary
from .manifest import MigrationStep, UpgradeManifest


def _plural(count: int, singular: str, plural: str | None = None) -> str:
    return singular if count == 1 else (plural or f"{singular}s")


class UpgradeReporter(Protocol):
    """Everything the runner needs from the user-facing layer."""

    def status(self, message: str) -> AbstractContextManager[None]: ...

    def intro(self, current_version: str, latest_version: str) -> None: ...

    def info(self, message: str) -> None: ...

    def warn(self, message: str) -> None: ...

    def confirm_dirty_tree(self, assume_yes: bool) -> bool: ...

    def change_summary(self, summary: DiffSummary, manifest: UpgradeManifest) -> None: ...

    def confirm_upgrade(self, dry_run: bool) -> bool: ...

    def applied(self, summary: DiffSummary, dependencies_changed: bool, config_filename: str) -> None: ...

    def manual_steps(
        self,
        migrations: Sequence[MigrationStep],
        matches: Mapping[str, list[str]],
    ) -> None: ...

    def outro(self, dependencies_changed: bool) -> None: ...


class ConsoleReporter:
    """Rich console implementation of :class:`UpgradeReporter`."""

    def __init__(self, console: Console | None = None, install_command: str = "pnpm install"):
        self.console = console or Console()
        self.install_command = install_command

    @contextmanager
    def status(self, message: str) -> Iterator[None]:
        with self.console.status(f"[cyan]{message}[/cyan]"):
            yield

    def intro(self, current_version: str, latest_version: str) -> None:
        self.console.print()
        self.console.print(
            Panel(
                f"Current version: [dim]v{current_version}[/dim]\n"
                f"Latest version:  [green]v{latest_version}[/green]",
                title="Velocity Upgrade",
                border_style="cyan",
                expand=False,
            )
        )

    def info(self, message: str) -> None:
        self.console.print(message)

    def warn(self, message: str) -> None:
        self.console.print(f"[yellow]Warning:[/yellow] {message}")

    def confirm_dirty_tree(self, assume_yes: bool) -> bool:
        if assume_yes:
            self.warn("You have uncommitted changes. Proceeding anyway (--yes).")
            return True

        self.warn("You have uncommitted changes. We recommend committing or stashing first.")
        if not typer.confirm("Continue anyway?", default=False):
            self.console.print("[yellow]Upgrade cancelled.[/yellow]")
            return False
        return True

    def change_summary(self, summary: DiffSummary, manifest: UpgradeManifest) -> None:
        deps = manifest.dependencies
        rows: list[tuple[str, str, str]] = []
        if summary.modified:
            rows.append(
                (f"[yellow]{summary.modified}[/yellow]",
                 f"{_plural(summary.modified, 'file')} modified",
                 "framework components, layouts, utilities")
            )
        if summary.added:
            rows.append(
                (f"[green]{summary.added}[/green]",
                 f"{_plural(summary.added, 'file')} added",
                 "new framework files")
            )
        if deps.update:
            count = len(deps.update)
            rows.append((f"[cyan]{count}[/cyan]", f"{_plural(count, 'dependency', 'dependencies')} updated", ""))
        if deps.remove:
            count = len(deps.remove)
            rows.append((f"[red]{count}[/red]", f"{_plural(count, 'dependency', 'dependencies')} removed", ""))
        if deps.add:
            count = len(deps.add)
            rows.append((f"[green]{count}[/green]", f"{_plural(count, 'dependency', 'dependencies')} added", ""))
        if manifest.migrations:
            count = len(manifest.migrations)
            rows.append((f"[yellow]{count}[/yellow]", f"manual migration {_plural(count, 'step')}", ""))

        if not rows:
            return

        table = Table(title="Changes to apply", show_header=False, box=None, title_justify="left")
        table.add_column("Count", justify="right")
        table.add_column("Change", style="bright_white")
        table.add_column("Detail", style="dim")
        for row in rows:
            table.add_row(*row)
        self.console.print(table)
        self.console.print()

    def confirm_upgrade(self, dry_run: bool) -> bool:
        if dry_run:
            self.console.print("[dim]Dry run - no changes will be made.[/dim]")
            return False
        if not typer.confirm("Proceed with upgrade?", default=True):
            self.console.print("[yellow]Upgrade cancelled.[/yellow]")
            return False
        return True

    def applied(self, summary: DiffSummary, dependencies_changed: bool, config_filename: str) -> None:
        if summary.modified:
            self.console.print(
                f"[green]✓[/green] Updated {summary.modified} framework {_plural(summary.modified, 'file')}"
            )
        if summary.added:
            self.console.print(f"[green]✓[/green] Added {summary.added} new {_plural(summary.added, 'file')}")
        if dependencies_changed:
            self.console.print("[green]✓[/green] Updated package.json dependencies")
        self.console.print(f"[green]✓[/green] Updated {config_filename}")

    def manual_steps(
        self,
        migrations: Sequence[MigrationStep],
        matches: Mapping[str, list[str]],
    ) -> None:
        if not migrations:
            return

        lines: list[str] = []
        for index, step in enumerate(migrations, start=1):
            lines.append(f"[bold]{index}. {escape(step.title)}[/bold]")
            lines.append(f"   {escape(step.description)}")
            found = matches.get(step.title) or []
            if found:
                lines.append(f"   [yellow]⚠[/yellow] Found matches in: {escape(', '.join(found))}")
            lines.append("")

        self.console.print(
            Panel(
                "\n".join(lines).rstrip(),
                title="Manual steps required",
                border_style="yellow",
            )
        )

    def outro(self, dependencies_changed: bool) -> None:
        if dependencies_changed:
            self.console.print(f"Run [cyan]{self.install_command}[/cyan] to update dependencies.")
        self.console.print("[bold green]Upgrade complete![/bold green] Review the manual steps above.")


__all__ = ["ConsoleReporter", "UpgradeReporter"]
