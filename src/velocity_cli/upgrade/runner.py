"""Upgrade runner: drives one upgrade of a Velocity project.

The run goes through these steps, any of which can end it early:

1. load ``.velocity.json`` (fatal if missing)
2. warn about a dirty git tree and ask to continue
3. download the latest template into an ephemeral directory
4. load ``velocity-manifest.json`` or fall back to a built-in manifest
5. refuse manifests that need a newer velocity-cli
6. stop if the project is already on the manifest version
7. diff the declared safe files
8. confirm, copy changed files, merge dependencies, bump the version
9. scan the project for manual migration steps

The ephemeral template directory is removed on every exit path.
"""

from __future__ import annotations

import logging
import shutil
import tempfile
import time
from collections.abc import Callable, Iterator
from contextlib import contextmanager
from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path

from velocity_cli.core.config import UpgradeSettings
from velocity_cli.core.git import has_uncommitted_changes as git_has_uncommitted_changes

from .dependencies import merge_package_json_deps
from .diff import DiffSummary, FileDiff, changed_files, diff_projects, summarize_diffs
from .errors import (
    CliVersionTooOldError,
    NotAVelocityProjectError,
    TemplateDownloadError,
    UpgradeError,
)
from .manifest import UpgradeManifest, build_fallback_manifest, load_manifest
from .metadata import VelocityConfig, read_velocity_config, write_velocity_config
from .report import UpgradeReporter
from .scanner import scan_for_migration_patterns
from .version import is_version_less_than

logger = logging.getLogger(__name__)

TemplateSource = Callable[[str, Path], None]
DirtyTreeProbe = Callable[[Path], bool]


class UpgradeStatus(str, Enum):
    UPGRADED = "upgraded"
    UP_TO_DATE = "up_to_date"
    VERSION_ONLY = "version_only"
    DRY_RUN = "dry_run"
    CANCELLED = "cancelled"


@dataclass
class UpgradeResult:
    """Outcome of a single :meth:`UpgradeRunner.run`."""

    status: UpgradeStatus
    from_version: str
    to_version: str | None = None
    diffs: list[FileDiff] = field(default_factory=list)
    summary: DiffSummary = field(default_factory=DiffSummary)
    dependencies_changed: bool = False
    migration_matches: dict[str, list[str]] = field(default_factory=dict)
    used_fallback_manifest: bool = False

    @property
    def files_written(self) -> list[str]:
        if self.status is not UpgradeStatus.UPGRADED:
            return []
        return [diff.path for diff in changed_files(self.diffs)]


@contextmanager
def ephemeral_template_dir(prefix: str = "velocity-upgrade-") -> Iterator[Path]:
    """Yield a fresh temporary directory and always remove it afterwards."""
    path = Path(tempfile.mkdtemp(prefix=f"{prefix}{int(time.time() * 1000)}-"))
    try:
        yield path
    finally:
        shutil.rmtree(path, ignore_errors=True)
        logger.debug("Removed template directory %s", path)


def apply_file_changes(project_path: Path, template_path: Path, diffs: list[FileDiff]) -> list[str]:
    """Copy added and modified files from the template into the project."""
    written: list[str] = []
    for diff in changed_files(diffs):
        source = template_path / diff.path
        dest = project_path / diff.path
        dest.parent.mkdir(parents=True, exist_ok=True)
        shutil.copyfile(source, dest)
        written.append(diff.path)
    return written


class UpgradeRunner:
    """Upgrade one project to the latest template version."""

    def __init__(
        self,
        project_path: Path,
        reporter: UpgradeReporter,
        template_source: TemplateSource,
        settings: UpgradeSettings | None = None,
        has_uncommitted_changes: DirtyTreeProbe | None = None,
    ):
        self.project_path = project_path
        self.reporter = reporter
        self.template_source = template_source
        self.settings = settings or UpgradeSettings()
        self.has_uncommitted_changes = has_uncommitted_changes or git_has_uncommitted_changes

    def _load_config(self) -> VelocityConfig:
        filename = self.settings.config_filename
        try:
            config = read_velocity_config(self.project_path, filename)
        except ValueError as exc:
            raise UpgradeError(f"Could not parse {filename}: {exc}") from exc
        if config is None:
            raise NotAVelocityProjectError(self.project_path, filename)
        return config

    def _download(self, template_path: Path) -> None:
        repo = self.settings.template_repo
        with self.reporter.status("Downloading latest template..."):
            try:
                self.template_source(repo, template_path)
            except TemplateDownloadError:
                raise
            except Exception as exc:
                raise TemplateDownloadError(
                    f"Could not download template {repo}. Check your internet connection.\n{exc}"
                ) from exc
        logger.debug("Template %s downloaded to %s", repo, template_path)

    def _resolve_manifest(self, template_path: Path, config: VelocityConfig) -> tuple[UpgradeManifest, bool]:
        manifest = load_manifest(template_path, self.settings.manifest_filename)
        if manifest is not None:
            return manifest, False
        self.reporter.warn("Manifest not found in template. Using fallback file list.")
        return build_fallback_manifest(template_path, config.version, self.settings), True

    def _write_version(self, config: VelocityConfig, version: str) -> None:
        write_velocity_config(
            self.project_path,
            config.bumped(version),
            self.settings.config_filename,
        )

    def _scan(self, manifest: UpgradeManifest) -> dict[str, list[str]]:
        matches = scan_for_migration_patterns(
            self.project_path,
            manifest.migrations,
            self.settings.default_search_paths,
        )
        self.reporter.manual_steps(manifest.migrations, matches)
        return matches

    def run(self, *, dry_run: bool = False, assume_yes: bool = False) -> UpgradeResult:
        """Run the upgrade.

        Raises:
            NotAVelocityProjectError: The project has no metadata file.
            TemplateDownloadError: The template could not be downloaded.
            CliVersionTooOldError: The manifest needs a newer velocity-cli.
            ManifestError: The template ships an unusable manifest.
        """
        config = self._load_config()
        result = UpgradeResult(status=UpgradeStatus.CANCELLED, from_version=config.version)

        if self.has_uncommitted_changes(self.project_path):
            if not self.reporter.confirm_dirty_tree(assume_yes):
                return result

        with ephemeral_template_dir() as template_path:
            self._download(template_path)
            manifest, result.used_fallback_manifest = self._resolve_manifest(template_path, config)
            result.to_version = manifest.version

            if is_version_less_than(self.settings.cli_version, manifest.min_cli_version):
                raise CliVersionTooOldError(self.settings.cli_version, manifest.min_cli_version)

            self.reporter.intro(config.version, manifest.version)

            if config.version == manifest.version:
                self.reporter.info(f"[green]Already on v{manifest.version}. Nothing to upgrade.[/green]")
                result.status = UpgradeStatus.UP_TO_DATE
                return result

            result.diffs = diff_projects(self.project_path, template_path, manifest)
            result.summary = summarize_diffs(result.diffs)
            has_dep_changes = manifest.dependencies.has_changes

            if not result.summary.has_file_changes and not has_dep_changes:
                self.reporter.info("[green]All files are up to date. Updating version marker only.[/green]")
                if dry_run:
                    result.status = UpgradeStatus.DRY_RUN
                else:
                    self._write_version(config, manifest.version)
                    result.status = UpgradeStatus.VERSION_ONLY
                return result

            self.reporter.change_summary(result.summary, manifest)
            proceed = self.reporter.confirm_upgrade(dry_run)

            if dry_run:
                result.migration_matches = self._scan(manifest)
                self.reporter.info("[dim]Dry run complete. No changes were made.[/dim]")
                result.status = UpgradeStatus.DRY_RUN
                return result

            if not proceed:
                return result

            with self.reporter.status("Applying changes..."):
                written = apply_file_changes(self.project_path, template_path, result.diffs)
                logger.debug("Copied %d file(s) from template", len(written))
                if has_dep_changes:
                    result.dependencies_changed = merge_package_json_deps(
                        self.project_path, manifest.dependencies
                    )
                self._write_version(config, manifest.version)

            result.status = UpgradeStatus.UPGRADED
            self.reporter.applied(result.summary, has_dep_changes, self.settings.config_filename)
            result.migration_matches = self._scan(manifest)
            self.reporter.outro(has_dep_changes)
            return result


__all__ = [
    "TemplateSource",
    "UpgradeResult",
    "UpgradeRunner",
    "UpgradeStatus",
    "apply_file_changes",
    "ephemeral_template_dir",
]
