"""Exceptions raised by the upgrade engine."""

from __future__ import annotations


class UpgradeError(RuntimeError):
    """Base class for failures that stop an upgrade run."""


class NotAVelocityProjectError(UpgradeError):
    """Raised when the target directory has no project metadata file."""

    def __init__(self, project_path: object, config_filename: str) -> None:
        super().__init__(
            f"{project_path} doesn't appear to be a Velocity project (no {config_filename}). "
            "Run this command from a project created with create-velocity-astro."
        )


class TemplateDownloadError(UpgradeError):
    """Raised when the template could not be materialized."""


class ManifestError(UpgradeError):
    """Raised when an upgrade manifest exists but cannot be used."""


class CliVersionTooOldError(UpgradeError):
    """Raised when the manifest needs a newer engine than the running one."""

    def __init__(self, cli_version: str, required: str) -> None:
        self.cli_version = cli_version
        self.required = required
        super().__init__(
            f"This upgrade requires velocity-cli >= {required} (running {cli_version}). "
            "Run `pip install --upgrade velocity-cli` to update."
        )


__all__ = [
    "CliVersionTooOldError",
    "ManifestError",
    "NotAVelocityProjectError",
    "TemplateDownloadError",
    "UpgradeError",
]
