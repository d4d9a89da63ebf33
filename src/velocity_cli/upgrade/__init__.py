"""Velocity upgrade engine for moving projects to newer template versions."""

from __future__ import annotations

from .diff import DiffStatus, DiffSummary, FileCategory, FileDiff, diff_projects, summarize_diffs
from .errors import (
    CliVersionTooOldError,
    ManifestError,
    NotAVelocityProjectError,
    TemplateDownloadError,
    UpgradeError,
)
from .manifest import DependencyChanges, ManifestFiles, MigrationStep, UpgradeManifest
from .metadata import VelocityConfig, VelocityFeatures
from .runner import UpgradeResult, UpgradeRunner, UpgradeStatus

__all__ = [
    "CliVersionTooOldError",
    "DependencyChanges",
    "DiffStatus",
    "DiffSummary",
    "FileCategory",
    "FileDiff",
    "ManifestError",
    "ManifestFiles",
    "MigrationStep",
    "NotAVelocityProjectError",
    "TemplateDownloadError",
    "UpgradeError",
    "UpgradeManifest",
    "UpgradeResult",
    "UpgradeRunner",
    "UpgradeStatus",
    "VelocityConfig",
    "VelocityFeatures",
    "diff_projects",
    "summarize_diffs",
]
