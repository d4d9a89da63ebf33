"""Classify manifest-declared safe files against a fresh template."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from pathlib import Path

from .manifest import UpgradeManifest
from .paths import expand_paths


class DiffStatus(str, Enum):
    ADDED = "added"
    MODIFIED = "modified"
    UNCHANGED = "unchanged"
    # Part of the vocabulary; diff_projects never detects deletions.
    REMOVED = "removed"


class FileCategory(str, Enum):
    SAFE = "safe"
    # Protected paths are declared in manifests but never diffed.
    PROTECTED = "protected"


@dataclass(frozen=True)
class FileDiff:
    path: str
    status: DiffStatus
    category: FileCategory = FileCategory.SAFE

    @property
    def is_change(self) -> bool:
        return self.status in (DiffStatus.ADDED, DiffStatus.MODIFIED)

    def to_dict(self) -> dict[str, str]:
        return {"path": self.path, "status": self.status.value, "category": self.category.value}


@dataclass(frozen=True)
class DiffSummary:
    added: int = 0
    modified: int = 0
    unchanged: int = 0

    @property
    def has_file_changes(self) -> bool:
        return bool(self.added or self.modified)


def _same_bytes(left: Path, right: Path) -> bool:
    if left.stat().st_size != right.stat().st_size:
        return False
    return left.read_bytes() == right.read_bytes()


def diff_projects(
    current_root: Path,
    fresh_root: Path,
    manifest: UpgradeManifest,
) -> list[FileDiff]:
    """Compare safe files between the project and the fresh template.

    Only paths expanded from ``manifest.files.safe`` (rooted at the fresh
    template) are examined. Anything else is invisible to the upgrade.
    """
    diffs: list[FileDiff] = []
    for rel_path in expand_paths(manifest.files.safe, fresh_root):
        fresh_path = fresh_root / rel_path
        current_path = current_root / rel_path

        if not fresh_path.is_file():
            continue

        if not current_path.exists():
            status = DiffStatus.ADDED
        elif _same_bytes(current_path, fresh_path):
            status = DiffStatus.UNCHANGED
        else:
            status = DiffStatus.MODIFIED
        diffs.append(FileDiff(path=rel_path, status=status))
    return diffs


def summarize_diffs(diffs: list[FileDiff]) -> DiffSummary:
    """Count added, modified and unchanged entries; removed ones are ignored."""
    added = modified = unchanged = 0
    for diff in diffs:
        if diff.status is DiffStatus.ADDED:
            added += 1
        elif diff.status is DiffStatus.MODIFIED:
            modified += 1
        elif diff.status is DiffStatus.UNCHANGED:
            unchanged += 1
    return DiffSummary(added=added, modified=modified, unchanged=unchanged)


def changed_files(diffs: list[FileDiff]) -> list[FileDiff]:
    """Entries whose bytes must be copied into the project."""
    return [diff for diff in diffs if diff.is_change]


__all__ = [
    "DiffStatus",
    "DiffSummary",
    "FileCategory",
    "FileDiff",
    "changed_files",
    "diff_projects",
    "summarize_diffs",
]
