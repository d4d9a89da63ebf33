"""Shared helpers for velocity-cli tests."""

from __future__ import annotations

from collections.abc import Iterator
from contextlib import contextmanager
from pathlib import Path
from typing import Any

import pytest


def write_tree(root: Path, files: dict[str, str | bytes]) -> Path:
    """Create ``files`` (relative path -> content) under ``root``."""
    for rel, content in files.items():
        path = root / rel
        path.parent.mkdir(parents=True, exist_ok=True)
        if isinstance(content, bytes):
            path.write_bytes(content)
        else:
            path.write_text(content, encoding="utf-8")
    return root


def symlink_or_skip(link: Path, target: Path) -> None:
    """Create ``link`` pointing at ``target``, skipping where symlinks are unavailable."""
    try:
        link.symlink_to(target, target_is_directory=target.is_dir())
    except (OSError, NotImplementedError) as exc:
        pytest.skip(f"symlinks unavailable: {exc}")


class RecordingReporter:
    """UpgradeReporter double that records calls and answers prompts."""

    def __init__(self, *, confirm_dirty: bool = True, confirm_upgrade: bool = True):
        self.answer_dirty = confirm_dirty
        self.answer_upgrade = confirm_upgrade
        self.events: list[tuple[str, Any]] = []

    def names(self) -> list[str]:
        return [name for name, _ in self.events]

    @contextmanager
    def status(self, message: str) -> Iterator[None]:
        self.events.append(("status", message))
        yield

    def intro(self, current_version: str, latest_version: str) -> None:
        self.events.append(("intro", (current_version, latest_version)))

    def info(self, message: str) -> None:
        self.events.append(("info", message))

    def warn(self, message: str) -> None:
        self.events.append(("warn", message))

    def confirm_dirty_tree(self, assume_yes: bool) -> bool:
        self.events.append(("confirm_dirty_tree", assume_yes))
        return assume_yes or self.answer_dirty

    def change_summary(self, summary, manifest) -> None:
        self.events.append(("change_summary", summary))

    def confirm_upgrade(self, dry_run: bool) -> bool:
        self.events.append(("confirm_upgrade", dry_run))
        return False if dry_run else self.answer_upgrade

    def applied(self, summary, dependencies_changed: bool, config_filename: str) -> None:
        self.events.append(("applied", (summary, dependencies_changed)))

    def manual_steps(self, migrations, matches) -> None:
        self.events.append(("manual_steps", dict(matches)))

    def outro(self, dependencies_changed: bool) -> None:
        self.events.append(("outro", dependencies_changed))
