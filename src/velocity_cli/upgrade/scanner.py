"""Detect files that still need a manual migration step."""

from __future__ import annotations

import logging
import re
from collections.abc import Iterable, Sequence
from pathlib import Path

from velocity_cli.core.config import DEFAULT_SEARCH_PATHS, SCAN_SKIP_DIRS

from .manifest import MigrationStep
from .paths import walk_files

logger = logging.getLogger(__name__)


def _file_matches(path: Path, pattern: re.Pattern[str]) -> bool:
    try:
        content = path.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as exc:
        logger.debug("Skipping unreadable file %s: %s", path, exc)
        return False
    return pattern.search(content) is not None


def find_pattern_matches(
    project_root: Path,
    pattern: re.Pattern[str],
    search_paths: Iterable[str],
) -> list[str]:
    """Project-relative files under ``search_paths`` whose text matches ``pattern``."""
    matches: dict[str, None] = {}
    for search_path in search_paths:
        for rel_path in walk_files(project_root / search_path, project_root, SCAN_SKIP_DIRS):
            if rel_path in matches:
                continue
            if _file_matches(project_root / rel_path, pattern):
                matches[rel_path] = None
    return list(matches)


def scan_for_migration_patterns(
    project_root: Path,
    migrations: Sequence[MigrationStep],
    default_search_paths: Sequence[str] = DEFAULT_SEARCH_PATHS,
) -> dict[str, list[str]]:
    """Map each migration title to the files that look like they need it.

    Steps without a pattern are informational and always map to ``[]``.
    The scan is read-only and never fails the upgrade.
    """
    results: dict[str, list[str]] = {}
    for step in migrations:
        if not step.pattern:
            results[step.title] = []
            continue

        try:
            pattern = re.compile(step.pattern)
        except re.error as exc:
            logger.warning("Ignoring invalid pattern for migration %r: %s", step.title, exc)
            results[step.title] = []
            continue

        search_paths = step.search_paths or tuple(default_search_paths)
        results[step.title] = find_pattern_matches(project_root, pattern, search_paths)
    return results


__all__ = ["find_pattern_matches", "scan_for_migration_patterns"]
