"""Expand declared manifest paths into concrete project-relative files."""

from __future__ import annotations

import os
from collections.abc import Iterable
from pathlib import Path


def _relative_posix(path: Path, base: Path) -> str:
    return path.relative_to(base).as_posix()


def walk_files(
    directory: Path,
    base: Path,
    skip_dirs: Iterable[str] = (),
) -> list[str]:
    """Return every file beneath ``directory`` relative to ``base``.

    Walks depth-first. Directories named in ``skip_dirs`` are not entered.
    Symlinks are listed as entries and never followed, even when they
    point at a directory.
    A missing ``directory`` yields an empty list; a plain file yields
    itself.
    """
    if not directory.exists():
        return []
    if not directory.is_dir():
        return [_relative_posix(directory, base)]

    skipped = frozenset(skip_dirs)
    results: list[str] = []
    for entry in sorted(directory.iterdir(), key=lambda p: p.name):
        if entry.is_dir() and not entry.is_symlink():
            if entry.name in skipped:
                continue
            results.extend(walk_files(entry, base, skipped))
        else:
            results.append(_relative_posix(entry, base))
    return results


def is_directory_entry(entry: str, root: Path) -> bool:
    """Decide whether a declared entry names a directory."""
    if entry.endswith("/") or entry.endswith(os.sep):
        return True
    return (root / entry).is_dir()


def expand_paths(entries: Iterable[str], root: Path) -> list[str]:
    """Expand file and directory entries into a de-duplicated file list.

    ``src/lib`` and ``src/lib/`` produce the same files. Order follows the
    first time each file is seen.
    """
    seen: dict[str, None] = {}
    for entry in entries:
        if is_directory_entry(entry, root):
            expanded = walk_files(root / entry, root)
        else:
            expanded = [Path(entry).as_posix()]
        for path in expanded:
            seen.setdefault(path, None)
    return list(seen)


__all__ = ["expand_paths", "is_directory_entry", "walk_files"]
