"""Git working tree probes used before touching a project."""

from __future__ import annotations

import logging
import subprocess
from dataclasses import dataclass
from pathlib import Path

logger = logging.getLogger(__name__)

__all__ = ["has_uncommitted_changes"]


@dataclass
class _GitCommandResult:
    returncode: int
    stdout: str
    stderr: str


def _run_git(repo_root: Path, args: list[str], timeout: int = 15) -> _GitCommandResult:
    """Run git command and normalize failure shape for deterministic handling."""
    try:
        completed = subprocess.run(
            ["git", *args],
            cwd=str(repo_root),
            capture_output=True,
            text=True,
            encoding="utf-8",
            errors="replace",
            check=False,
            timeout=timeout,
        )
        return _GitCommandResult(
            returncode=completed.returncode,
            stdout=completed.stdout or "",
            stderr=completed.stderr or "",
        )
    except FileNotFoundError:
        return _GitCommandResult(
            returncode=127,
            stdout="",
            stderr="git executable not found on PATH",
        )
    except subprocess.TimeoutExpired:
        return _GitCommandResult(
            returncode=124,
            stdout="",
            stderr=f"git command timed out: git {' '.join(args)}",
        )


def has_uncommitted_changes(project_path: Path) -> bool:
    """Return True when ``git status --porcelain`` reports anything.

    A directory that is not a git repository (or a machine without git)
    counts as clean so the upgrade can proceed.
    """
    result = _run_git(project_path, ["status", "--porcelain"])
    if result.returncode != 0:
        logger.debug("Skipping dirty tree check: %s", result.stderr.strip())
        return False
    return bool(result.stdout.strip())
