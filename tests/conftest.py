from __future__ import annotations

import json
from collections.abc import Callable
from pathlib import Path

import pytest

from tests.utils import RecordingReporter, write_tree


@pytest.fixture()
def reporter() -> RecordingReporter:
    return RecordingReporter()


@pytest.fixture()
def tree() -> Callable[[Path, dict[str, str | bytes]], Path]:
    return write_tree


@pytest.fixture()
def velocity_project(tmp_path: Path) -> Path:
    """A generated project on version 1.0.0."""
    project = tmp_path / "project"
    write_tree(
        project,
        {
            ".velocity.json": json.dumps(
                {
                    "version": "1.0.0",
                    "createdAt": "2025-01-01",
                    "updatedAt": "2025-01-01",
                    "features": {"demo": True, "i18n": False, "components": "all"},
                },
                indent=2,
            )
            + "\n",
            "package.json": json.dumps(
                {
                    "name": "my-site",
                    "dependencies": {"astro": "^4.0.0", "old-lib": "1.0.0"},
                    "devDependencies": {"eslint": "^8.0.0"},
                },
                indent=2,
            )
            + "\n",
            "src/lib/a.ts": "export const a = 1;\n",
            "src/lib/b.ts": "export const b = 1;\n",
            "src/pages/index.astro": "<h1>mine</h1>\n",
        },
    )
    return project
