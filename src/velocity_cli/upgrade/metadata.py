"""Project metadata stored in ``.velocity.json``."""

from __future__ import annotations

import json
import os
import tempfile
from dataclasses import dataclass, field, replace
from datetime import date
from pathlib import Path
from typing import Any

from velocity_cli.core.config import CONFIG_FILENAME


@dataclass(frozen=True)
class VelocityFeatures:
    demo: bool = False
    i18n: bool = False
    components: str = "none"

    @classmethod
    def from_dict(cls, data: Any) -> "VelocityFeatures":
        if not isinstance(data, dict):
            return cls()
        return cls(
            demo=bool(data.get("demo", False)),
            i18n=bool(data.get("i18n", False)),
            components=str(data.get("components", "none")),
        )

    def to_dict(self) -> dict[str, Any]:
        return {"demo": self.demo, "i18n": self.i18n, "components": self.components}


@dataclass(frozen=True)
class VelocityConfig:
    """Snapshot of a generated project's metadata.

    ``version`` is the only upgrade cursor: there is no history and no
    rollback log. Keys this class does not know about are carried in
    ``extra`` and written back untouched.
    """

    version: str
    created_at: str
    updated_at: str
    features: VelocityFeatures = field(default_factory=VelocityFeatures)
    extra: dict[str, Any] = field(default_factory=dict)

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "VelocityConfig":
        known = {"version", "createdAt", "updatedAt", "features"}
        return cls(
            version=str(data.get("version", "0.0.0")),
            created_at=str(data.get("createdAt", "")),
            updated_at=str(data.get("updatedAt", "")),
            features=VelocityFeatures.from_dict(data.get("features")),
            extra={key: value for key, value in data.items() if key not in known},
        )

    def to_dict(self) -> dict[str, Any]:
        return {
            "version": self.version,
            "createdAt": self.created_at,
            "updatedAt": self.updated_at,
            "features": self.features.to_dict(),
            **self.extra,
        }

    def bumped(self, version: str, today: date | None = None) -> "VelocityConfig":
        """Copy with a new version and ``updatedAt`` set to today."""
        stamp = (today or date.today()).isoformat()
        return replace(self, version=version, updated_at=stamp)


def config_path(project_path: Path, filename: str = CONFIG_FILENAME) -> Path:
    return project_path / filename


def read_velocity_config(project_path: Path, filename: str = CONFIG_FILENAME) -> VelocityConfig | None:
    """Return the project's metadata, or None if it is not a Velocity project."""
    path = config_path(project_path, filename)
    if not path.exists():
        return None
    payload = json.loads(path.read_text(encoding="utf-8"))
    if not isinstance(payload, dict):
        return None
    return VelocityConfig.from_dict(payload)


def write_velocity_config(
    project_path: Path,
    config: VelocityConfig,
    filename: str = CONFIG_FILENAME,
) -> None:
    """Atomically replace the metadata file (temp file + rename)."""
    path = config_path(project_path, filename)
    fd, tmp_path = tempfile.mkstemp(dir=path.parent, prefix=f"{filename}.", suffix=".tmp")
    try:
        with os.fdopen(fd, "w", encoding="utf-8") as handle:
            handle.write(json.dumps(config.to_dict(), indent=2, ensure_ascii=False) + "\n")
        os.replace(tmp_path, path)
    except Exception:
        if os.path.exists(tmp_path):
            os.unlink(tmp_path)
        raise


__all__ = [
    "VelocityConfig",
    "VelocityFeatures",
    "config_path",
    "read_velocity_config",
    "write_velocity_config",
]
