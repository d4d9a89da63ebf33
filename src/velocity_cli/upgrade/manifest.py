"""Upgrade manifest shipped at the root of every Velocity template."""

from __future__ import annotations

import json
import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

from velocity_cli.core.config import PACKAGE_DESCRIPTOR, UpgradeSettings

from .errors import ManifestError

logger = logging.getLogger(__name__)


def _string_tuple(value: Any) -> tuple[str, ...]:
    if not isinstance(value, list):
        return ()
    return tuple(str(item) for item in value if isinstance(item, str) and item.strip())


def _string_map(value: Any) -> dict[str, str]:
    if not isinstance(value, dict):
        return {}
    return {str(key): str(version) for key, version in value.items()}


@dataclass(frozen=True)
class MigrationStep:
    """A manual change the user has to make, with optional detection."""

    title: str
    description: str = ""
    pattern: str | None = None
    search_paths: tuple[str, ...] = ()

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "MigrationStep":
        title = data.get("title")
        if not isinstance(title, str) or not title.strip():
            raise ManifestError("Every migration step needs a non-empty 'title'")
        pattern = data.get("pattern")
        return cls(
            title=title,
            description=str(data.get("description") or ""),
            pattern=pattern if isinstance(pattern, str) and pattern else None,
            search_paths=_string_tuple(data.get("searchPaths")),
        )

    def to_dict(self) -> dict[str, Any]:
        payload: dict[str, Any] = {"title": self.title, "description": self.description}
        if self.pattern:
            payload["pattern"] = self.pattern
        if self.search_paths:
            payload["searchPaths"] = list(self.search_paths)
        return payload


@dataclass(frozen=True)
class ManifestFiles:
    safe: tuple[str, ...] = ()
    protected: tuple[str, ...] = ()


@dataclass(frozen=True)
class DependencyChanges:
    """Declarative edits to the project's ``package.json``."""

    update: dict[str, str] = field(default_factory=dict)
    add: dict[str, str] = field(default_factory=dict)
    remove: tuple[str, ...] = ()

    @property
    def has_changes(self) -> bool:
        return bool(self.update or self.add or self.remove)


@dataclass(frozen=True)
class UpgradeManifest:
    """The upgrade contract for one template version."""

    version: str
    min_cli_version: str
    files: ManifestFiles = field(default_factory=ManifestFiles)
    dependencies: DependencyChanges = field(default_factory=DependencyChanges)
    migrations: tuple[MigrationStep, ...] = ()

    @classmethod
    def from_dict(cls, data: Any) -> "UpgradeManifest":
        if not isinstance(data, dict):
            raise ManifestError("Upgrade manifest must be a JSON object")

        version = data.get("version")
        min_cli_version = data.get("minCliVersion")
        if not isinstance(version, str) or not version.strip():
            raise ManifestError("Upgrade manifest is missing 'version'")
        if not isinstance(min_cli_version, str) or not min_cli_version.strip():
            raise ManifestError("Upgrade manifest is missing 'minCliVersion'")

        files = data.get("files") if isinstance(data.get("files"), dict) else {}
        deps = data.get("dependencies") if isinstance(data.get("dependencies"), dict) else {}
        migrations = data.get("migrations") if isinstance(data.get("migrations"), list) else []

        return cls(
            version=version.strip(),
            min_cli_version=min_cli_version.strip(),
            files=ManifestFiles(
                safe=_string_tuple(files.get("safe")),
                protected=_string_tuple(files.get("protected")),
            ),
            dependencies=DependencyChanges(
                update=_string_map(deps.get("update")),
                add=_string_map(deps.get("add")),
                remove=_string_tuple(deps.get("remove")),
            ),
            migrations=tuple(
                MigrationStep.from_dict(step) for step in migrations if isinstance(step, dict)
            ),
        )

    def to_dict(self) -> dict[str, Any]:
        return {
            "version": self.version,
            "minCliVersion": self.min_cli_version,
            "files": {
                "safe": list(self.files.safe),
                "protected": list(self.files.protected),
            },
            "dependencies": {
                "update": dict(self.dependencies.update),
                "remove": list(self.dependencies.remove),
                "add": dict(self.dependencies.add),
            },
            "migrations": [step.to_dict() for step in self.migrations],
        }


def read_template_version(template_root: Path) -> str | None:
    """Best-effort read of ``version`` from the template's package.json."""
    package_path = template_root / PACKAGE_DESCRIPTOR
    if not package_path.exists():
        return None
    try:
        payload = json.loads(package_path.read_text(encoding="utf-8"))
    except (OSError, ValueError) as exc:
        logger.debug("Could not read template version from %s: %s", package_path, exc)
        return None
    version = payload.get("version") if isinstance(payload, dict) else None
    return version if isinstance(version, str) and version else None


def build_fallback_manifest(
    template_root: Path,
    current_version: str,
    settings: UpgradeSettings,
) -> UpgradeManifest:
    """Conservative manifest for templates that predate manifests."""
    return UpgradeManifest(
        version=read_template_version(template_root) or current_version,
        min_cli_version=settings.fallback_min_cli_version,
        files=ManifestFiles(safe=tuple(settings.fallback_safe_files)),
    )


def load_manifest(template_root: Path, filename: str) -> UpgradeManifest | None:
    """Load the manifest from ``template_root``.

    Returns:
        The parsed manifest, or None when the template ships none.

    Raises:
        ManifestError: If the file exists but is not a usable manifest.
    """
    manifest_path = template_root / filename
    if not manifest_path.exists():
        return None
    try:
        payload = json.loads(manifest_path.read_text(encoding="utf-8"))
    except (OSError, ValueError) as exc:
        raise ManifestError(f"Failed to read {filename}: {exc}") from exc
    return UpgradeManifest.from_dict(payload)


__all__ = [
    "DependencyChanges",
    "ManifestFiles",
    "MigrationStep",
    "UpgradeManifest",
    "build_fallback_manifest",
    "load_manifest",
    "read_template_version",
]
