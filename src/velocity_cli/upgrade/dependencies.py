"""Apply manifest dependency changes to ``package.json``."""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any

from velocity_cli.core.config import PACKAGE_DESCRIPTOR

from .errors import UpgradeError
from .manifest import DependencyChanges

logger = logging.getLogger(__name__)

DEPENDENCY_SECTIONS = ("dependencies", "devDependencies")


def _section(package: dict[str, Any], name: str) -> dict[str, Any]:
    section = package.get(name)
    if not isinstance(section, dict):
        section = {}
        package[name] = section
    return section


def _declares(package: dict[str, Any], section: str, name: str) -> bool:
    entries = package.get(section)
    return isinstance(entries, dict) and name in entries


def merge_dependencies(package: dict[str, Any], changes: DependencyChanges) -> dict[str, Any]:
    """Mutate ``package`` in place and return it.

    Updates land in whichever section already lists the package
    (``dependencies`` first), removals clear both sections, and additions
    always go to ``dependencies``, overwriting whatever is there.
    """
    for name, version in changes.update.items():
        if _declares(package, "dependencies", name):
            package["dependencies"][name] = version
        elif _declares(package, "devDependencies", name):
            package["devDependencies"][name] = version
        else:
            _section(package, "dependencies")[name] = version

    for name in changes.remove:
        for section in DEPENDENCY_SECTIONS:
            if _declares(package, section, name):
                del package[section][name]

    for name, version in changes.add.items():
        _section(package, "dependencies")[name] = version

    return package


def write_json(path: Path, payload: Any) -> None:
    path.write_text(json.dumps(payload, indent=2, ensure_ascii=False) + "\n", encoding="utf-8")


def merge_package_json_deps(project_root: Path, changes: DependencyChanges) -> bool:
    """Merge ``changes`` into the project's package.json.

    Returns:
        True if the descriptor was rewritten, False when there is none.

    Raises:
        UpgradeError: The descriptor exists but is not a readable JSON object.
    """
    package_path = project_root / PACKAGE_DESCRIPTOR
    if not package_path.exists():
        logger.debug("No %s in %s; skipping dependency merge", PACKAGE_DESCRIPTOR, project_root)
        return False

    try:
        package = json.loads(package_path.read_text(encoding="utf-8"))
    except ValueError as exc:
        raise UpgradeError(f"Could not parse {PACKAGE_DESCRIPTOR}: {exc}") from exc
    if not isinstance(package, dict):
        raise UpgradeError(f"{PACKAGE_DESCRIPTOR} must contain a JSON object")
    merge_dependencies(package, changes)
    write_json(package_path, package)
    return True


__all__ = ["DEPENDENCY_SECTIONS", "merge_dependencies", "merge_package_json_deps", "write_json"]
