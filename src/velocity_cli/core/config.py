"""Configuration for the Velocity upgrade engine."""

from __future__ import annotations

import os
from dataclasses import dataclass, field, replace

CONFIG_FILENAME = ".velocity.json"
MANIFEST_FILENAME = "velocity-manifest.json"
PACKAGE_DESCRIPTOR = "package.json"

DEFAULT_TEMPLATE_REPO = "southwellmedia/velocity"
TEMPLATE_REPO_ENV = "VELOCITY_TEMPLATE_REPO"

# Lowest engine version a fallback manifest asks for.
FALLBACK_MIN_CLI_VERSION = "1.0.0"

# Safe list used when the template ships no manifest.
FALLBACK_SAFE_FILES: tuple[str, ...] = (
    "src/components/ui/",
    "src/components/seo/",
    "src/components/layout/",
    "src/layouts/",
    "src/lib/",
    "src/styles/tokens/",
    "src/styles/global.css",
    "src/content.config.ts",
    "tsconfig.json",
    "eslint.config.js",
    ".prettierrc",
    ".prettierignore",
)

DEFAULT_SEARCH_PATHS: tuple[str, ...] = ("src/",)

# Directories the migration scanner never descends into.
SCAN_SKIP_DIRS: frozenset[str] = frozenset({"node_modules", ".git"})


def _default_cli_version() -> str:
    from velocity_cli import __version__

    return __version__


@dataclass(frozen=True)
class UpgradeSettings:
    """Everything the upgrade runner would otherwise read from module globals."""

    cli_version: str = field(default_factory=_default_cli_version)
    template_repo: str = DEFAULT_TEMPLATE_REPO
    fallback_safe_files: tuple[str, ...] = FALLBACK_SAFE_FILES
    fallback_min_cli_version: str = FALLBACK_MIN_CLI_VERSION
    default_search_paths: tuple[str, ...] = DEFAULT_SEARCH_PATHS
    config_filename: str = CONFIG_FILENAME
    manifest_filename: str = MANIFEST_FILENAME

    @classmethod
    def from_env(cls, template_repo: str | None = None) -> "UpgradeSettings":
        """Build settings, letting an explicit repo beat ``VELOCITY_TEMPLATE_REPO``."""
        settings = cls()
        repo = (template_repo or os.environ.get(TEMPLATE_REPO_ENV) or "").strip()
        if repo:
            settings = replace(settings, template_repo=repo)
        return settings


__all__ = [
    "CONFIG_FILENAME",
    "DEFAULT_SEARCH_PATHS",
    "DEFAULT_TEMPLATE_REPO",
    "FALLBACK_MIN_CLI_VERSION",
    "FALLBACK_SAFE_FILES",
    "MANIFEST_FILENAME",
    "PACKAGE_DESCRIPTOR",
    "SCAN_SKIP_DIRS",
    "TEMPLATE_REPO_ENV",
    "UpgradeSettings",
]
