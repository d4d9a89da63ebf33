"""Core utilities and configuration exports."""

from .config import (
    CONFIG_FILENAME,
    DEFAULT_TEMPLATE_REPO,
    MANIFEST_FILENAME,
    PACKAGE_DESCRIPTOR,
    UpgradeSettings,
)
from .git import has_uncommitted_changes

__all__ = [
    "CONFIG_FILENAME",
    "DEFAULT_TEMPLATE_REPO",
    "MANIFEST_FILENAME",
    "PACKAGE_DESCRIPTOR",
    "UpgradeSettings",
    "has_uncommitted_changes",
]
