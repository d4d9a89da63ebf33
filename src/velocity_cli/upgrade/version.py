"""Loose version comparison for manifest gate checks.

This is not full semantic versioning: pre-release tags are split into
their own components and anything non-numeric counts as ``0``. It is good
enough to compare ``1.6.0`` against ``2.0.0`` and nothing more.
"""

from __future__ import annotations

import re
from itertools import zip_longest

_SEPARATORS = re.compile(r"[.-]")
_LEADING_DIGITS = re.compile(r"\s*[+-]?\d+")


def _component(segment: str) -> int:
    match = _LEADING_DIGITS.match(segment)
    return int(match.group()) if match else 0


def parse_version(version: str) -> list[int]:
    """Split ``version`` into integer components.

    >>> parse_version("v1.2.3-beta.4")
    [1, 2, 3, 0, 4]
    """
    if version.startswith("v"):
        version = version[1:]
    return [_component(part) for part in _SEPARATORS.split(version)]


def is_version_less_than(current: str, required: str) -> bool:
    """Return True when ``current`` sorts strictly before ``required``."""
    for left, right in zip_longest(parse_version(current), parse_version(required), fillvalue=0):
        if left < right:
            return True
        if left > right:
            return False
    return False


__all__ = ["is_version_less_than", "parse_version"]
