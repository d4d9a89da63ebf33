"""CLI command modules for velocity-cli."""

from .upgrade import upgrade

__all__ = ["upgrade"]
