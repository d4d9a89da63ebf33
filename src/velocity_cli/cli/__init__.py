"""CLI helpers exposed for other modules."""

from .helpers import console, show_banner

__all__ = ["console", "show_banner"]
