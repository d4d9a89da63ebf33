"""Template transport for velocity-cli."""

from .download import TemplateRef, download_template, extract_archive, parse_template_ref

__all__ = [
    "TemplateRef",
    "download_template",
    "extract_archive",
    "parse_template_ref",
]
