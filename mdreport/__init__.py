"""Render generated markdown analysis reports to standalone HTML."""

TOOL_VERSION = "0.1.0"

__all__ = [
    "TOOL_VERSION",
    "convert_md_to_html_file",
    "relink_html_file",
    "render_document",
]

from .render import convert_md_to_html_file, relink_html_file, render_document
