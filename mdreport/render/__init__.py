"""Markdown report to standalone HTML: anchors, table of contents, entity links."""

__all__ = [
    "CompanionFiles",
    "Extraction",
    "HeadingRecord",
    "StructuralViolation",
    "TocEntry",
    "add_links",
    "convert_md_to_html_file",
    "extract_headings",
    "relink_html_file",
    "render_body",
    "render_document",
    "render_toc",
]

from .assemble import render_body, render_document
from .headings import extract_headings
from .linker import add_links
from .model import CompanionFiles, Extraction, HeadingRecord, StructuralViolation, TocEntry
from .toc import render_toc
from .writer import convert_md_to_html_file, relink_html_file
