from __future__ import annotations

import html
from typing import Iterable, Mapping

from .model import StructuralViolation, TocEntry


def _toc_item(entry: TocEntry, labels: Mapping[str, str]) -> str:
    try:
        label = labels[entry.anchor_id]
    except KeyError as exc:
        raise StructuralViolation(f"TOC entry {entry.anchor_id!r} has no captured label") from exc
    return (
        f'<li class="level-{entry.level}">'
        f'<a href="#{entry.anchor_id}">{html.escape(label, quote=False)}</a>'
        "</li>"
    )


def render_toc(entries: Iterable[TocEntry], labels: Mapping[str, str]) -> str:
    """Render entries in document order; the level only drives the indent class."""
    items = "".join(_toc_item(entry, labels) for entry in entries)
    return f'<div class="toc"><h2>Table of Contents</h2><ul>{items}</ul></div>'
