"""Post-hoc hyperlinking of entity names to companion report files.

Only names whose companion file exists are linked. The HTML is walked once:
markup, comments, existing anchors and head/style/script content are copied
through verbatim, and every remaining text run is matched against all
eligible names at once (longest first). A region of text is therefore linked
at most once, and re-running the linker on its own output changes nothing.
"""

from __future__ import annotations

import html
import logging
import os
import re
from typing import Callable, Dict, Mapping, Optional

from markdown_it.common.utils import escapeHtml

from .model import EntityNames

logger = logging.getLogger(__name__)

FOREGROUND = "FG"
BACKGROUND = "BG"
SQL = "SQL"

_MARKUP_RE = re.compile(
    r"""<!--.*?-->|<![^>]*>|</?[A-Za-z](?:[^>"']|"[^"]*"|'[^']*')*>""", re.DOTALL
)
_TAG_NAME_RE = re.compile(r"<(/?)([A-Za-z][A-Za-z0-9]*)")
_OPAQUE_TAGS = frozenset({"a", "head", "title", "style", "script"})


def safe_event_filename(dirpath: str, event: str, is_fg: bool = True) -> str:
    safe_event_name = event.replace("/", "_").replace(" ", "_").replace(":", "").replace("*", "_")
    prefix = "fg" if is_fg else "bg"
    return f"{dirpath}/{prefix}_{safe_event_name}.html"


def companion_target(category: str, name: str, companion_dir: str) -> Optional[str]:
    tag = category.strip().upper()
    if tag == FOREGROUND:
        return safe_event_filename(companion_dir, name, True)
    if tag == BACKGROUND:
        return safe_event_filename(companion_dir, name, False)
    if tag == SQL:
        return f"{companion_dir}/sqlid_{name}.html"
    return None


def resolve_link_targets(
    entity_names: EntityNames,
    companion_dir: str,
    exists: Callable[[str], bool] = os.path.exists,
) -> Dict[str, str]:
    targets: Dict[str, str] = {}
    for category in sorted(entity_names):
        for name in sorted(set(entity_names[category])):
            if not name or name in targets:
                continue
            path = companion_target(category, name, companion_dir)
            if path is None:
                logger.debug("Skipping %r: unknown entity category %r", name, category)
                continue
            if not exists(path):
                logger.debug("Skipping %r: companion report %s not found", name, path)
                continue
            targets[name] = path
    return targets


def _anchor(path: str, text: str) -> str:
    return f'<a href="{html.escape(path)}" target="_blank">{text}</a>'


def _link_text(text: str, pattern: re.Pattern[str], hrefs: Mapping[str, str]) -> str:
    return pattern.sub(lambda match: _anchor(hrefs[match.group(0)], match.group(0)), text)


def link_entities(html_text: str, targets: Mapping[str, str]) -> str:
    if not targets:
        return html_text

    # Match names in the form the renderer escapes text to.
    hrefs = {escapeHtml(name): path for name, path in targets.items()}
    ordered = sorted(hrefs, key=lambda text: (-len(text), text))
    pattern = re.compile("|".join(re.escape(text) for text in ordered))

    pieces = []
    open_counts = {tag: 0 for tag in _OPAQUE_TAGS}
    pos = 0
    for markup in _MARKUP_RE.finditer(html_text):
        text = html_text[pos : markup.start()]
        if any(open_counts.values()):
            pieces.append(text)
        else:
            pieces.append(_link_text(text, pattern, hrefs))
        pieces.append(markup.group(0))
        pos = markup.end()

        name_match = _TAG_NAME_RE.match(markup.group(0))
        if name_match is None:
            continue
        tag = name_match.group(2).lower()
        if tag not in open_counts or markup.group(0).endswith("/>"):
            continue
        if name_match.group(1):
            open_counts[tag] = max(0, open_counts[tag] - 1)
        else:
            open_counts[tag] += 1

    tail = html_text[pos:]
    pieces.append(tail if any(open_counts.values()) else _link_text(tail, pattern, hrefs))
    return "".join(pieces)


def add_links(
    html_text: str,
    entity_names: EntityNames,
    companion_dir: str,
    exists: Callable[[str], bool] = os.path.exists,
) -> str:
    names = {category: set(values) for category, values in entity_names.items()}
    targets = resolve_link_targets(names, companion_dir, exists=exists)
    logger.debug("Linking %d of %d entity names", len(targets), sum(len(v) for v in names.values()))
    return link_entities(html_text, targets)
