from __future__ import annotations

from typing import Any, Dict, Optional, Tuple

from markdown_it import MarkdownIt
from mdit_py_plugins.footnote import footnote_plugin

from .headings import extract_headings
from .model import CompanionFiles, Extraction
from .toc import render_toc

_DOCUMENT_TEMPLATE = """<!DOCTYPE html>
<html lang="en">
<head>
    <meta charset="UTF-8">
    <title>Analysis report</title>
    <style>
        body {{
            font-family: Arial, sans-serif;
            padding: 2em;
            background: #fdfdfd;
            color: #333;
        }}
        .toc {{
            background: #f0f0f0;
            padding: 1em;
            margin-bottom: 2em;
            border-left: 4px solid #444;
        }}
        .toc ul {{ list-style: none; padding-left: 0; }}
        .toc li {{ margin: 0.5em 0; }}
        .toc li.level-1 {{ margin-left: 0em; }}
        .toc li.level-2 {{ margin-left: 1em; }}
        .toc li.level-3 {{ margin-left: 2em; }}
        .toc li.level-4 {{ margin-left: 3em; }}
        .toc li.level-5 {{ margin-left: 4em; }}
        .toc li.level-6 {{ margin-left: 5em; }}
        pre {{
            background: #272822;
            color: #f8f8f2;
            padding: 1em;
            overflow-x: auto;
        }}
        code {{ background: #eee; padding: 0.2em 0.4em; border-radius: 4px; }}
        pre code {{ background: none; padding: 0; }}
        table {{ border-collapse: collapse; }}
        th, td {{ border: 1px solid #ccc; padding: 0.3em 0.6em; }}
        a {{ color: #0077cc; text-decoration: none; }}
        a:hover {{ text-decoration: underline; }}
        .report-chrome {{ text-align: center; color: #777; font-size: 0.9em; }}
    </style>
</head>
<body>
<header class="report-chrome"><p>Analysis report</p></header>
{toc}
<iframe src="{load_profile}" width="100%" height="600px" style="border: none;"></iframe>
<a href="{charts}" target="_blank">ALL CHARTS</a>
{content}
<footer class="report-chrome"><p>Generated by mdreport</p></footer>
</body>
</html>"""


def build_markdown() -> MarkdownIt:
    return MarkdownIt("commonmark").enable("table").use(footnote_plugin)


def render_body(markdown_text: str, md: Optional[MarkdownIt] = None) -> Tuple[str, Extraction]:
    """
    Render markdown to an HTML body fragment with anchored headings.

    The same ``env`` is used for parsing and rendering so footnote references
    resolve against the definitions collected during the parse.
    """

    engine = md or build_markdown()
    env: Dict[str, Any] = {}
    tokens = engine.parse(markdown_text, env)
    extraction = extract_headings(tokens)
    body = engine.renderer.render(extraction.tokens, engine.options, env)
    return body, extraction


def render_document(
    markdown_text: str,
    companion_dir: str,
    companions: CompanionFiles = CompanionFiles(),
    md: Optional[MarkdownIt] = None,
) -> str:
    body, extraction = render_body(markdown_text, md)
    return _DOCUMENT_TEMPLATE.format(
        toc=render_toc(extraction.toc, extraction.labels),
        load_profile=f"{companion_dir}/{companions.load_profile}",
        charts=f"{companion_dir}/{companions.charts}",
        content=body,
    )
