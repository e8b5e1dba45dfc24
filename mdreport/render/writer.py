from __future__ import annotations

import logging
import os
import tempfile
from pathlib import Path
from typing import Any, Callable, Optional

from .assemble import render_document
from .linker import add_links
from .model import CompanionFiles, EntityNames

Opener = Callable[[str], Any]

_logger = logging.getLogger(__name__)


def companion_dir_for(input_path: str | os.PathLike[str]) -> str:
    # Everything after the first dot is dropped, directories included.
    return f"{str(input_path).split('.')[0]}.html_reports"


def output_path_for(input_path: str | os.PathLike[str]) -> Path:
    return Path(input_path).with_suffix(".html")


def _atomic_write_text(path: Path, content: str) -> None:
    with tempfile.NamedTemporaryFile(
        mode="w",
        encoding="utf-8",
        newline="",
        delete=False,
        dir=str(path.parent),
        prefix=path.name + ".",
        suffix=".tmp",
    ) as handle:
        temp_path = Path(handle.name)
        try:
            handle.write(content)
        except BaseException:
            handle.close()
            temp_path.unlink(missing_ok=True)
            raise
    try:
        os.replace(temp_path, path)
    except OSError:
        temp_path.unlink(missing_ok=True)
        raise


def _open_best_effort(opener: Opener, path: Path, logger: logging.Logger) -> None:
    try:
        opener(str(path))
    except Exception:
        logger.debug("Could not open %s in a viewer; continuing.", path, exc_info=True)


def convert_md_to_html_file(
    input_path: str | os.PathLike[str],
    entity_names: EntityNames,
    *,
    companions: CompanionFiles = CompanionFiles(),
    opener: Optional[Opener] = None,
    logger: logging.Logger | None = None,
) -> Path:
    """
    Render a markdown report to a sibling ``.html`` file.

    The full document is built in memory before a single atomic write, so a
    failure never leaves a truncated report behind. ``OSError`` from reading or
    writing propagates; a failing ``opener`` is logged and ignored.
    """

    log = logger or _logger
    with open(input_path, "r", encoding="utf-8") as handle:
        markdown_text = handle.read()

    companion_dir = companion_dir_for(input_path)
    html_plain = render_document(markdown_text, companion_dir, companions)
    html_doc = add_links(html_plain, entity_names, companion_dir)

    output_path = output_path_for(input_path)
    _atomic_write_text(output_path, html_doc)
    log.info("HTML report generated at %s", output_path)

    if opener is not None:
        _open_best_effort(opener, output_path, log)
    return output_path


def relink_html_file(
    html_path: str | os.PathLike[str],
    entity_names: EntityNames,
    companion_dir: str,
    *,
    logger: logging.Logger | None = None,
) -> Path:
    """Link entity names in an already rendered report, e.g. after more companion files appeared."""
    log = logger or _logger
    path = Path(html_path)
    current = path.read_text(encoding="utf-8")
    linked = add_links(current, entity_names, companion_dir)
    if linked == current:
        log.info("No new links for %s", path)
        return path
    _atomic_write_text(path, linked)
    log.info("Relinked %s", path)
    return path
