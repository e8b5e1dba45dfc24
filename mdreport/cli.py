from __future__ import annotations

import argparse
import os
import sys
import webbrowser
from collections.abc import Sequence
from pathlib import Path

from mdreport.config import RenderConfig
from mdreport.foundation.config_io import CONFIG_ENV_VAR, load_config, load_yaml_mapping
from mdreport.foundation.logging_utils import setup_logger
from mdreport.render.linker import BACKGROUND, FOREGROUND, SQL
from mdreport.render.writer import convert_md_to_html_file, relink_html_file


def _add_entity_arguments(parser: argparse.ArgumentParser) -> None:
    parser.add_argument("--fg", action="append", default=[], metavar="NAME", help="Foreground wait event name (repeatable).")
    parser.add_argument("--bg", action="append", default=[], metavar="NAME", help="Background wait event name (repeatable).")
    parser.add_argument("--sql", action="append", default=[], metavar="SQL_ID", help="SQL id (repeatable).")
    parser.add_argument(
        "--entities",
        dest="entities_path",
        help="YAML/JSON file mapping a category (FG, BG, SQL) to a list of names.",
    )


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="mdreport", add_help=True)
    parser.add_argument(
        "--config",
        "--config-path",
        dest="config_path",
        help="Config YAML (default: $MDREPORT_CONFIG, then config/config.yaml in the repo, then built-in defaults).",
    )
    sub = parser.add_subparsers(dest="command", required=True)

    render = sub.add_parser("render", help="Render a markdown report to a standalone HTML file")
    render.add_argument("input_path", metavar="REPORT.md")
    render.add_argument("--no-open", action="store_true", dest="no_open", help="Do not open the result in a browser.")
    _add_entity_arguments(render)

    relink = sub.add_parser("relink", help="Add entity links to an existing HTML report")
    relink.add_argument("html_path", metavar="REPORT.html")
    relink.add_argument("--companion-dir", dest="companion_dir", required=True)
    _add_entity_arguments(relink)

    return parser


def load_entity_names(args: argparse.Namespace) -> dict[str, set[str]]:
    names: dict[str, set[str]] = {FOREGROUND: set(args.fg), BACKGROUND: set(args.bg), SQL: set(args.sql)}
    if args.entities_path:
        payload = load_yaml_mapping(args.entities_path)
        for category, values in payload.items():
            if isinstance(values, str) or not isinstance(values, Sequence):
                raise ValueError(f"Entity file {args.entities_path}: {category!r} must map to a list of names")
            names.setdefault(str(category).upper(), set()).update(str(value) for value in values)
    return {category: values for category, values in names.items() if values}


def resolve_config(config_path: str | None) -> tuple[RenderConfig, list[str]]:
    try:
        cfg, _meta = load_config(config_path=config_path)
    except FileNotFoundError:
        if config_path or os.environ.get(CONFIG_ENV_VAR, "").strip():
            raise
        cfg = {}
    return RenderConfig.from_dict(cfg)


def _open_in_browser(path: str) -> None:
    webbrowser.open(Path(path).resolve().as_uri())


def main(argv: Sequence[str] | None = None) -> int:
    args = build_parser().parse_args(list(argv) if argv is not None else None)

    try:
        config, warnings = resolve_config(args.config_path)
        logger = setup_logger(config.log_level)
        for warning in warnings:
            logger.warning(warning)
        entity_names = load_entity_names(args)

        if args.command == "render":
            opener = None if args.no_open or not config.open_in_viewer else _open_in_browser
            output_path = convert_md_to_html_file(
                args.input_path,
                entity_names,
                companions=config.companions,
                opener=opener,
                logger=logger,
            )
            print(f"mdreport: Wrote {output_path}")
            return 0

        if args.command == "relink":
            output_path = relink_html_file(args.html_path, entity_names, args.companion_dir, logger=logger)
            print(f"mdreport: Updated {output_path}")
            return 0
    except (OSError, UnicodeDecodeError) as exc:
        print(f"mdreport: {exc}", file=sys.stderr)
        return 1
    except ValueError as exc:
        print(f"mdreport: {exc}", file=sys.stderr)
        return 2

    raise AssertionError(f"Unhandled command: {args.command}")


if __name__ == "__main__":  # pragma: no cover
    raise SystemExit(main(sys.argv[1:]))
