# src/ttmctl/cli.py

"""
Command-line interface for ttmctl.

This module:
- defines argument parsing and subcommands,
- reads input text (argument, file or stdin),
- delegates all parsing to engine modules and all output to render.

KISS rule: keep commands small and predictable.
"""

import argparse
import logging
import sys
from dataclasses import replace
from pathlib import Path
from typing import Any

import yaml

from ttmctl.config import ConfigError, load_config
from ttmctl.engine.block_tracker import parse_block_tracker
from ttmctl.engine.date import parse_date_code
from ttmctl.engine.errors import NotationError
from ttmctl.engine.render import (
    format_date_code,
    format_stat,
    format_task,
    render_tree,
    to_data,
    tree_to_data,
)
from ttmctl.engine.section import iter_sections
from ttmctl.engine.stat import parse_stat
from ttmctl.engine.task import parse_task
from ttmctl.engine.tree import build_task_tree


# ---------------------------------------------------------------------
# Parser
# ---------------------------------------------------------------------

def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="ttmctl")
    parser.add_argument(
        "--config",
        type=str,
        default=None,
        help="Settings file (default: ./.ttmctl.yml if present)",
    )
    parser.add_argument(
        "-v",
        "--verbose",
        action="store_true",
        help="Log parser decisions to stderr",
    )
    parser.add_argument(
        "--format",
        choices=["text", "yaml"],
        default=None,
        help="Output format (overrides the settings file)",
    )
    parser.add_argument(
        "--no-color",
        action="store_true",
        help="Disable coloured output",
    )
    sub = parser.add_subparsers(dest="command", required=True)

    # ------------------------------------------------------------------
    # Single elements
    # ------------------------------------------------------------------

    p_stat = sub.add_parser("stat", help="Parse one progress counter, e.g. 2/5")
    p_stat.add_argument("text", help="Counter token")
    p_stat.set_defaults(func=cmd_stat)

    p_date = sub.add_parser("date", help="Parse one week code, e.g. Y20S-W8M")
    p_date.add_argument("text", help="Date code")
    p_date.set_defaults(func=cmd_date)

    p_task = sub.add_parser("task", help="Parse one task line")
    p_task.add_argument("text", help="Task line, e.g. '>(2/15) Task (due: W2M)'")
    p_task.set_defaults(func=cmd_task)

    # ------------------------------------------------------------------
    # Documents
    # ------------------------------------------------------------------

    p_sections = sub.add_parser("sections", help="List the sections of a document")
    p_sections.add_argument("file", help="Input file, or - for stdin")
    p_sections.set_defaults(func=cmd_sections)

    p_tree = sub.add_parser("tree", help="Show the task tree of an indented block")
    p_tree.add_argument("file", help="Input file, or - for stdin")
    p_tree.add_argument(
        "-s",
        "--section",
        type=str,
        default=None,
        help="Only use the body of the section with this specifier",
    )
    p_tree.set_defaults(func=cmd_tree)

    p_tracker = sub.add_parser("tracker", help="Parse block tracker lines")
    p_tracker.add_argument("file", help="Input file, or - for stdin")
    p_tracker.set_defaults(func=cmd_tracker)

    return parser


# ---------------------------------------------------------------------
# Output helpers
# ---------------------------------------------------------------------

def _read_input(name: str) -> str:
    if name == "-":
        return sys.stdin.read()
    return Path(name).read_text(encoding="utf-8")


def _dump_yaml(data: Any) -> None:
    print(yaml.safe_dump(data, sort_keys=False, allow_unicode=True), end="")


def _use_yaml(args: argparse.Namespace) -> bool:
    return args.settings.format == "yaml"


def _use_color(args: argparse.Namespace) -> bool:
    return args.settings.color and not args.no_color


# ---------------------------------------------------------------------
# Commands
# ---------------------------------------------------------------------

def cmd_stat(args: argparse.Namespace) -> int:
    stat = parse_stat(args.text)
    if _use_yaml(args):
        _dump_yaml(to_data(stat))
    else:
        print(format_stat(stat))
    return 0


def cmd_date(args: argparse.Namespace) -> int:
    code = parse_date_code(args.text)
    if _use_yaml(args):
        _dump_yaml(to_data(code))
    else:
        print(format_date_code(code))
    return 0


def cmd_task(args: argparse.Namespace) -> int:
    task = parse_task(args.text)
    if _use_yaml(args):
        _dump_yaml(to_data(task))
    else:
        print(format_task(task, color=_use_color(args)))
    return 0


def cmd_sections(args: argparse.Namespace) -> int:
    sections = list(iter_sections(_read_input(args.file)))
    if _use_yaml(args):
        _dump_yaml([to_data(s) for s in sections])
        return 0

    for section in sections:
        print(f"{section.tab}[{section.specifier}] ({len(section.lines)} lines)")
    return 0


def cmd_tree(args: argparse.Namespace) -> int:
    text = _read_input(args.file)

    if args.section is not None:
        for section in iter_sections(text):
            if section.specifier == args.section:
                text = section.body
                break
        else:
            print(f"Error: section not found: [{args.section}]")
            return 1

    tree = build_task_tree(text)
    if _use_yaml(args):
        _dump_yaml(tree_to_data(tree))
    else:
        render_tree(tree, color=_use_color(args))
    return 0


def cmd_tracker(args: argparse.Namespace) -> int:
    entries = parse_block_tracker(_read_input(args.file))
    if _use_yaml(args):
        _dump_yaml([to_data(e) for e in entries])
        return 0

    for entry in entries:
        days = "  ".join(f"{day.value}:{format_stat(stat)}" for day, stat in entry.days())
        print(f"{entry.name}: {days}")
    return 0


# ---------------------------------------------------------------------
# Main
# ---------------------------------------------------------------------

def main(argv: list[str] | None = None) -> int:
    parser = _build_parser()
    args = parser.parse_args(argv)

    try:
        settings = load_config(args.config)
    except ConfigError as e:
        print(f"Error: {e}")
        return 1

    if args.format is not None:
        settings = replace(settings, format=args.format)
    args.settings = settings

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else getattr(logging, settings.log_level),
        format="%(levelname)s %(name)s: %(message)s",
        stream=sys.stderr,
    )

    func = getattr(args, "func", None)
    if func is None:
        parser.print_help()
        return 2

    try:
        return func(args)
    except (NotationError, OSError, UnicodeDecodeError) as e:
        print(f"Error: {e}")
        return 1


if __name__ == "__main__":
    raise SystemExit(main())
