# src/ttmctl/engine/render.py

"""
Rendering helpers for CLI output.

This module is responsible for:
- task tree rendering (tree),
- one-line summaries of tasks, stats and date codes,
- conversion of parsed records to plain data for YAML output.

It is presentation-only: it echoes parsed values and never writes the
notation back out.
"""

from __future__ import annotations

import sys
from collections.abc import Mapping
from dataclasses import fields, is_dataclass
from enum import Enum
from typing import Any, Optional

from .model import (
    AnyDateCode,
    BoolStat,
    CountStat,
    DateCode,
    RequiredCountStat,
    ShortDateCode,
    ShortWeekDateCode,
    Stat,
    Task,
    TaskFlag,
    TaskFlags,
    UnknownStat,
    WeekDateCode,
)
from .tree import CommitNote, Label, TaskNode, TaskTree, TaskTreeNode


# ---------------------------------------------------------------------
# ANSI / terminal helpers
# ---------------------------------------------------------------------

_RESET = "\033[0m"
_DIM = "\033[90m"

# First matching flag wins.
_COLOR = {
    TaskFlag.DONE: "\033[90m",     # grey
    TaskFlag.BLOCKED: "\033[33m",  # yellow
    TaskFlag.LATE: "\033[31m",     # red
    TaskFlag.CURRENT: "\033[32m",  # green
}


def _supports_color() -> bool:
    """Return True if stdout is a TTY."""
    return sys.stdout.isatty()


def _task_color(flags: TaskFlags) -> str:
    for flag, code in _COLOR.items():
        if flag in flags:
            return code
    return ""


# ---------------------------------------------------------------------
# Summaries
# ---------------------------------------------------------------------

def format_stat(stat: Optional[Stat]) -> str:
    if stat is None:
        return "·"
    if isinstance(stat, CountStat):
        act = "" if stat.act is None else str(stat.act)
        exp = "" if stat.exp is None else f"/{stat.exp}"
        return f"{act}{exp}"
    if isinstance(stat, BoolStat):
        return f"{'done' if stat.act else 'open'}/{'required' if stat.exp else 'optional'}"
    if isinstance(stat, RequiredCountStat):
        return f"{stat.act} ({'required' if stat.exp else 'optional'})"
    if isinstance(stat, UnknownStat):
        return "unknown"
    return repr(stat)


def format_date_code(code: AnyDateCode) -> str:
    if isinstance(code, DateCode):
        return f"year {code.year} {code.season.name.title()}, week {code.week}, {code.weekday.name.title()}"
    if isinstance(code, WeekDateCode):
        return f"year {code.year} {code.season.name.title()}, week {code.week}"
    if isinstance(code, ShortDateCode):
        return f"week {code.week}, {code.weekday.name.title()}"
    if isinstance(code, ShortWeekDateCode):
        return f"week {code.week}"
    return repr(code)


def format_task(task: Task, *, color: bool = True) -> str:
    """
    Summarise a task on one line:

      Name [flags] (day, accum, context) due: ... p<priority>
    """
    name = task.name or "(unnamed)"
    if color and _supports_color():
        c = _task_color(task.flags)
        if c:
            name = f"{c}{name}{_RESET}"

    parts = [name]
    if task.flags:
        parts.append("[" + ", ".join(f.name.lower() for f in task.flags) + "]")

    stats = task.prefix_stats
    if any(s is not None for s in stats):
        parts.append("(" + ", ".join(format_stat(s) for s in stats) + ")")

    if task.due_date is not None:
        parts.append(f"due: {format_date_code(task.due_date)}")
    if task.hard_date is not None:
        parts.append(f"hard: {format_date_code(task.hard_date)}")
    if task.has_priority:
        parts.append(f"p{task.priority}")
    for goal, goal_stats in task.other_stats.items():
        parts.append(f"{goal}: " + ", ".join(format_stat(s) for s in goal_stats))
    if task.note_link:
        note = f"*{task.note_link}"
        parts.append(f"{_DIM}{note}{_RESET}" if color and _supports_color() else note)

    return " ".join(parts)


def _format_node(node: TaskTreeNode, *, color: bool) -> str:
    if isinstance(node, TaskNode):
        return format_task(node.task, color=color)
    if isinstance(node, CommitNote):
        return f"- {node.text}"
    if isinstance(node, Label):
        return f"{_DIM}{node.text}{_RESET}" if color and _supports_color() else node.text
    return repr(node)


# ---------------------------------------------------------------------
# Tree rendering
# ---------------------------------------------------------------------

def render_tree(tree: TaskTree, *, color: bool = True) -> None:
    """
    Render a task tree with branch guides, children in source order.
    """
    root = tree.root
    print(root.text if isinstance(root, Label) else _format_node(root, color=color))
    _render_children(tree, TaskTree.ROOT, prefix="", color=color)


def _render_children(tree: TaskTree, idx: int, *, prefix: str, color: bool) -> None:
    items = tree.children(idx)
    for i, child in enumerate(items):
        is_last = i == (len(items) - 1)
        branch = "└── " if is_last else "├── "
        next_prefix = prefix + ("    " if is_last else "│   ")

        print(f"{prefix}{branch}{_format_node(tree[child], color=color)}")

        _render_children(tree, child, prefix=next_prefix, color=color)


# ---------------------------------------------------------------------
# Plain data (YAML output)
# ---------------------------------------------------------------------

def to_data(value: Any) -> Any:
    """
    Convert parsed records into YAML-safe builtins.

    Dataclasses become mappings tagged with their type name; enums become
    their names; empty optional values are dropped.
    """
    if isinstance(value, TaskFlags):
        return [f.name.lower() for f in value]
    if isinstance(value, Enum):
        return value.name.lower()
    if is_dataclass(value) and not isinstance(value, type):
        out: dict[str, Any] = {"type": type(value).__name__}
        for f in fields(value):
            v = getattr(value, f.name)
            if v is None or v == "" or v == {}:
                continue
            out[f.name] = to_data(v)
        return out
    if isinstance(value, Mapping):
        return {str(k): to_data(v) for k, v in value.items()}
    if isinstance(value, (list, tuple)):
        return [to_data(v) for v in value]
    return value


def tree_to_data(tree: TaskTree, idx: int = TaskTree.ROOT) -> dict[str, Any]:
    data = to_data(tree[idx])
    children = tree.children(idx)
    if children:
        data["children"] = [tree_to_data(tree, c) for c in children]
    return data
