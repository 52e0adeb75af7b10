# src/ttmctl/engine/task.py

"""
Task line parser.

Grammar:

    <flags>(<day>[,<accum>[,<context>]]) <name>[ (<field>[; <field>]*)]

- flags:   zero or more of `>` current, `~` done, `B` blocked, `L` late
- prefix:  up to three progress counters, assigned positionally
- suffix:  `*<note link>` or `key: value` fields, where key is one of
           due / hard (date codes), prior (0-99), g<goal> (stat tuple)

Field-level failures are re-raised as the enclosing descriptor's error
kind, chained to the field error with `raise ... from`.
"""

import logging
from collections.abc import Callable
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Final, NoReturn, Optional

from .date import parse_date_code
from .errors import (
    InvalidDueDate,
    InvalidGoalStat,
    InvalidHardDate,
    InvalidInteger,
    InvalidPrefixDescriptor,
    InvalidPriorityValue,
    InvalidSuffixDescriptor,
    InvalidTaskFlags,
    NotationError,
    NoTaskDescriptorsFound,
    UnbalancedParenthesis,
    UnsupportedDescriptorKey,
)
from .grammar import (
    GrammarRegistry,
    filter_inner_capture_group_names,
    parse_integer_auto,
    resolve_registry,
)
from .model import (
    PRIORITY_MAX,
    PRIORITY_NONE,
    AnyDateCode,
    StatTuple,
    Task,
    TaskFlag,
    TaskFlags,
)
from .stat import parse_stat_slots, parse_stat_tuple

logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------
# Patterns
# ---------------------------------------------------------------------

# Standalone, these expose their inner field; embedded in TASK_LINE only
# the descriptor as a whole stays addressable.
PREFIX_DESCRIPTOR: Final[str] = r"\x28(?P<Slots>[^\x28\x29]*)\x29"

# One level of parentheses may nest inside the suffix, e.g. a note link
# `*P[note (draft)]`.
SUFFIX_DESCRIPTOR: Final[str] = (
    r"\x28(?P<Fields>(?:[^\x28\x29]|\x28[^\x28\x29]*\x29)*)\x29"
)

_FLAGS_AND_PREFIX: Final[str] = (
    r"\s*(?P<Flags>[^\x28\x29]*?)"
    rf"(?P<Prefix>{PREFIX_DESCRIPTOR})"
)

TASK_HEAD: Final[str] = filter_inner_capture_group_names(_FLAGS_AND_PREFIX)

# The suffix is only the parenthesised group that ends the line; any
# parentheses before it belong to the name.
TASK_LINE: Final[str] = filter_inner_capture_group_names(
    _FLAGS_AND_PREFIX
    + r"(?P<Name>.*?)"
    + rf"(?P<Suffix>{SUFFIX_DESCRIPTOR})?"
    + r"\s*"
)

FLAG_CODES: Final[dict[str, TaskFlag]] = {flag.value: flag for flag in TaskFlag}


# ---------------------------------------------------------------------
# Tuple fields
# ---------------------------------------------------------------------

def split_tuple_fields(text: str, sep: str = ";") -> list[str]:
    """
    Split `(A; B; C)` into its trimmed fields ["A", "B", "C"].

    Empty fields are kept: `(A;;C)` gives three fields, `()` one empty
    field. Raises UnbalancedParenthesis unless the first field opens with
    `(` and the last one closes with `)`; parentheses inside the fields
    are kept as text.
    """
    s = text.strip()
    if not s.startswith("("):
        raise UnbalancedParenthesis(text, "no open parenthesis found")
    if not s.endswith(")") or len(s) < 2:
        raise UnbalancedParenthesis(text, "no close parenthesis found")

    return [f.strip() for f in s[1:-1].split(sep)]


# ---------------------------------------------------------------------
# Builder
# ---------------------------------------------------------------------

@dataclass(slots=True)
class _TaskBuilder:
    """
    Mutable staging area filled while a single line is parsed.
    """

    name: str = ""
    flags: TaskFlags = field(default_factory=TaskFlags)
    prefix: StatTuple = (None, None, None)
    note_link: str = ""
    priority: int = PRIORITY_NONE
    due_date: Optional[AnyDateCode] = None
    hard_date: Optional[AnyDateCode] = None
    other_stats: dict[str, StatTuple] = field(default_factory=dict)

    def build(self) -> Task:
        day, accum, context = self.prefix
        return Task(
            name=self.name,
            flags=self.flags,
            day_stat=day,
            accum_stat=accum,
            context_stat=context,
            note_link=self.note_link,
            priority=self.priority,
            due_date=self.due_date,
            hard_date=self.hard_date,
            other_stats=MappingProxyType(dict(self.other_stats)),
        )


# ---------------------------------------------------------------------
# Suffix keys
# ---------------------------------------------------------------------

FieldHandler = Callable[[_TaskBuilder, str, str, str, GrammarRegistry], None]


def _set_due(b: _TaskBuilder, key: str, value: str, raw: str, g: GrammarRegistry) -> None:
    try:
        b.due_date = parse_date_code(value, grammars=g)
    except NotationError as e:
        raise InvalidDueDate(raw, str(e)) from e


def _set_hard(b: _TaskBuilder, key: str, value: str, raw: str, g: GrammarRegistry) -> None:
    try:
        b.hard_date = parse_date_code(value, grammars=g)
    except NotationError as e:
        raise InvalidHardDate(raw, str(e)) from e


def _set_priority(b: _TaskBuilder, key: str, value: str, raw: str, g: GrammarRegistry) -> None:
    try:
        priority = parse_integer_auto(value.strip())
    except InvalidInteger as e:
        raise InvalidPriorityValue(raw, "not an integer") from e

    if not 0 <= priority <= PRIORITY_MAX:
        raise InvalidPriorityValue(raw, f"must be between 0 and {PRIORITY_MAX}")
    b.priority = priority


def _set_goal(b: _TaskBuilder, key: str, value: str, raw: str, g: GrammarRegistry) -> None:
    goal = key[1:]
    try:
        b.other_stats[goal] = parse_stat_tuple(value, grammars=g)
    except NotationError as e:
        raise InvalidGoalStat(raw, str(e), goal=goal) from e


# Evaluated in order; the first matching predicate handles the field.
SUFFIX_KEYS: Final[tuple[tuple[Callable[[str], bool], FieldHandler], ...]] = (
    (lambda key: key == "due", _set_due),
    (lambda key: key == "hard", _set_hard),
    (lambda key: key == "prior", _set_priority),
    (lambda key: len(key) > 1 and key.startswith("g"), _set_goal),
)


# ---------------------------------------------------------------------
# Public API
# ---------------------------------------------------------------------

def parse_task(text: str, *, grammars: Optional[GrammarRegistry] = None) -> Task:
    """
    Parse one task line into a Task.

    Leading and trailing whitespace of the line is ignored.
    """
    g = resolve_registry(grammars)

    m = g.compile(TASK_LINE).fullmatch(text)
    if m is None:
        _raise_line_error(text, g)

    b = _TaskBuilder(name=m.group("Name").strip())
    b.flags = parse_task_flags(m.group("Flags"))
    b.prefix = _parse_prefix(m.group("Prefix"), g)

    suffix = m.group("Suffix")
    if suffix is not None:
        _parse_suffix(b, suffix, g)

    task = b.build()
    logger.debug("task %r parsed from %r", task.name, text)
    return task


def parse_task_flags(text: str) -> TaskFlags:
    flags = TaskFlags()
    for c in text.strip():
        flag = FLAG_CODES.get(c)
        if flag is None:
            raise InvalidTaskFlags(text, f"unknown flag '{c}'")
        flags = flags.with_flag(flag)
    return flags


# ---------------------------------------------------------------------
# Internal helpers
# ---------------------------------------------------------------------

def _raise_line_error(text: str, g: GrammarRegistry) -> NoReturn:
    if "(" not in text and ")" not in text:
        raise NoTaskDescriptorsFound(text)

    head = g.compile(TASK_HEAD).match(text)
    if head is None:
        raise InvalidPrefixDescriptor(text, "expected '(' stats ')' after the flags")

    raise InvalidSuffixDescriptor(text[head.end():].strip(), "task name must fit on one line")


def _parse_prefix(prefix: str, g: GrammarRegistry) -> StatTuple:
    try:
        slots = split_tuple_fields(prefix, ",")
        return parse_stat_slots(slots, grammars=g)
    except NotationError as e:
        raise InvalidPrefixDescriptor(prefix, str(e)) from e


def _parse_suffix(b: _TaskBuilder, suffix: str, g: GrammarRegistry) -> None:
    try:
        fields = split_tuple_fields(suffix, ";")
    except UnbalancedParenthesis as e:
        raise InvalidSuffixDescriptor(suffix, str(e)) from e

    for raw in fields:
        if not raw:
            continue

        if raw.startswith("*"):
            b.note_link = raw[1:]
            continue

        key, sep, value = raw.partition(":")
        if not sep:
            raise InvalidSuffixDescriptor(raw, "expected '*note' or 'key: value'")

        key = key.strip()
        for matches, handle in SUFFIX_KEYS:
            if matches(key):
                handle(b, key, value.strip(), raw, g)
                break
        else:
            raise UnsupportedDescriptorKey(raw, key=key, field=raw)
