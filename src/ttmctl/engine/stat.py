# src/ttmctl/engine/stat.py

"""
Progress counter (Stat) grammar.

A counter token takes one of these forms, tried in this order:

1. Count          `ACT/EXP`, `ACT`, `/EXP`    (integers, any radix)
2. Bool           `!/-`, `!`, `/-`, ...        (`!` = true, `-` = false)
3. RequiredCount  `ACT/!`, `ACT/-`
4. Unknown        `?`

The whole token must match one form. Whitespace around `/` is allowed;
whitespace around the token is not.
"""

import logging
import re
from collections.abc import Callable, Sequence
from typing import Final, Optional

from .errors import NoStatVariant, TooManySlots
from .grammar import (
    INTEGER,
    GrammarRegistry,
    filter_inner_capture_group_names,
    parse_integer_auto,
    resolve_registry,
)
from .model import (
    BoolStat,
    CountStat,
    RequiredCountStat,
    Stat,
    StatTuple,
    UnknownStat,
)

logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------
# Patterns
# ---------------------------------------------------------------------

COUNT: Final[str] = (
    rf"(?P<ACT0>{INTEGER})\s*/\s*(?P<EXP0>{INTEGER})"      # ACT/EXP
    rf"|(?P<ACT1>{INTEGER})"                                 # ACT
    rf"|/\s*(?P<EXP2>{INTEGER})"                             # /EXP
)

BOOL: Final[str] = (
    r"(?P<ACT0>[-!])\s*/\s*(?P<EXP0>[-!])"
    r"|(?P<ACT1>[-!])"
    r"|/\s*(?P<EXP2>[-!])"
)

REQUIRED_COUNT: Final[str] = rf"(?P<ACT>{INTEGER})\s*/\s*(?P<EXP>[-!])"

UNKNOWN: Final[str] = r"\?"

# Any one stat. Variant field names are dropped by the normalizer.
STAT: Final[str] = filter_inner_capture_group_names(
    rf"(?:{COUNT})|(?:{BOOL})|(?:{REQUIRED_COUNT})|(?:{UNKNOWN})"
)

MAX_TUPLE_SLOTS: Final[int] = 3

_BOOL_CODES: Final[dict[str, bool]] = {"!": True, "-": False}


# ---------------------------------------------------------------------
# Variant extractors
# ---------------------------------------------------------------------

def _first(m: re.Match[str], *names: str) -> Optional[str]:
    for name in names:
        value = m.group(name)
        if value is not None:
            return value
    return None


def _extract_count(m: re.Match[str]) -> Stat:
    act = _first(m, "ACT0", "ACT1")
    exp = _first(m, "EXP0", "EXP2")
    return CountStat(
        act=parse_integer_auto(act) if act is not None else None,
        exp=parse_integer_auto(exp) if exp is not None else None,
    )


def _extract_bool(m: re.Match[str]) -> Stat:
    act = _first(m, "ACT0", "ACT1")
    exp = _first(m, "EXP0", "EXP2")
    return BoolStat(
        act=_BOOL_CODES[act] if act is not None else False,
        exp=_BOOL_CODES[exp] if exp is not None else True,
    )


def _extract_required_count(m: re.Match[str]) -> Stat:
    return RequiredCountStat(
        act=parse_integer_auto(m.group("ACT")),
        exp=_BOOL_CODES[m.group("EXP")],
    )


def _extract_unknown(m: re.Match[str]) -> Stat:
    return UnknownStat()


# Priority order matters: "5" is a Count, never a RequiredCount.
STAT_VARIANTS: Final[tuple[tuple[str, Callable[..., Stat]], ...]] = (
    (COUNT, _extract_count),
    (BOOL, _extract_bool),
    (REQUIRED_COUNT, _extract_required_count),
    (UNKNOWN, _extract_unknown),
)


# ---------------------------------------------------------------------
# Public API
# ---------------------------------------------------------------------

def parse_stat(text: str, *, grammars: Optional[GrammarRegistry] = None) -> Stat:
    """
    Parse one progress counter token.

    Raises NoStatVariant when no form matches the entire token.
    """
    g = resolve_registry(grammars)

    for pattern, extract in STAT_VARIANTS:
        m = g.compile(pattern).fullmatch(text)
        if m is not None:
            return extract(m)

    raise NoStatVariant(text)


def is_stat(text: str, *, grammars: Optional[GrammarRegistry] = None) -> bool:
    g = resolve_registry(grammars)
    return g.compile(STAT).fullmatch(text) is not None


def parse_stat_tuple(
    text: str,
    *,
    grammars: Optional[GrammarRegistry] = None,
) -> StatTuple:
    """
    Parse `[Stat][,Stat[,Stat]]` into positional slots.

    Empty slots are None. Each slot is trimmed before parsing. Raises
    TooManySlots when more than three slots are given; stat errors
    propagate unchanged so callers can wrap them.
    """
    stats = parse_stat_slots(text.split(","), grammars=grammars)
    logger.debug("stat tuple %r -> %r", text, stats)
    return stats


def parse_stat_slots(
    slots: Sequence[str],
    *,
    grammars: Optional[GrammarRegistry] = None,
) -> StatTuple:
    if len(slots) > MAX_TUPLE_SLOTS:
        raise TooManySlots(
            ",".join(slots), f"{len(slots)} slots given, at most {MAX_TUPLE_SLOTS} allowed"
        )

    out: list[Optional[Stat]] = [None] * MAX_TUPLE_SLOTS
    for i, slot in enumerate(slots):
        slot = slot.strip()
        if slot:
            out[i] = parse_stat(slot, grammars=grammars)

    return (out[0], out[1], out[2])
