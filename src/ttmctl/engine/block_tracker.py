# src/ttmctl/engine/block_tracker.py

"""
Block tracker entries.

A block tracker line records one week of a time block: seven progress
counters, Monday through Sunday, followed by the block's name.

    ?  !  !  !  !  /- 4/4 PROJECT
"""

import logging
from typing import Final, Optional

from .errors import (
    Exhausted,
    InvalidTrackerStat,
    NotationError,
    TooFewEntryTokens,
    TooManyEntryTokens,
)
from .grammar import GrammarRegistry, resolve_registry
from .model import BlockTrackerEntry, Stat, Weekday
from .scanner import StrScanner
from .stat import parse_stat

logger = logging.getLogger(__name__)

ENTRY_TOKENS: Final[int] = len(Weekday) + 1


def parse_block_tracker_entry(
    text: str,
    *,
    grammars: Optional[GrammarRegistry] = None,
) -> BlockTrackerEntry:
    g = resolve_registry(grammars)
    scanner = StrScanner(text)

    tokens: list[str] = []
    while True:
        try:
            tokens.append(scanner.next_word())
        except Exhausted:
            break
        if len(tokens) > ENTRY_TOKENS:
            raise TooManyEntryTokens(text, f"expected {ENTRY_TOKENS} tokens")

    if len(tokens) < ENTRY_TOKENS:
        raise TooFewEntryTokens(text, f"expected {ENTRY_TOKENS} tokens, got {len(tokens)}")

    week_stats: list[Stat] = []
    for i, token in enumerate(tokens[:-1]):
        try:
            week_stats.append(parse_stat(token, grammars=g))
        except NotationError as e:
            raise InvalidTrackerStat(token, str(e), index=i) from e

    return BlockTrackerEntry(name=tokens[-1], week_stats=tuple(week_stats))


def parse_block_tracker(
    text: str,
    *,
    grammars: Optional[GrammarRegistry] = None,
) -> list[BlockTrackerEntry]:
    """
    Parse every non-blank line of `text` as a block tracker entry.
    """
    entries = [
        parse_block_tracker_entry(line, grammars=grammars)
        for line in text.splitlines()
        if line.strip()
    ]
    logger.debug("parsed %d block tracker entries", len(entries))
    return entries
