# src/ttmctl/engine/section.py

"""
Section parser.

A section starts with a specifier line `<tab>[<specifier>]` and owns the
lines below it up to, but excluding, the first non-blank line that

- is indented less than `<tab>` (this includes unindented lines when
  `<tab>` is not empty), or
- is indented by exactly `<tab>` and is itself a `[...]` specifier.

Sections carry no metadata of their own; nested structure is left to
whatever grammar the caller applies to the body.

When a section ends before the input does, parse_section() returns the
section together with the unconsumed remainder so the caller can keep
scanning. iter_sections() does exactly that.
"""

import logging
from collections.abc import Iterator
from typing import Final, Optional

from .errors import Exhausted, InvalidSpecifier
from .grammar import CompiledGrammar, GrammarRegistry, resolve_registry
from .model import Section
from .scanner import StrScanner

logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------
# Patterns
# ---------------------------------------------------------------------

SPECIFIER_LINE: Final[str] = r"(?P<Tab>[ \t]*)\[(?P<Specifier>[^\]\n]*)\]\s*"


def leading_whitespace(line: str) -> str:
    return line[: len(line) - len(line.lstrip(" \t"))]


# ---------------------------------------------------------------------
# Public API
# ---------------------------------------------------------------------

def parse_section(
    text: str,
    *,
    grammars: Optional[GrammarRegistry] = None,
) -> tuple[Section, str]:
    """
    Parse the section starting at the first non-blank line of `text`.

    Returns (section, remainder). `remainder` is the input from the line
    that ended the section on, or "" if the section ran to the end.
    """
    spec_re = resolve_registry(grammars).compile(SPECIFIER_LINE)
    scanner = StrScanner(text)

    specifier_line = ""
    while not specifier_line:
        try:
            specifier_line = scanner.next_line()
        except Exhausted as e:
            raise InvalidSpecifier(text, "input is blank") from e

    m = spec_re.fullmatch(specifier_line)
    if m is None:
        raise InvalidSpecifier(specifier_line)

    tab = m.group("Tab")
    specifier = m.group("Specifier").strip()

    body: list[str] = []
    remainder = ""
    while not scanner.exhausted:
        line_start = scanner.cur
        line = scanner.next_line()

        if _ends_section(line, tab, spec_re):
            remainder = text[line_start:]
            break

        body.append(line)

    while body and not body[-1].strip():
        body.pop()

    section = Section(tab=tab, specifier=specifier, body="\n".join(body))
    logger.debug(
        "section [%s]: %d body line(s), remainder %d char(s)",
        specifier,
        len(body),
        len(remainder),
    )
    return section, remainder


def iter_sections(
    text: str,
    *,
    grammars: Optional[GrammarRegistry] = None,
) -> Iterator[Section]:
    """
    Yield consecutive sections until the input is consumed.

    Raises InvalidSpecifier if a section is followed by a line that does
    not open another section (e.g. an outdented plain line).
    """
    rest = text
    while rest.strip():
        section, rest = parse_section(rest, grammars=grammars)
        yield section


# ---------------------------------------------------------------------
# Internal helpers
# ---------------------------------------------------------------------

def _ends_section(line: str, tab: str, spec_re: CompiledGrammar) -> bool:
    if not line.strip():
        return False

    indent = leading_whitespace(line)
    if len(indent) < len(tab):
        return True

    return indent == tab and spec_re.fullmatch(line) is not None
