# src/ttmctl/engine/grammar.py

"""
Grammar composition helpers.

Field grammars are written as regex pattern strings with named capture
fields, e.g. `(?P<ACT0>...)`. Larger grammars embed smaller ones by string
composition, which would repeat field names such as ACT/EXP at every
layer. `filter_inner_capture_group_names` strips every name that is not
at the top level of the composed pattern so only the outermost fields
stay addressable.

Compiled grammars live in a GrammarRegistry: each distinct pattern is
compiled at most once, and the result is never mutated afterwards.

Literal parentheses inside patterns are written as `\\x28` / `\\x29` so
they do not take part in the group depth count.
"""

import logging
import re
import threading
from dataclasses import dataclass
from typing import Final, Optional

from .errors import InvalidInteger

logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------
# Shared tokens
# ---------------------------------------------------------------------

INTEGER: Final[str] = r"(?:0x[a-fA-F0-9]+|0o[0-7]+|0b[01]+|\d+)"

_NAMED_GROUP: Final[str] = "?P<"

_HEX_RE = re.compile(r"[0-9a-fA-F]+")
_OCT_RE = re.compile(r"[0-7]+")
_BIN_RE = re.compile(r"[01]+")
_DEC_RE = re.compile(r"[0-9]+")


# ---------------------------------------------------------------------
# Normalizer
# ---------------------------------------------------------------------

def filter_inner_capture_group_names(pattern: str) -> str:
    """
    Remove the names of capture groups nested two or more groups deep.

    >>> filter_inner_capture_group_names(r"(?P<VALUE>(?P<NUMBER>[0-9]))")
    '(?P<VALUE>([0-9]))'
    """
    depth = 0
    out: list[str] = []

    for segment in pattern.split("("):
        if depth != 1 and segment.startswith(_NAMED_GROUP):
            name_end = segment.index(">")
            out.append(segment[name_end + 1:])
        else:
            out.append(segment)

        # closing groups in this segment leave their scope, and the next
        # segment starts one layer deeper
        depth -= segment.count(")")
        depth += 1

    return "(".join(out)


# ---------------------------------------------------------------------
# Integers
# ---------------------------------------------------------------------

def parse_integer_auto(text: str) -> int:
    """
    Parse a decimal, hexadecimal, octal or binary integer.

    Radix is taken from a `0x` / `0o` / `0b` prefix. Without a prefix the
    digits are hexadecimal if they contain any of A-F, decimal otherwise.
    An optional leading `-` negates the value.
    """
    s = text
    sign = 1
    if s.startswith("-"):
        sign = -1
        s = s[1:]

    for prefix, base, digits in (("0x", 16, _HEX_RE), ("0o", 8, _OCT_RE), ("0b", 2, _BIN_RE)):
        if s.startswith(prefix):
            body = s[len(prefix):]
            if not digits.fullmatch(body):
                raise InvalidInteger(text, f"not a base {base} integer")
            return sign * int(body, base)

    if _DEC_RE.fullmatch(s):
        return sign * int(s, 10)
    if _HEX_RE.fullmatch(s):
        return sign * int(s, 16)

    raise InvalidInteger(text)


# ---------------------------------------------------------------------
# Compiled grammars
# ---------------------------------------------------------------------

@dataclass(frozen=True, slots=True)
class CompiledGrammar:
    """
    A compiled pattern and the named fields it exposes.
    """

    pattern: str
    regex: re.Pattern[str]
    fields: tuple[str, ...]

    def fullmatch(self, text: str) -> Optional[re.Match[str]]:
        return self.regex.fullmatch(text)

    def match(self, text: str) -> Optional[re.Match[str]]:
        return self.regex.match(text)


class GrammarRegistry:
    """
    Cache of compiled grammars, keyed by pattern string.

    Compilation happens at most once per pattern, also under concurrent
    first access.
    """

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._grammars: dict[str, CompiledGrammar] = {}

    def __len__(self) -> int:
        return len(self._grammars)

    def __contains__(self, pattern: str) -> bool:
        return pattern in self._grammars

    def compile(self, pattern: str) -> CompiledGrammar:
        grammar = self._grammars.get(pattern)
        if grammar is not None:
            return grammar

        with self._lock:
            grammar = self._grammars.get(pattern)
            if grammar is None:
                regex = re.compile(pattern)
                grammar = CompiledGrammar(
                    pattern=pattern,
                    regex=regex,
                    fields=tuple(regex.groupindex),
                )
                self._grammars[pattern] = grammar
                logger.debug("compiled grammar with fields %s", grammar.fields)

        return grammar


_default_registry: Optional[GrammarRegistry] = None
_default_registry_lock = threading.Lock()


def default_registry() -> GrammarRegistry:
    """
    Return the process-wide registry, creating it on first use.
    """
    global _default_registry

    if _default_registry is None:
        with _default_registry_lock:
            if _default_registry is None:
                _default_registry = GrammarRegistry()
    return _default_registry


def resolve_registry(grammars: Optional[GrammarRegistry]) -> GrammarRegistry:
    return grammars if grammars is not None else default_registry()
