# src/ttmctl/engine/date.py

"""
Calendar week code grammar.

Date codes, from most to least specific:

- Y<year><season>-W<week><weekday>   e.g. Y20S-W8M   (DateCode)
- Y<year><season>-W<week>            e.g. Y20M-WF    (WeekDateCode)
- W<week><weekday>                   e.g. W8T        (ShortDateCode)
- W<week>                            e.g. W333       (ShortWeekDateCode)

<week> is decimal or a single hex digit A-F (10-15). <season> is one of
M/F/W/S and <weekday> one of M/T/W/R/F/S/U. The Y and W markers are
case-insensitive, the single-letter codes are not.

Outside date codes, weekdays may also be written as English names; see
parse_weekday().
"""

import re
from collections.abc import Callable
from typing import Final, Optional

from .errors import InvalidDateCode, InvalidSeason, InvalidWeekday
from .grammar import GrammarRegistry, parse_integer_auto, resolve_registry
from .model import (
    AnyDateCode,
    DateCode,
    Season,
    ShortDateCode,
    ShortWeekDateCode,
    WeekDateCode,
    Weekday,
)


# ---------------------------------------------------------------------
# Patterns
# ---------------------------------------------------------------------

WEEK: Final[str] = r"\d+|[A-F]"

_YEAR_PART: Final[str] = r"[Yy](?P<Year>\d+)(?P<Season>[MFWS])-"
_WEEK_PART: Final[str] = rf"[Ww](?P<Week>{WEEK})"
_WEEKDAY_PART: Final[str] = r"(?P<Weekday>[MTWRFSU])"

DATE_CODE: Final[str] = _YEAR_PART + _WEEK_PART + _WEEKDAY_PART
WEEK_DATE_CODE: Final[str] = _YEAR_PART + _WEEK_PART
SHORT_DATE_CODE: Final[str] = _WEEK_PART + _WEEKDAY_PART
SHORT_WEEK_DATE_CODE: Final[str] = _WEEK_PART


# ---------------------------------------------------------------------
# Weekday / season grammars
# ---------------------------------------------------------------------

_WEEKDAY_NAMES: Final[dict[str, Weekday]] = {}
for _day, _short, _long in (
    (Weekday.MON, "Mon", "Monday"),
    (Weekday.TUE, "Tue", "Tuesday"),
    (Weekday.WED, "Wed", "Wednesday"),
    (Weekday.THU, "Thu", "Thursday"),
    (Weekday.FRI, "Fri", "Friday"),
    (Weekday.SAT, "Sat", "Saturday"),
    (Weekday.SUN, "Sun", "Sunday"),
):
    _WEEKDAY_NAMES[_day.value] = _day
    _WEEKDAY_NAMES[_short] = _day
    _WEEKDAY_NAMES[_long] = _day


def parse_weekday(text: str) -> Weekday:
    """
    Parse a weekday given as a single-letter code, `Mon` or `Monday`.
    """
    try:
        return _WEEKDAY_NAMES[text.strip()]
    except KeyError as e:
        raise InvalidWeekday(text) from e


def parse_season(text: str) -> Season:
    try:
        return Season(text.strip())
    except ValueError as e:
        raise InvalidSeason(text) from e


def _week(m: re.Match[str]) -> int:
    # a lone A-F is hex, digits are decimal
    return parse_integer_auto(m.group("Week"))


# ---------------------------------------------------------------------
# Variant extractors
# ---------------------------------------------------------------------

def _extract_date_code(m: re.Match[str]) -> AnyDateCode:
    return DateCode(
        year=int(m.group("Year")),
        season=Season(m.group("Season")),
        week=_week(m),
        weekday=Weekday(m.group("Weekday")),
    )


def _extract_week_date_code(m: re.Match[str]) -> AnyDateCode:
    return WeekDateCode(
        year=int(m.group("Year")),
        season=Season(m.group("Season")),
        week=_week(m),
    )


def _extract_short_date_code(m: re.Match[str]) -> AnyDateCode:
    return ShortDateCode(week=_week(m), weekday=Weekday(m.group("Weekday")))


def _extract_short_week_date_code(m: re.Match[str]) -> AnyDateCode:
    return ShortWeekDateCode(week=_week(m))


DATE_CODE_VARIANTS: Final[tuple[tuple[str, Callable[[re.Match[str]], AnyDateCode]], ...]] = (
    (DATE_CODE, _extract_date_code),
    (WEEK_DATE_CODE, _extract_week_date_code),
    (SHORT_DATE_CODE, _extract_short_date_code),
    (SHORT_WEEK_DATE_CODE, _extract_short_week_date_code),
)


# ---------------------------------------------------------------------
# Public API
# ---------------------------------------------------------------------

def parse_date_code(text: str, *, grammars: Optional[GrammarRegistry] = None) -> AnyDateCode:
    """
    Parse a calendar week code.

    Surrounding whitespace is ignored. Raises InvalidDateCode when no
    form matches the whole code.
    """
    g = resolve_registry(grammars)
    s = text.strip()

    for pattern, extract in DATE_CODE_VARIANTS:
        m = g.compile(pattern).fullmatch(s)
        if m is not None:
            return extract(m)

    raise InvalidDateCode(text)
