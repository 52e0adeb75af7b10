from __future__ import annotations

import pytest

from ttmctl.engine.date import parse_date_code, parse_season, parse_weekday
from ttmctl.engine.errors import InvalidDateCode, InvalidSeason, InvalidWeekday
from ttmctl.engine.model import (
    DateCode,
    Season,
    ShortDateCode,
    ShortWeekDateCode,
    WeekDateCode,
    Weekday,
)


@pytest.mark.parametrize(
    ("text", "code"),
    [
        ("Y20S-W8M", DateCode(20, Season.SPRING, 8, Weekday.MON)),
        ("y21W-w3U", DateCode(21, Season.WINTER, 3, Weekday.SUN)),
        ("Y20M-WF", WeekDateCode(20, Season.SUMMER, 15)),
        ("Y19F-W12", WeekDateCode(19, Season.FALL, 12)),
        ("W8T", ShortDateCode(8, Weekday.TUE)),
        ("WAR", ShortDateCode(10, Weekday.THU)),
        ("W333", ShortWeekDateCode(333)),
        ("W08", ShortWeekDateCode(8)),
        ("  W2M  ", ShortDateCode(2, Weekday.MON)),
    ],
)
def test_parse_date_code(text: str, code: object) -> None:
    assert parse_date_code(text) == code


@pytest.mark.parametrize(
    "text",
    ["", "W", "8M", "Y20X-W8M", "Y20S-8M", "W8m", "Wa", "Y20S-W8M extra", "WG"],
)
def test_parse_date_code_rejects(text: str) -> None:
    with pytest.raises(InvalidDateCode):
        parse_date_code(text)


def test_more_specific_form_wins() -> None:
    # "W1F" is week 1 on Friday, not week 0x1F
    assert parse_date_code("W1F") == ShortDateCode(1, Weekday.FRI)


@pytest.mark.parametrize(
    ("text", "day"),
    [
        ("M", Weekday.MON),
        ("R", Weekday.THU),
        ("S", Weekday.SAT),
        ("U", Weekday.SUN),
        ("Sat", Weekday.SAT),
        ("Sunday", Weekday.SUN),
        (" Wed ", Weekday.WED),
    ],
)
def test_parse_weekday(text: str, day: Weekday) -> None:
    assert parse_weekday(text) == day


def test_parse_weekday_rejects() -> None:
    with pytest.raises(InvalidWeekday):
        parse_weekday("X")
    with pytest.raises(InvalidWeekday):
        parse_weekday("monday")


def test_parse_season() -> None:
    assert parse_season("M") is Season.SUMMER
    assert parse_season("S") is Season.SPRING
    with pytest.raises(InvalidSeason):
        parse_season("Q")


def test_weekday_positions_follow_tracker_columns() -> None:
    assert [d.position for d in Weekday] == list(range(7))
    assert Weekday.SUN.position == 6
