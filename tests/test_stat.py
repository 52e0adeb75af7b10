from __future__ import annotations

import pytest

from ttmctl.engine.errors import NoStatVariant, TooManySlots
from ttmctl.engine.grammar import GrammarRegistry
from ttmctl.engine.model import BoolStat, CountStat, RequiredCountStat, UnknownStat
from ttmctl.engine.stat import STAT, is_stat, parse_stat, parse_stat_tuple


@pytest.mark.parametrize(
    ("text", "stat"),
    [
        ("2/020", CountStat(2, 20)),
        ("0x0/0b0", CountStat(0, 0)),
        ("5 /  5", CountStat(5, 5)),
        ("7", CountStat(7, None)),
        ("/3", CountStat(None, 3)),
        ("0o10/0xA", CountStat(8, 10)),
        ("!", BoolStat(True, True)),
        ("-", BoolStat(False, True)),
        ("/-", BoolStat(False, False)),
        ("!/-", BoolStat(True, False)),
        ("- / !", BoolStat(False, True)),
        ("1/!", RequiredCountStat(1, True)),
        ("3/-", RequiredCountStat(3, False)),
        ("?", UnknownStat()),
    ],
)
def test_parse_stat(text: str, stat: object) -> None:
    assert parse_stat(text) == stat


@pytest.mark.parametrize(
    "text",
    ["/", ",999", "(999)", "999 // beep boop", "", " 5", "5/", "??", "ABC"],
)
def test_parse_stat_rejects(text: str) -> None:
    with pytest.raises(NoStatVariant):
        parse_stat(text)


def test_count_wins_over_required_count() -> None:
    assert isinstance(parse_stat("5"), CountStat)


def test_is_stat_matches_union_grammar() -> None:
    assert "(?P<" not in STAT
    assert is_stat("2/5")
    assert is_stat("?")
    assert is_stat("1/-")
    assert not is_stat("2//5")


def test_stat_tuple_slots() -> None:
    assert parse_stat_tuple("2/15") == (CountStat(2, 15), None, None)
    assert parse_stat_tuple("1, ,?") == (CountStat(1, None), None, UnknownStat())
    assert parse_stat_tuple("") == (None, None, None)
    assert parse_stat_tuple(",,!") == (None, None, BoolStat(True, True))


def test_stat_tuple_errors() -> None:
    with pytest.raises(TooManySlots):
        parse_stat_tuple("1,2,3,4")
    with pytest.raises(NoStatVariant):
        parse_stat_tuple("1,x")


def test_private_registry_is_used() -> None:
    registry = GrammarRegistry()
    assert parse_stat("4/4", grammars=registry) == CountStat(4, 4)
    assert len(registry) >= 1


@pytest.mark.parametrize(
    ("text", "stat"),
    [
        ("0/5", CountStat(0, 5)),
        ("/0xFF", CountStat(None, 255)),
        ("-", BoolStat(False, True)),
        ("!/-", BoolStat(True, False)),
        ("0/-", RequiredCountStat(0, False)),
        ("?", UnknownStat()),
    ],
)
def test_reference_counters(text: str, stat: object) -> None:
    assert parse_stat(text) == stat


@pytest.mark.parametrize("text", [" 0/5", "0     "])
def test_outer_whitespace_is_not_trimmed(text: str) -> None:
    with pytest.raises(NoStatVariant):
        parse_stat(text)
