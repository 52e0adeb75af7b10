from __future__ import annotations

import re
import threading

import pytest

from ttmctl.engine.errors import InvalidInteger
from ttmctl.engine.grammar import (
    GrammarRegistry,
    default_registry,
    filter_inner_capture_group_names,
    parse_integer_auto,
    resolve_registry,
)


@pytest.mark.parametrize(
    ("pattern", "expected"),
    [
        (r"(?P<VALUE>(?P<NUMBER>[0-9]))", r"(?P<VALUE>([0-9]))"),
        (r"(?P<A>(?P<B>(?P<C>x)))", r"(?P<A>((x)))"),
        (r"(?P<A>x)|(?P<B>y)", r"(?P<A>x)|(?P<B>y)"),
        (r"a(?P<X>b(?:c)(?P<Y>d))e", r"a(?P<X>b(?:c)(d))e"),
        (r"no groups here", r"no groups here"),
        (r"(?:(?P<INNER>x))", r"(?:(x))"),
    ],
)
def test_normalizer_strips_nested_names(pattern: str, expected: str) -> None:
    assert filter_inner_capture_group_names(pattern) == expected


def test_normalizer_is_idempotent() -> None:
    pattern = r"(?P<A>(?P<B>x)|(?P<C>(?P<D>y)))(?P<E>z)"
    once = filter_inner_capture_group_names(pattern)
    assert filter_inner_capture_group_names(once) == once
    assert set(re.compile(once).groupindex) == {"A", "E"}


def test_normalizer_allows_composing_repeated_names() -> None:
    inner = r"(?P<ACT>\d+)/(?P<EXP>\d+)"
    composed = filter_inner_capture_group_names(rf"(?P<First>{inner}),(?P<Second>{inner})")
    m = re.fullmatch(composed, "1/2,3/4")
    assert m is not None
    assert m.group("First") == "1/2"
    assert m.group("Second") == "3/4"


@pytest.mark.parametrize(
    ("text", "value"),
    [
        ("42", 42),
        ("020", 20),
        ("0x1F", 31),
        ("0o17", 15),
        ("0b101", 5),
        ("-7", -7),
        ("FF", 255),
        ("1A", 26),
    ],
)
def test_parse_integer_auto(text: str, value: int) -> None:
    assert parse_integer_auto(text) == value


@pytest.mark.parametrize("text", ["", "0x", "0b2", "0o9", "12G", "-"])
def test_parse_integer_auto_rejects(text: str) -> None:
    with pytest.raises(InvalidInteger):
        parse_integer_auto(text)


def test_registry_compiles_once() -> None:
    registry = GrammarRegistry()
    first = registry.compile(r"(?P<Word>\w+)")
    second = registry.compile(r"(?P<Word>\w+)")
    assert first is second
    assert len(registry) == 1
    assert r"(?P<Word>\w+)" in registry
    assert first.fields == ("Word",)


def test_registry_concurrent_first_access() -> None:
    registry = GrammarRegistry()
    barrier = threading.Barrier(8)
    results = []
    lock = threading.Lock()

    def worker() -> None:
        barrier.wait()
        grammar = registry.compile(r"(?P<N>\d+)")
        with lock:
            results.append(grammar)

    threads = [threading.Thread(target=worker) for _ in range(8)]
    for t in threads:
        t.start()
    for t in threads:
        t.join()

    assert len(results) == 8
    assert all(r is results[0] for r in results)
    assert len(registry) == 1


def test_default_registry_is_shared() -> None:
    assert default_registry() is default_registry()
    assert resolve_registry(None) is default_registry()

    empty = GrammarRegistry()
    assert resolve_registry(empty) is empty


@pytest.mark.parametrize("value", [0, 1, 7, 10, 255, 1024, 65535])
def test_parse_integer_auto_radix_independent(value: int) -> None:
    for text in (str(value), hex(value), oct(value), bin(value)):
        assert parse_integer_auto(text) == value
        assert parse_integer_auto("-" + text) == -value
