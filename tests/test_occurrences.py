"""Tests for literal occurrence scanning."""

from __future__ import annotations

import types

from foldkit.core.ranges import TextRange
from foldkit.folding.occurrences import find_all_occurrences


def test_finds_every_match_in_document_order() -> None:
    matches = list(find_all_occurrences("beta alpha beta gamma beta", "beta"))

    assert [match.to_tuple() for match in matches] == [(0, 4), (11, 15), (22, 26)]


def test_matches_do_not_overlap() -> None:
    matches = list(find_all_occurrences("aaaaa", "aa"))

    assert [match.to_tuple() for match in matches] == [(0, 2), (2, 4)]
    for previous, current in zip(matches, matches[1:]):
        assert previous.end <= current.start


def test_empty_literal_yields_nothing() -> None:
    assert list(find_all_occurrences("anything at all", "")) == []


def test_literal_is_not_a_pattern() -> None:
    matches = list(find_all_occurrences("a.c abc a.c", "a.c"))

    assert [match.to_tuple() for match in matches] == [(0, 3), (8, 11)]


def test_missing_literal_yields_nothing() -> None:
    assert list(find_all_occurrences("alpha", "omega")) == []


def test_result_is_a_lazy_one_pass_iterator() -> None:
    matches = find_all_occurrences("x x x", "x")

    assert isinstance(matches, types.GeneratorType)
    assert next(matches) == TextRange(0, 1)
    assert [match.start for match in matches] == [2, 4]
    assert list(matches) == []
