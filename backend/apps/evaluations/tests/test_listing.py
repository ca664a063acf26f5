"""Tests for catalogue and evaluation ordering helpers."""

from types import SimpleNamespace

import pytest

from apps.evaluations.services import matches_search, rank_performances


def _performance(title, count=0, star=None, like=None):
    return SimpleNamespace(
        title=title, evaluation_count=count, avg_star_rating=star, avg_like_rating=like
    )


@pytest.mark.parametrize(
    ("query", "expected"),
    [(None, True), ("   ", True), ("ham", True), ("PRINCE", True), ("cats", False)],
)
def test_matches_search(query, expected):
    assert matches_search(query, "Hamlet", "A prince hesitates") is expected


def test_matches_search_without_description():
    assert matches_search("prince", "Hamlet", None) is False


def test_unrated_performances_sink_without_sort():
    unrated = _performance("Cats")
    rated = _performance("Rent", count=1, star=3.0, like=3.0)

    assert [p.title for p in rank_performances([unrated, rated])] == ["Rent", "Cats"]


def test_unrated_performances_keep_incoming_order():
    first = _performance("Cats")
    second = _performance("Hamlet")
    rated = _performance("Rent", count=3, star=1.0, like=1.0)

    ranked = rank_performances([first, second, rated], "star_high")

    assert [p.title for p in ranked] == ["Rent", "Cats", "Hamlet"]
