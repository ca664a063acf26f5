"""Tests for community statistics and viewer totals."""

import uuid

import pytest

from apps.core.services import Anonymous
from apps.evaluations.services import (
    PerformanceStats,
    get_performance_stats,
    get_viewer_total,
    has_evaluated_all,
    upsert_evaluation,
)


@pytest.mark.django_db()
def test_stats_for_unrated_performance_are_empty(performance):
    stats = get_performance_stats(performance.pk)

    assert stats == PerformanceStats(count=0, avg_star=None, avg_like=None)
    assert stats.as_dict() == {"count": 0, "avg_star": None, "avg_like": None}


@pytest.mark.django_db()
def test_stats_average_every_viewer(performance, user_identity, guest_identity):
    upsert_evaluation(identity=user_identity, performance_id=performance.pk, star_rating=1, like_rating=5)
    upsert_evaluation(identity=guest_identity, performance_id=performance.pk, star_rating=3, like_rating=1)

    stats = get_performance_stats(performance.pk)

    assert stats.count == 2
    assert stats.avg_star == pytest.approx(2.0)
    assert stats.avg_like == pytest.approx(3.0)


@pytest.mark.django_db()
def test_stats_ignore_other_performances(make_performance, guest_identity):
    rated = make_performance("Hamlet")
    other = make_performance("Cats")
    upsert_evaluation(identity=guest_identity, performance_id=rated.pk, star_rating=4.5, like_rating=4.5)

    assert get_performance_stats(other.pk).count == 0
    assert get_performance_stats(rated.pk).avg_star == pytest.approx(4.5)


@pytest.mark.django_db()
def test_viewer_total_counts_only_own_rows(make_performance, user_identity, guest_identity):
    for title in ("Hamlet", "Cats", "Rent"):
        upsert_evaluation(
            identity=guest_identity,
            performance_id=make_performance(title).pk,
            star_rating=3,
            like_rating=3,
        )

    assert get_viewer_total(guest_identity) == 3
    assert get_viewer_total(user_identity) == 0
    assert get_viewer_total(Anonymous(guest_id=uuid.uuid4())) == 0


@pytest.mark.django_db()
def test_has_evaluated_all(make_performance, guest_identity):
    assert has_evaluated_all(guest_identity) is False

    first = make_performance("Hamlet")
    second = make_performance("Cats")
    upsert_evaluation(identity=guest_identity, performance_id=first.pk, star_rating=2, like_rating=2)
    assert has_evaluated_all(guest_identity) is False

    upsert_evaluation(identity=guest_identity, performance_id=second.pk, star_rating=2, like_rating=2)
    assert has_evaluated_all(guest_identity) is True
