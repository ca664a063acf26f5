"""Tests for the optimistic rating queue."""

import uuid

import pytest

from apps.evaluations import models
from apps.evaluations.services import ConfirmedRating, PendingEvaluations, upsert_evaluation


@pytest.mark.django_db()
def test_partial_ratings_are_not_flushed(guest_identity, performance):
    queue = PendingEvaluations(guest_identity)
    queue.stage(performance.pk, star_rating=4.0)

    report = queue.flush()

    assert report.skipped == [performance.pk]
    assert report.saved == []
    assert queue.current(performance.pk).star_rating == 4.0
    assert not models.Evaluation.objects.exists()


@pytest.mark.django_db()
def test_complete_ratings_are_saved_and_confirmed(guest_identity, performance):
    queue = PendingEvaluations(guest_identity)
    queue.stage(performance.pk, star_rating=4.0)
    queue.stage(performance.pk, like_rating=2.26)

    report = queue.flush()

    assert report.saved == [performance.pk]
    assert queue.pending_ids == []
    assert queue.confirmed(performance.pk) == ConfirmedRating(4.0, 2.5)


@pytest.mark.django_db()
def test_failed_flush_rolls_back_to_confirmed_value(guest_identity, performance):
    upsert_evaluation(identity=guest_identity, performance_id=performance.pk, star_rating=3, like_rating=3)
    queue = PendingEvaluations.load(guest_identity)
    missing = uuid.uuid4()

    queue.stage(missing, star_rating=5.0, like_rating=5.0)
    queue.stage(performance.pk, star_rating=1.0)
    report = queue.flush()

    assert set(report.failed) == {missing}
    assert queue.current(missing) is None
    assert report.saved == [performance.pk]
    assert queue.current(performance.pk).star_rating == 1.0
    assert queue.current(performance.pk).like_rating == 3.0


@pytest.mark.django_db()
def test_staging_starts_from_confirmed_value(guest_identity, performance):
    upsert_evaluation(identity=guest_identity, performance_id=performance.pk, star_rating=2, like_rating=4)
    queue = PendingEvaluations.load(guest_identity)

    entry = queue.stage(performance.pk, like_rating=0.5)

    assert entry.is_complete
    assert (entry.star_rating, entry.like_rating) == (2.0, 0.5)


@pytest.mark.django_db()
def test_retract_removes_stored_and_staged_rating(guest_identity, performance):
    upsert_evaluation(identity=guest_identity, performance_id=performance.pk, star_rating=2, like_rating=4)
    queue = PendingEvaluations.load(guest_identity)
    queue.stage(performance.pk, star_rating=5.0)

    assert queue.retract(performance.pk) is True
    assert queue.current(performance.pk) is None
    assert not models.Evaluation.objects.filter(performance=performance).exists()
    assert queue.retract(performance.pk) is False
