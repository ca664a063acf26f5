"""Tests for moving guest evaluations onto an account."""

import uuid
from unittest.mock import patch

import pytest

from apps.core.services import InMemoryIdentityStore
from apps.evaluations import models
from apps.evaluations.exceptions import FatalStoreError, TransientStoreError
from apps.evaluations.services import (
    EvaluationStore,
    MigrationResult,
    get_viewer_total,
    migrate_after_authentication,
    migrate_guest_to_user,
    upsert_evaluation,
)


def _rate(identity, performance, star, like):
    return upsert_evaluation(
        identity=identity, performance_id=performance.pk, star_rating=star, like_rating=like
    ).evaluation


class AlreadyRemovedStore(EvaluationStore):
    """Someone else deletes the guest row just before we do."""

    def delete(self, evaluation_id):
        super().delete(evaluation_id)
        return super().delete(evaluation_id)


class FailingReparentStore(EvaluationStore):
    def __init__(self, failing_id):
        self.failing_id = failing_id

    def reparent(self, evaluation_id, new_owner):
        if evaluation_id == self.failing_id:
            raise FatalStoreError("boom")
        return super().reparent(evaluation_id, new_owner)


@pytest.mark.django_db()
def test_guest_rows_move_to_the_account(guest_identity, user_identity, make_performance):
    first = make_performance("Hamlet")
    second = make_performance("Les Misérables")
    original = _rate(guest_identity, first, 4.0, 3.5)
    _rate(guest_identity, second, 2.0, 2.5)

    result = migrate_guest_to_user(guest_identity.guest_id, user_identity.user_id)

    assert result == MigrationResult(migrated=2, discarded=0, errors=0)
    assert get_viewer_total(user_identity) == 2
    assert get_viewer_total(guest_identity) == 0
    moved = models.Evaluation.objects.get(pk=original.pk)
    assert moved.user_id == user_identity.user_id
    assert moved.guest_id is None
    assert float(moved.star_rating) == 4.0
    assert moved.created_at == original.created_at


@pytest.mark.django_db()
def test_account_rating_wins_collisions(guest_identity, user_identity, performance):
    _rate(user_identity, performance, 5.0, 5.0)
    _rate(guest_identity, performance, 2.0, 2.0)

    result = migrate_guest_to_user(guest_identity.guest_id, user_identity.user_id)

    assert result == MigrationResult(migrated=0, discarded=1, errors=0)
    rows = models.Evaluation.objects.filter(performance=performance)
    assert rows.count() == 1
    survivor = rows.get()
    assert survivor.user_id == user_identity.user_id
    assert (float(survivor.star_rating), float(survivor.like_rating)) == (5.0, 5.0)


@pytest.mark.django_db()
def test_second_run_finds_nothing_to_move(guest_identity, user_identity, performance):
    _rate(guest_identity, performance, 3.0, 3.0)

    migrate_guest_to_user(guest_identity.guest_id, user_identity.user_id)
    again = migrate_guest_to_user(guest_identity.guest_id, user_identity.user_id)

    assert again == MigrationResult()
    assert get_viewer_total(user_identity) == 1


@pytest.mark.django_db()
def test_row_failures_are_counted_and_others_continue(
    guest_identity, user_identity, make_performance
):
    broken = _rate(guest_identity, make_performance("Hamlet"), 3.0, 3.0)
    _rate(guest_identity, make_performance("Cats"), 1.0, 4.0)
    _rate(guest_identity, make_performance("Rent"), 4.5, 4.5)

    result = migrate_guest_to_user(
        guest_identity.guest_id,
        user_identity.user_id,
        store=FailingReparentStore(failing_id=broken.pk),
    )

    assert result == MigrationResult(migrated=2, discarded=0, errors=1)
    assert models.Evaluation.objects.get(pk=broken.pk).guest_id == guest_identity.guest_id


@pytest.mark.django_db()
def test_listing_failure_returns_empty_result(guest_identity, user_identity):
    with patch.object(EvaluationStore, "list_by_owner", side_effect=TransientStoreError("timeout")):
        result = migrate_guest_to_user(guest_identity.guest_id, user_identity.user_id)

    assert result == MigrationResult(migrated=0, discarded=0, errors=0)


@pytest.mark.django_db()
def test_mixed_session_totals(guest_identity, user_identity, make_performance):
    shared = make_performance("Hamlet")
    guest_only = make_performance("Cats")
    _rate(user_identity, shared, 5.0, 4.0)
    _rate(guest_identity, shared, 1.0, 1.0)
    _rate(guest_identity, guest_only, 3.0, 3.5)

    result = migrate_guest_to_user(guest_identity.guest_id, user_identity.user_id)

    assert result.as_dict() == {"migrated": 1, "discarded": 1, "errors": 0}
    assert get_viewer_total(user_identity) == 2
    assert get_viewer_total(guest_identity) == 0


@pytest.mark.django_db()
def test_migrate_after_authentication_clears_the_guest_id(
    guest_identity, user_identity, performance
):
    _rate(guest_identity, performance, 3.0, 3.0)
    identity_store = InMemoryIdentityStore(str(guest_identity.guest_id))

    result = migrate_after_authentication(
        identity_store=identity_store, user_id=user_identity.user_id
    )

    assert result.migrated == 1
    assert identity_store.get() is None


@pytest.mark.django_db()
def test_migrate_after_authentication_clears_even_when_listing_fails(user_identity):
    identity_store = InMemoryIdentityStore(str(uuid.uuid4()))

    with patch.object(EvaluationStore, "list_by_owner", side_effect=FatalStoreError("down")):
        result = migrate_after_authentication(
            identity_store=identity_store, user_id=user_identity.user_id
        )

    assert result == MigrationResult()
    assert identity_store.get() is None


@pytest.mark.django_db()
def test_migrate_after_authentication_without_guest_is_a_noop(user_identity):
    identity_store = InMemoryIdentityStore()

    assert migrate_after_authentication(identity_store=identity_store, user_id=user_identity.user_id) is None


def test_migration_result_defaults_to_zero():
    assert MigrationResult().as_dict() == {"migrated": 0, "discarded": 0, "errors": 0}


@pytest.mark.django_db()
def test_guest_row_removed_elsewhere_is_not_counted_as_discarded(
    guest_identity, user_identity, performance
):
    _rate(user_identity, performance, 5.0, 5.0)
    _rate(guest_identity, performance, 2.0, 2.0)

    result = migrate_guest_to_user(
        guest_identity.guest_id, user_identity.user_id, store=AlreadyRemovedStore()
    )

    assert result == MigrationResult(migrated=0, discarded=0, errors=0)
    assert models.Evaluation.objects.filter(performance=performance).count() == 1
