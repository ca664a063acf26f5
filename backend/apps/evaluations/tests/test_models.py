"""Database constraint tests for evaluations."""

import uuid
from decimal import Decimal

import pytest
from django.db import IntegrityError, transaction

from apps.core.models import Guest
from apps.evaluations import models


def _create(**kwargs):
    defaults = {"star_rating": Decimal("3.0"), "like_rating": Decimal("4.0")}
    defaults.update(kwargs)
    with transaction.atomic():
        return models.Evaluation.objects.create(**defaults)


@pytest.mark.django_db()
def test_user_can_hold_only_one_evaluation_per_performance(user, performance):
    _create(user=user, performance=performance)

    with pytest.raises(IntegrityError):
        _create(user=user, performance=performance)


@pytest.mark.django_db()
def test_guest_can_hold_only_one_evaluation_per_performance(performance):
    guest = Guest.objects.create(id=uuid.uuid4())
    _create(guest=guest, performance=performance)

    with pytest.raises(IntegrityError):
        _create(guest=guest, performance=performance)


@pytest.mark.django_db()
def test_user_and_guest_may_rate_the_same_performance(user, performance):
    guest = Guest.objects.create(id=uuid.uuid4())
    _create(user=user, performance=performance)
    _create(guest=guest, performance=performance)

    assert models.Evaluation.objects.filter(performance=performance).count() == 2


@pytest.mark.django_db()
def test_evaluation_requires_exactly_one_owner(user, performance):
    guest = Guest.objects.create(id=uuid.uuid4())

    with pytest.raises(IntegrityError):
        _create(performance=performance)
    with pytest.raises(IntegrityError):
        _create(user=user, guest=guest, performance=performance)


@pytest.mark.django_db()
@pytest.mark.parametrize("field", ["star_rating", "like_rating"])
def test_ratings_must_sit_on_half_steps(user, performance, field):
    with pytest.raises(IntegrityError):
        _create(user=user, performance=performance, **{field: Decimal("0.3")})


def test_owner_label_prefers_user():
    evaluation = models.Evaluation(user_id=7, star_rating=Decimal("1.0"), like_rating=Decimal("1.0"))
    assert evaluation.owner_label == "user:7"
