"""Shared pytest fixtures for app tests."""

from __future__ import annotations

import uuid

import pytest

from apps.core.services import Anonymous, Authenticated, InMemoryRateLimiter
from apps.core.services import rate_limits as rate_limit_module
from apps.evaluations import api as evaluations_api
from apps.evaluations.services import EvaluationStore
from apps.performances.models import Performance

VIEWER_PASSWORD = "Curtain-Call-2024!"


@pytest.fixture(autouse=True)
def reset_rate_limiter():
    limiter = InMemoryRateLimiter()
    evaluations_api._rate_limiter = limiter
    rate_limit_module._rate_limiter_singleton = limiter  # type: ignore[attr-defined]
    yield
    limiter.reset()


@pytest.fixture
def make_performance(db):
    def _make(title: str = "Hamlet", **kwargs) -> Performance:
        return Performance.objects.create(title=title, **kwargs)

    return _make


@pytest.fixture
def performance(make_performance):
    return make_performance()


@pytest.fixture
def user(db, django_user_model):
    return django_user_model.objects.create_user(
        username="viewer@example.com",
        email="viewer@example.com",
        password=VIEWER_PASSWORD,
    )


@pytest.fixture
def user_identity(user):
    return Authenticated(user_id=user.pk)


@pytest.fixture
def guest_identity():
    return Anonymous(guest_id=uuid.uuid4())


@pytest.fixture
def store():
    return EvaluationStore()
