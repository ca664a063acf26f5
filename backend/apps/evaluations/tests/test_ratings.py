"""Tests for rating normalization and validation."""

from decimal import Decimal

import pytest

from apps.evaluations.exceptions import RatingValidationError
from apps.evaluations.services.ratings import (
    is_valid_rating,
    normalize_rating,
    prepare_rating,
    to_decimal,
)


@pytest.mark.parametrize(
    ("raw", "expected"),
    [
        (0.3, 0.5),
        (5.3, 5.0),
        (2.24, 2.0),
        (2.26, 2.5),
        (1.25, 1.5),
        (0.74, 0.5),
        (0.75, 1.0),
        (-3, 0.5),
        (4.75, 5.0),
        (Decimal("3.5"), 3.5),
    ],
)
def test_normalize_rating_snaps_to_half_steps(raw, expected):
    assert normalize_rating(raw) == expected


def test_normalize_rating_is_idempotent_and_valid_across_range():
    raw = 0.0
    while raw <= 6.0:
        once = normalize_rating(raw)
        assert normalize_rating(once) == once
        assert is_valid_rating(once)
        raw = round(raw + 0.01, 2)


@pytest.mark.parametrize("value", [0.5, 1.0, 2.5, 5.0, Decimal("4.5")])
def test_is_valid_rating_accepts_domain_values(value):
    assert is_valid_rating(value) is True


@pytest.mark.parametrize("value", [0, 0.3, 2.25, 5.5, -1, float("nan"), "3.0", None, True])
def test_is_valid_rating_rejects_without_clamping(value):
    assert is_valid_rating(value) is False


@pytest.mark.parametrize("value", [0, -0.5])
def test_prepare_rating_rejects_unset_sentinel(value):
    with pytest.raises(RatingValidationError) as excinfo:
        prepare_rating(value, field="star_rating")
    assert excinfo.value.field == "star_rating"


@pytest.mark.parametrize("value", [float("inf"), float("nan"), "4", None])
def test_prepare_rating_rejects_non_numbers(value):
    with pytest.raises(RatingValidationError):
        prepare_rating(value, field="like_rating")


def test_prepare_rating_normalizes_positive_input():
    assert prepare_rating(3.8, field="star_rating") == 4.0


def test_to_decimal_keeps_one_decimal_place():
    assert to_decimal(4.0) == Decimal("4.0")
    assert str(to_decimal(2.5)) == "2.5"
