"""Rating domain helpers: snapping raw input onto half steps between 0.5 and 5.0."""

from __future__ import annotations

import math
from decimal import Decimal
from numbers import Real

from apps.evaluations.exceptions import RatingValidationError

MIN_RATING = 0.5
MAX_RATING = 5.0
RATING_STEP = 0.5
# UI sentinel for an axis the viewer has not touched yet; never persisted.
UNSET_RATING = 0


def _as_float(value: object, field: str | None = None) -> float:
    if isinstance(value, bool) or not isinstance(value, (Real, Decimal)):
        raise RatingValidationError(f"Rating must be a number, got {value!r}", field=field)
    number = float(value)
    if not math.isfinite(number):
        raise RatingValidationError("Rating must be a finite number", field=field)
    return number


def normalize_rating(raw: float) -> float:
    """Clamp ``raw`` into range and round half-up to the nearest 0.5."""

    clamped = max(MIN_RATING, min(MAX_RATING, _as_float(raw)))
    normalized = math.floor(clamped * 2 + 0.5) / 2
    return max(MIN_RATING, min(MAX_RATING, normalized))


def is_valid_rating(value: float) -> bool:
    try:
        number = _as_float(value)
    except RatingValidationError:
        return False
    return MIN_RATING <= number <= MAX_RATING and number % RATING_STEP == 0


def prepare_rating(raw: float, *, field: str) -> float:
    """Reject unset or non-numeric input, then normalize."""

    number = _as_float(raw, field=field)
    if number <= UNSET_RATING:
        raise RatingValidationError(f"{field} must be greater than zero", field=field)
    return normalize_rating(number)


def to_decimal(value: float) -> Decimal:
    return Decimal(str(value)).quantize(Decimal("0.1"))


__all__ = [
    "MAX_RATING",
    "MIN_RATING",
    "RATING_STEP",
    "UNSET_RATING",
    "is_valid_rating",
    "normalize_rating",
    "prepare_rating",
    "to_decimal",
]
