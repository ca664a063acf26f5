"""Typed failures raised by the evaluation services."""

from __future__ import annotations


class EvaluationError(Exception):
    """Base class for evaluation failures."""

    def __init__(self, detail: str) -> None:
        super().__init__(detail)
        self.detail = detail


class RatingValidationError(EvaluationError):
    """Rating input outside the allowed domain; rejected before any store call."""

    def __init__(self, detail: str, *, field: str | None = None) -> None:
        super().__init__(detail)
        self.field = field


class ConstraintViolationError(EvaluationError):
    """The store's (owner, performance) uniqueness rejected a write."""


class EvaluationNotFoundError(EvaluationError):
    """The targeted row no longer exists."""


class TransientStoreError(EvaluationError):
    """Network, lock or timeout failure; the whole operation may be retried."""


class FatalStoreError(EvaluationError):
    """Unrecoverable persistence failure."""


__all__ = [
    "ConstraintViolationError",
    "EvaluationError",
    "EvaluationNotFoundError",
    "FatalStoreError",
    "RatingValidationError",
    "TransientStoreError",
]
