"""Query and command surface for evaluation rows.

Every method is a separate round trip against the database. Nothing is cached,
so a row read here may already be stale when the caller writes back.
"""

from __future__ import annotations

import logging
import uuid
from contextlib import contextmanager
from dataclasses import dataclass
from typing import Iterator, Optional

from django.db import DatabaseError, IntegrityError, InterfaceError, OperationalError, transaction
from django.utils import timezone

from apps.core.services.identity import Anonymous, Identity, ensure_guest_exists
from apps.evaluations import models
from apps.evaluations.exceptions import (
    ConstraintViolationError,
    EvaluationError,
    EvaluationNotFoundError,
    FatalStoreError,
    TransientStoreError,
)
from apps.evaluations.services.ratings import to_decimal
from apps.performances.models import Performance

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class RatingPair:
    star_rating: float
    like_rating: float


@contextmanager
def _store_errors(operation: str) -> Iterator[None]:
    try:
        yield
    except EvaluationError:
        raise
    except (OperationalError, InterfaceError) as exc:
        logger.warning("Evaluation store %s failed transiently: %s", operation, exc)
        raise TransientStoreError(f"Evaluation {operation} timed out or lost its connection") from exc
    except DatabaseError as exc:
        logger.error("Evaluation store %s failed: %s", operation, exc)
        raise FatalStoreError(f"Evaluation {operation} failed: {exc}") from exc


class EvaluationStore:
    """Thin adapter over the ``Evaluation`` table."""

    def find_by_owner_and_performance(
        self, identity: Identity, performance_id: uuid.UUID
    ) -> Optional[models.Evaluation]:
        with _store_errors("lookup"):
            return (
                models.Evaluation.objects.filter(performance_id=performance_id, **identity.owner_filter)
                .order_by("created_at")
                .first()
            )

    def insert(
        self,
        identity: Identity,
        performance_id: uuid.UUID,
        star_rating: float,
        like_rating: float,
        comment: Optional[str] = None,
    ) -> models.Evaluation:
        with _store_errors("insert"):
            if not Performance.objects.filter(pk=performance_id).exists():
                raise FatalStoreError(f"Unknown performance {performance_id}")
            if isinstance(identity, Anonymous):
                ensure_guest_exists(identity.guest_id)
            try:
                with transaction.atomic():
                    return models.Evaluation.objects.create(
                        performance_id=performance_id,
                        star_rating=to_decimal(star_rating),
                        like_rating=to_decimal(like_rating),
                        comment=comment,
                        **identity.owner_fields,
                    )
            except IntegrityError as exc:
                raise ConstraintViolationError(
                    f"Evaluation for {identity.distinct_id} on {performance_id} already exists"
                ) from exc

    def update(
        self,
        evaluation_id: uuid.UUID,
        star_rating: float,
        like_rating: float,
        comment: Optional[str] = None,
    ) -> models.Evaluation:
        changes = {
            "star_rating": to_decimal(star_rating),
            "like_rating": to_decimal(like_rating),
            "updated_at": timezone.now(),
        }
        if comment is not None:
            changes["comment"] = comment

        with _store_errors("update"):
            updated = models.Evaluation.objects.filter(pk=evaluation_id).update(**changes)
            if not updated:
                raise EvaluationNotFoundError(f"Evaluation {evaluation_id} no longer exists")
            try:
                return models.Evaluation.objects.get(pk=evaluation_id)
            except models.Evaluation.DoesNotExist as exc:
                raise EvaluationNotFoundError(f"Evaluation {evaluation_id} no longer exists") from exc

    def delete(self, evaluation_id: uuid.UUID) -> bool:
        with _store_errors("delete"):
            deleted, _ = models.Evaluation.objects.filter(pk=evaluation_id).delete()
            return deleted > 0

    def list_by_owner(self, identity: Identity) -> list[models.Evaluation]:
        with _store_errors("list"):
            return list(
                models.Evaluation.objects.filter(**identity.owner_filter)
                .select_related("performance")
                .order_by("-updated_at")
            )

    def count_by_owner(self, identity: Identity) -> int:
        with _store_errors("count"):
            return models.Evaluation.objects.filter(**identity.owner_filter).count()

    def count_performances(self) -> int:
        with _store_errors("count"):
            return Performance.objects.count()

    def rated_performance_ids(self, identity: Identity) -> set[uuid.UUID]:
        with _store_errors("list"):
            return set(
                models.Evaluation.objects.filter(**identity.owner_filter).values_list(
                    "performance_id", flat=True
                )
            )

    def list_by_performance(self, performance_id: uuid.UUID) -> list[RatingPair]:
        with _store_errors("list"):
            rows = models.Evaluation.objects.filter(performance_id=performance_id).values_list(
                "star_rating", "like_rating"
            )
            return [RatingPair(star_rating=float(star), like_rating=float(like)) for star, like in rows]

    def reparent(self, evaluation_id: uuid.UUID, new_owner: Identity) -> None:
        """Move a row to ``new_owner`` without touching its ratings or timestamps."""

        with _store_errors("reparent"):
            try:
                with transaction.atomic():
                    moved = models.Evaluation.objects.filter(pk=evaluation_id).update(
                        **new_owner.owner_fields
                    )
            except IntegrityError as exc:
                raise ConstraintViolationError(
                    f"{new_owner.distinct_id} already owns a row for evaluation {evaluation_id}'s performance"
                ) from exc
            if not moved:
                raise EvaluationNotFoundError(f"Evaluation {evaluation_id} no longer exists")


_default_store: Optional[EvaluationStore] = None


def get_evaluation_store() -> EvaluationStore:
    global _default_store
    if _default_store is None:
        _default_store = EvaluationStore()
    return _default_store


__all__ = ["EvaluationStore", "RatingPair", "get_evaluation_store"]
