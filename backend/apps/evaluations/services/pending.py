"""Per-viewer queue of ratings shown ahead of persistence.

A rating is staged the moment the viewer touches a control, one axis at a
time. Only entries with both axes set are flushed. A flush that fails rolls the
entry back to the last value the store confirmed instead of keeping the
optimistic one.
"""

from __future__ import annotations

import logging
import uuid
from dataclasses import dataclass, field
from typing import Optional

from apps.core.services.identity import Identity
from apps.evaluations.exceptions import EvaluationError
from apps.evaluations.services.ratings import UNSET_RATING
from apps.evaluations.services.reconciler import EvaluationReconciler, delete_evaluation
from apps.evaluations.services.store import EvaluationStore, get_evaluation_store

logger = logging.getLogger(__name__)


@dataclass
class PendingRating:
    star_rating: float = UNSET_RATING
    like_rating: float = UNSET_RATING

    @property
    def is_complete(self) -> bool:
        return self.star_rating > UNSET_RATING and self.like_rating > UNSET_RATING


@dataclass(frozen=True)
class ConfirmedRating:
    star_rating: float
    like_rating: float


@dataclass
class FlushReport:
    saved: list[uuid.UUID] = field(default_factory=list)
    failed: dict[uuid.UUID, str] = field(default_factory=dict)
    skipped: list[uuid.UUID] = field(default_factory=list)


class PendingEvaluations:
    def __init__(
        self,
        identity: Identity,
        *,
        store: Optional[EvaluationStore] = None,
        confirmed: Optional[dict[uuid.UUID, ConfirmedRating]] = None,
    ) -> None:
        self.identity = identity
        self.store = store or get_evaluation_store()
        self._pending: dict[uuid.UUID, PendingRating] = {}
        self._confirmed: dict[uuid.UUID, ConfirmedRating] = dict(confirmed or {})

    @classmethod
    def load(cls, identity: Identity, *, store: Optional[EvaluationStore] = None) -> "PendingEvaluations":
        store = store or get_evaluation_store()
        confirmed = {
            row.performance_id: ConfirmedRating(float(row.star_rating), float(row.like_rating))
            for row in store.list_by_owner(identity)
        }
        return cls(identity, store=store, confirmed=confirmed)

    def stage(
        self,
        performance_id: uuid.UUID,
        *,
        star_rating: Optional[float] = None,
        like_rating: Optional[float] = None,
    ) -> PendingRating:
        entry = self._pending.get(performance_id)
        if entry is None:
            base = self._confirmed.get(performance_id)
            entry = (
                PendingRating(base.star_rating, base.like_rating) if base else PendingRating()
            )
            self._pending[performance_id] = entry
        if star_rating is not None:
            entry.star_rating = star_rating
        if like_rating is not None:
            entry.like_rating = like_rating
        return entry

    def current(self, performance_id: uuid.UUID) -> Optional[PendingRating]:
        """What the viewer should see: the optimistic value if any, else the confirmed one."""

        if performance_id in self._pending:
            return self._pending[performance_id]
        confirmed = self._confirmed.get(performance_id)
        if confirmed is None:
            return None
        return PendingRating(confirmed.star_rating, confirmed.like_rating)

    def confirmed(self, performance_id: uuid.UUID) -> Optional[ConfirmedRating]:
        return self._confirmed.get(performance_id)

    @property
    def pending_ids(self) -> list[uuid.UUID]:
        return list(self._pending)

    def retract(self, performance_id: uuid.UUID) -> bool:
        """Drop any staged value and delete the stored row ("not seen")."""

        self._pending.pop(performance_id, None)
        removed = delete_evaluation(
            identity=self.identity, performance_id=performance_id, store=self.store
        )
        self._confirmed.pop(performance_id, None)
        return removed

    def flush(self) -> FlushReport:
        report = FlushReport()
        reconciler = EvaluationReconciler(self.store)

        for performance_id in list(self._pending):
            entry = self._pending[performance_id]
            if not entry.is_complete:
                report.skipped.append(performance_id)
                continue
            try:
                outcome = reconciler.upsert(
                    self.identity, performance_id, entry.star_rating, entry.like_rating
                )
            except EvaluationError as exc:
                logger.warning("Rolling back pending rating for %s: %s", performance_id, exc.detail)
                del self._pending[performance_id]
                report.failed[performance_id] = exc.detail
                continue

            self._confirmed[performance_id] = ConfirmedRating(
                float(outcome.evaluation.star_rating), float(outcome.evaluation.like_rating)
            )
            del self._pending[performance_id]
            report.saved.append(performance_id)

        return report


__all__ = ["ConfirmedRating", "FlushReport", "PendingEvaluations", "PendingRating"]
