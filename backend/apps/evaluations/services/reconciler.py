"""Insert-or-update reconciliation of a viewer's rating for one performance.

The lookup and the write are separate round trips, so another tab or device can
delete the row or insert its own between them. A vanished row falls back to an
insert, and an insert that loses the uniqueness race falls back to updating the
winning row. Each fallback is taken at most once, and the update fallback never
leads back to an insert, so a recovery that fails again is reported as fatal.
Three or more simultaneous writers on the same pair can exhaust that recovery.
"""

from __future__ import annotations

import enum
import logging
import uuid
from dataclasses import dataclass, field
from typing import NoReturn, Optional

from apps.core.posthog import capture_event
from apps.core.services.identity import Identity
from apps.evaluations import models
from apps.evaluations.exceptions import (
    ConstraintViolationError,
    EvaluationNotFoundError,
    FatalStoreError,
)
from apps.evaluations.services.ratings import prepare_rating
from apps.evaluations.services.store import EvaluationStore, get_evaluation_store

logger = logging.getLogger(__name__)


class UpsertState(enum.Enum):
    CHECKING = "checking"
    WRITING = "writing"
    RECOVERING_ONCE = "recovering_once"
    DONE = "done"
    FATAL = "fatal"


@dataclass
class UpsertOutcome:
    evaluation: models.Evaluation
    created: bool
    recovered: bool
    states: list[UpsertState] = field(default_factory=list)


class EvaluationReconciler:
    """Drives ``Checking -> Writing -> RecoveringOnce -> Done|Fatal`` for one upsert."""

    def __init__(self, store: Optional[EvaluationStore] = None) -> None:
        self.store = store or get_evaluation_store()

    def upsert(
        self,
        identity: Identity,
        performance_id: uuid.UUID,
        star_rating: float,
        like_rating: float,
        *,
        comment: Optional[str] = None,
    ) -> UpsertOutcome:
        star = prepare_rating(star_rating, field="star_rating")
        like = prepare_rating(like_rating, field="like_rating")

        states = [UpsertState.CHECKING]
        existing = self.store.find_by_owner_and_performance(identity, performance_id)

        states.append(UpsertState.WRITING)
        try:
            if existing is not None:
                evaluation = self.store.update(existing.id, star, like, comment)
                created = False
            else:
                evaluation = self.store.insert(identity, performance_id, star, like, comment)
                created = True
        except EvaluationNotFoundError:
            logger.info(
                "Evaluation for %s on %s vanished before update; inserting instead",
                identity.distinct_id,
                performance_id,
            )
            states.append(UpsertState.RECOVERING_ONCE)
            evaluation, created = self._recover_with_insert(
                identity, performance_id, star, like, comment, states
            )
        except ConstraintViolationError:
            logger.info(
                "Lost insert race for %s on %s; updating the winning row",
                identity.distinct_id,
                performance_id,
            )
            states.append(UpsertState.RECOVERING_ONCE)
            evaluation, created = self._recover_with_update(
                identity, performance_id, star, like, comment, states
            )

        states.append(UpsertState.DONE)
        outcome = UpsertOutcome(
            evaluation=evaluation,
            created=created,
            recovered=UpsertState.RECOVERING_ONCE in states,
            states=states,
        )
        capture_event(
            "evaluation_saved",
            distinct_id=identity.distinct_id,
            properties={
                "performance_id": str(performance_id),
                "star_rating": star,
                "like_rating": like,
                "created": created,
                "recovered": outcome.recovered,
            },
        )
        return outcome

    def _recover_with_insert(self, identity, performance_id, star, like, comment, states):
        try:
            return self.store.insert(identity, performance_id, star, like, comment), True
        except ConstraintViolationError:
            # The row was re-created elsewhere after it vanished; update that one instead.
            logger.info(
                "Evaluation for %s on %s re-created during recovery; updating it",
                identity.distinct_id,
                performance_id,
            )
            return self._recover_with_update(identity, performance_id, star, like, comment, states)

    def _recover_with_update(self, identity, performance_id, star, like, comment, states):
        winner = self.store.find_by_owner_and_performance(identity, performance_id)
        if winner is None:
            self._fail(
                states,
                identity,
                performance_id,
                "re-fetch after constraint violation",
                EvaluationNotFoundError("No row found after constraint violation"),
            )
        try:
            return self.store.update(winner.id, star, like, comment), False
        except EvaluationNotFoundError as exc:
            self._fail(states, identity, performance_id, "update after lost insert race", exc)

    @staticmethod
    def _fail(states, identity, performance_id, step: str, exc: Exception) -> NoReturn:
        states.append(UpsertState.FATAL)
        logger.error(
            "Evaluation upsert for %s on %s failed during %s: %s",
            identity.distinct_id,
            performance_id,
            step,
            exc,
        )
        raise FatalStoreError(f"Could not save evaluation: {step} failed") from exc


def upsert_evaluation(
    *,
    identity: Identity,
    performance_id: uuid.UUID,
    star_rating: float,
    like_rating: float,
    comment: Optional[str] = None,
    store: Optional[EvaluationStore] = None,
) -> UpsertOutcome:
    return EvaluationReconciler(store).upsert(
        identity, performance_id, star_rating, like_rating, comment=comment
    )


def delete_evaluation(
    *,
    identity: Identity,
    performance_id: uuid.UUID,
    store: Optional[EvaluationStore] = None,
) -> bool:
    """Retract the viewer's rating ("not seen"); returns whether a row was removed."""

    store = store or get_evaluation_store()
    existing = store.find_by_owner_and_performance(identity, performance_id)
    if existing is None:
        return False
    removed = store.delete(existing.id)
    if removed:
        logger.info("Removed evaluation %s for %s", existing.id, identity.distinct_id)
    return removed


__all__ = [
    "EvaluationReconciler",
    "UpsertOutcome",
    "UpsertState",
    "delete_evaluation",
    "upsert_evaluation",
]
