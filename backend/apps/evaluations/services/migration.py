"""Move a guest's evaluations onto the account that guest just signed into.

Each guest row is decided on its own and never rolled back: rows for
performances the account already rated are discarded (the account's rating
wins, values are never merged), the rest are re-parented. Row failures are
counted and logged rather than raised so one bad row cannot strand the others.
"""

from __future__ import annotations

import logging
import uuid
from dataclasses import asdict, dataclass
from typing import Optional

from apps.core.posthog import capture_event
from apps.core.services.identity import Anonymous, Authenticated, IdentityStore, peek_guest_id
from apps.evaluations.exceptions import (
    ConstraintViolationError,
    EvaluationError,
    EvaluationNotFoundError,
)
from apps.evaluations.services.store import EvaluationStore, get_evaluation_store

logger = logging.getLogger(__name__)


@dataclass
class MigrationResult:
    migrated: int = 0
    discarded: int = 0
    errors: int = 0

    def as_dict(self) -> dict[str, int]:
        return asdict(self)


def _discard(store: EvaluationStore, row, result: MigrationResult) -> None:
    if store.delete(row.id):
        result.discarded += 1
    else:
        logger.debug("Guest evaluation %s was already removed", row.id)


def migrate_guest_to_user(
    guest_id: uuid.UUID,
    user_id: int,
    *,
    store: Optional[EvaluationStore] = None,
) -> MigrationResult:
    store = store or get_evaluation_store()
    guest = Anonymous(guest_id=guest_id)
    user = Authenticated(user_id=user_id)
    result = MigrationResult()

    try:
        guest_rows = store.list_by_owner(guest)
    except EvaluationError as exc:
        logger.error("Failed to fetch guest evaluations for %s: %s", guest_id, exc)
        return result

    for row in guest_rows:
        try:
            if store.find_by_owner_and_performance(user, row.performance_id) is not None:
                _discard(store, row, result)
                continue
            try:
                store.reparent(row.id, user)
            except ConstraintViolationError:
                # The account rated this performance after our lookup; its row wins.
                _discard(store, row, result)
            else:
                result.migrated += 1
        except EvaluationNotFoundError:
            logger.debug("Guest evaluation %s vanished during migration", row.id)
        except EvaluationError as exc:
            logger.error("Failed to migrate evaluation %s: %s", row.id, exc)
            result.errors += 1

    if guest_rows:
        logger.info(
            "Migrated guest %s to user %s: %s moved, %s discarded, %s errors",
            guest_id,
            user_id,
            result.migrated,
            result.discarded,
            result.errors,
        )
        capture_event(
            "guest_evaluations_migrated",
            distinct_id=user.distinct_id,
            properties={"guest_id": str(guest_id), **result.as_dict()},
        )
    return result


def migrate_after_authentication(
    *,
    identity_store: IdentityStore,
    user_id: int,
    store: Optional[EvaluationStore] = None,
) -> Optional[MigrationResult]:
    """Run once right after sign-in/sign-up; the guest id is discarded afterwards."""

    guest_id = peek_guest_id(identity_store)
    if guest_id is None:
        return None
    try:
        return migrate_guest_to_user(guest_id, user_id, store=store)
    finally:
        identity_store.clear()


__all__ = ["MigrationResult", "migrate_after_authentication", "migrate_guest_to_user"]
