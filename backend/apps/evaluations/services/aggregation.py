"""Community statistics computed by re-querying on every call.

There are no counters or caches, so each call costs O(evaluations) for the
performance or viewer in question.
"""

from __future__ import annotations

import uuid
from dataclasses import asdict, dataclass
from statistics import fmean
from typing import Optional

from apps.core.services.identity import Identity
from apps.evaluations.services.store import EvaluationStore, get_evaluation_store


@dataclass(frozen=True)
class PerformanceStats:
    count: int
    avg_star: Optional[float]
    avg_like: Optional[float]

    def as_dict(self) -> dict[str, object]:
        return asdict(self)


def get_performance_stats(
    performance_id: uuid.UUID, *, store: Optional[EvaluationStore] = None
) -> PerformanceStats:
    store = store or get_evaluation_store()
    pairs = store.list_by_performance(performance_id)
    if not pairs:
        return PerformanceStats(count=0, avg_star=None, avg_like=None)
    return PerformanceStats(
        count=len(pairs),
        avg_star=fmean(pair.star_rating for pair in pairs),
        avg_like=fmean(pair.like_rating for pair in pairs),
    )


def get_viewer_total(identity: Identity, *, store: Optional[EvaluationStore] = None) -> int:
    store = store or get_evaluation_store()
    return store.count_by_owner(identity)


def has_evaluated_all(identity: Identity, *, store: Optional[EvaluationStore] = None) -> bool:
    """Whether the viewer has rated every performance in the catalogue."""

    store = store or get_evaluation_store()
    total_performances = store.count_performances()
    if total_performances == 0:
        return False
    return get_viewer_total(identity, store=store) >= total_performances


__all__ = ["PerformanceStats", "get_performance_stats", "get_viewer_total", "has_evaluated_all"]
