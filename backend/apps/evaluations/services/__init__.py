"""Services package for the evaluation domain."""

from .aggregation import PerformanceStats, get_performance_stats, get_viewer_total, has_evaluated_all
from .listing import (
    SORT_CHOICES,
    annotated_stats,
    matches_search,
    rank_performances,
    search_and_sort_evaluations,
    with_evaluation_stats,
)
from .migration import MigrationResult, migrate_after_authentication, migrate_guest_to_user
from .pending import ConfirmedRating, FlushReport, PendingEvaluations, PendingRating
from .ratings import is_valid_rating, normalize_rating
from .reconciler import (
    EvaluationReconciler,
    UpsertOutcome,
    UpsertState,
    delete_evaluation,
    upsert_evaluation,
)
from .store import EvaluationStore, RatingPair, get_evaluation_store

__all__ = [
    "PerformanceStats",
    "get_performance_stats",
    "get_viewer_total",
    "has_evaluated_all",
    "SORT_CHOICES",
    "annotated_stats",
    "matches_search",
    "rank_performances",
    "search_and_sort_evaluations",
    "with_evaluation_stats",
    "MigrationResult",
    "migrate_after_authentication",
    "migrate_guest_to_user",
    "ConfirmedRating",
    "FlushReport",
    "PendingEvaluations",
    "PendingRating",
    "is_valid_rating",
    "normalize_rating",
    "EvaluationReconciler",
    "UpsertOutcome",
    "UpsertState",
    "delete_evaluation",
    "upsert_evaluation",
    "EvaluationStore",
    "RatingPair",
    "get_evaluation_store",
]
