"""Search and ordering shared by the catalogue and the viewer's own evaluations."""

from __future__ import annotations

from typing import Callable, Iterable, Optional, TypeVar

from django.db.models import Avg, Count, QuerySet

from apps.evaluations import models
from apps.evaluations.services.aggregation import PerformanceStats

T = TypeVar("T")

# Each mode ranks by a score derived from (star, like), highest first.
SORT_SCORES: dict[str, Callable[[float, float], float]] = {
    "star_high": lambda star, like: star,
    "heart_high": lambda star, like: like,
    "star_low_heart_high": lambda star, like: like - star,
    "star_high_heart_low": lambda star, like: star - like,
}
SORT_CHOICES = tuple(SORT_SCORES)


def matches_search(query: Optional[str], title: str, description: Optional[str]) -> bool:
    """Case-insensitive substring match on title or description; a blank query matches."""

    needle = (query or "").strip().lower()
    if not needle:
        return True
    return needle in title.lower() or needle in (description or "").lower()


def with_evaluation_stats(queryset: QuerySet) -> QuerySet:
    """Annotate performances with their evaluation count and average ratings."""

    return queryset.annotate(
        evaluation_count=Count("evaluations"),
        avg_star_rating=Avg("evaluations__star_rating"),
        avg_like_rating=Avg("evaluations__like_rating"),
    )


def annotated_stats(performance) -> PerformanceStats:
    count = performance.evaluation_count
    if not count:
        return PerformanceStats(count=0, avg_star=None, avg_like=None)
    return PerformanceStats(
        count=count,
        avg_star=float(performance.avg_star_rating),
        avg_like=float(performance.avg_like_rating),
    )


def rank_performances(performances: Iterable[T], sort: Optional[str] = None) -> list[T]:
    """Order annotated performances for the catalogue.

    Unrated performances always come last in their incoming order. Rated ones
    are ordered by the mode's score, then by evaluation count.
    """

    score = SORT_SCORES.get(sort) if sort else None

    def key(performance):
        stats = annotated_stats(performance)
        if stats.count == 0:
            return (1, 0.0, 0)
        if score is None:
            return (0, 0.0, 0)
        return (0, -score(stats.avg_star, stats.avg_like), -stats.count)

    return sorted(performances, key=key)


def search_and_sort_evaluations(
    rows: Iterable[models.Evaluation],
    *,
    search: Optional[str] = None,
    sort: Optional[str] = None,
) -> list[models.Evaluation]:
    """Filter the viewer's rows by performance text and order them by their own ratings."""

    matched = [
        row
        for row in rows
        if matches_search(search, row.performance.title, row.performance.description)
    ]
    score = SORT_SCORES.get(sort) if sort else None
    if score is None:
        return matched
    return sorted(
        matched,
        key=lambda row: -score(float(row.star_rating), float(row.like_rating)),
    )


__all__ = [
    "SORT_CHOICES",
    "SORT_SCORES",
    "annotated_stats",
    "matches_search",
    "rank_performances",
    "search_and_sort_evaluations",
    "with_evaluation_stats",
]
