"""Database models for viewer evaluations of performances."""

from __future__ import annotations

import uuid
from decimal import Decimal

from django.conf import settings
from django.db import models
from django.db.models import Q

# Allowed values: 0.5 through 5.0 in half steps.
RATING_CHOICES = [Decimal(step) / 2 for step in range(1, 11)]


class Evaluation(models.Model):
    """One viewer's star/heart rating of one performance.

    Exactly one of ``user`` or ``guest`` owns the row, and each owner holds at
    most one row per performance.
    """

    id = models.UUIDField(primary_key=True, editable=False, default=uuid.uuid4)
    user = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        null=True,
        blank=True,
        related_name="evaluations",
        on_delete=models.CASCADE,
    )
    guest = models.ForeignKey(
        "core.Guest",
        null=True,
        blank=True,
        related_name="evaluations",
        on_delete=models.CASCADE,
    )
    performance = models.ForeignKey(
        "performances.Performance",
        related_name="evaluations",
        on_delete=models.CASCADE,
    )
    star_rating = models.DecimalField(max_digits=2, decimal_places=1)
    like_rating = models.DecimalField(max_digits=2, decimal_places=1)
    comment = models.TextField(blank=True, null=True)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ["-updated_at"]
        indexes = [
            models.Index(fields=["performance", "updated_at"], name="evaluation_perf_updated_idx"),
        ]
        constraints = [
            models.CheckConstraint(
                condition=(
                    Q(user__isnull=False, guest__isnull=True)
                    | Q(user__isnull=True, guest__isnull=False)
                ),
                name="evaluation_single_owner",
            ),
            models.CheckConstraint(
                condition=Q(star_rating__in=RATING_CHOICES),
                name="evaluation_star_rating_half_steps",
            ),
            models.CheckConstraint(
                condition=Q(like_rating__in=RATING_CHOICES),
                name="evaluation_like_rating_half_steps",
            ),
            models.UniqueConstraint(
                fields=["user", "performance"],
                condition=Q(user__isnull=False),
                name="unique_user_performance_evaluation",
            ),
            models.UniqueConstraint(
                fields=["guest", "performance"],
                condition=Q(guest__isnull=False),
                name="unique_guest_performance_evaluation",
            ),
        ]

    @property
    def owner_label(self) -> str:
        if self.user_id is not None:
            return f"user:{self.user_id}"
        return f"guest:{self.guest_id}"

    def __str__(self) -> str:  # pragma: no cover - trivial
        return f"Evaluation {self.owner_label} -> {self.performance_id}"
