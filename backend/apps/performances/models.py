"""Read-only performance catalogue maintained by content administrators."""

from __future__ import annotations

import uuid

from django.db import models


class Performance(models.Model):
    """A theatrical production viewers can rate."""

    id = models.UUIDField(primary_key=True, editable=False, default=uuid.uuid4)
    title = models.CharField(max_length=255)
    description = models.TextField(blank=True, null=True)
    poster_url = models.URLField(max_length=500, blank=True, null=True)
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        ordering = ["-created_at"]
        indexes = [models.Index(fields=["created_at"], name="performance_created_idx")]

    def __str__(self) -> str:  # pragma: no cover - trivial
        return self.title
