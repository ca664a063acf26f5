"""Core models shared across the backend (anonymous guests)."""

from __future__ import annotations

import uuid

from django.db import models


class Guest(models.Model):
    """Anonymous viewer identified by a client-persisted random id."""

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        ordering = ["-created_at"]

    def __str__(self) -> str:  # pragma: no cover - trivial
        return f"Guest {self.id}"
