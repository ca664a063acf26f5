"""Admin registrations for evaluation models."""

from django.contrib import admin

from . import models


@admin.register(models.Evaluation)
class EvaluationAdmin(admin.ModelAdmin):
    list_display = ("id", "performance", "user", "guest", "star_rating", "like_rating", "updated_at")
    search_fields = ("comment",)
    list_filter = ("star_rating", "like_rating")
    ordering = ("-updated_at",)
    readonly_fields = ("created_at", "updated_at")
    raw_id_fields = ("performance", "user", "guest")
