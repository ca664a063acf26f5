"""Admin registrations for performance models."""

from django.contrib import admin

from . import models


@admin.register(models.Performance)
class PerformanceAdmin(admin.ModelAdmin):
    list_display = ("id", "title", "created_at")
    search_fields = ("title", "description")
    ordering = ("-created_at",)
    readonly_fields = ("created_at",)
