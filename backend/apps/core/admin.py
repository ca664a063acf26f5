"""Admin registrations for core models."""

from django.contrib import admin

from . import models


@admin.register(models.Guest)
class GuestAdmin(admin.ModelAdmin):
    list_display = ("id", "created_at")
    search_fields = ("id",)
    ordering = ("-created_at",)
    readonly_fields = ("created_at",)
