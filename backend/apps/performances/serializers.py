"""Serializers for performance APIs."""

from rest_framework import serializers

from apps.evaluations.services import SORT_CHOICES, annotated_stats, get_performance_stats

from . import models


class PerformanceSerializer(serializers.ModelSerializer):
    stats = serializers.SerializerMethodField()

    class Meta:
        model = models.Performance
        fields = ["id", "title", "description", "poster_url", "created_at", "stats"]
        read_only_fields = fields

    def get_stats(self, obj):
        """Community averages across guest and account evaluations."""
        if hasattr(obj, "evaluation_count"):
            return annotated_stats(obj).as_dict()
        return get_performance_stats(obj.pk).as_dict()


class CatalogueQuerySerializer(serializers.Serializer):
    search = serializers.CharField(required=False, allow_blank=True, max_length=200)
    sort = serializers.ChoiceField(choices=SORT_CHOICES, required=False)
    unevaluated = serializers.BooleanField(required=False, default=False)
