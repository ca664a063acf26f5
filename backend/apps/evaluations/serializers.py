"""Serializers for evaluation APIs."""

from rest_framework import serializers

from . import models
from .services import SORT_CHOICES


class EvaluationSerializer(serializers.ModelSerializer):
    star_rating = serializers.FloatField(read_only=True)
    like_rating = serializers.FloatField(read_only=True)
    performance_title = serializers.CharField(source="performance.title", read_only=True)

    class Meta:
        model = models.Evaluation
        fields = [
            "id",
            "performance",
            "performance_title",
            "star_rating",
            "like_rating",
            "comment",
            "created_at",
            "updated_at",
        ]
        read_only_fields = fields


class EvaluationWriteSerializer(serializers.Serializer):
    star_rating = serializers.FloatField()
    like_rating = serializers.FloatField()
    comment = serializers.CharField(required=False, allow_blank=True, allow_null=True)


class EvaluationBatchItemSerializer(serializers.Serializer):
    performance_id = serializers.UUIDField()
    star_rating = serializers.FloatField(required=False, default=0)
    like_rating = serializers.FloatField(required=False, default=0)


MAX_BATCH_SIZE = 50


class EvaluationBatchSerializer(serializers.Serializer):
    evaluations = EvaluationBatchItemSerializer(
        many=True, allow_empty=False, max_length=MAX_BATCH_SIZE
    )


class EvaluationListQuerySerializer(serializers.Serializer):
    search = serializers.CharField(required=False, allow_blank=True, max_length=200)
    sort = serializers.ChoiceField(choices=SORT_CHOICES, required=False)
