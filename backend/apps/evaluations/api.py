"""REST API endpoints for viewer evaluations."""

from __future__ import annotations

import uuid
from typing import Optional

from django.conf import settings
from django.urls import path
from rest_framework import status
from rest_framework.response import Response
from rest_framework.views import APIView

from apps.core.services import (
    Identity,
    RateLimitConfig,
    RateLimitExceeded,
    get_rate_limiter,
    resolve_request_identity,
)
from apps.evaluations import serializers
from apps.evaluations.exceptions import (
    EvaluationError,
    EvaluationNotFoundError,
    RatingValidationError,
    TransientStoreError,
)
from apps.evaluations.services import (
    PendingEvaluations,
    delete_evaluation,
    get_evaluation_store,
    get_viewer_total,
    has_evaluated_all,
    search_and_sort_evaluations,
    upsert_evaluation,
)
from apps.performances.models import Performance

app_name = "evaluations"

_rate_limiter = get_rate_limiter()


def error_response(exc: EvaluationError) -> Response:
    if isinstance(exc, RatingValidationError):
        return Response(
            {"detail": exc.detail, "field": exc.field},
            status=status.HTTP_400_BAD_REQUEST,
        )
    if isinstance(exc, EvaluationNotFoundError):
        return Response({"detail": "Not found"}, status=status.HTTP_404_NOT_FOUND)
    if isinstance(exc, TransientStoreError):
        return Response(
            {"detail": "Evaluation service is temporarily unavailable", "retryable": True},
            status=status.HTTP_503_SERVICE_UNAVAILABLE,
        )
    return Response(
        {"detail": "Could not save your evaluation. Please try again.", "retryable": False},
        status=status.HTTP_500_INTERNAL_SERVER_ERROR,
    )


class RateLimitedWriteMixin:
    rate_limit_config = RateLimitConfig.per_minute(settings.RATE_LIMITS["evaluations"]["per_minute"])

    def check_write_rate(self, identity: Identity, writes: int = 1) -> Optional[Response]:
        """Charge one hit per write; a batch is charged for every item it carries."""

        try:
            for _ in range(writes):
                _rate_limiter.check(f"evaluation_write:{identity.distinct_id}", self.rate_limit_config)
        except RateLimitExceeded as exc:
            return Response(
                {"detail": "Evaluation rate limit exceeded", "retry_after": exc.retry_after},
                status=status.HTTP_429_TOO_MANY_REQUESTS,
            )
        return None


class EvaluationListView(APIView):
    """The viewer's evaluations, most recently updated first unless a sort is requested."""

    def get(self, request, *args, **kwargs):
        params = serializers.EvaluationListQuerySerializer(data=request.query_params)
        params.is_valid(raise_exception=True)

        identity = resolve_request_identity(request)
        try:
            rows = get_evaluation_store().list_by_owner(identity)
        except EvaluationError as exc:
            return error_response(exc)
        rows = search_and_sort_evaluations(
            rows,
            search=params.validated_data.get("search"),
            sort=params.validated_data.get("sort"),
        )
        return Response({"results": serializers.EvaluationSerializer(rows, many=True).data})


class EvaluationTotalView(APIView):
    def get(self, request, *args, **kwargs):
        identity = resolve_request_identity(request)
        try:
            total = get_viewer_total(identity)
            finished = has_evaluated_all(identity)
        except EvaluationError as exc:
            return error_response(exc)
        return Response({"total": total, "has_evaluated_all": finished})


class EvaluationDetailView(RateLimitedWriteMixin, APIView):
    """Read, upsert or retract the viewer's evaluation of one performance."""

    def get(self, request, performance_id: uuid.UUID) -> Response:
        identity = resolve_request_identity(request)
        try:
            evaluation = get_evaluation_store().find_by_owner_and_performance(identity, performance_id)
        except EvaluationError as exc:
            return error_response(exc)
        if evaluation is None:
            return Response({"detail": "Not found"}, status=status.HTTP_404_NOT_FOUND)
        return Response(serializers.EvaluationSerializer(evaluation).data)

    def put(self, request, performance_id: uuid.UUID) -> Response:
        serializer = serializers.EvaluationWriteSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        if not Performance.objects.filter(pk=performance_id).exists():
            return Response({"detail": "Not found"}, status=status.HTTP_404_NOT_FOUND)

        identity = resolve_request_identity(request)
        limited = self.check_write_rate(identity)
        if limited is not None:
            return limited

        try:
            outcome = upsert_evaluation(
                identity=identity,
                performance_id=performance_id,
                star_rating=serializer.validated_data["star_rating"],
                like_rating=serializer.validated_data["like_rating"],
                comment=serializer.validated_data.get("comment"),
            )
        except EvaluationError as exc:
            return error_response(exc)

        return Response(
            serializers.EvaluationSerializer(outcome.evaluation).data,
            status=status.HTTP_201_CREATED if outcome.created else status.HTTP_200_OK,
        )

    def delete(self, request, performance_id: uuid.UUID) -> Response:
        identity = resolve_request_identity(request)
        try:
            removed = delete_evaluation(identity=identity, performance_id=performance_id)
        except EvaluationError as exc:
            return error_response(exc)
        if not removed:
            return Response({"detail": "Not found"}, status=status.HTTP_404_NOT_FOUND)
        return Response(status=status.HTTP_204_NO_CONTENT)


class EvaluationBatchView(RateLimitedWriteMixin, APIView):
    """Save every completed rating from an evaluation session, continuing past failures."""

    def post(self, request, *args, **kwargs):
        serializer = serializers.EvaluationBatchSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        items = serializer.validated_data["evaluations"]
        identity = resolve_request_identity(request)
        limited = self.check_write_rate(identity, writes=len(items))
        if limited is not None:
            return limited

        queue = PendingEvaluations(identity)
        for item in items:
            queue.stage(
                item["performance_id"],
                star_rating=item["star_rating"],
                like_rating=item["like_rating"],
            )
        report = queue.flush()

        return Response(
            {
                "saved": [str(pid) for pid in report.saved],
                "failed": {str(pid): detail for pid, detail in report.failed.items()},
                "skipped": [str(pid) for pid in report.skipped],
            }
        )


urlpatterns = [
    path("", EvaluationListView.as_view(), name="list"),
    path("total/", EvaluationTotalView.as_view(), name="total"),
    path("batch/", EvaluationBatchView.as_view(), name="batch"),
    path("<uuid:performance_id>/", EvaluationDetailView.as_view(), name="detail"),
]
