"""REST API endpoints for the performance catalogue."""

from __future__ import annotations

from django.db.models import Q
from django.urls import include, path
from rest_framework import mixins, routers, viewsets
from rest_framework.decorators import action
from rest_framework.pagination import PageNumberPagination
from rest_framework.response import Response

from apps.core.services import resolve_request_identity
from apps.evaluations.api import error_response
from apps.evaluations.exceptions import EvaluationError
from apps.evaluations.services import (
    get_evaluation_store,
    get_performance_stats,
    rank_performances,
    with_evaluation_stats,
)
from apps.performances import models, serializers

app_name = "performances"


class PerformancePagination(PageNumberPagination):
    page_size = 20
    max_page_size = 50


class PerformanceViewSet(
    mixins.ListModelMixin, mixins.RetrieveModelMixin, viewsets.GenericViewSet
):
    serializer_class = serializers.PerformanceSerializer
    pagination_class = PerformancePagination

    def get_queryset(self):
        return with_evaluation_stats(models.Performance.objects.order_by("-created_at"))

    def list(self, request, *args, **kwargs):
        params = serializers.CatalogueQuerySerializer(data=request.query_params)
        params.is_valid(raise_exception=True)

        queryset = self.get_queryset()
        search = (params.validated_data.get("search") or "").strip()
        if search:
            queryset = queryset.filter(Q(title__icontains=search) | Q(description__icontains=search))

        if params.validated_data["unevaluated"]:
            # Queue for the rating flow: only what this viewer has not rated yet.
            identity = resolve_request_identity(request)
            try:
                rated = get_evaluation_store().rated_performance_ids(identity)
            except EvaluationError as exc:
                return error_response(exc)
            queryset = queryset.exclude(pk__in=rated)

        performances = rank_performances(queryset, params.validated_data.get("sort"))
        page = self.paginate_queryset(performances)
        serializer = self.get_serializer(page, many=True)
        return self.get_paginated_response(serializer.data)

    @action(detail=True, methods=["get"], url_path="stats")
    def stats(self, request, pk=None):
        performance = self.get_object()
        return Response(get_performance_stats(performance.pk).as_dict())


router = routers.DefaultRouter()
router.register("", PerformanceViewSet, basename="performance")

urlpatterns = [
    path("", include(router.urls)),
]
