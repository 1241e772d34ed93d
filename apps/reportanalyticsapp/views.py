from drf_yasg import openapi
from rest_framework import viewsets
from rest_framework.decorators import action
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response

from api.documentation.decorators import document_api_endpoint
from apps.locationsapp.mixins import LocationScopedMixin
from apps.reportanalyticsapp.services.analytics_organizer import (
    DEFAULT_TIME_RANGE,
    TIME_RANGES,
    AnalyticsDataOrganizer,
)

RANGE_PARAM = [
    {
        "name": "range",
        "description": "Reporting window, defaults to 30d",
        "type": openapi.TYPE_STRING,
        "enum": list(TIME_RANGES),
    }
]


class AnalyticsViewSet(LocationScopedMixin, viewsets.ViewSet):
    """
    Chart data for the analytics pages

    Endpoints:
    - GET /api/v1/analytics/satisfaction/?range=30d
    - GET /api/v1/analytics/performance/?range=30d
    - GET /api/v1/analytics/behavior/?range=30d
    - GET /api/v1/analytics/revenue/?range=30d
    - GET /api/v1/analytics/comprehensive/?range=30d
    """

    permission_classes = [IsAuthenticated]

    def _report(self, request, name):
        organizer = AnalyticsDataOrganizer(location_id=self.get_service_location_id())
        time_range = request.query_params.get("range", DEFAULT_TIME_RANGE)
        return Response(getattr(organizer, name)(time_range))

    @document_api_endpoint(
        summary="Customer satisfaction", tags=["Analytics"], query_params=RANGE_PARAM, location_scoped=True
    )
    @action(detail=False, methods=["get"])
    def satisfaction(self, request):
        return self._report(request, "customer_satisfaction")

    @document_api_endpoint(
        summary="Repair performance", tags=["Analytics"], query_params=RANGE_PARAM, location_scoped=True
    )
    @action(detail=False, methods=["get"])
    def performance(self, request):
        return self._report(request, "repair_performance")

    @document_api_endpoint(
        summary="Customer behavior", tags=["Analytics"], query_params=RANGE_PARAM, location_scoped=True
    )
    @action(detail=False, methods=["get"])
    def behavior(self, request):
        return self._report(request, "customer_behavior")

    @document_api_endpoint(summary="Revenue", tags=["Analytics"], query_params=RANGE_PARAM, location_scoped=True)
    @action(detail=False, methods=["get"])
    def revenue(self, request):
        return self._report(request, "revenue")

    @document_api_endpoint(
        summary="All analytics reports", tags=["Analytics"], query_params=RANGE_PARAM, location_scoped=True
    )
    @action(detail=False, methods=["get"])
    def comprehensive(self, request):
        return self._report(request, "comprehensive")
