from rest_framework import viewsets
from rest_framework.decorators import action
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response

from api.documentation.decorators import document_api_endpoint
from apps.dashboardapp.services.dashboard_service import DashboardService
from apps.locationsapp.mixins import LocationScopedMixin


def _limit(request, default):
    try:
        return max(1, min(int(request.query_params.get("limit", default)), 50))
    except ValueError:
        return default


class DashboardViewSet(LocationScopedMixin, viewsets.ViewSet):
    """
    Dashboard data for the current location

    Endpoints:
    - GET /api/v1/dashboard/stats/
    - GET /api/v1/dashboard/status-distribution/
    - GET /api/v1/dashboard/recent-activities/?limit=10
    - GET /api/v1/dashboard/top-services/?limit=5
    """

    permission_classes = [IsAuthenticated]

    @document_api_endpoint(summary="Dashboard counters", tags=["Dashboard"], location_scoped=True)
    @action(detail=False, methods=["get"])
    def stats(self, request):
        return Response(DashboardService.get_stats(self.get_service_location_id()))

    @document_api_endpoint(summary="Devices per status", tags=["Dashboard"], location_scoped=True)
    @action(detail=False, methods=["get"], url_path="status-distribution")
    def status_distribution(self, request):
        return Response(DashboardService.get_status_distribution(self.get_service_location_id()))

    @document_api_endpoint(summary="Recent activity", tags=["Dashboard"], location_scoped=True)
    @action(detail=False, methods=["get"], url_path="recent-activities")
    def recent_activities(self, request):
        return Response(
            DashboardService.get_recent_activities(self.get_service_location_id(), limit=_limit(request, 10))
        )

    @document_api_endpoint(summary="Top services", tags=["Dashboard"], location_scoped=True)
    @action(detail=False, methods=["get"], url_path="top-services")
    def top_services(self, request):
        return Response(
            DashboardService.get_top_services(self.get_service_location_id(), limit=_limit(request, 5))
        )
