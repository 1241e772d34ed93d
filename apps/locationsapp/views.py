"""
Locations app views
Admin management of shop branches plus a lightweight list for location pickers.
"""

from rest_framework import permissions, status, viewsets
from rest_framework.decorators import action
from rest_framework.response import Response

from api.documentation.decorators import document_api_endpoint
from apps.authapp.permissions import IsAdmin
from apps.locationsapp.models import Location
from apps.locationsapp.serializers import LocationSerializer, LocationSimpleSerializer
from apps.locationsapp.services.location_service import LocationService


class LocationViewSet(viewsets.ModelViewSet):
    """
    API endpoint for shop locations

    Endpoints:
    - GET /api/v1/locations/ - List locations (admin)
    - POST /api/v1/locations/ - Create a location (admin)
    - GET/PUT/PATCH/DELETE /api/v1/locations/{id}/ - Manage a location (admin)
    - GET /api/v1/locations/active/ - Active locations for any signed-in user
    - GET /api/v1/locations/{id}/stats/ - Headline numbers for one location

    Deleting a location that still has customers, devices, stock or sales
    deactivates it instead.
    """

    queryset = Location.objects.all()
    serializer_class = LocationSerializer
    permission_classes = [permissions.IsAuthenticated, IsAdmin]
    search_fields = ["name", "code", "city"]
    filterset_fields = ["is_active", "city", "country"]
    ordering_fields = ["name", "code", "created_at"]

    def get_permissions(self):
        if self.action == "active":
            return [permissions.IsAuthenticated()]
        return super().get_permissions()

    def destroy(self, request, *args, **kwargs):
        location = self.get_object()
        deleted = LocationService.delete_location(location)
        if deleted:
            return Response(status=status.HTTP_204_NO_CONTENT)
        return Response(
            {"detail": "Location has existing records and was deactivated instead."},
            status=status.HTTP_200_OK,
        )

    @document_api_endpoint(summary="Active locations", tags=["Locations"])
    @action(detail=False, methods=["get"])
    def active(self, request):
        """List active locations (used by location pickers)"""
        queryset = Location.objects.filter(is_active=True)
        if not request.user.is_admin:
            queryset = queryset.filter(id=request.user.location_id)
        serializer = LocationSimpleSerializer(queryset, many=True)
        return Response(serializer.data)

    @document_api_endpoint(summary="Location statistics", tags=["Locations"])
    @action(detail=True, methods=["get"])
    def stats(self, request, pk=None):
        """Customer, device, stock and revenue figures for one location"""
        location = self.get_object()
        return Response(LocationService.get_stats(location))
