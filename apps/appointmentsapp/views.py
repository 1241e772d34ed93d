"""
Appointments app views
"""

from rest_framework import permissions, viewsets
from rest_framework.decorators import action
from rest_framework.response import Response

from api.documentation.decorators import document_api_endpoint
from apps.appointmentsapp.models import Appointment
from apps.appointmentsapp.serializers import AppointmentSerializer, AppointmentStatusSerializer
from apps.appointmentsapp.services.appointment_service import AppointmentService
from apps.locationsapp.mixins import LocationScopedMixin


class AppointmentViewSet(LocationScopedMixin, viewsets.ModelViewSet):
    """
    API endpoint for customer appointments

    Endpoints:
    - GET/POST /api/v1/appointments/ - List or book appointments
    - GET/PUT/PATCH/DELETE /api/v1/appointments/{id}/ - Manage an appointment
    - GET /api/v1/appointments/upcoming/ - Future open appointments, soonest first
    - POST /api/v1/appointments/{id}/status/ - Change the status

    Booking a staff member who already has an overlapping appointment fails.
    """

    serializer_class = AppointmentSerializer
    permission_classes = [permissions.IsAuthenticated]
    filterset_fields = ["status", "assigned_to", "customer"]
    search_fields = ["title", "customer__name", "customer__phone"]
    ordering_fields = ["appointment_date", "created_at"]

    def get_queryset(self):
        queryset = Appointment.objects.select_related("customer", "assigned_to")
        return self.scope_queryset(queryset)

    def perform_create(self, serializer):
        data = dict(serializer.validated_data)
        data["location_id"] = self.get_location_for_create(data.pop("location", None))
        serializer.instance = AppointmentService.create_appointment(data, user=self.request.user)

    def perform_update(self, serializer):
        data = dict(serializer.validated_data)
        data.pop("location", None)
        serializer.instance = AppointmentService.update_appointment(serializer.instance, data)

    @document_api_endpoint(summary="Upcoming appointments", tags=["Appointments"], location_scoped=True)
    @action(detail=False, methods=["get"])
    def upcoming(self, request):
        queryset = AppointmentService.upcoming(self.filter_queryset(self.get_queryset()))
        page = self.paginate_queryset(queryset)
        if page is not None:
            return self.get_paginated_response(self.get_serializer(page, many=True).data)
        return Response(self.get_serializer(queryset, many=True).data)

    @document_api_endpoint(
        summary="Change appointment status",
        request_body=AppointmentStatusSerializer,
        tags=["Appointments"],
        location_scoped=True,
    )
    @action(detail=True, methods=["post"], url_path="status")
    def update_status(self, request, pk=None):
        appointment = self.get_object()
        serializer = AppointmentStatusSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        appointment = AppointmentService.set_status(appointment, serializer.validated_data["status"])
        return Response(self.get_serializer(appointment).data)
