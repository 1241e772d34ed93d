"""
Devices app views
Device intake, repair status tracking, the device catalogue and the public
tracking and feedback pages.
"""

from rest_framework import permissions, status, viewsets
from rest_framework.decorators import action
from rest_framework.response import Response
from rest_framework.views import APIView

from api.documentation.decorators import document_api_endpoint
from api.v1.throttling import TrackingRateThrottle
from apps.authapp.permissions import IsManagerOrReadOnly
from apps.customersapp.services.customer_service import CustomerService
from apps.devicesapp.constants import CLOSED_STATUSES
from apps.devicesapp.models import (
    Brand,
    Device,
    DeviceModel,
    DeviceType,
    PredefinedProblem,
    ServiceType,
)
from apps.devicesapp.serializers import (
    BrandSerializer,
    DeviceFeedbackSerializer,
    DeviceListSerializer,
    DeviceModelSerializer,
    DevicePaymentSerializer,
    DeviceSerializer,
    DeviceStatusHistorySerializer,
    DeviceStatusUpdateSerializer,
    DeviceTypeSerializer,
    PredefinedProblemSerializer,
    PublicFeedbackSerializer,
    ServiceTypeSerializer,
)
from apps.devicesapp.services.device_service import DeviceService
from apps.devicesapp.services.feedback_service import FeedbackService
from apps.locationsapp.mixins import LocationScopedMixin


class DeviceViewSet(LocationScopedMixin, viewsets.ModelViewSet):
    """
    API endpoint for devices in for repair

    Endpoints:
    - GET /api/v1/devices/ - List devices of the current location
    - POST /api/v1/devices/ - Register a device (generates the receipt number)
    - GET/PUT/PATCH /api/v1/devices/{id}/ - Device details
    - DELETE /api/v1/devices/{id}/ - Deactivate a device
    - POST /api/v1/devices/{id}/status/ - Move the device through the repair lifecycle
    - POST /api/v1/devices/{id}/payment/ - Set the payment status
    - GET /api/v1/devices/{id}/history/ - Status history
    - GET /api/v1/devices/{id}/feedback/ - Customer feedback
    - GET /api/v1/devices/active/ - Devices not yet delivered or cancelled

    Filtering:
    - status, priority, payment_status, assigned_to, customer
    - search: receipt number, customer name or phone, serial, IMEI, problem
    """

    permission_classes = [permissions.IsAuthenticated]
    filterset_fields = [
        "status",
        "priority",
        "payment_status",
        "assigned_to",
        "customer",
        "device_type",
        "service_type",
    ]
    search_fields = [
        "receipt_number",
        "customer__name",
        "customer__phone",
        "serial_number",
        "imei",
        "brand_name",
        "model_name",
        "problem_description",
    ]
    ordering_fields = ["created_at", "updated_at", "priority", "estimated_completion_date"]

    def get_queryset(self):
        queryset = Device.objects.filter(is_active=True).select_related(
            "customer", "location", "assigned_to", "device_type", "brand", "device_model"
        )
        return self.scope_queryset(queryset)

    def get_serializer_class(self):
        if self.action in ("list", "active"):
            return DeviceListSerializer
        return DeviceSerializer

    def perform_create(self, serializer):
        data = dict(serializer.validated_data)
        data["location_id"] = self.get_location_for_create(data.pop("location", None))
        serializer.instance = DeviceService.register_device(data, user=self.request.user)

    def perform_update(self, serializer):
        serializer.validated_data.pop("location", None)
        if "customer" in serializer.validated_data:
            CustomerService.ensure_at_location(
                serializer.validated_data["customer"], serializer.instance.location_id
            )
        serializer.save()

    def destroy(self, request, *args, **kwargs):
        DeviceService.deactivate(self.get_object())
        return Response(status=status.HTTP_204_NO_CONTENT)

    @document_api_endpoint(
        summary="Update device status",
        request_body=DeviceStatusUpdateSerializer,
        tags=["Devices"],
        location_scoped=True,
    )
    @action(detail=True, methods=["post"], url_path="status")
    def update_status(self, request, pk=None):
        device = self.get_object()
        serializer = DeviceStatusUpdateSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        device = DeviceService.update_status(
            device,
            serializer.validated_data["status"],
            user=request.user,
            notes=serializer.validated_data.get("notes", ""),
            payment_status=serializer.validated_data.get("payment_status"),
        )
        return Response(DeviceSerializer(device).data)

    @document_api_endpoint(
        summary="Update payment status",
        request_body=DevicePaymentSerializer,
        tags=["Devices"],
        location_scoped=True,
    )
    @action(detail=True, methods=["post"], url_path="payment")
    def update_payment(self, request, pk=None):
        device = self.get_object()
        serializer = DevicePaymentSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        device = DeviceService.update_payment_status(device, serializer.validated_data["payment_status"])
        return Response(DeviceSerializer(device).data)

    @document_api_endpoint(summary="Device status history", tags=["Devices"], location_scoped=True)
    @action(detail=True, methods=["get"])
    def history(self, request, pk=None):
        device = self.get_object()
        entries = device.status_history.select_related("changed_by").order_by("-created_at")
        return Response(DeviceStatusHistorySerializer(entries, many=True).data)

    @document_api_endpoint(summary="Device feedback", tags=["Devices"], location_scoped=True)
    @action(detail=True, methods=["get"])
    def feedback(self, request, pk=None):
        device = self.get_object()
        if not hasattr(device, "feedback"):
            return Response({"detail": "No feedback yet."}, status=status.HTTP_404_NOT_FOUND)
        return Response(DeviceFeedbackSerializer(device.feedback).data)

    @document_api_endpoint(summary="Active repairs", tags=["Devices"], location_scoped=True)
    @action(detail=False, methods=["get"])
    def active(self, request):
        queryset = self.filter_queryset(self.get_queryset()).exclude(status__in=CLOSED_STATUSES)
        page = self.paginate_queryset(queryset)
        if page is not None:
            serializer = self.get_serializer(page, many=True)
            return self.get_paginated_response(serializer.data)
        return Response(self.get_serializer(queryset, many=True).data)


class CatalogueViewSet(viewsets.ModelViewSet):
    """
    Base for catalogue entries: readable by all staff, editable by managers.

    Pass ``?active=true`` to hide retired entries.
    """

    permission_classes = [IsManagerOrReadOnly]
    search_fields = ["name"]

    def get_queryset(self):
        queryset = super().get_queryset()
        if self.request.query_params.get("active") == "true":
            queryset = queryset.filter(is_active=True)
        return queryset


class DeviceTypeViewSet(CatalogueViewSet):
    queryset = DeviceType.objects.all()
    serializer_class = DeviceTypeSerializer
    filterset_fields = ["category", "is_active"]


class BrandViewSet(CatalogueViewSet):
    queryset = Brand.objects.all()
    serializer_class = BrandSerializer
    filterset_fields = ["is_active"]


class DeviceModelViewSet(CatalogueViewSet):
    queryset = DeviceModel.objects.select_related("brand", "device_type")
    serializer_class = DeviceModelSerializer
    filterset_fields = ["brand", "device_type", "is_active"]


class ServiceTypeViewSet(CatalogueViewSet):
    queryset = ServiceType.objects.all()
    serializer_class = ServiceTypeSerializer
    filterset_fields = ["category", "is_public", "is_active"]


class PredefinedProblemViewSet(CatalogueViewSet):
    queryset = PredefinedProblem.objects.all()
    serializer_class = PredefinedProblemSerializer
    filterset_fields = ["device_type", "category", "severity", "is_active"]


class DeviceTrackingView(APIView):
    """
    Public repair tracking by receipt number. No authentication required.
    """

    permission_classes = [permissions.AllowAny]
    authentication_classes = []
    throttle_classes = [TrackingRateThrottle]

    @document_api_endpoint(summary="Track a repair", tags=["Public"])
    def get(self, request, receipt_number):
        return Response(DeviceService.track(receipt_number))


class PublicFeedbackView(APIView):
    """
    Customers rate a finished repair using their receipt number.
    """

    permission_classes = [permissions.AllowAny]
    authentication_classes = []
    throttle_classes = [TrackingRateThrottle]

    @document_api_endpoint(
        summary="Submit repair feedback",
        request_body=PublicFeedbackSerializer,
        responses={201: "Created", 400: "Bad Request", 404: "Not Found", 409: "Already submitted"},
        tags=["Public"],
    )
    def post(self, request):
        serializer = PublicFeedbackSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        data = dict(serializer.validated_data)
        receipt_number = data.pop("receipt_number")
        feedback = FeedbackService.submit_feedback(receipt_number, data)
        return Response(DeviceFeedbackSerializer(feedback).data, status=status.HTTP_201_CREATED)
