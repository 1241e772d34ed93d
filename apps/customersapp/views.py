"""
Customers app views
Customer records for each location and saved customer categories used for
targeted SMS campaigns.
"""

from rest_framework import permissions, status, viewsets
from rest_framework.decorators import action
from rest_framework.response import Response

from api.documentation.decorators import document_api_endpoint
from apps.authapp.permissions import IsManagerOrReadOnly
from apps.customersapp.models import Customer, CustomerCategory
from apps.customersapp.serializers import (
    CategoryCriteriaSerializer,
    CustomerCategorySerializer,
    CustomerSerializer,
    CustomerSimpleSerializer,
)
from apps.customersapp.services.categorization_service import CategorizationService
from apps.customersapp.services.customer_service import CustomerService
from apps.locationsapp.mixins import LocationScopedMixin


class CustomerViewSet(LocationScopedMixin, viewsets.ModelViewSet):
    """
    API endpoint for customer records

    Endpoints:
    - GET /api/v1/customers/ - List customers of the current location
    - POST /api/v1/customers/ - Create a customer
    - GET/PUT/PATCH /api/v1/customers/{id}/ - Customer details
    - DELETE /api/v1/customers/{id}/ - Deactivate a customer
    - GET /api/v1/customers/{id}/devices/ - Devices brought in by the customer
    - GET /api/v1/customers/{id}/stats/ - Spending and visit totals

    Filtering:
    - search: name, phone or email
    - include_inactive: also list deactivated customers
    """

    serializer_class = CustomerSerializer
    permission_classes = [permissions.IsAuthenticated]
    filterset_fields = ["city", "gender"]
    ordering_fields = ["name", "created_at", "registration_date"]

    def get_queryset(self):
        queryset = self.scope_queryset(Customer.objects.select_related("location"))
        if self.request.query_params.get("include_inactive") != "true":
            queryset = queryset.filter(is_active=True)
        return CustomerService.search(queryset, self.request.query_params.get("search"))

    def destroy(self, request, *args, **kwargs):
        CustomerService.deactivate(self.get_object())
        return Response(status=status.HTTP_204_NO_CONTENT)

    @document_api_endpoint(summary="Customer devices", tags=["Customers"], location_scoped=True)
    @action(detail=True, methods=["get"])
    def devices(self, request, pk=None):
        from apps.devicesapp.serializers import DeviceListSerializer

        customer = self.get_object()
        devices = customer.devices.filter(is_active=True).select_related(
            "device_type", "brand", "device_model"
        )
        return Response(DeviceListSerializer(devices, many=True).data)

    @document_api_endpoint(summary="Customer statistics", tags=["Customers"], location_scoped=True)
    @action(detail=True, methods=["get"])
    def stats(self, request, pk=None):
        return Response(CustomerService.get_customer_stats(self.get_object()))


class CustomerCategoryViewSet(LocationScopedMixin, viewsets.ModelViewSet):
    """
    Saved customer categories.

    - GET /api/v1/customer-categories/{id}/customers/ - Customers currently matching
    - POST /api/v1/customer-categories/preview/ - Match criteria without saving
    """

    queryset = CustomerCategory.objects.all()
    serializer_class = CustomerCategorySerializer
    permission_classes = [IsManagerOrReadOnly]
    search_fields = ["name"]

    def perform_create(self, serializer):
        serializer.save(created_by=self.request.user)

    def _matches_response(self, queryset):
        return Response(
            {
                "count": queryset.count(),
                "customers": CustomerSimpleSerializer(queryset, many=True).data,
            }
        )

    @document_api_endpoint(summary="Customers in category", tags=["Customers"], location_scoped=True)
    @action(detail=True, methods=["get"])
    def customers(self, request, pk=None):
        category = self.get_object()
        queryset = CategorizationService.customers_for_category(
            category, location_id=self.get_service_location_id()
        )
        return self._matches_response(queryset)

    @document_api_endpoint(
        summary="Preview category",
        request_body=CategoryCriteriaSerializer,
        tags=["Customers"],
        location_scoped=True,
    )
    @action(detail=False, methods=["post"], permission_classes=[permissions.IsAuthenticated])
    def preview(self, request):
        serializer = CategoryCriteriaSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        queryset = CategorizationService.customers_for_criteria(
            serializer.to_criteria(), location_id=self.get_service_location_id()
        )
        return self._matches_response(queryset)
