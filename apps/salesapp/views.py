"""
Sales app views
Counter sales of stocked items.
"""

from rest_framework import mixins, permissions, status, viewsets
from rest_framework.decorators import action
from rest_framework.response import Response

from api.documentation.decorators import document_api_endpoint
from apps.locationsapp.mixins import LocationScopedMixin
from apps.salesapp.models import Sale
from apps.salesapp.serializers import SaleCreateSerializer, SaleSerializer
from apps.salesapp.services.sale_service import SaleService


class SaleViewSet(
    LocationScopedMixin,
    mixins.ListModelMixin,
    mixins.RetrieveModelMixin,
    viewsets.GenericViewSet,
):
    """
    API endpoint for sales

    Endpoints:
    - GET /api/v1/sales/ - List sales of the current location
    - POST /api/v1/sales/ - Record a sale (stock is decremented)
    - GET /api/v1/sales/{id}/ - Sale details with line items
    - GET /api/v1/sales/today/ - Today's sales and their total
    """

    serializer_class = SaleSerializer
    permission_classes = [permissions.IsAuthenticated]
    filterset_fields = ["payment_method", "payment_status", "customer", "sales_person"]
    ordering_fields = ["created_at", "total_amount"]

    def get_queryset(self):
        queryset = Sale.objects.select_related("customer").prefetch_related("items__inventory_item")
        return self.scope_queryset(queryset)

    @document_api_endpoint(
        summary="Record a sale",
        request_body=SaleCreateSerializer,
        responses={201: SaleSerializer, 400: "Bad Request"},
        tags=["Sales"],
        location_scoped=True,
    )
    def create(self, request, *args, **kwargs):
        serializer = SaleCreateSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        data = dict(serializer.validated_data)

        sale = SaleService.create_sale(
            location_id=self.get_location_for_create(data.pop("location", None)),
            items=[dict(line) for line in data.pop("items")],
            sales_person=request.user,
            **data,
        )
        return Response(SaleSerializer(sale).data, status=status.HTTP_201_CREATED)

    @document_api_endpoint(summary="Today's sales", tags=["Sales"], location_scoped=True)
    @action(detail=False, methods=["get"])
    def today(self, request):
        location_id = self.get_service_location_id()
        sales = SaleService.todays_sales(location_id).select_related("customer")
        return Response(
            {
                "sales": SaleSerializer(sales, many=True).data,
                "count": sales.count(),
                "total": SaleService.todays_revenue(location_id),
            }
        )
