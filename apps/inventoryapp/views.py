"""
Inventory app views
Stock per location with low-stock lists, stockout predictions and alerts.
"""

from rest_framework import permissions, status, viewsets
from rest_framework.decorators import action
from rest_framework.response import Response

from api.documentation.decorators import document_api_endpoint
from apps.inventoryapp.models import InventoryItem
from apps.inventoryapp.serializers import (
    InventoryItemSerializer,
    PublicInventoryItemSerializer,
    StockAdjustmentSerializer,
)
from apps.inventoryapp.services.inventory_service import InventoryService
from apps.locationsapp.mixins import LocationScopedMixin


class InventoryItemViewSet(LocationScopedMixin, viewsets.ModelViewSet):
    """
    API endpoint for inventory items

    Endpoints:
    - GET/POST /api/v1/inventory/ - List or add items
    - GET/PUT/PATCH/DELETE /api/v1/inventory/{id}/ - Manage an item (delete deactivates)
    - GET /api/v1/inventory/low-stock/ - Items at or below their minimum level
    - GET /api/v1/inventory/predictions/ - Days until stockout per item
    - GET /api/v1/inventory/alerts/ - Low stock, predicted stockout and reorder alerts
    - POST /api/v1/inventory/{id}/adjust/ - Add or remove stock
    - GET /api/v1/inventory/public/ - Public catalog (no authentication)
    """

    serializer_class = InventoryItemSerializer
    permission_classes = [permissions.IsAuthenticated]
    filterset_fields = ["category", "brand", "is_public"]
    search_fields = ["name", "sku", "barcode", "brand", "model"]
    ordering_fields = ["name", "quantity", "sale_price", "created_at"]

    def get_queryset(self):
        if self.action == "public":
            return InventoryService.public_queryset()
        return self.scope_queryset(InventoryItem.objects.filter(is_active=True))

    def get_permissions(self):
        if self.action == "public":
            return [permissions.AllowAny()]
        return super().get_permissions()

    def destroy(self, request, *args, **kwargs):
        InventoryService.deactivate(self.get_object())
        return Response(status=status.HTTP_204_NO_CONTENT)

    @document_api_endpoint(summary="Low stock items", tags=["Inventory"], location_scoped=True)
    @action(detail=False, methods=["get"], url_path="low-stock")
    def low_stock(self, request):
        queryset = InventoryService.low_stock_queryset(self.get_service_location_id())
        return Response(InventoryItemSerializer(queryset, many=True).data)

    @document_api_endpoint(summary="Stockout predictions", tags=["Inventory"], location_scoped=True)
    @action(detail=False, methods=["get"])
    def predictions(self, request):
        return Response(InventoryService.get_predictions(self.get_service_location_id()))

    @document_api_endpoint(summary="Inventory alerts", tags=["Inventory"], location_scoped=True)
    @action(detail=False, methods=["get"])
    def alerts(self, request):
        return Response(InventoryService.get_alerts(self.get_service_location_id()))

    @document_api_endpoint(
        summary="Adjust stock",
        request_body=StockAdjustmentSerializer,
        tags=["Inventory"],
        location_scoped=True,
    )
    @action(detail=True, methods=["post"])
    def adjust(self, request, pk=None):
        item = self.get_object()
        serializer = StockAdjustmentSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        item = InventoryService.adjust_stock(
            item,
            serializer.validated_data["quantity"],
            reason=serializer.validated_data["reason"],
            user=request.user,
        )
        return Response(InventoryItemSerializer(item).data)

    @document_api_endpoint(summary="Public catalog", tags=["Public"])
    @action(detail=False, methods=["get"])
    def public(self, request):
        queryset = self.filter_queryset(self.get_queryset())
        page = self.paginate_queryset(queryset)
        if page is not None:
            return self.get_paginated_response(PublicInventoryItemSerializer(page, many=True).data)
        return Response(PublicInventoryItemSerializer(queryset, many=True).data)
