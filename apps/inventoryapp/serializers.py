from rest_framework import serializers

from apps.inventoryapp.models import InventoryItem
from apps.locationsapp.models import Location


class InventoryItemSerializer(serializers.ModelSerializer):
    location = serializers.PrimaryKeyRelatedField(queryset=Location.objects.all(), required=False)
    is_low_stock = serializers.BooleanField(read_only=True)

    class Meta:
        model = InventoryItem
        fields = (
            "id",
            "location",
            "name",
            "sku",
            "description",
            "category",
            "brand",
            "model",
            "purchase_price",
            "sale_price",
            "quantity",
            "min_stock_level",
            "reorder_point",
            "reorder_quantity",
            "lead_time_days",
            "avg_daily_sales",
            "predicted_stockout",
            "supplier",
            "barcode",
            "is_public",
            "is_active",
            "is_low_stock",
            "created_at",
            "updated_at",
        )
        read_only_fields = (
            "id",
            "avg_daily_sales",
            "predicted_stockout",
            "is_active",
            "created_at",
            "updated_at",
        )


class PublicInventoryItemSerializer(serializers.ModelSerializer):
    """Catalog view for anonymous visitors; no costs or stock counts."""

    location_name = serializers.CharField(source="location.name", read_only=True)
    in_stock = serializers.SerializerMethodField()

    class Meta:
        model = InventoryItem
        fields = ("id", "name", "description", "category", "brand", "model", "sale_price", "location_name", "in_stock")

    def get_in_stock(self, obj):
        return obj.quantity > 0


class StockAdjustmentSerializer(serializers.Serializer):
    quantity = serializers.IntegerField()
    reason = serializers.CharField(required=False, allow_blank=True, default="")

    def validate_quantity(self, value):
        if value == 0:
            raise serializers.ValidationError("Adjustment cannot be zero.")
        return value
