from rest_framework import serializers

from apps.customersapp.models import Customer
from apps.inventoryapp.models import InventoryItem
from apps.locationsapp.models import Location
from apps.salesapp.models import Sale, SaleItem


class SaleItemSerializer(serializers.ModelSerializer):
    item_name = serializers.CharField(source="inventory_item.name", read_only=True)

    class Meta:
        model = SaleItem
        fields = ("id", "inventory_item", "item_name", "quantity", "unit_price", "total_price")


class SaleSerializer(serializers.ModelSerializer):
    items = SaleItemSerializer(many=True, read_only=True)
    customer_name = serializers.CharField(source="customer.name", read_only=True, default=None)

    class Meta:
        model = Sale
        fields = (
            "id",
            "location",
            "customer",
            "customer_name",
            "items",
            "subtotal",
            "tax_amount",
            "discount_amount",
            "total_amount",
            "payment_method",
            "payment_status",
            "notes",
            "sales_person",
            "created_at",
        )
        read_only_fields = fields


class SaleLineInputSerializer(serializers.Serializer):
    inventory_item = serializers.PrimaryKeyRelatedField(queryset=InventoryItem.objects.all())
    quantity = serializers.IntegerField(min_value=1)
    unit_price = serializers.DecimalField(
        max_digits=10, decimal_places=2, min_value=0, required=False, allow_null=True
    )


class SaleCreateSerializer(serializers.Serializer):
    location = serializers.PrimaryKeyRelatedField(queryset=Location.objects.all(), required=False)
    customer = serializers.PrimaryKeyRelatedField(
        queryset=Customer.objects.filter(is_active=True), required=False, allow_null=True
    )
    items = SaleLineInputSerializer(many=True)
    tax_amount = serializers.DecimalField(max_digits=12, decimal_places=2, min_value=0, default=0)
    discount_amount = serializers.DecimalField(max_digits=12, decimal_places=2, min_value=0, default=0)
    payment_method = serializers.ChoiceField(choices=Sale.PAYMENT_METHOD_CHOICES, default="cash")
    payment_status = serializers.ChoiceField(choices=Sale.PAYMENT_STATUS_CHOICES, default="paid")
    notes = serializers.CharField(required=False, allow_blank=True, default="")
