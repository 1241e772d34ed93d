from django.contrib import admin

from apps.inventoryapp.models import InventoryItem


@admin.register(InventoryItem)
class InventoryItemAdmin(admin.ModelAdmin):
    list_display = ("name", "sku", "location", "quantity", "min_stock_level", "sale_price", "is_active")
    list_filter = ("location", "category", "is_active", "is_public")
    search_fields = ("name", "sku", "barcode")
    readonly_fields = ("avg_daily_sales", "predicted_stockout")
