from django.contrib import admin

from apps.salesapp.models import Sale, SaleItem


class SaleItemInline(admin.TabularInline):
    model = SaleItem
    extra = 0


@admin.register(Sale)
class SaleAdmin(admin.ModelAdmin):
    list_display = ("id", "location", "customer", "total_amount", "payment_method", "created_at")
    list_filter = ("location", "payment_method", "payment_status")
    date_hierarchy = "created_at"
    inlines = [SaleItemInline]
