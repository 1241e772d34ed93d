from django.contrib import admin

from apps.devicesapp.models import (
    Brand,
    Device,
    DeviceFeedback,
    DeviceModel,
    DeviceStatusHistory,
    DeviceType,
    PredefinedProblem,
    ServiceType,
)


class DeviceStatusHistoryInline(admin.TabularInline):
    model = DeviceStatusHistory
    extra = 0
    readonly_fields = ("old_status", "new_status", "changed_by", "notes", "created_at")


@admin.register(Device)
class DeviceAdmin(admin.ModelAdmin):
    list_display = ("receipt_number", "customer", "location", "status", "payment_status", "priority", "created_at")
    list_filter = ("status", "payment_status", "priority", "location")
    search_fields = ("receipt_number", "customer__name", "customer__phone", "serial_number", "imei")
    readonly_fields = ("receipt_number", "created_at", "updated_at")
    inlines = [DeviceStatusHistoryInline]


@admin.register(DeviceFeedback)
class DeviceFeedbackAdmin(admin.ModelAdmin):
    list_display = ("device", "rating", "overall_satisfaction", "would_recommend", "submitted_at")
    list_filter = ("overall_satisfaction", "would_recommend")


@admin.register(DeviceType, Brand, ServiceType)
class CatalogueAdmin(admin.ModelAdmin):
    list_display = ("name", "is_active", "created_at")
    search_fields = ("name",)


@admin.register(DeviceModel)
class DeviceModelAdmin(admin.ModelAdmin):
    list_display = ("name", "brand", "device_type", "release_year", "is_active")
    list_filter = ("brand", "device_type")
    search_fields = ("name", "brand__name")


@admin.register(PredefinedProblem)
class PredefinedProblemAdmin(admin.ModelAdmin):
    list_display = ("name", "category", "device_type", "severity", "is_active")
    list_filter = ("severity", "category")
