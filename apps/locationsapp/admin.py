from django.contrib import admin

from apps.locationsapp.models import Location


@admin.register(Location)
class LocationAdmin(admin.ModelAdmin):
    list_display = ("name", "code", "city", "country", "manager_name", "is_active")
    list_filter = ("is_active", "country", "city")
    search_fields = ("name", "code", "city", "manager_name")
    ordering = ("name",)
