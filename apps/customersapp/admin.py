from django.contrib import admin

from apps.customersapp.models import Customer, CustomerCategory


@admin.register(Customer)
class CustomerAdmin(admin.ModelAdmin):
    list_display = ("name", "phone", "email", "location", "is_active", "registration_date")
    list_filter = ("location", "is_active", "gender")
    search_fields = ("name", "phone", "email")
    date_hierarchy = "registration_date"


@admin.register(CustomerCategory)
class CustomerCategoryAdmin(admin.ModelAdmin):
    list_display = ("name", "is_active", "created_at")
    search_fields = ("name",)
