from django.contrib import admin

from apps.appointmentsapp.models import Appointment


@admin.register(Appointment)
class AppointmentAdmin(admin.ModelAdmin):
    list_display = ("title", "customer", "location", "appointment_date", "duration", "status", "assigned_to")
    list_filter = ("status", "location")
    search_fields = ("title", "customer__name")
    date_hierarchy = "appointment_date"
