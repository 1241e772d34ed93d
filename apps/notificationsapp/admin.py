from django.contrib import admin

from apps.notificationsapp.models import (
    Notification,
    NotificationPreference,
    NotificationTemplate,
    NotificationType,
)


@admin.register(NotificationType)
class NotificationTypeAdmin(admin.ModelAdmin):
    list_display = ("name", "category", "default_priority", "is_active")
    list_filter = ("category", "is_active")


@admin.register(NotificationTemplate)
class NotificationTemplateAdmin(admin.ModelAdmin):
    list_display = ("notification_type", "title", "is_active", "updated_at")


@admin.register(Notification)
class NotificationAdmin(admin.ModelAdmin):
    list_display = ("title", "recipient", "notification_type", "status", "priority", "created_at")
    list_filter = ("status", "priority", "notification_type")
    search_fields = ("title", "message")


@admin.register(NotificationPreference)
class NotificationPreferenceAdmin(admin.ModelAdmin):
    list_display = ("user", "notification_type", "enabled", "email", "sms", "push", "in_app")
