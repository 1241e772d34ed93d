from rest_framework import serializers

from apps.notificationsapp.models import (
    Notification,
    NotificationPreference,
    NotificationTemplate,
    NotificationType,
)


class NotificationTypeSerializer(serializers.ModelSerializer):
    class Meta:
        model = NotificationType
        fields = ("id", "name", "category", "description", "default_priority", "is_active", "created_at")
        read_only_fields = ("id", "created_at")


class NotificationTemplateSerializer(serializers.ModelSerializer):
    notification_type_name = serializers.CharField(source="notification_type.name", read_only=True)

    class Meta:
        model = NotificationTemplate
        fields = (
            "id",
            "notification_type",
            "notification_type_name",
            "title",
            "message",
            "variables",
            "is_active",
            "created_at",
            "updated_at",
        )
        read_only_fields = ("id", "created_at", "updated_at")


class NotificationSerializer(serializers.ModelSerializer):
    type = serializers.CharField(source="notification_type.name", read_only=True)
    category = serializers.CharField(source="notification_type.category", read_only=True)

    class Meta:
        model = Notification
        fields = (
            "id",
            "type",
            "category",
            "title",
            "message",
            "status",
            "priority",
            "data",
            "sender",
            "read_at",
            "expires_at",
            "related_entity_type",
            "related_entity_id",
            "created_at",
        )
        read_only_fields = fields


class NotificationPreferenceSerializer(serializers.ModelSerializer):
    notification_type = serializers.CharField(source="notification_type.name", read_only=True)
    category = serializers.CharField(source="notification_type.category", read_only=True)

    class Meta:
        model = NotificationPreference
        fields = ("notification_type", "category", "enabled", "email", "sms", "push", "in_app")


class PreferenceUpdateSerializer(serializers.Serializer):
    notification_type = serializers.CharField()
    enabled = serializers.BooleanField(required=False)
    email = serializers.BooleanField(required=False)
    sms = serializers.BooleanField(required=False)
    push = serializers.BooleanField(required=False)
    in_app = serializers.BooleanField(required=False)
