from rest_framework import serializers

from apps.customersapp.serializers import CategoryCriteriaSerializer
from apps.smsapp.constants import LANGUAGE_CHOICES, TEMPLATE_KINDS
from apps.smsapp.models import (
    EthiopianSmsSettings,
    RecipientGroup,
    SmsCampaign,
    SmsCampaignRecipient,
    SmsQueue,
)


class SmsTemplateSerializer(serializers.Serializer):
    language = serializers.ChoiceField(choices=LANGUAGE_CHOICES, read_only=True)
    device_registration = serializers.CharField(required=False)
    device_status_update = serializers.CharField(required=False)
    device_ready_for_pickup = serializers.CharField(required=False)
    is_default = serializers.BooleanField(read_only=True)


class TemplatePreviewSerializer(serializers.Serializer):
    text = serializers.CharField(required=False)
    kind = serializers.ChoiceField(choices=TEMPLATE_KINDS, required=False)
    language = serializers.ChoiceField(choices=LANGUAGE_CHOICES, required=False)
    context = serializers.DictField(child=serializers.CharField(), required=False)

    def validate(self, attrs):
        if not attrs.get("text") and not attrs.get("kind"):
            raise serializers.ValidationError({"text": "Provide the template text or a template kind."})
        return attrs


class EthiopianSmsSettingsSerializer(serializers.ModelSerializer):
    class Meta:
        model = EthiopianSmsSettings
        fields = (
            "provider",
            "username",
            "password",
            "api_key",
            "sender_id",
            "base_url",
            "custom_endpoint",
            "custom_headers",
            "updated_at",
        )
        read_only_fields = ("updated_at",)
        extra_kwargs = {"password": {"write_only": True}, "api_key": {"write_only": True}}

    def to_representation(self, instance):
        data = super().to_representation(instance)
        data["has_password"] = bool(instance.password)
        data["has_api_key"] = bool(instance.api_key)
        return data


class TestSmsSerializer(serializers.Serializer):
    phone_number = serializers.CharField()
    message = serializers.CharField(required=False, allow_blank=True)


class SendSmsSerializer(serializers.Serializer):
    phone_number = serializers.CharField()
    message = serializers.CharField(max_length=1600)


class SmsQueueSerializer(serializers.ModelSerializer):
    class Meta:
        model = SmsQueue
        fields = (
            "id",
            "phone_number",
            "message",
            "message_type",
            "status",
            "attempts",
            "max_attempts",
            "last_attempt_at",
            "error_message",
            "metadata",
            "sent_at",
            "created_at",
        )
        read_only_fields = fields


class RetrySerializer(serializers.Serializer):
    ids = serializers.ListField(child=serializers.UUIDField(), required=False)


class RecipientGroupSerializer(serializers.ModelSerializer):
    member_count = serializers.IntegerField(read_only=True)

    class Meta:
        model = RecipientGroup
        fields = ("id", "name", "description", "is_active", "member_count", "created_at", "updated_at")
        read_only_fields = ("id", "created_at", "updated_at")


class GroupCustomersSerializer(serializers.Serializer):
    customer_ids = serializers.ListField(child=serializers.UUIDField(), allow_empty=False)


class SmsCampaignSerializer(serializers.ModelSerializer):
    class Meta:
        model = SmsCampaign
        fields = (
            "id",
            "name",
            "message",
            "target_group",
            "category",
            "recipient_group",
            "custom_filters",
            "occasion",
            "scheduled_date",
            "status",
            "total_count",
            "sent_count",
            "sent_at",
            "created_by",
            "created_at",
            "updated_at",
        )
        read_only_fields = (
            "id",
            "status",
            "total_count",
            "sent_count",
            "sent_at",
            "created_by",
            "created_at",
            "updated_at",
        )

    def validate_custom_filters(self, value):
        criteria = CategoryCriteriaSerializer(data=value or {})
        criteria.is_valid(raise_exception=True)
        return criteria.to_criteria()

    def validate(self, attrs):
        target = attrs.get("target_group", getattr(self.instance, "target_group", "all"))
        if target == "category" and not attrs.get("category", getattr(self.instance, "category", None)):
            raise serializers.ValidationError({"category": "Required for category campaigns."})
        if target == "recipient_group" and not attrs.get(
            "recipient_group", getattr(self.instance, "recipient_group", None)
        ):
            raise serializers.ValidationError({"recipient_group": "Required for group campaigns."})
        return attrs


class ScheduleCampaignSerializer(serializers.Serializer):
    scheduled_date = serializers.DateTimeField()


class SmsCampaignRecipientSerializer(serializers.ModelSerializer):
    customer_name = serializers.CharField(source="customer.name", read_only=True, default=None)

    class Meta:
        model = SmsCampaignRecipient
        fields = ("id", "customer", "customer_name", "phone_number", "status", "sent_at", "error_message")
