from rest_framework import serializers

from apps.authapp.serializers import UserSimpleSerializer
from apps.customersapp.models import Customer
from apps.customersapp.serializers import CustomerSimpleSerializer
from apps.devicesapp.constants import DEVICE_STATUS_CHOICES, PAYMENT_STATUS_CHOICES
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
from apps.locationsapp.models import Location


class DeviceTypeSerializer(serializers.ModelSerializer):
    class Meta:
        model = DeviceType
        fields = ("id", "name", "category", "description", "is_active", "created_at")
        read_only_fields = ("id", "created_at")


class BrandSerializer(serializers.ModelSerializer):
    class Meta:
        model = Brand
        fields = ("id", "name", "description", "website", "is_active", "created_at")
        read_only_fields = ("id", "created_at")


class DeviceModelSerializer(serializers.ModelSerializer):
    brand_name = serializers.CharField(source="brand.name", read_only=True)
    device_type_name = serializers.CharField(source="device_type.name", read_only=True)

    class Meta:
        model = DeviceModel
        fields = (
            "id",
            "name",
            "brand",
            "brand_name",
            "device_type",
            "device_type_name",
            "specifications",
            "release_year",
            "is_active",
            "created_at",
        )
        read_only_fields = ("id", "created_at")


class ServiceTypeSerializer(serializers.ModelSerializer):
    class Meta:
        model = ServiceType
        fields = (
            "id",
            "name",
            "category",
            "description",
            "base_price",
            "estimated_duration",
            "is_public",
            "is_active",
            "created_at",
        )
        read_only_fields = ("id", "created_at")


class PredefinedProblemSerializer(serializers.ModelSerializer):
    class Meta:
        model = PredefinedProblem
        fields = (
            "id",
            "name",
            "description",
            "category",
            "device_type",
            "estimated_cost",
            "estimated_duration",
            "severity",
            "is_active",
            "created_at",
        )
        read_only_fields = ("id", "created_at")


class DeviceListSerializer(serializers.ModelSerializer):
    """Compact device row for lists."""

    device = serializers.CharField(source="display_name", read_only=True)
    customer_name = serializers.CharField(source="customer.name", read_only=True)
    status_display = serializers.CharField(source="get_status_display", read_only=True)

    class Meta:
        model = Device
        fields = (
            "id",
            "receipt_number",
            "device",
            "customer",
            "customer_name",
            "status",
            "status_display",
            "payment_status",
            "priority",
            "total_cost",
            "estimated_completion_date",
            "created_at",
        )


class DeviceSerializer(serializers.ModelSerializer):
    """
    Full device representation used for create, retrieve and update.

    Status and payment status only change through the dedicated actions.
    """

    customer = serializers.PrimaryKeyRelatedField(queryset=Customer.objects.filter(is_active=True))
    location = serializers.PrimaryKeyRelatedField(queryset=Location.objects.all(), required=False)
    customer_detail = CustomerSimpleSerializer(source="customer", read_only=True)
    assigned_to_detail = UserSimpleSerializer(source="assigned_to", read_only=True)
    device = serializers.CharField(source="display_name", read_only=True)
    status_display = serializers.CharField(source="get_status_display", read_only=True)

    class Meta:
        model = Device
        fields = (
            "id",
            "receipt_number",
            "customer",
            "customer_detail",
            "location",
            "assigned_to",
            "assigned_to_detail",
            "device",
            "device_type",
            "brand",
            "device_model",
            "device_type_name",
            "brand_name",
            "model_name",
            "serial_number",
            "imei",
            "problem_description",
            "diagnosis",
            "repair_notes",
            "estimated_cost",
            "final_cost",
            "total_cost",
            "status",
            "status_display",
            "payment_status",
            "priority",
            "service_type",
            "warranty_expiry",
            "estimated_completion_date",
            "actual_completion_date",
            "pickup_date",
            "delivered_at",
            "feedback_requested",
            "is_active",
            "created_at",
            "updated_at",
        )
        read_only_fields = (
            "id",
            "receipt_number",
            "status",
            "payment_status",
            "actual_completion_date",
            "pickup_date",
            "delivered_at",
            "is_active",
            "created_at",
            "updated_at",
        )

    def validate(self, attrs):
        device_type = attrs.get("device_type", getattr(self.instance, "device_type", None))
        device_type_name = attrs.get(
            "device_type_name", getattr(self.instance, "device_type_name", "")
        )
        if not (device_type or device_type_name):
            raise serializers.ValidationError(
                {"device_type": "Pick a device type or enter device_type_name."}
            )

        device_model = attrs.get("device_model")
        brand = attrs.get("brand", getattr(self.instance, "brand", None))
        if device_model and brand and device_model.brand_id != brand.id:
            raise serializers.ValidationError({"device_model": "Model does not belong to this brand."})
        return attrs


class DeviceStatusUpdateSerializer(serializers.Serializer):
    status = serializers.ChoiceField(choices=DEVICE_STATUS_CHOICES)
    notes = serializers.CharField(required=False, allow_blank=True, default="")
    payment_status = serializers.ChoiceField(
        choices=PAYMENT_STATUS_CHOICES, required=False, allow_null=True
    )


class DevicePaymentSerializer(serializers.Serializer):
    payment_status = serializers.CharField()


class DeviceStatusHistorySerializer(serializers.ModelSerializer):
    changed_by_name = serializers.SerializerMethodField()

    class Meta:
        model = DeviceStatusHistory
        fields = ("id", "old_status", "new_status", "changed_by", "changed_by_name", "notes", "created_at")

    def get_changed_by_name(self, obj):
        if obj.changed_by is None:
            return None
        return obj.changed_by.get_full_name() or obj.changed_by.username


class DeviceFeedbackSerializer(serializers.ModelSerializer):
    class Meta:
        model = DeviceFeedback
        fields = (
            "id",
            "device",
            "rating",
            "service_quality",
            "communication",
            "timeliness",
            "value_for_money",
            "overall_satisfaction",
            "would_recommend",
            "comment",
            "submitted_at",
        )
        read_only_fields = ("id", "device", "submitted_at")
        extra_kwargs = {"overall_satisfaction": {"required": False}}


class PublicFeedbackSerializer(DeviceFeedbackSerializer):
    receipt_number = serializers.CharField(write_only=True)

    class Meta(DeviceFeedbackSerializer.Meta):
        fields = DeviceFeedbackSerializer.Meta.fields + ("receipt_number",)
