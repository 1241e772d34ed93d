from rest_framework import serializers

from apps.appointmentsapp.models import Appointment
from apps.customersapp.models import Customer
from apps.locationsapp.models import Location


class AppointmentSerializer(serializers.ModelSerializer):
    customer = serializers.PrimaryKeyRelatedField(queryset=Customer.objects.filter(is_active=True))
    location = serializers.PrimaryKeyRelatedField(queryset=Location.objects.all(), required=False)
    customer_name = serializers.CharField(source="customer.name", read_only=True)
    assigned_to_name = serializers.SerializerMethodField()
    end_time = serializers.DateTimeField(read_only=True)

    class Meta:
        model = Appointment
        fields = (
            "id",
            "customer",
            "customer_name",
            "location",
            "title",
            "description",
            "appointment_date",
            "duration",
            "end_time",
            "status",
            "assigned_to",
            "assigned_to_name",
            "created_by",
            "notes",
            "created_at",
            "updated_at",
        )
        read_only_fields = ("id", "created_by", "created_at", "updated_at")

    def get_assigned_to_name(self, obj):
        if obj.assigned_to is None:
            return None
        return obj.assigned_to.get_full_name() or obj.assigned_to.username

    def validate_duration(self, value):
        if value < 5:
            raise serializers.ValidationError("Duration must be at least 5 minutes.")
        return value


class AppointmentStatusSerializer(serializers.Serializer):
    status = serializers.CharField()
