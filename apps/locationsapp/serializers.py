from rest_framework import serializers

from apps.locationsapp.models import Location


class LocationSerializer(serializers.ModelSerializer):
    class Meta:
        model = Location
        fields = (
            "id",
            "name",
            "code",
            "address",
            "city",
            "state",
            "zip_code",
            "country",
            "phone",
            "email",
            "manager_name",
            "is_active",
            "timezone",
            "business_hours",
            "notes",
            "created_at",
            "updated_at",
        )
        read_only_fields = ("id", "created_at", "updated_at")

    def validate_code(self, value):
        value = value.strip().upper()
        queryset = Location.objects.filter(code=value)
        if self.instance is not None:
            queryset = queryset.exclude(pk=self.instance.pk)
        if queryset.exists():
            raise serializers.ValidationError("A location with this code already exists.")
        return value


class LocationSimpleSerializer(serializers.ModelSerializer):
    class Meta:
        model = Location
        fields = ("id", "name", "code", "city")
