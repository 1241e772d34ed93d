from rest_framework import serializers

from apps.customersapp.models import Customer, CustomerCategory
from apps.customersapp.services.categorization_service import CRITERIA_KEYS
from apps.locationsapp.models import Location
from apps.locationsapp.serializers import LocationSimpleSerializer


class CustomerSerializer(serializers.ModelSerializer):
    location = serializers.PrimaryKeyRelatedField(queryset=Location.objects.all(), required=False)
    location_detail = LocationSimpleSerializer(source="location", read_only=True)

    class Meta:
        model = Customer
        fields = (
            "id",
            "name",
            "first_name",
            "last_name",
            "email",
            "phone",
            "address",
            "city",
            "state",
            "zip_code",
            "country",
            "date_of_birth",
            "gender",
            "occupation",
            "notes",
            "is_active",
            "location",
            "location_detail",
            "registration_date",
            "created_at",
            "updated_at",
        )
        read_only_fields = ("id", "registration_date", "created_at", "updated_at")

    def validate(self, attrs):
        name = attrs.get("name", getattr(self.instance, "name", ""))
        first_name = attrs.get("first_name", getattr(self.instance, "first_name", ""))
        if not (name or first_name):
            raise serializers.ValidationError({"name": "A name or first name is required."})
        return attrs


class CustomerSimpleSerializer(serializers.ModelSerializer):
    class Meta:
        model = Customer
        fields = ("id", "name", "phone", "email")


class CategoryCriteriaSerializer(serializers.Serializer):
    locations = serializers.ListField(child=serializers.UUIDField(), required=False)
    deviceTypes = serializers.ListField(child=serializers.CharField(), required=False)
    minSpending = serializers.DecimalField(max_digits=12, decimal_places=2, required=False, allow_null=True)
    maxSpending = serializers.DecimalField(max_digits=12, decimal_places=2, required=False, allow_null=True)
    lastVisitDays = serializers.IntegerField(min_value=1, required=False, allow_null=True)
    ageMin = serializers.IntegerField(min_value=0, max_value=120, required=False, allow_null=True)
    ageMax = serializers.IntegerField(min_value=0, max_value=120, required=False, allow_null=True)
    occupations = serializers.ListField(child=serializers.CharField(), required=False)

    def validate(self, attrs):
        unknown = set(self.initial_data or {}) - set(CRITERIA_KEYS)
        if unknown:
            raise serializers.ValidationError(
                {key: "Unknown criterion." for key in sorted(unknown)}
            )
        if attrs.get("minSpending") is not None and attrs.get("maxSpending") is not None:
            if attrs["minSpending"] > attrs["maxSpending"]:
                raise serializers.ValidationError({"maxSpending": "Must be greater than minSpending."})
        if attrs.get("ageMin") is not None and attrs.get("ageMax") is not None:
            if attrs["ageMin"] > attrs["ageMax"]:
                raise serializers.ValidationError({"ageMax": "Must be greater than ageMin."})
        return attrs

    def to_criteria(self):
        """JSON-safe criteria dict for storage."""
        criteria = {}
        for key, value in self.validated_data.items():
            if value is None or value == []:
                continue
            if key == "locations":
                value = [str(v) for v in value]
            elif key in ("minSpending", "maxSpending"):
                value = float(value)
            criteria[key] = value
        return criteria


class CustomerCategorySerializer(serializers.ModelSerializer):
    class Meta:
        model = CustomerCategory
        fields = ("id", "name", "description", "criteria", "color", "is_active", "created_at", "updated_at")
        read_only_fields = ("id", "created_at", "updated_at")

    def validate_criteria(self, value):
        criteria_serializer = CategoryCriteriaSerializer(data=value or {})
        criteria_serializer.is_valid(raise_exception=True)
        return criteria_serializer.to_criteria()
