from __future__ import annotations

from rest_framework import serializers

from mp_core.common.validators import cep_validator, validate_phone
from mp_core.facilities.models import Facility, FacilityType


class FacilitySerializer(serializers.ModelSerializer):
    full_address = serializers.CharField(read_only=True)

    class Meta:
        model = Facility
        fields = [
            "id",
            "tenant_id",
            "name",
            "code",
            "facility_type",
            "timezone",
            "phone",
            "email",
            "address",
            "city",
            "state",
            "postal_code",
            "full_address",
            "is_active",
            "created_at",
            "updated_at",
        ]
        read_only_fields = fields


class _FacilityFieldsSerializer(serializers.Serializer):
    facility_type = serializers.ChoiceField(choices=FacilityType.choices, required=False)
    timezone = serializers.CharField(max_length=64, required=False)
    phone = serializers.CharField(max_length=32, required=False, allow_blank=True, validators=[validate_phone])
    email = serializers.EmailField(required=False, allow_blank=True)
    address = serializers.CharField(max_length=500, required=False, allow_blank=True)
    city = serializers.CharField(max_length=100, required=False, allow_blank=True)
    state = serializers.CharField(max_length=2, required=False, allow_blank=True)
    postal_code = serializers.CharField(max_length=10, required=False, allow_blank=True, validators=[cep_validator])

    def validate_state(self, value: str) -> str:
        return value.upper()


class FacilityCreateSerializer(_FacilityFieldsSerializer):
    name = serializers.CharField(max_length=255)
    code = serializers.SlugField(max_length=64)


class FacilityUpdateSerializer(_FacilityFieldsSerializer):
    name = serializers.CharField(max_length=255, required=False)
    is_active = serializers.BooleanField(required=False)

    def validate(self, attrs):
        if not attrs:
            raise serializers.ValidationError("At least one field is required.")
        return attrs
