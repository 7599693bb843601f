# mp_core/iam/api/schema_serializers.py
from __future__ import annotations

from rest_framework import serializers

from mp_core.iam.models import UserProfile


class LoginRequestSerializer(serializers.Serializer):
    username = serializers.CharField()
    password = serializers.CharField()


class DetailResponseSerializer(serializers.Serializer):
    detail = serializers.CharField()


class MeUserSerializer(serializers.Serializer):
    id = serializers.IntegerField()
    username = serializers.CharField(allow_null=True, required=False)
    email = serializers.EmailField(allow_null=True, required=False)
    first_name = serializers.CharField(required=False, allow_blank=True)
    last_name = serializers.CharField(required=False, allow_blank=True)
    is_superuser = serializers.BooleanField()


class ActiveScopeSerializer(serializers.Serializer):
    tenant_id = serializers.UUIDField()
    facility_id = serializers.UUIDField()


class LoginResponseSerializer(serializers.Serializer):
    detail = serializers.CharField()
    default_scope = ActiveScopeSerializer(allow_null=True)


class ProfileSerializer(serializers.ModelSerializer):
    class Meta:
        model = UserProfile
        fields = [
            "id",
            "tenant_id",
            "phone",
            "crm",
            "specialty",
            "clinic_name",
            "clinic_address",
            "avatar",
            "timezone",
            "locale",
            "notifications_enabled",
            "whatsapp_enabled",
            "updated_at",
        ]
        read_only_fields = fields


class MeResponseSerializer(serializers.Serializer):
    user = MeUserSerializer()
    profile = ProfileSerializer(allow_null=True, required=False)
    memberships = serializers.ListField(child=serializers.DictField())
    active_scope = ActiveScopeSerializer(allow_null=True, required=False)


class ScopeSwitchRequestSerializer(serializers.Serializer):
    tenant_id = serializers.UUIDField()
    facility_id = serializers.UUIDField()


class ScopeSwitchResponseSerializer(serializers.Serializer):
    message = serializers.CharField()
    active_scope = ActiveScopeSerializer()


class ProfileUpdateSerializer(serializers.Serializer):
    first_name = serializers.CharField(max_length=150, required=False, allow_blank=True)
    last_name = serializers.CharField(max_length=150, required=False, allow_blank=True)
    email = serializers.EmailField(required=False, allow_blank=True)

    phone = serializers.RegexField(r"^\+?[\d\s()\-]{10,20}$", required=False, allow_blank=True)
    crm = serializers.CharField(max_length=32, required=False, allow_blank=True)
    specialty = serializers.CharField(max_length=120, required=False, allow_blank=True)
    clinic_name = serializers.CharField(max_length=255, required=False, allow_blank=True)
    clinic_address = serializers.CharField(max_length=500, required=False, allow_blank=True)
    avatar = serializers.URLField(max_length=500, required=False, allow_blank=True)
    timezone = serializers.CharField(max_length=64, required=False)
    locale = serializers.CharField(max_length=10, required=False)
    notifications_enabled = serializers.BooleanField(required=False)
    whatsapp_enabled = serializers.BooleanField(required=False)

    def validate(self, attrs):
        if not attrs:
            raise serializers.ValidationError("At least one field is required.")
        return attrs
