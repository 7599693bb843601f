from __future__ import annotations

from rest_framework import serializers

from mp_core.common.validators import validate_cnpj
from mp_core.tenants.models import Tenant, TenantStatus


class TenantSerializer(serializers.ModelSerializer):
    class Meta:
        model = Tenant
        fields = ["id", "name", "code", "cnpj", "contact_email", "status", "metadata", "created_at", "updated_at"]
        read_only_fields = fields


class TenantCreateSerializer(serializers.Serializer):
    name = serializers.CharField(max_length=255)
    code = serializers.SlugField(max_length=64)
    cnpj = serializers.CharField(max_length=18, required=False, allow_blank=True, validators=[validate_cnpj])
    contact_email = serializers.EmailField(required=False, allow_blank=True)
    status = serializers.ChoiceField(choices=TenantStatus.choices, required=False, default=TenantStatus.ACTIVE)
    metadata = serializers.JSONField(required=False, default=dict)


class TenantStatusUpdateSerializer(serializers.Serializer):
    status = serializers.ChoiceField(choices=TenantStatus.choices)
