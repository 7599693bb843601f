from rest_framework import serializers

from mp_core.medications.models import Medication


class MedicationCreateSerializer(serializers.Serializer):
    medication_name = serializers.CharField(max_length=255)
    active_ingredient = serializers.CharField(max_length=255, required=False, allow_blank=True)
    dosage = serializers.CharField(max_length=100, required=False, allow_blank=True)
    form = serializers.CharField(max_length=50, required=False, allow_blank=True)
    route = serializers.CharField(max_length=50, required=False, allow_blank=True)
    frequency = serializers.CharField(max_length=100, required=False, allow_blank=True)
    duration = serializers.CharField(max_length=100, required=False, allow_blank=True)
    instructions = serializers.CharField(required=False, allow_blank=True)
    side_effects = serializers.ListField(required=False)
    contraindications = serializers.ListField(required=False)
    interactions = serializers.ListField(required=False)
    is_controlled = serializers.BooleanField(required=False)
    controlled_type = serializers.CharField(max_length=50, required=False, allow_blank=True)


class MedicationUpdateSerializer(MedicationCreateSerializer):
    medication_name = serializers.CharField(max_length=255, required=False)

    def validate(self, attrs):
        if not attrs:
            raise serializers.ValidationError("At least one field is required.")
        return attrs


class MedicationSerializer(serializers.ModelSerializer):
    class Meta:
        model = Medication
        fields = [
            "id",
            "tenant_id",
            "facility_id",
            "medication_name",
            "active_ingredient",
            "dosage",
            "form",
            "route",
            "frequency",
            "duration",
            "instructions",
            "side_effects",
            "contraindications",
            "interactions",
            "is_controlled",
            "controlled_type",
            "created_at",
            "updated_at",
        ]
        read_only_fields = fields
