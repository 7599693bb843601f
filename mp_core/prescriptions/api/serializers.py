from rest_framework import serializers

from mp_core.prescriptions.models import Prescription, PrescriptionStatus, PrescriptionType


class PrescriptionCreateSerializer(serializers.Serializer):
    patient_id = serializers.UUIDField()
    consultation_id = serializers.UUIDField(required=False, allow_null=True)
    title = serializers.CharField(max_length=255)
    prescription_type = serializers.ChoiceField(choices=PrescriptionType.choices, default=PrescriptionType.MEDICATION)
    issued_at = serializers.DateTimeField(required=False)
    expiration_date = serializers.DateTimeField(required=False, allow_null=True)
    medications = serializers.ListField(child=serializers.DictField(), required=False)
    general_instructions = serializers.CharField(max_length=2000, required=False, allow_blank=True)
    status = serializers.ChoiceField(choices=PrescriptionStatus.choices, required=False)
    additional_notes = serializers.CharField(required=False, allow_blank=True)


class PrescriptionUpdateSerializer(serializers.Serializer):
    consultation_id = serializers.UUIDField(required=False, allow_null=True)
    title = serializers.CharField(max_length=255, required=False)
    prescription_type = serializers.ChoiceField(choices=PrescriptionType.choices, required=False)
    issued_at = serializers.DateTimeField(required=False)
    expiration_date = serializers.DateTimeField(required=False, allow_null=True)
    medications = serializers.ListField(child=serializers.DictField(), required=False)
    general_instructions = serializers.CharField(max_length=2000, required=False, allow_blank=True)
    status = serializers.ChoiceField(choices=PrescriptionStatus.choices, required=False)
    additional_notes = serializers.CharField(required=False, allow_blank=True)

    def validate(self, attrs):
        if not attrs:
            raise serializers.ValidationError("At least one field is required.")
        return attrs


class PrescriptionSerializer(serializers.ModelSerializer):
    patient_name = serializers.CharField(source="patient.full_name", read_only=True)
    is_expired = serializers.BooleanField(read_only=True)

    class Meta:
        model = Prescription
        fields = [
            "id",
            "tenant_id",
            "facility_id",
            "patient_id",
            "patient_name",
            "doctor_id",
            "consultation_id",
            "title",
            "prescription_type",
            "issued_at",
            "expiration_date",
            "is_expired",
            "medications",
            "general_instructions",
            "status",
            "pdf_url",
            "additional_notes",
            "created_at",
            "updated_at",
        ]
        read_only_fields = fields
