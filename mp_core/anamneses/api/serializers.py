from rest_framework import serializers

from mp_core.anamneses.models import Anamnesis


class AnamnesisCreateSerializer(serializers.Serializer):
    patient_id = serializers.UUIDField()
    anamnesis_date = serializers.DateField(required=False)

    chief_complaint = serializers.CharField()
    illness_history = serializers.CharField()

    medical_history = serializers.ListField(required=False)
    surgical_history = serializers.ListField(required=False)
    social_history = serializers.DictField(required=False)
    current_medications = serializers.ListField(required=False)
    allergies = serializers.ListField(required=False)
    systems_review = serializers.DictField(required=False)
    physical_exam = serializers.DictField(required=False)

    family_history = serializers.CharField(required=False, allow_blank=True)
    diagnosis = serializers.CharField(required=False, allow_blank=True)
    treatment_plan = serializers.CharField(required=False, allow_blank=True)
    additional_notes = serializers.CharField(required=False, allow_blank=True)


class AnamnesisUpdateSerializer(serializers.Serializer):
    anamnesis_date = serializers.DateField(required=False)

    chief_complaint = serializers.CharField(required=False)
    illness_history = serializers.CharField(required=False)

    medical_history = serializers.ListField(required=False)
    surgical_history = serializers.ListField(required=False)
    social_history = serializers.DictField(required=False)
    current_medications = serializers.ListField(required=False)
    allergies = serializers.ListField(required=False)
    systems_review = serializers.DictField(required=False)
    physical_exam = serializers.DictField(required=False)

    family_history = serializers.CharField(required=False, allow_blank=True)
    diagnosis = serializers.CharField(required=False, allow_blank=True)
    treatment_plan = serializers.CharField(required=False, allow_blank=True)
    additional_notes = serializers.CharField(required=False, allow_blank=True)

    def validate(self, attrs):
        if not attrs:
            raise serializers.ValidationError("At least one field is required.")
        return attrs


class AnamnesisReportQuerySerializer(serializers.Serializer):
    date_from = serializers.DateField()
    date_to = serializers.DateField()
    patient_id = serializers.UUIDField(required=False)

    def validate(self, attrs):
        if attrs["date_to"] < attrs["date_from"]:
            raise serializers.ValidationError({"date_to": "date_to must be on or after date_from."})
        return attrs


class AnamnesisSerializer(serializers.ModelSerializer):
    patient_name = serializers.CharField(source="patient.full_name", read_only=True)

    class Meta:
        model = Anamnesis
        fields = [
            "id",
            "tenant_id",
            "facility_id",
            "patient_id",
            "patient_name",
            "doctor_id",
            "anamnesis_date",
            "chief_complaint",
            "illness_history",
            "medical_history",
            "surgical_history",
            "social_history",
            "current_medications",
            "allergies",
            "systems_review",
            "physical_exam",
            "family_history",
            "diagnosis",
            "treatment_plan",
            "additional_notes",
            "created_at",
            "updated_at",
        ]
        read_only_fields = fields
