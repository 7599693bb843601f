from rest_framework import serializers

from mp_core.medical_records.models import MedicalRecord


class MedicalRecordSerializer(serializers.ModelSerializer):
    patient_name = serializers.CharField(source="patient.full_name", read_only=True)

    class Meta:
        model = MedicalRecord
        fields = [
            "id",
            "tenant_id",
            "facility_id",
            "patient_id",
            "patient_name",
            "doctor_id",
            "patient_info",
            "health_summary",
            "consultation_ids",
            "anamnesis_ids",
            "exam_ids",
            "prescription_ids",
            "last_updated",
            "created_at",
        ]
        read_only_fields = fields
