# mp_core/consultations/api/serializers.py
from __future__ import annotations

from rest_framework import serializers

from mp_core.consultations.models import (
    DEFAULT_DURATION_MINUTES,
    MAX_DURATION_MINUTES,
    MIN_DURATION_MINUTES,
    Consultation,
    ConsultationStatus,
    ConsultationType,
)


class ConsultationCreateSerializer(serializers.Serializer):
    patient_id = serializers.UUIDField()
    consultation_date = serializers.DateTimeField()
    consultation_time = serializers.TimeField(required=False, allow_null=True)
    consultation_duration = serializers.IntegerField(
        min_value=MIN_DURATION_MINUTES,
        max_value=MAX_DURATION_MINUTES,
        default=DEFAULT_DURATION_MINUTES,
    )
    consultation_type = serializers.ChoiceField(choices=ConsultationType.choices, default=ConsultationType.IN_PERSON)
    room_link = serializers.URLField(max_length=500, required=False, allow_blank=True)
    status = serializers.ChoiceField(choices=ConsultationStatus.choices, required=False)

    reason_for_visit = serializers.CharField(required=False, allow_blank=True)
    clinical_notes = serializers.CharField(required=False, allow_blank=True)
    diagnosis = serializers.CharField(required=False, allow_blank=True)

    procedures_performed = serializers.ListField(required=False)
    referrals = serializers.ListField(required=False)
    exams_requested = serializers.ListField(required=False)
    follow_up = serializers.ListField(required=False)

    additional_notes = serializers.CharField(required=False, allow_blank=True)


class ConsultationUpdateSerializer(serializers.Serializer):
    consultation_date = serializers.DateTimeField(required=False)
    consultation_time = serializers.TimeField(required=False, allow_null=True)
    consultation_duration = serializers.IntegerField(
        min_value=MIN_DURATION_MINUTES,
        max_value=MAX_DURATION_MINUTES,
        required=False,
    )
    consultation_type = serializers.ChoiceField(choices=ConsultationType.choices, required=False)
    room_link = serializers.URLField(max_length=500, required=False, allow_blank=True)
    status = serializers.ChoiceField(choices=ConsultationStatus.choices, required=False)

    reason_for_visit = serializers.CharField(required=False, allow_blank=True)
    clinical_notes = serializers.CharField(required=False, allow_blank=True)
    diagnosis = serializers.CharField(required=False, allow_blank=True)

    procedures_performed = serializers.ListField(required=False)
    referrals = serializers.ListField(required=False)
    exams_requested = serializers.ListField(required=False)
    follow_up = serializers.ListField(required=False)

    additional_notes = serializers.CharField(required=False, allow_blank=True)

    def validate(self, attrs):
        if not attrs:
            raise serializers.ValidationError("At least one field is required.")
        return attrs


class ConsultationStatusSerializer(serializers.Serializer):
    status = serializers.ChoiceField(choices=ConsultationStatus.choices)
    reason = serializers.CharField(max_length=500, required=False, allow_blank=True)


class ConsultationSerializer(serializers.ModelSerializer):
    patient_name = serializers.CharField(source="patient.full_name", read_only=True)
    full_date_time = serializers.CharField(read_only=True)

    class Meta:
        model = Consultation
        fields = [
            "id",
            "tenant_id",
            "facility_id",
            "patient_id",
            "patient_name",
            "doctor_id",
            "consultation_date",
            "consultation_time",
            "full_date_time",
            "consultation_duration",
            "consultation_type",
            "room_link",
            "status",
            "reason_for_visit",
            "clinical_notes",
            "diagnosis",
            "procedures_performed",
            "referrals",
            "exams_requested",
            "follow_up",
            "additional_notes",
            "prescription_id",
            "created_at",
            "updated_at",
        ]
        read_only_fields = fields
