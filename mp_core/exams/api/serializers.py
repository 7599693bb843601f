from rest_framework import serializers

from mp_core.exams.models import Exam, ExamStatus, ExamType


class ExamCreateSerializer(serializers.Serializer):
    patient_id = serializers.UUIDField()
    consultation_id = serializers.UUIDField(required=False, allow_null=True)
    exam_name = serializers.CharField(max_length=255)
    exam_type = serializers.ChoiceField(choices=ExamType.choices)
    exam_category = serializers.CharField(max_length=100, required=False, allow_blank=True)
    exam_date = serializers.DateField()
    status = serializers.ChoiceField(choices=ExamStatus.choices, required=False)
    request_details = serializers.DictField(required=False)
    results = serializers.DictField(required=False)
    additional_notes = serializers.CharField(required=False, allow_blank=True)


class ExamUpdateSerializer(serializers.Serializer):
    consultation_id = serializers.UUIDField(required=False, allow_null=True)
    exam_name = serializers.CharField(max_length=255, required=False)
    exam_type = serializers.ChoiceField(choices=ExamType.choices, required=False)
    exam_category = serializers.CharField(max_length=100, required=False, allow_blank=True)
    exam_date = serializers.DateField(required=False)
    status = serializers.ChoiceField(choices=ExamStatus.choices, required=False)
    request_details = serializers.DictField(required=False)
    results = serializers.DictField(required=False)
    additional_notes = serializers.CharField(required=False, allow_blank=True)

    def validate(self, attrs):
        if not attrs:
            raise serializers.ValidationError("At least one field is required.")
        return attrs


class ExamStatusSerializer(serializers.Serializer):
    status = serializers.ChoiceField(choices=ExamStatus.choices)
    results = serializers.DictField(required=False)
    additional_notes = serializers.CharField(max_length=1000, required=False, allow_blank=True)


class ExamReportQuerySerializer(serializers.Serializer):
    date_from = serializers.DateField()
    date_to = serializers.DateField()
    exam_type = serializers.ChoiceField(choices=ExamType.choices, required=False)
    status = serializers.ChoiceField(choices=ExamStatus.choices, required=False)
    patient_id = serializers.UUIDField(required=False)

    def validate(self, attrs):
        if attrs["date_to"] < attrs["date_from"]:
            raise serializers.ValidationError({"date_to": "date_to must be on or after date_from."})
        return attrs


class ExamSerializer(serializers.ModelSerializer):
    patient_name = serializers.CharField(source="patient.full_name", read_only=True)

    class Meta:
        model = Exam
        fields = [
            "id",
            "tenant_id",
            "facility_id",
            "patient_id",
            "patient_name",
            "doctor_id",
            "consultation_id",
            "exam_name",
            "exam_type",
            "exam_category",
            "exam_date",
            "status",
            "request_details",
            "results",
            "additional_notes",
            "created_at",
            "updated_at",
        ]
        read_only_fields = fields
