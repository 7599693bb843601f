from rest_framework import serializers

from mp_core.notes.models import NOTE_TEXT_MAX_LENGTH, Note, NoteType


class NoteCreateSerializer(serializers.Serializer):
    patient_id = serializers.UUIDField()
    note_title = serializers.CharField(max_length=255)
    note_text = serializers.CharField(max_length=NOTE_TEXT_MAX_LENGTH)
    consultation_date = serializers.DateTimeField(required=False, allow_null=True)
    note_type = serializers.ChoiceField(choices=NoteType.choices, default=NoteType.GENERAL)
    is_important = serializers.BooleanField(required=False)
    attachments = serializers.ListField(required=False)


class NoteUpdateSerializer(serializers.Serializer):
    note_title = serializers.CharField(max_length=255, required=False)
    note_text = serializers.CharField(max_length=NOTE_TEXT_MAX_LENGTH, required=False)
    consultation_date = serializers.DateTimeField(required=False, allow_null=True)
    note_type = serializers.ChoiceField(choices=NoteType.choices, required=False)
    is_important = serializers.BooleanField(required=False)
    attachments = serializers.ListField(required=False)

    def validate(self, attrs):
        if not attrs:
            raise serializers.ValidationError("At least one field is required.")
        return attrs


class NoteSerializer(serializers.ModelSerializer):
    patient_name = serializers.CharField(source="patient.full_name", read_only=True)
    modified_by_id = serializers.IntegerField(read_only=True, allow_null=True)

    class Meta:
        model = Note
        fields = [
            "id",
            "tenant_id",
            "facility_id",
            "patient_id",
            "patient_name",
            "doctor_id",
            "note_title",
            "note_text",
            "consultation_date",
            "note_type",
            "is_important",
            "attachments",
            "last_modified",
            "modified_by_id",
            "view_count",
            "created_at",
            "updated_at",
        ]
        read_only_fields = fields
