from rest_framework import serializers

from mp_core.schedule.models import ScheduleSlot, SlotStatus


class ScheduleSlotCreateSerializer(serializers.Serializer):
    slot_id = serializers.CharField(max_length=64, required=False, allow_blank=True)
    schedule_date = serializers.DateField()
    start_time = serializers.TimeField()
    end_time = serializers.TimeField()
    duration = serializers.IntegerField(min_value=1, required=False)
    status = serializers.ChoiceField(choices=SlotStatus.choices, default=SlotStatus.AVAILABLE)
    appointment_type = serializers.CharField(max_length=100, required=False, allow_blank=True)
    notes = serializers.CharField(required=False, allow_blank=True)

    def validate(self, attrs):
        if attrs["end_time"] <= attrs["start_time"]:
            raise serializers.ValidationError({"end_time": "End time must be after start time."})
        return attrs


class ScheduleSlotUpdateSerializer(serializers.Serializer):
    schedule_date = serializers.DateField(required=False)
    start_time = serializers.TimeField(required=False)
    end_time = serializers.TimeField(required=False)
    duration = serializers.IntegerField(min_value=1, required=False)
    status = serializers.ChoiceField(choices=SlotStatus.choices, required=False)
    appointment_type = serializers.CharField(max_length=100, required=False, allow_blank=True)
    appointment_reason = serializers.CharField(required=False, allow_blank=True)
    notes = serializers.CharField(required=False, allow_blank=True)

    def validate(self, attrs):
        if not attrs:
            raise serializers.ValidationError("At least one field is required.")
        return attrs


class SlotBookingSerializer(serializers.Serializer):
    patient_id = serializers.UUIDField(required=False, allow_null=True)
    patient_name = serializers.CharField(max_length=255, required=False, allow_blank=True)
    patient_phone = serializers.CharField(max_length=20, required=False, allow_blank=True)
    appointment_type = serializers.CharField(max_length=100, required=False, allow_blank=True)
    appointment_reason = serializers.CharField(required=False, allow_blank=True)

    def validate(self, attrs):
        if not attrs.get("patient_id") and not attrs.get("patient_name"):
            raise serializers.ValidationError({"patient_name": "Provide patient_id or patient_name."})
        return attrs


class ScheduleSlotSerializer(serializers.ModelSerializer):
    time_slot = serializers.CharField(read_only=True)

    class Meta:
        model = ScheduleSlot
        fields = [
            "id",
            "slot_id",
            "tenant_id",
            "facility_id",
            "doctor_id",
            "patient_id",
            "schedule_date",
            "start_time",
            "end_time",
            "time_slot",
            "duration",
            "status",
            "patient_name",
            "patient_phone",
            "appointment_type",
            "appointment_reason",
            "notes",
            "created_at",
            "updated_at",
        ]
        read_only_fields = fields
