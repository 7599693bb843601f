from rest_framework import serializers

from mp_core.whatsapp.models import (
    MessageStatus,
    MessageType,
    ReminderType,
    WhatsAppConnection,
    WhatsAppMessage,
    WhatsAppReminder,
)


class SessionCreateSerializer(serializers.Serializer):
    device_info = serializers.DictField(required=False)


class QRCodeSerializer(serializers.Serializer):
    qr_code = serializers.CharField()


class ConnectedSerializer(serializers.Serializer):
    phone_number = serializers.CharField(max_length=20)


class ConnectionSerializer(serializers.ModelSerializer):
    is_expired = serializers.BooleanField(read_only=True)

    class Meta:
        model = WhatsAppConnection
        fields = [
            "id",
            "tenant_id",
            "facility_id",
            "user_id",
            "session_id",
            "status",
            "connected",
            "qr_code",
            "phone_number",
            "device_info",
            "connected_at",
            "expires_at",
            "is_expired",
            "created_at",
            "updated_at",
        ]
        read_only_fields = fields


class MessageCreateSerializer(serializers.Serializer):
    to = serializers.CharField(max_length=32)
    message = serializers.CharField()
    type = serializers.ChoiceField(choices=MessageType.choices, default=MessageType.TEXT)
    template_name = serializers.CharField(max_length=100, required=False, allow_blank=True)
    template_params = serializers.DictField(required=False)


class MessageStatusCallbackSerializer(serializers.Serializer):
    status = serializers.ChoiceField(
        choices=[c for c in MessageStatus.choices if c[0] != MessageStatus.PENDING]
    )
    message_id = serializers.CharField(max_length=128, required=False, allow_blank=True)
    error = serializers.DictField(required=False)

    def validate(self, attrs):
        if attrs["status"] == MessageStatus.SENT and not attrs.get("message_id"):
            raise serializers.ValidationError({"message_id": "Required when status is 'sent'."})
        return attrs


class MessageSerializer(serializers.ModelSerializer):
    formatted_phone = serializers.CharField(read_only=True)

    class Meta:
        model = WhatsAppMessage
        fields = [
            "id",
            "tenant_id",
            "facility_id",
            "user_id",
            "to",
            "formatted_phone",
            "message",
            "type",
            "template_name",
            "template_params",
            "status",
            "message_id",
            "error",
            "sent_at",
            "delivered_at",
            "read_at",
            "created_at",
        ]
        read_only_fields = fields


class ReminderCreateSerializer(serializers.Serializer):
    patient_id = serializers.UUIDField()
    consultation_id = serializers.UUIDField(required=False, allow_null=True)
    patient_name = serializers.CharField(max_length=255, required=False, allow_blank=True)
    patient_phone = serializers.CharField(max_length=20, required=False, allow_blank=True)
    consultation_date = serializers.DateTimeField()
    consultation_time = serializers.TimeField()
    reminder_type = serializers.ChoiceField(choices=ReminderType.choices, default=ReminderType.CONSULTATION)
    reminder_time = serializers.IntegerField(min_value=0, max_value=720, required=False)
    scheduled_for = serializers.DateTimeField(required=False)


class ReminderUpdateSerializer(serializers.Serializer):
    patient_name = serializers.CharField(max_length=255, required=False)
    patient_phone = serializers.CharField(max_length=20, required=False)
    consultation_date = serializers.DateTimeField(required=False)
    consultation_time = serializers.TimeField(required=False)
    reminder_type = serializers.ChoiceField(choices=ReminderType.choices, required=False)
    reminder_time = serializers.IntegerField(min_value=0, max_value=720, required=False)
    scheduled_for = serializers.DateTimeField(required=False)

    def validate(self, attrs):
        if not attrs:
            raise serializers.ValidationError("At least one field is required.")
        return attrs


class ReminderSerializer(serializers.ModelSerializer):
    reminder_message = serializers.CharField(read_only=True)
    hours_until_reminder = serializers.IntegerField(read_only=True, allow_null=True)

    class Meta:
        model = WhatsAppReminder
        fields = [
            "id",
            "tenant_id",
            "facility_id",
            "user_id",
            "patient_id",
            "consultation_id",
            "patient_name",
            "patient_phone",
            "consultation_date",
            "consultation_time",
            "reminder_type",
            "reminder_time",
            "status",
            "message_id",
            "sent_at",
            "error",
            "scheduled_for",
            "reminder_message",
            "hours_until_reminder",
            "created_at",
        ]
        read_only_fields = fields
