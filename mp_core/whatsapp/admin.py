from django.contrib import admin

from mp_core.whatsapp.models import WhatsAppConnection, WhatsAppMessage, WhatsAppReminder


@admin.register(WhatsAppConnection)
class WhatsAppConnectionAdmin(admin.ModelAdmin):
    list_display = ("session_id", "user", "status", "connected", "phone_number", "connected_at")
    list_filter = ("status", "connected")
    search_fields = ("session_id", "phone_number")


@admin.register(WhatsAppMessage)
class WhatsAppMessageAdmin(admin.ModelAdmin):
    list_display = ("to", "type", "status", "sent_at", "delivered_at", "read_at")
    list_filter = ("status", "type")
    search_fields = ("to", "message_id")


@admin.register(WhatsAppReminder)
class WhatsAppReminderAdmin(admin.ModelAdmin):
    list_display = ("patient_name", "reminder_type", "consultation_date", "scheduled_for", "status")
    list_filter = ("status", "reminder_type")
    search_fields = ("patient_name", "patient_phone")
