from django.contrib import admin

from mp_core.schedule.models import ScheduleSlot


@admin.register(ScheduleSlot)
class ScheduleSlotAdmin(admin.ModelAdmin):
    list_display = ("slot_id", "schedule_date", "start_time", "end_time", "status", "patient_name")
    list_filter = ("status", "schedule_date")
    search_fields = ("slot_id", "patient_name", "patient_phone")
    readonly_fields = ("id", "slot_id", "created_at", "updated_at")
