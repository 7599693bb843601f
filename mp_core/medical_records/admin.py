from django.contrib import admin

from mp_core.medical_records.models import MedicalRecord


@admin.register(MedicalRecord)
class MedicalRecordAdmin(admin.ModelAdmin):
    list_display = ("patient", "doctor", "last_updated")
    search_fields = ("patient__full_name",)
    readonly_fields = ("id", "last_updated", "created_at", "updated_at")
