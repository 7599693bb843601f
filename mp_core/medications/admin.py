from django.contrib import admin

from mp_core.medications.models import Medication


@admin.register(Medication)
class MedicationAdmin(admin.ModelAdmin):
    list_display = ("medication_name", "dosage", "form", "route", "is_controlled", "controlled_type")
    list_filter = ("is_controlled", "form", "route")
    search_fields = ("medication_name", "active_ingredient")
    readonly_fields = ("id", "created_at", "updated_at")
    ordering = ("medication_name",)
