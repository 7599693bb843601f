from django.contrib import admin

from mp_core.consultations.models import Consultation


@admin.register(Consultation)
class ConsultationAdmin(admin.ModelAdmin):
    list_display = ("patient", "doctor", "consultation_date", "consultation_type", "status", "consultation_duration")
    list_filter = ("status", "consultation_type")
    search_fields = ("patient__full_name", "reason_for_visit", "diagnosis")
    readonly_fields = ("id", "created_at", "updated_at")
    date_hierarchy = "consultation_date"
    ordering = ("-consultation_date",)
