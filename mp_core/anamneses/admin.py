from django.contrib import admin

from mp_core.anamneses.models import Anamnesis


@admin.register(Anamnesis)
class AnamnesisAdmin(admin.ModelAdmin):
    list_display = ("patient", "doctor", "anamnesis_date", "chief_complaint", "created_at")
    search_fields = ("patient__full_name", "chief_complaint", "diagnosis")
    readonly_fields = ("id", "created_at", "updated_at")
    date_hierarchy = "anamnesis_date"
