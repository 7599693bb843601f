from django.contrib import admin

from mp_core.prescriptions.models import Prescription


@admin.register(Prescription)
class PrescriptionAdmin(admin.ModelAdmin):
    list_display = ("title", "patient", "prescription_type", "status", "issued_at", "expiration_date")
    list_filter = ("status", "prescription_type")
    search_fields = ("title", "patient__full_name")
    readonly_fields = ("id", "pdf_url", "created_at", "updated_at")
    date_hierarchy = "issued_at"
