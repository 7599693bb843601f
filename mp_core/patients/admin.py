from django.contrib import admin

from mp_core.patients.models import Patient


@admin.register(Patient)
class PatientAdmin(admin.ModelAdmin):
    list_display = ("full_name", "cpf", "mobile_phone", "email", "doctor", "favorite", "deleted_at", "created_at")
    list_filter = ("favorite", "blood_type", "gender", "state")
    search_fields = ("full_name", "cpf", "email", "mobile_phone")
    readonly_fields = ("id", "created_at", "updated_at", "last_consultation_date")
    ordering = ("full_name",)

    def get_queryset(self, request):
        return Patient.all_objects.all()
