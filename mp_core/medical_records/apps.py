from django.apps import AppConfig


class MedicalRecordsConfig(AppConfig):
    default_auto_field = "django.db.models.BigAutoField"
    name = "mp_core.medical_records"

    def ready(self):
        from mp_core.medical_records import subscribers  # noqa: F401
