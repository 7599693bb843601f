from django.apps import AppConfig


class AnamnesesConfig(AppConfig):
    default_auto_field = "django.db.models.BigAutoField"
    name = "mp_core.anamneses"
