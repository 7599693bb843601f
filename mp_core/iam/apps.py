from django.apps import AppConfig


class IamConfig(AppConfig):
    default_auto_field = "django.db.models.BigAutoField"
    name = "mp_core.iam"

    def ready(self) -> None:
        from mp_core.iam import openapi  # noqa: F401
