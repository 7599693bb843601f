from django.apps import AppConfig


class WhatsAppConfig(AppConfig):
    default_auto_field = "django.db.models.BigAutoField"
    name = "mp_core.whatsapp"
    verbose_name = "WhatsApp"
