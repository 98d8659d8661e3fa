from django.apps import AppConfig


class ClaimConfig(AppConfig):
    default_auto_field = "django.db.models.BigAutoField"
    name = "claim"

    def ready(self):
        from . import signals  # noqa: F401
