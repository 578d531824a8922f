from django.apps import AppConfig


class ListingsConfig(AppConfig):
    default_auto_field = "django.db.models.BigAutoField"
    name = "carcruise.listings"

    def ready(self):
        # Import signal handlers
        from . import signals  # noqa: F401
