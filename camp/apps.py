from django.apps import AppConfig


class CampConfig(AppConfig):
    default_auto_field = "django.db.models.BigAutoField"
    name = "camp"
    verbose_name = "Limb Camp"

    def ready(self):
        """Import signal handlers and other app initialization code."""
        import camp.signals  # noqa
