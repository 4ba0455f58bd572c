from django.apps import AppConfig


class ApiConfig(AppConfig):
    """REST endpoints over the quiz engine."""

    default_auto_field = "django.db.models.BigAutoField"
    name = "api"
    verbose_name = "Quiz engine API"
