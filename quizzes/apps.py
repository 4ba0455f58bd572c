from django.apps import AppConfig


class QuizzesConfig(AppConfig):
    """App configuration for quiz authoring, assignment and scoring."""

    default_auto_field = "django.db.models.BigAutoField"
    name = "quizzes"
