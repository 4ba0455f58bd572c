from django.apps import AppConfig


class CoursesConfig(AppConfig):
    """Courses and enrolments; course-scoped assignments read their rosters here."""

    default_auto_field = "django.db.models.BigAutoField"
    name = "courses"
