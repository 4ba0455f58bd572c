from django.apps import AppConfig


class AccountsConfig(AppConfig):
    """Roles and display names for quiz authors and students."""

    default_auto_field = "django.db.models.BigAutoField"
    name = "accounts"

    def ready(self) -> None:  # pragma: no cover (import-time hook)
        # Every user gets a profile; reports and role checks read it.
        from . import signals  # noqa: F401
        return super().ready()
