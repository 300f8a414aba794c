from django.apps import AppConfig


class BoothsConfig(AppConfig):
    name = "booths"
    default_auto_field = "django.db.models.BigAutoField"

    def ready(self) -> None:
        from booths import signals  # noqa: F401
        from booths.conf import get_setting
        from booths.logging import setup_logging

        setup_logging(
            json_output=get_setting("LOG_JSON"),
            log_level=get_setting("LOG_LEVEL"),
        )
