from django.apps import AppConfig


class CiConfig(AppConfig):
    default_auto_field = "django.db.models.BigAutoField"
    name = "ci"
    verbose_name = "CI/CD"
