from django.apps import AppConfig
from django.utils.translation import gettext_lazy as _

from examcenter.checks import (
    register_startup_checks,
    register_startup_checks_extra,
)


class CenterConfig(AppConfig):
    name = "center"
    verbose_name = _("Exam center")

    default_auto_field = "django.db.models.BigAutoField"

    def ready(self):
        import center.receivers  # noqa

        # register all checks
        register_startup_checks()
        register_startup_checks_extra()
