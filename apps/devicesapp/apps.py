from django.apps import AppConfig
from django.utils.translation import gettext_lazy as _


class DevicesAppConfig(AppConfig):
    name = "apps.devicesapp"
    verbose_name = _("Devices")

    def ready(self):
        import apps.devicesapp.signals  # noqa
