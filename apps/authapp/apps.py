from django.apps import AppConfig
from django.utils.translation import gettext_lazy as _


class AuthAppConfig(AppConfig):
    name = "apps.authapp"
    label = "authapp"
    verbose_name = _("Authentication")
