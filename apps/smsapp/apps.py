from django.apps import AppConfig
from django.utils.translation import gettext_lazy as _


class SmsAppConfig(AppConfig):
    name = "apps.smsapp"
    verbose_name = _("SMS")
