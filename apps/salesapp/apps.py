from django.apps import AppConfig
from django.utils.translation import gettext_lazy as _


class SalesAppConfig(AppConfig):
    name = "apps.salesapp"
    verbose_name = _("Sales")
