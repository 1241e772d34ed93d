from django.apps import AppConfig
from django.utils.translation import gettext_lazy as _


class DashboardAppConfig(AppConfig):
    name = "apps.dashboardapp"
    verbose_name = _("Dashboard")
