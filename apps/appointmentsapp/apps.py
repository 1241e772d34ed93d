from django.apps import AppConfig
from django.utils.translation import gettext_lazy as _


class AppointmentsAppConfig(AppConfig):
    name = "apps.appointmentsapp"
    verbose_name = _("Appointments")
