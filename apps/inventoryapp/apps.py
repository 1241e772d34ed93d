from django.apps import AppConfig
from django.utils.translation import gettext_lazy as _


class InventoryAppConfig(AppConfig):
    name = "apps.inventoryapp"
    verbose_name = _("Inventory")
