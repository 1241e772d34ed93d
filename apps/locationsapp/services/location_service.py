import logging

from django.db import transaction
from django.db.models import Sum
from django.utils import timezone

from apps.locationsapp.models import Location

logger = logging.getLogger(__name__)


class LocationService:
    """
    Branch level helpers that need to look across the operational apps.
    """

    @staticmethod
    def get_stats(location):
        from apps.customersapp.models import Customer
        from apps.devicesapp.constants import CLOSED_STATUSES
        from apps.devicesapp.models import Device
        from apps.inventoryapp.services.inventory_service import InventoryService
        from apps.salesapp.models import Sale

        today = timezone.localdate()
        today_revenue = Sale.objects.filter(
            location=location, created_at__date=today
        ).aggregate(total=Sum("total_amount"))["total"]

        return {
            "customers": Customer.objects.filter(location=location, is_active=True).count(),
            "active_devices": Device.objects.filter(location=location, is_active=True)
            .exclude(status__in=CLOSED_STATUSES)
            .count(),
            "low_stock_items": InventoryService.low_stock_queryset(location.id).count(),
            "today_revenue": float(today_revenue or 0),
        }

    @staticmethod
    def has_operational_data(location):
        return (
            location.customers.exists()
            or location.devices.exists()
            or location.inventory_items.exists()
            or location.sales.exists()
        )

    @staticmethod
    @transaction.atomic
    def delete_location(location):
        """
        Delete a location, or deactivate it when records still point at it.

        Returns:
            bool: True if the row was deleted, False if it was deactivated
        """
        if LocationService.has_operational_data(location):
            location.is_active = False
            location.save(update_fields=["is_active", "updated_at"])
            logger.info(f"Location {location.code} deactivated instead of deleted")
            return False

        location.delete()
        logger.info(f"Location {location.code} deleted")
        return True
