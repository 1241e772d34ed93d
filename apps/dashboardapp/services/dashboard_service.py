import logging
from decimal import Decimal

from django.conf import settings
from django.core.cache import cache
from django.db.models import Count, Q, Sum
from django.utils import timezone

from apps.devicesapp.constants import CLOSED_STATUSES, DEVICE_STATUSES

logger = logging.getLogger(__name__)

PENDING_APPOINTMENT_STATUSES = ("scheduled", "confirmed")


def _cache_seconds():
    return settings.REPAIRSHOP.get("DASHBOARD_CACHE_SECONDS", 60)


def _cache_key(name, location_id, *extra):
    parts = [name, str(location_id or "all")] + [str(e) for e in extra]
    return "dashboard_" + "_".join(parts)


def _scoped(queryset, location_id):
    if location_id:
        return queryset.filter(location_id=location_id)
    return queryset


class DashboardService:
    """
    Service for the numbers shown on the shop dashboard.
    Results are cached briefly per location so the landing page stays cheap.
    """

    @staticmethod
    def get_stats(location_id=None):
        """Headline counters for the dashboard cards"""
        cache_key = _cache_key("stats", location_id)
        stats = cache.get(cache_key)
        if stats is not None:
            return stats

        from apps.customersapp.models import Customer
        from apps.devicesapp.models import Device
        from apps.inventoryapp.services.inventory_service import InventoryService
        from apps.salesapp.services.sale_service import SaleService
        from apps.appointmentsapp.models import Appointment

        devices = _scoped(Device.objects.filter(is_active=True), location_id)
        today = timezone.localdate()

        stats = {
            "activeRepairs": devices.exclude(status__in=CLOSED_STATUSES).count(),
            "completedToday": devices.filter(status="completed", updated_at__date=today).count(),
            "lowStockItems": InventoryService.low_stock_queryset(location_id).count(),
            "todayRevenue": float(SaleService.todays_revenue(location_id)),
            "pendingAppointments": _scoped(Appointment.objects.all(), location_id)
            .filter(status__in=PENDING_APPOINTMENT_STATUSES, appointment_date__gte=timezone.now())
            .count(),
            "totalCustomers": _scoped(Customer.objects.filter(is_active=True), location_id).count(),
        }
        cache.set(cache_key, stats, _cache_seconds())
        return stats

    @staticmethod
    def get_status_distribution(location_id=None):
        """Device count per status, including statuses with no devices"""
        from apps.devicesapp.models import Device

        counts = dict(
            _scoped(Device.objects.filter(is_active=True), location_id)
            .values_list("status")
            .annotate(total=Count("id"))
            .order_by()
        )
        return [{"status": status, "count": counts.get(status, 0)} for status in DEVICE_STATUSES]

    @staticmethod
    def get_recent_activities(location_id=None, limit=10):
        """
        Latest status changes and sales, newest first.

        Returns:
            list of {type, id, title, description, timestamp}
        """
        from apps.devicesapp.models import DeviceStatusHistory
        from apps.salesapp.models import Sale

        history = DeviceStatusHistory.objects.select_related("device", "changed_by").order_by("-created_at")
        if location_id:
            history = history.filter(device__location_id=location_id)

        activities = []
        for entry in history[:limit]:
            description = (
                f"Status changed from {entry.old_status} to {entry.new_status}"
                if entry.old_status
                else "Device registered"
            )
            activities.append(
                {
                    "type": "device_status",
                    "id": str(entry.device_id),
                    "title": f"{entry.device.display_name} ({entry.device.receipt_number})",
                    "description": description,
                    "user": entry.changed_by.get_full_name() if entry.changed_by else None,
                    "timestamp": entry.created_at,
                }
            )

        sales = _scoped(Sale.objects.select_related("customer", "sales_person"), location_id)
        for sale in sales.order_by("-created_at")[:limit]:
            activities.append(
                {
                    "type": "sale",
                    "id": str(sale.id),
                    "title": f"Sale {sale.total_amount}",
                    "description": sale.customer.name if sale.customer else "Walk-in customer",
                    "user": sale.sales_person.get_full_name() if sale.sales_person else None,
                    "timestamp": sale.created_at,
                }
            )

        activities.sort(key=lambda activity: activity["timestamp"], reverse=True)
        return activities[:limit]

    @staticmethod
    def get_top_services(location_id=None, limit=5):
        """Service types ranked by number of devices, with delivered revenue"""
        cache_key = _cache_key("top_services", location_id, limit)
        services = cache.get(cache_key)
        if services is not None:
            return services

        from apps.devicesapp.models import ServiceType

        device_filter = Q(devices__is_active=True)
        if location_id:
            device_filter &= Q(devices__location_id=location_id)

        queryset = (
            ServiceType.objects.filter(is_active=True)
            .annotate(
                device_count=Count("devices", filter=device_filter),
                revenue=Sum(
                    "devices__total_cost", filter=device_filter & Q(devices__status="delivered")
                ),
            )
            .filter(device_count__gt=0)
            .order_by("-device_count", "name")[:limit]
        )
        services = [
            {
                "id": str(service.id),
                "name": service.name,
                "deviceCount": service.device_count,
                "revenue": float(service.revenue or Decimal("0")),
            }
            for service in queryset
        ]
        cache.set(cache_key, services, _cache_seconds())
        return services
