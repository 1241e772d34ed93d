from datetime import timedelta
from decimal import Decimal

from django.test import TestCase
from django.utils import timezone

from apps.appointmentsapp.models import Appointment
from apps.dashboardapp.services.dashboard_service import DashboardService
from apps.devicesapp.constants import DEVICE_STATUSES
from apps.devicesapp.models import ServiceType
from apps.devicesapp.services.device_service import DeviceService
from apps.salesapp.services.sale_service import SaleService
from utils.testing import create_customer, create_device, create_inventory_item, create_location, create_user


class DashboardServiceTest(TestCase):
    def setUp(self):
        self.location = create_location()
        self.other = create_location()
        self.user = create_user(location=self.location, first_name="Selam", last_name="Tesfaye")
        self.customer = create_customer(self.location, name="Abebe")

    def test_stats(self):
        create_device(self.customer)
        finished = create_device(self.customer)
        DeviceService.update_status(finished, "completed", user=self.user)
        create_device(self.customer, status="delivered")
        create_device(create_customer(self.other))
        create_inventory_item(self.location, quantity=2, min_stock_level=5)
        item = create_inventory_item(self.location, sale_price=Decimal("300.00"))
        SaleService.create_sale(self.location.id, [{"inventory_item": item, "quantity": 2}])
        Appointment.objects.create(
            customer=self.customer,
            location=self.location,
            title="Pickup",
            appointment_date=timezone.now() + timedelta(hours=3),
        )
        Appointment.objects.create(
            customer=self.customer,
            location=self.location,
            title="Old",
            appointment_date=timezone.now() - timedelta(days=1),
        )

        stats = DashboardService.get_stats(self.location.id)

        self.assertEqual(
            stats,
            {
                "activeRepairs": 2,
                "completedToday": 1,
                "lowStockItems": 1,
                "todayRevenue": 600.0,
                "pendingAppointments": 1,
                "totalCustomers": 1,
            },
        )

    def test_stats_across_all_locations(self):
        create_device(self.customer)
        create_device(create_customer(self.other))

        stats = DashboardService.get_stats()

        self.assertEqual(stats["activeRepairs"], 2)
        self.assertEqual(stats["totalCustomers"], 2)

    def test_status_distribution_lists_every_status(self):
        create_device(self.customer)
        create_device(self.customer)
        create_device(self.customer, status="waiting_parts")
        create_device(self.customer, is_active=False)

        distribution = DashboardService.get_status_distribution(self.location.id)

        self.assertEqual([row["status"] for row in distribution], list(DEVICE_STATUSES))
        counts = {row["status"]: row["count"] for row in distribution}
        self.assertEqual(counts["registered"], 2)
        self.assertEqual(counts["waiting_parts"], 1)
        self.assertEqual(counts["delivered"], 0)

    def test_recent_activities_merge_history_and_sales(self):
        device = create_device(self.customer)
        DeviceService.update_status(device, "diagnosed", user=self.user)
        item = create_inventory_item(self.location)
        SaleService.create_sale(self.location.id, [{"inventory_item": item, "quantity": 1}], sales_person=self.user)

        activities = DashboardService.get_recent_activities(self.location.id)

        self.assertEqual({activity["type"] for activity in activities}, {"device_status", "sale"})
        status_change = next(a for a in activities if a["type"] == "device_status")
        self.assertEqual(status_change["description"], "Status changed from registered to diagnosed")
        self.assertEqual(status_change["user"], "Selam Tesfaye")
        sale = next(a for a in activities if a["type"] == "sale")
        self.assertEqual(sale["description"], "Walk-in customer")
        timestamps = [activity["timestamp"] for activity in activities]
        self.assertEqual(timestamps, sorted(timestamps, reverse=True))

    def test_recent_activities_limit_and_scope(self):
        for _ in range(3):
            DeviceService.update_status(create_device(self.customer), "diagnosed")
        DeviceService.update_status(create_device(create_customer(self.other)), "diagnosed")

        self.assertEqual(len(DashboardService.get_recent_activities(self.location.id, limit=2)), 2)
        self.assertEqual(len(DashboardService.get_recent_activities(self.other.id)), 1)

    def test_top_services(self):
        screen = ServiceType.objects.create(name="Screen replacement")
        battery = ServiceType.objects.create(name="Battery replacement")
        ServiceType.objects.create(name="Unused")
        create_device(self.customer, service_type=screen, status="delivered", total_cost=Decimal("1200.00"))
        create_device(self.customer, service_type=screen)
        create_device(self.customer, service_type=battery)
        create_device(create_customer(self.other), service_type=battery)

        services = DashboardService.get_top_services(self.location.id)

        self.assertEqual(
            [(s["name"], s["deviceCount"], s["revenue"]) for s in services],
            [("Screen replacement", 2, 1200.0), ("Battery replacement", 1, 0.0)],
        )
