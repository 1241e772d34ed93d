from decimal import Decimal

from django.test import TestCase

from apps.devicesapp.models import ServiceType
from apps.devicesapp.services.feedback_service import FeedbackService
from apps.reportanalyticsapp.services.analytics_organizer import (
    AnalyticsDataOrganizer,
    parse_time_range,
)
from apps.salesapp.services.sale_service import SaleService
from utils.testing import create_customer, create_device, create_inventory_item, create_location, create_user


class ParseTimeRangeTest(TestCase):
    def test_known_and_unknown(self):
        self.assertEqual(parse_time_range("90d"), "90d")
        self.assertEqual(parse_time_range("2y"), "30d")
        self.assertEqual(parse_time_range(None), "30d")


class DemoDataTest(TestCase):
    def setUp(self):
        self.organizer = AnalyticsDataOrganizer(seed=42)

    def test_satisfaction_demo(self):
        report = self.organizer.customer_satisfaction("7d")

        self.assertTrue(report["metadata"]["isDemoData"])
        self.assertFalse(report["metadata"]["hasRealData"])
        self.assertEqual(report["totalResponses"], 0)
        self.assertEqual(len(report["daily"]), 8)
        self.assertTrue(all(4.2 <= value <= 4.8 for value in report["daily"].values()))
        self.assertEqual(report["byDeviceType"], [])
        self.assertTrue(report["trends"]["monthly"])

    def test_demo_is_reproducible_with_seed(self):
        first = AnalyticsDataOrganizer(seed=7).revenue("7d")["daily"]
        second = AnalyticsDataOrganizer(seed=7).revenue("7d")["daily"]

        self.assertEqual(first, second)

    def test_new_customers_demo_are_integers(self):
        report = self.organizer.customer_behavior("30d")

        self.assertTrue(report["metadata"]["isDemoData"])
        self.assertTrue(all(float(v).is_integer() and 0 <= v < 6 for v in report["newCustomers"].values()))
        self.assertEqual(report["topCustomers"], [])
        self.assertEqual(report["totalCustomers"], 0)

    def test_comprehensive_flags_demo(self):
        report = self.organizer.comprehensive("7d")

        self.assertEqual(set(report), {"satisfaction", "performance", "behavior", "revenue", "metadata"})
        self.assertTrue(report["metadata"]["isDemoData"])
        self.assertEqual(report["metadata"]["timeRange"], "7d")


class RealDataTest(TestCase):
    def setUp(self):
        self.location = create_location(name="Piassa")
        self.technician = create_user(location=self.location, first_name="Dawit", last_name="Bekele")
        self.customer = create_customer(self.location, name="Hirut")
        self.screen = ServiceType.objects.create(name="Screen replacement")

    def _delivered(self, **extra):
        device = create_device(self.customer, status="delivered", assigned_to=self.technician, **extra)
        device.delivered_at = device.created_at
        device.save()
        return device

    def test_satisfaction_from_feedback(self):
        first = self._delivered(service_type=self.screen)
        second = self._delivered()
        FeedbackService.submit_feedback(first.receipt_number, {"rating": 5})
        FeedbackService.submit_feedback(second.receipt_number, {"rating": 3, "overall_satisfaction": 4})

        report = AnalyticsDataOrganizer(location_id=self.location.id).customer_satisfaction()

        self.assertFalse(report["metadata"]["isDemoData"])
        self.assertEqual(report["totalResponses"], 2)
        self.assertEqual(report["overall"], 4.5)
        self.assertEqual(
            report["byServiceType"],
            [
                {"name": "General", "average": 4.0, "count": 1},
                {"name": "Screen replacement", "average": 5.0, "count": 1},
            ],
        )
        self.assertEqual(report["byTechnician"][0]["name"], "Dawit Bekele")
        self.assertEqual(report["byLocation"][0]["name"], "Piassa")
        self.assertEqual(list(report["daily"].values()).count(None), len(report["daily"]) - 1)

    def test_other_location_falls_back_to_demo(self):
        FeedbackService.submit_feedback(self._delivered().receipt_number, {"rating": 5})

        report = AnalyticsDataOrganizer(location_id=create_location().id).customer_satisfaction()

        self.assertTrue(report["metadata"]["isDemoData"])

    def test_repair_performance(self):
        self._delivered()
        create_device(self.customer, priority="urgent")

        report = AnalyticsDataOrganizer(location_id=self.location.id).repair_performance()

        self.assertFalse(report["metadata"]["isDemoData"])
        self.assertEqual(report["totalDevices"], 2)
        self.assertEqual(report["averageEfficiency"], 50.0)
        self.assertEqual(
            [(row["name"], row["count"], row["completed"]) for row in report["byPriority"]],
            [("normal", 1, 1), ("urgent", 1, 0)],
        )

    def test_customer_behavior(self):
        self._delivered(total_cost=Decimal("900.00"))
        create_device(self.customer)
        create_customer(self.location, name="Window shopper")

        report = AnalyticsDataOrganizer(location_id=self.location.id).customer_behavior()

        self.assertFalse(report["metadata"]["isDemoData"])
        self.assertEqual(report["topCustomers"][0]["name"], "Hirut")
        self.assertEqual(report["topCustomers"][0]["value"], 900.0)
        self.assertEqual(len(report["topCustomers"]), 1)
        self.assertEqual(report["visitFrequency"], {"New": 0, "Returning": 1, "Loyal": 0})
        self.assertEqual(sum(report["newCustomers"].values()), 2)
        self.assertEqual(report["totalCustomers"], 2)

    def test_revenue(self):
        self._delivered(service_type=self.screen, total_cost=Decimal("1500.00"))
        item = create_inventory_item(self.location, sale_price=Decimal("240.00"))
        SaleService.create_sale(self.location.id, [{"inventory_item": item, "quantity": 1}])

        report = AnalyticsDataOrganizer(location_id=self.location.id).revenue()

        self.assertFalse(report["metadata"]["isDemoData"])
        self.assertEqual(report["salesTotal"], 240.0)
        self.assertEqual(report["repairTotal"], 1500.0)
        self.assertEqual(report["total"], 1740.0)
        self.assertEqual(report["byServiceType"], [{"name": "Screen replacement", "total": 1500.0}])
        self.assertEqual(report["byLocation"], [{"name": "Piassa", "total": 1740.0}])
        self.assertEqual(sum(report["daily"].values()), 1740.0)
