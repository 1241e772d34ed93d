from decimal import Decimal

from django.test import TestCase

from apps.locationsapp.models import Location
from apps.locationsapp.services.location_service import LocationService
from utils.testing import create_customer, create_device, create_inventory_item, create_location


class LocationServiceTest(TestCase):
    def setUp(self):
        self.location = create_location()

    def test_delete_empty_location(self):
        self.assertTrue(LocationService.delete_location(self.location))
        self.assertFalse(Location.objects.filter(pk=self.location.pk).exists())

    def test_delete_location_with_customers_deactivates(self):
        create_customer(self.location)

        self.assertFalse(LocationService.delete_location(self.location))

        self.location.refresh_from_db()
        self.assertFalse(self.location.is_active)

    def test_get_stats(self):
        customer = create_customer(self.location)
        create_device(customer)
        create_device(customer, status="delivered")
        create_inventory_item(self.location, quantity=2, min_stock_level=5)
        create_inventory_item(self.location, quantity=50, min_stock_level=5)

        stats = LocationService.get_stats(self.location)

        self.assertEqual(stats["customers"], 1)
        self.assertEqual(stats["active_devices"], 1)
        self.assertEqual(stats["low_stock_items"], 1)
        self.assertEqual(stats["today_revenue"], float(Decimal("0")))
