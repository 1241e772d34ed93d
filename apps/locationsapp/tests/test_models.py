from django.test import TestCase

from apps.locationsapp.models import Location, default_business_hours
from utils.testing import create_location


class LocationModelTest(TestCase):
    def test_code_is_normalised_on_save(self):
        location = create_location(code=" add01 ")
        location.refresh_from_db()
        self.assertEqual(location.code, "ADD01")

    def test_default_business_hours(self):
        hours = default_business_hours()
        self.assertTrue(hours["sunday"]["closed"])
        self.assertEqual(hours["monday"]["open"], "08:30")
        # Each call returns an independent dict
        hours["monday"]["open"] = "07:00"
        self.assertEqual(default_business_hours()["monday"]["open"], "08:30")

    def test_str(self):
        location = create_location(name="Bole Branch", code="BOL")
        self.assertEqual(str(location), "Bole Branch (BOL)")

    def test_ordering_by_name(self):
        create_location(name="Piassa")
        create_location(name="Bole")
        names = list(Location.objects.values_list("name", flat=True))
        self.assertEqual(names, sorted(names))
