from django.test import TestCase
from django.urls import reverse
from rest_framework import status
from rest_framework.test import APIClient

from utils.testing import create_admin, create_location, create_user


class AnalyticsViewSetTest(TestCase):
    def setUp(self):
        self.client = APIClient()
        self.client.force_authenticate(create_user(location=create_location()))

    def test_reports(self):
        for name in ("satisfaction", "performance", "behavior", "revenue"):
            response = self.client.get(reverse(f"analytics-{name}"), {"range": "7d"})

            self.assertEqual(response.status_code, status.HTTP_200_OK, name)
            self.assertEqual(response.data["metadata"]["timeRange"], "7d")

    def test_unknown_range_defaults_to_thirty_days(self):
        response = self.client.get(reverse("analytics-revenue"), {"range": "forever"})

        self.assertEqual(response.data["metadata"]["timeRange"], "30d")
        self.assertEqual(len(response.data["daily"]), 31)

    def test_comprehensive_for_admin_across_locations(self):
        client = APIClient()
        client.force_authenticate(create_admin())

        response = client.get(reverse("analytics-comprehensive"))

        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertIn("behavior", response.data)

    def test_requires_authentication(self):
        response = APIClient().get(reverse("analytics-revenue"))

        self.assertEqual(response.status_code, status.HTTP_401_UNAUTHORIZED)
