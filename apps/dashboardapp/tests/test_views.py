from unittest.mock import patch

from django.test import TestCase
from django.urls import reverse
from rest_framework import status
from rest_framework.test import APIClient

from apps.dashboardapp.services.dashboard_service import DashboardService
from apps.devicesapp.services.device_service import DeviceService
from utils.testing import create_admin, create_customer, create_device, create_location, create_user


class DashboardViewSetTest(TestCase):
    def setUp(self):
        self.location = create_location()
        self.other = create_location()
        self.client = APIClient()
        self.client.force_authenticate(create_user(location=self.location))
        create_device(create_customer(self.location))
        create_device(create_customer(self.other))

    def test_stats_scoped_to_own_location(self):
        response = self.client.get(reverse("dashboard-stats"))

        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data["activeRepairs"], 1)

    def test_admin_selects_location(self):
        client = APIClient()
        client.force_authenticate(create_admin())

        everything = client.get(reverse("dashboard-stats"))
        selected = client.get(reverse("dashboard-stats"), HTTP_X_SELECTED_LOCATION=str(self.other.id))

        self.assertEqual(everything.data["activeRepairs"], 2)
        self.assertEqual(selected.data["activeRepairs"], 1)

    def test_status_distribution(self):
        response = self.client.get(reverse("dashboard-status-distribution"))

        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data[0], {"status": "registered", "count": 1})

    def test_recent_activities(self):
        DeviceService.update_status(create_device(create_customer(self.location)), "diagnosed")

        response = self.client.get(reverse("dashboard-recent-activities"))

        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(len(response.data), 1)

    def test_limit_is_clamped(self):
        with patch.object(DashboardService, "get_top_services", return_value=[]) as top:
            self.client.get(reverse("dashboard-top-services"), {"limit": 500})
            self.client.get(reverse("dashboard-top-services"), {"limit": "lots"})

        self.assertEqual(top.call_args_list[0].kwargs["limit"], 50)
        self.assertEqual(top.call_args_list[1].kwargs["limit"], 5)

    def test_user_without_location_is_rejected(self):
        client = APIClient()
        client.force_authenticate(create_user())

        response = client.get(reverse("dashboard-stats"))

        self.assertEqual(response.status_code, status.HTTP_403_FORBIDDEN)

    def test_requires_authentication(self):
        response = APIClient().get(reverse("dashboard-stats"))

        self.assertEqual(response.status_code, status.HTTP_401_UNAUTHORIZED)
