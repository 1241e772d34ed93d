from datetime import timedelta

from django.test import TestCase
from django.urls import reverse
from django.utils import timezone
from rest_framework import status
from rest_framework.test import APIClient

from utils.testing import create_customer, create_location, create_user


class AppointmentViewSetTest(TestCase):
    def setUp(self):
        self.location = create_location()
        self.user = create_user(location=self.location)
        self.customer = create_customer(self.location)
        self.client = APIClient()
        self.client.force_authenticate(self.user)
        self.start = timezone.now() + timedelta(days=2)

    def _payload(self, **extra):
        payload = {
            "customer": str(self.customer.pk),
            "title": "Diagnosis",
            "appointment_date": self.start.isoformat(),
            "duration": 30,
            "assigned_to": str(self.user.pk),
        }
        payload.update(extra)
        return payload

    def test_book(self):
        response = self.client.post(reverse("appointment-list"), self._payload(), format="json")

        self.assertEqual(response.status_code, status.HTTP_201_CREATED)
        self.assertEqual(response.data["location"], self.location.id)
        self.assertEqual(response.data["created_by"], self.user.id)

    def test_double_booking_rejected(self):
        self.client.post(reverse("appointment-list"), self._payload(), format="json")

        response = self.client.post(
            reverse("appointment-list"),
            self._payload(appointment_date=(self.start + timedelta(minutes=10)).isoformat()),
            format="json",
        )

        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertIn("appointment_date", response.data["errors"])

    def test_short_duration_rejected(self):
        response = self.client.post(reverse("appointment-list"), self._payload(duration=2), format="json")

        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)

    def test_status_and_upcoming(self):
        created = self.client.post(reverse("appointment-list"), self._payload(), format="json")

        upcoming = self.client.get(reverse("appointment-upcoming"))
        self.assertEqual(upcoming.data["pagination"]["total"], 1)

        response = self.client.post(
            reverse("appointment-update-status", args=[created.data["id"]]), {"status": "cancelled"}, format="json"
        )
        self.assertEqual(response.data["status"], "cancelled")

        upcoming = self.client.get(reverse("appointment-upcoming"))
        self.assertEqual(upcoming.data["pagination"]["total"], 0)

    def test_other_location_hidden(self):
        other_user = create_user(location=create_location())
        client = APIClient()
        client.force_authenticate(other_user)
        created = self.client.post(reverse("appointment-list"), self._payload(), format="json")

        response = client.get(reverse("appointment-detail", args=[created.data["id"]]))

        self.assertEqual(response.status_code, status.HTTP_404_NOT_FOUND)
