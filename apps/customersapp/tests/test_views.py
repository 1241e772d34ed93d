from django.test import TestCase
from django.urls import reverse
from rest_framework import status
from rest_framework.test import APIClient

from apps.customersapp.models import Customer, CustomerCategory
from utils.testing import create_admin, create_customer, create_device, create_location, create_user


class CustomerViewSetTest(TestCase):
    def setUp(self):
        self.location = create_location()
        self.other_location = create_location()
        self.user = create_user(role="sales", location=self.location)
        self.admin = create_admin()
        self.customer = create_customer(self.location, name="Meron")
        self.other_customer = create_customer(self.other_location, name="Yonas")
        self.client = APIClient()
        self.client.force_authenticate(self.user)

    def test_list_is_scoped_to_user_location(self):
        response = self.client.get(reverse("customer-list"))

        self.assertEqual(response.status_code, status.HTTP_200_OK)
        names = [row["name"] for row in response.data["data"]]
        self.assertEqual(names, ["Meron"])

    def test_admin_selects_location_with_header(self):
        self.client.force_authenticate(self.admin)

        response = self.client.get(
            reverse("customer-list"), HTTP_X_SELECTED_LOCATION=str(self.other_location.id)
        )

        names = [row["name"] for row in response.data["data"]]
        self.assertEqual(names, ["Yonas"])

    def test_admin_sees_all_locations(self):
        self.client.force_authenticate(self.admin)

        response = self.client.get(reverse("customer-list"), HTTP_X_SELECTED_LOCATION="all")

        self.assertEqual(response.data["pagination"]["total"], 2)

    def test_create_uses_user_location(self):
        response = self.client.post(
            reverse("customer-list"), {"name": "Liya", "phone": "0912345678"}, format="json"
        )

        self.assertEqual(response.status_code, status.HTTP_201_CREATED)
        self.assertEqual(Customer.objects.get(name="Liya").location, self.location)

    def test_create_for_other_location_denied(self):
        response = self.client.post(
            reverse("customer-list"),
            {"name": "Liya", "phone": "0912345678", "location": str(self.other_location.id)},
            format="json",
        )

        self.assertEqual(response.status_code, status.HTTP_403_FORBIDDEN)

    def test_create_requires_name(self):
        response = self.client.post(reverse("customer-list"), {"phone": "0912345678"}, format="json")

        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)

    def test_cannot_read_other_location_customer(self):
        response = self.client.get(reverse("customer-detail", args=[self.other_customer.id]))

        self.assertEqual(response.status_code, status.HTTP_404_NOT_FOUND)

    def test_delete_deactivates(self):
        response = self.client.delete(reverse("customer-detail", args=[self.customer.id]))

        self.assertEqual(response.status_code, status.HTTP_204_NO_CONTENT)
        self.customer.refresh_from_db()
        self.assertFalse(self.customer.is_active)

    def test_search(self):
        create_customer(self.location, name="Kidus")

        response = self.client.get(reverse("customer-list"), {"search": "kid"})

        self.assertEqual([row["name"] for row in response.data["data"]], ["Kidus"])

    def test_devices_and_stats(self):
        create_device(self.customer)

        devices = self.client.get(reverse("customer-devices", args=[self.customer.id]))
        stats = self.client.get(reverse("customer-stats", args=[self.customer.id]))

        self.assertEqual(len(devices.data), 1)
        self.assertEqual(stats.data["total_devices"], 1)


class CustomerCategoryViewSetTest(TestCase):
    def setUp(self):
        self.location = create_location()
        self.manager = create_user(role="manager", location=self.location)
        self.technician = create_user(role="technician", location=self.location)
        create_customer(self.location, occupation="Nurse")
        create_customer(self.location, occupation="Driver")
        self.client = APIClient()

    def test_manager_creates_category(self):
        self.client.force_authenticate(self.manager)

        response = self.client.post(
            reverse("customer-category-list"),
            {"name": "Nurses", "criteria": {"occupations": ["nurse"]}},
            format="json",
        )

        self.assertEqual(response.status_code, status.HTTP_201_CREATED)
        category = CustomerCategory.objects.get(name="Nurses")
        self.assertEqual(category.created_by, self.manager)

    def test_unknown_criterion_rejected(self):
        self.client.force_authenticate(self.manager)

        response = self.client.post(
            reverse("customer-category-list"),
            {"name": "Bad", "criteria": {"favouriteColour": "blue"}},
            format="json",
        )

        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)

    def test_technician_cannot_create(self):
        self.client.force_authenticate(self.technician)

        response = self.client.post(reverse("customer-category-list"), {"name": "X"}, format="json")

        self.assertEqual(response.status_code, status.HTTP_403_FORBIDDEN)

    def test_category_customers(self):
        category = CustomerCategory.objects.create(name="Drivers", criteria={"occupations": ["Driver"]})
        self.client.force_authenticate(self.technician)

        response = self.client.get(reverse("customer-category-customers", args=[category.id]))

        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data["count"], 1)

    def test_preview(self):
        self.client.force_authenticate(self.technician)

        response = self.client.post(
            reverse("customer-category-preview"), {"occupations": ["Nurse", "Driver"]}, format="json"
        )

        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data["count"], 2)
