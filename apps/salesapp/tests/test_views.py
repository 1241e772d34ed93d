from decimal import Decimal

from django.test import TestCase
from django.urls import reverse
from rest_framework import status
from rest_framework.test import APIClient

from apps.salesapp.services.sale_service import SaleService
from utils.testing import create_admin, create_inventory_item, create_location, create_user


class SaleViewSetTest(TestCase):
    def setUp(self):
        self.location = create_location()
        self.user = create_user(location=self.location)
        self.item = create_inventory_item(self.location, quantity=5, sale_price=Decimal("120.00"))
        self.client = APIClient()
        self.client.force_authenticate(self.user)

    def test_record_sale(self):
        response = self.client.post(
            reverse("sale-list"),
            {"items": [{"inventory_item": str(self.item.pk), "quantity": 2}], "payment_method": "mobile_money"},
            format="json",
        )

        self.assertEqual(response.status_code, status.HTTP_201_CREATED)
        self.assertEqual(response.data["total_amount"], "240.00")
        self.assertEqual(response.data["sales_person"], self.user.id)
        self.assertEqual(response.data["items"][0]["item_name"], self.item.name)
        self.item.refresh_from_db()
        self.assertEqual(self.item.quantity, 3)

    def test_overselling_rejected(self):
        response = self.client.post(
            reverse("sale-list"),
            {"items": [{"inventory_item": str(self.item.pk), "quantity": 6}]},
            format="json",
        )

        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertIn("errors", response.data)

    def test_sales_are_read_only(self):
        sale = SaleService.create_sale(self.location.id, [{"inventory_item": self.item, "quantity": 1}])

        response = self.client.delete(reverse("sale-detail", args=[sale.pk]))

        self.assertEqual(response.status_code, status.HTTP_405_METHOD_NOT_ALLOWED)

    def test_today_scoped_to_location(self):
        SaleService.create_sale(self.location.id, [{"inventory_item": self.item, "quantity": 1}])
        other = create_location()
        SaleService.create_sale(other.id, [{"inventory_item": create_inventory_item(other), "quantity": 1}])

        response = self.client.get(reverse("sale-today"))

        self.assertEqual(response.data["count"], 1)
        self.assertEqual(response.data["total"], Decimal("120.00"))

    def test_admin_sees_all_locations(self):
        SaleService.create_sale(self.location.id, [{"inventory_item": self.item, "quantity": 1}])
        other = create_location()
        SaleService.create_sale(other.id, [{"inventory_item": create_inventory_item(other), "quantity": 1}])
        client = APIClient()
        client.force_authenticate(create_admin())

        response = client.get(reverse("sale-list"), HTTP_X_SELECTED_LOCATION="all")

        self.assertEqual(response.data["pagination"]["total"], 2)
