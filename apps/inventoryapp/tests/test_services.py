from datetime import timedelta

from django.test import TestCase
from django.utils import timezone

from apps.inventoryapp.models import InventoryItem
from apps.inventoryapp.services.inventory_service import (
    InventoryService,
    days_until_stockout,
    risk_level,
)
from apps.inventoryapp.tasks import refresh_stock_predictions
from apps.notificationsapp.models import Notification
from apps.salesapp.services.sale_service import SaleService
from utils.exceptions import ValidationError
from utils.testing import create_admin, create_inventory_item, create_location


class StockMathTest(TestCase):
    def test_days_until_stockout(self):
        self.assertEqual(days_until_stockout(10, 0), -1)
        self.assertEqual(days_until_stockout(10, 3), 3)
        self.assertEqual(days_until_stockout(0, 2), 0)

    def test_risk_level(self):
        self.assertEqual(risk_level(0, 5, -1), "critical")
        self.assertEqual(risk_level(5, 5, -1), "high")
        self.assertEqual(risk_level(20, 5, 2), "high")
        self.assertEqual(risk_level(20, 5, 6), "medium")
        self.assertEqual(risk_level(20, 5, 30), "low")
        self.assertEqual(risk_level(20, 5, -1), "low")

    def test_selling_out_today_is_high_risk(self):
        self.assertEqual(risk_level(3, 1, 0), "high")
        self.assertEqual(risk_level(20, 5, 0), "high")


class InventoryServiceTest(TestCase):
    def setUp(self):
        self.location = create_location()
        self.item = create_inventory_item(self.location, name="Battery", quantity=10, min_stock_level=2)

    def test_adjust_stock(self):
        item = InventoryService.adjust_stock(self.item, 5, reason="Delivery")
        self.assertEqual(item.quantity, 15)

        item = InventoryService.adjust_stock(item, -15)
        self.assertEqual(item.quantity, 0)

    def test_adjust_stock_cannot_go_negative(self):
        with self.assertRaises(ValidationError):
            InventoryService.adjust_stock(self.item, -11)

        self.item.refresh_from_db()
        self.assertEqual(self.item.quantity, 10)

    def test_low_stock_queryset(self):
        low = create_inventory_item(self.location, quantity=1, min_stock_level=3)
        create_inventory_item(self.location, quantity=1, min_stock_level=3, is_active=False)
        create_inventory_item(create_location(), quantity=0, min_stock_level=3)

        self.assertEqual(list(InventoryService.low_stock_queryset(self.location.id)), [low])

    def _sell(self, item, quantity, days_ago=0):
        sale = SaleService.create_sale(self.location.id, [{"inventory_item": item, "quantity": quantity}])
        if days_ago:
            type(sale).objects.filter(pk=sale.pk).update(created_at=timezone.now() - timedelta(days=days_ago))
        item.refresh_from_db()
        return sale

    def test_predictions_use_thirty_day_sales(self):
        self._sell(self.item, 6)
        self._sell(self.item, 3, days_ago=45)

        prediction = next(
            p for p in InventoryService.get_predictions(self.location.id) if p["sku"] == self.item.sku
        )

        self.assertEqual(prediction["current_stock"], 1)
        self.assertEqual(prediction["avg_daily_sales"], 0.2)
        self.assertEqual(prediction["days_until_stockout"], 5)
        self.assertEqual(prediction["predicted_stockout_date"], timezone.localdate() + timedelta(days=5))
        self.assertEqual(prediction["risk_level"], "high")

    def test_predictions_sorted_by_risk(self):
        create_inventory_item(self.location, name="Empty", quantity=0)

        predictions = InventoryService.get_predictions(self.location.id)

        self.assertEqual(predictions[0]["name"], "Empty")
        self.assertEqual(predictions[0]["risk_level"], "critical")
        self.assertIsNone(predictions[-1]["predicted_stockout_date"])

    def test_alerts(self):
        item = create_inventory_item(
            self.location, name="Screen", quantity=0, min_stock_level=2, reorder_point=3, reorder_quantity=20
        )

        alerts = [a for a in InventoryService.get_alerts(self.location.id) if a["item_id"] == str(item.id)]

        self.assertEqual([a["type"] for a in alerts], ["low_stock", "reorder_required"])
        self.assertEqual(alerts[0]["priority"], "critical")
        self.assertEqual(alerts[0]["message"], "Screen is out of stock")
        self.assertEqual(alerts[1]["message"], "Reorder 20 units of Screen")

    def test_predicted_stockout_alert(self):
        item = create_inventory_item(self.location, name="Glass", quantity=62, min_stock_level=1, reorder_point=1)
        self._sell(item, 60)

        alerts = [a for a in InventoryService.get_alerts(self.location.id) if a["item_id"] == str(item.id)]

        self.assertEqual(alerts[0]["type"], "predicted_stockout")
        self.assertEqual(alerts[0]["days_until_stockout"], 1)
        self.assertEqual(alerts[0]["priority"], "critical")

    def test_refresh_task_stores_predictions_and_notifies(self):
        admin = create_admin()
        self._sell(self.item, 9)

        result = refresh_stock_predictions()

        self.item.refresh_from_db()
        self.assertEqual(result["low_stock"], 1)
        self.assertEqual(str(self.item.avg_daily_sales), "0.30")
        self.assertEqual(self.item.predicted_stockout, timezone.localdate() + timedelta(days=3))
        self.assertTrue(
            Notification.objects.filter(recipient=admin, notification_type__name="low_stock").exists()
        )

    def test_deactivate(self):
        InventoryService.deactivate(self.item)

        self.assertFalse(InventoryItem.objects.get(pk=self.item.pk).is_active)
        self.assertFalse(InventoryService.active_queryset().exists())
