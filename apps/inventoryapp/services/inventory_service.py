"""
Stock levels, stockout prediction and inventory alerts.

Predictions use a plain moving average: units sold over the last 30 days
divided by 30.
"""

import logging
import math
from datetime import timedelta
from decimal import Decimal

from django.db import transaction
from django.db.models import F, Sum
from django.utils import timezone
from django.utils.translation import gettext_lazy as _

from apps.inventoryapp.models import InventoryItem
from utils.exceptions import ValidationError

logger = logging.getLogger(__name__)

SALES_WINDOW_DAYS = 30

RISK_CRITICAL = "critical"
RISK_HIGH = "high"
RISK_MEDIUM = "medium"
RISK_LOW = "low"

PRIORITY_ORDER = {RISK_CRITICAL: 0, RISK_HIGH: 1, RISK_MEDIUM: 2, RISK_LOW: 3}


def days_until_stockout(quantity, avg_daily_sales):
    """Whole days of stock left, or -1 when the item is not selling."""
    if not avg_daily_sales:
        return -1
    return math.floor(quantity / avg_daily_sales)


def risk_level(quantity, min_stock_level, days):
    if quantity == 0:
        return RISK_CRITICAL
    if quantity <= min_stock_level or 0 <= days <= 3:
        return RISK_HIGH
    if 0 <= days <= 7:
        return RISK_MEDIUM
    return RISK_LOW


class InventoryService:
    @staticmethod
    def active_queryset(location_id=None):
        queryset = InventoryItem.objects.filter(is_active=True)
        if location_id:
            queryset = queryset.filter(location_id=location_id)
        return queryset

    @classmethod
    def low_stock_queryset(cls, location_id=None):
        return cls.active_queryset(location_id).filter(quantity__lte=F("min_stock_level"))

    @staticmethod
    def public_queryset():
        return InventoryItem.objects.filter(is_active=True, is_public=True).select_related("location")

    @staticmethod
    def adjust_stock(item, delta, reason="", user=None):
        """
        Add ``delta`` (negative to remove) units to ``item``.

        Raises:
            ValidationError: if the result would be negative
        """
        with transaction.atomic():
            item = InventoryItem.objects.select_for_update().get(pk=item.pk)
            new_quantity = item.quantity + int(delta)
            if new_quantity < 0:
                raise ValidationError(
                    _("Insufficient stock"),
                    detail={"quantity": [f"Only {item.quantity} of {item.name} in stock."]},
                )
            item.quantity = new_quantity
            item.save(update_fields=["quantity", "updated_at"])

        logger.info(
            f"Stock of {item.sku} adjusted by {delta} to {new_quantity}"
            f" ({reason or 'no reason'}) by {getattr(user, 'username', 'system')}"
        )
        return item

    @staticmethod
    def deactivate(item):
        item.is_active = False
        item.save(update_fields=["is_active", "updated_at"])
        logger.info(f"Inventory item {item.sku} deactivated")

    @staticmethod
    def units_sold(item_ids, since):
        """Units sold per item id since ``since``."""
        from apps.salesapp.models import SaleItem

        rows = (
            SaleItem.objects.filter(inventory_item_id__in=item_ids, sale__created_at__gte=since)
            .values("inventory_item_id")
            .annotate(total=Sum("quantity"))
        )
        return {row["inventory_item_id"]: row["total"] or 0 for row in rows}

    @staticmethod
    def build_prediction(item, sold, today=None):
        today = today or timezone.localdate()
        avg = sold / SALES_WINDOW_DAYS
        days = days_until_stockout(item.quantity, avg)
        return {
            "item_id": str(item.id),
            "name": item.name,
            "sku": item.sku,
            "current_stock": item.quantity,
            "min_stock_level": item.min_stock_level,
            "reorder_point": item.reorder_point,
            "reorder_quantity": item.reorder_quantity,
            "avg_daily_sales": round(avg, 2),
            "days_until_stockout": days,
            "predicted_stockout_date": today + timedelta(days=days) if days >= 0 else None,
            "risk_level": risk_level(item.quantity, item.min_stock_level, days),
        }

    @classmethod
    def get_predictions(cls, location_id=None):
        items = list(cls.active_queryset(location_id))
        since = timezone.now() - timedelta(days=SALES_WINDOW_DAYS)
        sold = cls.units_sold([item.id for item in items], since)
        today = timezone.localdate()
        predictions = [cls.build_prediction(item, sold.get(item.id, 0), today) for item in items]
        return sorted(
            predictions, key=lambda p: (PRIORITY_ORDER[p["risk_level"]], p["name"].lower())
        )

    @classmethod
    def refresh_predictions(cls, location_id=None):
        """Store the current average and stockout date on every active item."""
        items = list(cls.active_queryset(location_id))
        since = timezone.now() - timedelta(days=SALES_WINDOW_DAYS)
        sold = cls.units_sold([item.id for item in items], since)
        today = timezone.localdate()

        for item in items:
            prediction = cls.build_prediction(item, sold.get(item.id, 0), today)
            item.avg_daily_sales = Decimal(str(prediction["avg_daily_sales"]))
            item.predicted_stockout = prediction["predicted_stockout_date"]
        InventoryItem.objects.bulk_update(items, ["avg_daily_sales", "predicted_stockout"])
        return len(items)

    @staticmethod
    def alerts_for(item, prediction):
        alerts = []
        days = prediction["days_until_stockout"]
        base = {
            "item_id": str(item.id),
            "item_name": item.name,
            "sku": item.sku,
            "current_stock": item.quantity,
            "days_until_stockout": days,
        }

        if item.quantity <= item.min_stock_level:
            alerts.append(
                dict(
                    base,
                    type="low_stock",
                    priority=RISK_CRITICAL if item.quantity == 0 else RISK_HIGH,
                    message=(
                        f"{item.name} is out of stock"
                        if item.quantity == 0
                        else f"{item.name} is low on stock ({item.quantity} left)"
                    ),
                )
            )
        if 1 <= days <= 7:
            alerts.append(
                dict(
                    base,
                    type="predicted_stockout",
                    priority=RISK_CRITICAL if days <= 3 else RISK_HIGH,
                    message=f"{item.name} is expected to run out in {days} days",
                )
            )
        if item.quantity <= item.reorder_point:
            alerts.append(
                dict(
                    base,
                    type="reorder_required",
                    priority=RISK_MEDIUM,
                    message=f"Reorder {item.reorder_quantity} units of {item.name}",
                )
            )
        return alerts

    @classmethod
    def get_alerts(cls, location_id=None):
        items = list(cls.active_queryset(location_id))
        since = timezone.now() - timedelta(days=SALES_WINDOW_DAYS)
        sold = cls.units_sold([item.id for item in items], since)
        today = timezone.localdate()

        alerts = []
        for item in items:
            prediction = cls.build_prediction(item, sold.get(item.id, 0), today)
            alerts.extend(cls.alerts_for(item, prediction))
        return sorted(alerts, key=lambda a: (PRIORITY_ORDER[a["priority"]], a["item_name"].lower()))
