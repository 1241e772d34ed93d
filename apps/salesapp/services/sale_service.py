import logging
from decimal import Decimal

from django.db import transaction
from django.db.models import Sum
from django.utils import timezone
from django.utils.translation import gettext_lazy as _

from apps.customersapp.services.customer_service import CustomerService
from apps.inventoryapp.models import InventoryItem
from apps.salesapp.models import Sale, SaleItem
from utils.exceptions import ValidationError

logger = logging.getLogger(__name__)

ZERO = Decimal("0.00")


def sale_total(subtotal, tax_amount, discount_amount):
    """subtotal + tax - discount, floored at zero."""
    total = Decimal(subtotal) + Decimal(tax_amount or 0) - Decimal(discount_amount or 0)
    return max(total, ZERO)


class SaleService:
    @staticmethod
    @transaction.atomic
    def create_sale(
        location_id,
        items,
        customer=None,
        tax_amount=ZERO,
        discount_amount=ZERO,
        payment_method="cash",
        payment_status="paid",
        notes="",
        sales_person=None,
    ):
        """
        Record a sale and take the sold units out of stock.

        Args:
            location_id: location the sale happens at
            items: list of dicts with ``inventory_item`` (id or instance),
                ``quantity`` and optional ``unit_price``
            customer: optional Customer

        Raises:
            ValidationError: empty cart, customer or item from another
                location, or not enough stock
        """
        if not items:
            raise ValidationError(_("A sale needs at least one item"), detail={"items": ["This list may not be empty."]})
        CustomerService.ensure_at_location(customer, location_id)

        item_ids = [getattr(line["inventory_item"], "pk", line["inventory_item"]) for line in items]
        stock = {
            item.pk: item
            for item in InventoryItem.objects.select_for_update().filter(
                pk__in=item_ids, is_active=True
            )
        }

        lines = []
        errors = {}
        # Units still unclaimed by earlier lines of this cart
        remaining = {}
        for item_id, line in zip(item_ids, items):
            item = stock.get(item_id)
            if item is None or item.location_id != location_id:
                errors[str(item_id)] = "Item is not available at this location."
                continue
            quantity = int(line["quantity"])
            available = remaining.setdefault(item_id, item.quantity)
            if quantity > available:
                errors[str(item_id)] = f"Only {available} of {item.name} in stock."
                continue
            remaining[item_id] = available - quantity
            unit_price = line.get("unit_price")
            unit_price = item.sale_price if unit_price is None else Decimal(unit_price)
            lines.append((item, quantity, unit_price))
        if errors:
            raise ValidationError(_("Some items cannot be sold"), detail={"items": errors})

        subtotal = sum((unit_price * quantity for _item, quantity, unit_price in lines), ZERO)
        sale = Sale.objects.create(
            location_id=location_id,
            customer=customer,
            subtotal=subtotal,
            tax_amount=tax_amount or ZERO,
            discount_amount=discount_amount or ZERO,
            total_amount=sale_total(subtotal, tax_amount, discount_amount),
            payment_method=payment_method,
            payment_status=payment_status,
            notes=notes or "",
            sales_person=sales_person,
        )

        for item, quantity, unit_price in lines:
            SaleItem.objects.create(
                sale=sale,
                inventory_item=item,
                quantity=quantity,
                unit_price=unit_price,
                total_price=unit_price * quantity,
            )
            item.quantity -= quantity
            item.save(update_fields=["quantity", "updated_at"])

        logger.info(f"Sale {sale.id} recorded: {len(lines)} lines, total {sale.total_amount}")
        return sale

    @staticmethod
    def todays_sales(location_id=None):
        queryset = Sale.objects.filter(created_at__date=timezone.localdate())
        if location_id:
            queryset = queryset.filter(location_id=location_id)
        return queryset

    @classmethod
    def todays_revenue(cls, location_id=None):
        return cls.todays_sales(location_id).aggregate(total=Sum("total_amount"))["total"] or ZERO
