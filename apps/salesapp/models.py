import uuid

from django.conf import settings
from django.db import models
from django.utils.translation import gettext_lazy as _

MONEY = {"max_digits": 12, "decimal_places": 2, "default": 0}


class Sale(models.Model):
    PAYMENT_METHOD_CHOICES = (
        ("cash", _("Cash")),
        ("card", _("Card")),
        ("mobile_money", _("Mobile Money")),
        ("bank_transfer", _("Bank Transfer")),
    )
    PAYMENT_STATUS_CHOICES = (
        ("pending", _("Pending")),
        ("paid", _("Paid")),
        ("partial", _("Partial")),
        ("refunded", _("Refunded")),
    )

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    location = models.ForeignKey(
        "locationsapp.Location", on_delete=models.PROTECT, related_name="sales"
    )
    customer = models.ForeignKey(
        "customersapp.Customer",
        on_delete=models.SET_NULL,
        related_name="sales",
        null=True,
        blank=True,
    )
    subtotal = models.DecimalField(_("Subtotal"), **MONEY)
    tax_amount = models.DecimalField(_("Tax"), **MONEY)
    discount_amount = models.DecimalField(_("Discount"), **MONEY)
    total_amount = models.DecimalField(_("Total"), **MONEY)
    payment_method = models.CharField(
        _("Payment Method"), max_length=20, choices=PAYMENT_METHOD_CHOICES, default="cash"
    )
    payment_status = models.CharField(
        _("Payment Status"), max_length=10, choices=PAYMENT_STATUS_CHOICES, default="paid"
    )
    notes = models.TextField(_("Notes"), blank=True)
    sales_person = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.SET_NULL,
        related_name="sales",
        null=True,
        blank=True,
    )
    created_at = models.DateTimeField(_("Created At"), auto_now_add=True)
    updated_at = models.DateTimeField(_("Updated At"), auto_now=True)

    class Meta:
        verbose_name = _("Sale")
        verbose_name_plural = _("Sales")
        ordering = ["-created_at"]
        indexes = [models.Index(fields=["location", "created_at"])]

    def __str__(self):
        return f"Sale {self.id} - {self.total_amount}"


class SaleItem(models.Model):
    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    sale = models.ForeignKey(Sale, on_delete=models.CASCADE, related_name="items")
    inventory_item = models.ForeignKey(
        "inventoryapp.InventoryItem", on_delete=models.PROTECT, related_name="sale_items"
    )
    quantity = models.PositiveIntegerField(_("Quantity"))
    unit_price = models.DecimalField(_("Unit Price"), max_digits=10, decimal_places=2)
    total_price = models.DecimalField(_("Total Price"), max_digits=12, decimal_places=2)

    class Meta:
        verbose_name = _("Sale Item")
        verbose_name_plural = _("Sale Items")

    def __str__(self):
        return f"{self.quantity} x {self.inventory_item_id}"
