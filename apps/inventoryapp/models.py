import uuid

from django.core.validators import MinValueValidator
from django.db import models
from django.utils.translation import gettext_lazy as _


class InventoryItem(models.Model):
    """
    A stocked part or accessory at one location.

    ``avg_daily_sales`` and ``predicted_stockout`` are refreshed nightly from
    the last 30 days of sales.
    """

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    location = models.ForeignKey(
        "locationsapp.Location", on_delete=models.PROTECT, related_name="inventory_items"
    )
    name = models.CharField(_("Name"), max_length=255)
    sku = models.CharField(_("SKU"), max_length=64, unique=True)
    description = models.TextField(_("Description"), blank=True)
    category = models.CharField(_("Category"), max_length=100, blank=True)
    brand = models.CharField(_("Brand"), max_length=100, blank=True)
    model = models.CharField(_("Model"), max_length=100, blank=True)
    purchase_price = models.DecimalField(
        _("Purchase Price"), max_digits=10, decimal_places=2, default=0,
        validators=[MinValueValidator(0)],
    )
    sale_price = models.DecimalField(
        _("Sale Price"), max_digits=10, decimal_places=2, default=0,
        validators=[MinValueValidator(0)],
    )
    quantity = models.PositiveIntegerField(_("Quantity"), default=0)
    min_stock_level = models.PositiveIntegerField(_("Minimum Stock Level"), default=10)
    reorder_point = models.PositiveIntegerField(_("Reorder Point"), default=15)
    reorder_quantity = models.PositiveIntegerField(_("Reorder Quantity"), default=50)
    lead_time_days = models.PositiveIntegerField(_("Lead Time (days)"), default=7)
    avg_daily_sales = models.DecimalField(
        _("Average Daily Sales"), max_digits=10, decimal_places=2, default=0
    )
    predicted_stockout = models.DateField(_("Predicted Stockout"), null=True, blank=True)
    supplier = models.CharField(_("Supplier"), max_length=255, blank=True)
    barcode = models.CharField(_("Barcode"), max_length=64, blank=True)
    is_public = models.BooleanField(_("Public"), default=False)
    is_active = models.BooleanField(_("Active"), default=True)
    created_at = models.DateTimeField(_("Created At"), auto_now_add=True)
    updated_at = models.DateTimeField(_("Updated At"), auto_now=True)

    class Meta:
        verbose_name = _("Inventory Item")
        verbose_name_plural = _("Inventory Items")
        ordering = ["name"]
        indexes = [
            models.Index(fields=["location", "is_active"]),
            models.Index(fields=["category"]),
        ]

    def __str__(self):
        return f"{self.name} ({self.sku})"

    @property
    def is_low_stock(self):
        return self.quantity <= self.min_stock_level
