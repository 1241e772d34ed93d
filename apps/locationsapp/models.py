import uuid

from django.db import models
from django.utils.translation import gettext_lazy as _


def default_business_hours():
    weekday = {"open": "08:30", "close": "18:00", "closed": False}
    return {
        "monday": dict(weekday),
        "tuesday": dict(weekday),
        "wednesday": dict(weekday),
        "thursday": dict(weekday),
        "friday": dict(weekday),
        "saturday": {"open": "09:00", "close": "14:00", "closed": False},
        "sunday": {"open": None, "close": None, "closed": True},
    }


class Location(models.Model):
    """
    A physical repair shop branch. Every operational record belongs to one.
    """

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    name = models.CharField(_("Name"), max_length=255)
    code = models.CharField(
        _("Code"),
        max_length=10,
        unique=True,
        help_text=_("Short branch code printed on receipts, e.g. ADD01"),
    )
    address = models.TextField(_("Address"))
    city = models.CharField(_("City"), max_length=100)
    state = models.CharField(_("State"), max_length=100, blank=True)
    zip_code = models.CharField(_("ZIP Code"), max_length=20, blank=True)
    country = models.CharField(_("Country"), max_length=100, default="USA")
    phone = models.CharField(_("Phone"), max_length=20, blank=True)
    email = models.EmailField(_("Email"), blank=True)
    manager_name = models.CharField(_("Manager Name"), max_length=255, blank=True)
    is_active = models.BooleanField(_("Active"), default=True)
    timezone = models.CharField(_("Timezone"), max_length=64, default="America/New_York")
    business_hours = models.JSONField(_("Business Hours"), default=default_business_hours, blank=True)
    notes = models.TextField(_("Notes"), blank=True)
    created_at = models.DateTimeField(_("Created At"), auto_now_add=True)
    updated_at = models.DateTimeField(_("Updated At"), auto_now=True)

    class Meta:
        verbose_name = _("Location")
        verbose_name_plural = _("Locations")
        ordering = ["name"]
        indexes = [
            models.Index(fields=["is_active"]),
        ]

    def __str__(self):
        return f"{self.name} ({self.code})"

    def save(self, *args, **kwargs):
        self.code = (self.code or "").strip().upper()
        super().save(*args, **kwargs)
