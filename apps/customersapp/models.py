import uuid

from django.conf import settings
from django.db import models
from django.utils import timezone
from django.utils.translation import gettext_lazy as _

from apps.authapp.validators import validate_phone_number


class Customer(models.Model):
    """
    A repair shop customer. Customers never log in; staff create them at intake.
    """

    GENDER_CHOICES = (
        ("male", _("Male")),
        ("female", _("Female")),
        ("other", _("Other")),
    )

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    name = models.CharField(_("Name"), max_length=255, blank=True)
    first_name = models.CharField(_("First Name"), max_length=150, blank=True)
    last_name = models.CharField(_("Last Name"), max_length=150, blank=True)
    email = models.EmailField(_("Email"), blank=True)
    phone = models.CharField(_("Phone"), max_length=20, validators=[validate_phone_number])
    address = models.TextField(_("Address"), blank=True)
    city = models.CharField(_("City"), max_length=100, blank=True)
    state = models.CharField(_("State"), max_length=100, blank=True)
    zip_code = models.CharField(_("ZIP Code"), max_length=20, blank=True)
    country = models.CharField(_("Country"), max_length=100, blank=True)
    date_of_birth = models.DateField(_("Date of Birth"), null=True, blank=True)
    gender = models.CharField(_("Gender"), max_length=10, choices=GENDER_CHOICES, blank=True)
    occupation = models.CharField(_("Occupation"), max_length=100, blank=True)
    notes = models.TextField(_("Notes"), blank=True)
    is_active = models.BooleanField(_("Active"), default=True)
    location = models.ForeignKey(
        "locationsapp.Location",
        on_delete=models.PROTECT,
        related_name="customers",
        verbose_name=_("Location"),
    )
    registration_date = models.DateTimeField(_("Registration Date"), default=timezone.now)
    created_at = models.DateTimeField(_("Created At"), auto_now_add=True)
    updated_at = models.DateTimeField(_("Updated At"), auto_now=True)

    class Meta:
        verbose_name = _("Customer")
        verbose_name_plural = _("Customers")
        ordering = ["-created_at"]
        indexes = [
            models.Index(fields=["phone"]),
            models.Index(fields=["location", "is_active"]),
            models.Index(fields=["created_at"]),
        ]

    def __str__(self):
        return f"{self.name} ({self.phone})"

    def save(self, *args, **kwargs):
        if not self.name:
            self.name = f"{self.first_name} {self.last_name}".strip()
        super().save(*args, **kwargs)


class CustomerCategory(models.Model):
    """
    A saved customer filter used to target SMS campaigns.

    ``criteria`` keys: locations, deviceTypes, minSpending, maxSpending,
    lastVisitDays, ageMin, ageMax, occupations.
    """

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    name = models.CharField(_("Name"), max_length=100, unique=True)
    description = models.TextField(_("Description"), blank=True)
    criteria = models.JSONField(_("Criteria"), default=dict, blank=True)
    color = models.CharField(_("Color"), max_length=7, default="#3B82F6")
    is_active = models.BooleanField(_("Active"), default=True)
    created_by = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.SET_NULL,
        related_name="customer_categories",
        null=True,
        blank=True,
    )
    created_at = models.DateTimeField(_("Created At"), auto_now_add=True)
    updated_at = models.DateTimeField(_("Updated At"), auto_now=True)

    class Meta:
        verbose_name = _("Customer Category")
        verbose_name_plural = _("Customer Categories")
        ordering = ["name"]

    def __str__(self):
        return self.name
