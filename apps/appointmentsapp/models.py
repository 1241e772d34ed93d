import uuid
from datetime import timedelta

from django.conf import settings
from django.db import models
from django.utils.translation import gettext_lazy as _


class Appointment(models.Model):
    STATUS_CHOICES = (
        ("scheduled", _("Scheduled")),
        ("confirmed", _("Confirmed")),
        ("in_progress", _("In Progress")),
        ("completed", _("Completed")),
        ("cancelled", _("Cancelled")),
    )

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    customer = models.ForeignKey(
        "customersapp.Customer", on_delete=models.CASCADE, related_name="appointments"
    )
    location = models.ForeignKey(
        "locationsapp.Location", on_delete=models.PROTECT, related_name="appointments"
    )
    title = models.CharField(_("Title"), max_length=255)
    description = models.TextField(_("Description"), blank=True)
    appointment_date = models.DateTimeField(_("Appointment Date"))
    duration = models.PositiveIntegerField(_("Duration (minutes)"), default=60)
    status = models.CharField(_("Status"), max_length=20, choices=STATUS_CHOICES, default="scheduled")
    assigned_to = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.SET_NULL,
        related_name="assigned_appointments",
        null=True,
        blank=True,
    )
    created_by = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.SET_NULL,
        related_name="created_appointments",
        null=True,
        blank=True,
    )
    notes = models.TextField(_("Notes"), blank=True)
    created_at = models.DateTimeField(_("Created At"), auto_now_add=True)
    updated_at = models.DateTimeField(_("Updated At"), auto_now=True)

    class Meta:
        verbose_name = _("Appointment")
        verbose_name_plural = _("Appointments")
        ordering = ["appointment_date"]
        indexes = [
            models.Index(fields=["location", "appointment_date"]),
            models.Index(fields=["assigned_to", "appointment_date"]),
        ]

    def __str__(self):
        return f"{self.title} @ {self.appointment_date:%Y-%m-%d %H:%M}"

    @property
    def end_time(self):
        return self.appointment_date + timedelta(minutes=self.duration)
