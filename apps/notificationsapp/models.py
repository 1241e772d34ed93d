"""
Notification Models

In-app notifications for staff, the types they belong to, optional
per-type text templates and per-user channel preferences.
"""

import uuid

from django.conf import settings
from django.db import models
from django.utils import timezone
from django.utils.translation import gettext_lazy as _

from apps.notificationsapp.constants import (
    CATEGORY_CHOICES,
    PRIORITY_CHOICES,
    PRIORITY_NORMAL,
    STATUS_CHOICES,
    STATUS_UNREAD,
)


class NotificationType(models.Model):
    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    name = models.CharField(_("Name"), max_length=50, unique=True)
    category = models.CharField(_("Category"), max_length=20, choices=CATEGORY_CHOICES, default="system")
    description = models.TextField(_("Description"), blank=True)
    default_priority = models.CharField(
        _("Default Priority"), max_length=10, choices=PRIORITY_CHOICES, default=PRIORITY_NORMAL
    )
    is_active = models.BooleanField(_("Active"), default=True)
    created_at = models.DateTimeField(_("Created At"), auto_now_add=True)

    class Meta:
        verbose_name = _("Notification Type")
        verbose_name_plural = _("Notification Types")
        ordering = ["category", "name"]

    def __str__(self):
        return self.name


class NotificationTemplate(models.Model):
    """
    Default title and message for a notification type, with ``{variable}``
    placeholders filled from the notification data.
    """

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    notification_type = models.ForeignKey(
        NotificationType, on_delete=models.CASCADE, related_name="templates"
    )
    title = models.CharField(_("Title"), max_length=255)
    message = models.TextField(_("Message"))
    variables = models.JSONField(
        _("Variables"),
        default=list,
        blank=True,
        help_text="List of available variables for this template",
    )
    is_active = models.BooleanField(_("Active"), default=True)
    created_at = models.DateTimeField(_("Created At"), auto_now_add=True)
    updated_at = models.DateTimeField(_("Updated At"), auto_now=True)

    class Meta:
        verbose_name = _("Notification Template")
        verbose_name_plural = _("Notification Templates")
        ordering = ["-updated_at"]

    def __str__(self):
        return f"{self.notification_type.name}: {self.title}"


class Notification(models.Model):
    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    recipient = models.ForeignKey(
        settings.AUTH_USER_MODEL, on_delete=models.CASCADE, related_name="notifications"
    )
    sender = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.SET_NULL,
        related_name="sent_notifications",
        null=True,
        blank=True,
    )
    notification_type = models.ForeignKey(
        NotificationType, on_delete=models.CASCADE, related_name="notifications"
    )
    title = models.CharField(_("Title"), max_length=255)
    message = models.TextField(_("Message"))
    status = models.CharField(_("Status"), max_length=10, choices=STATUS_CHOICES, default=STATUS_UNREAD)
    priority = models.CharField(
        _("Priority"), max_length=10, choices=PRIORITY_CHOICES, default=PRIORITY_NORMAL
    )
    data = models.JSONField(_("Data"), default=dict, blank=True)
    read_at = models.DateTimeField(_("Read At"), null=True, blank=True)
    expires_at = models.DateTimeField(_("Expires At"), null=True, blank=True)
    related_entity_type = models.CharField(_("Related Entity Type"), max_length=50, blank=True)
    related_entity_id = models.CharField(_("Related Entity ID"), max_length=64, blank=True)
    created_at = models.DateTimeField(_("Created At"), auto_now_add=True)

    class Meta:
        verbose_name = _("Notification")
        verbose_name_plural = _("Notifications")
        ordering = ["-created_at"]
        indexes = [
            models.Index(fields=["recipient", "status"]),
            models.Index(fields=["created_at"]),
            models.Index(fields=["expires_at"]),
        ]

    def __str__(self):
        return f"{self.notification_type.name}: {self.title}"

    @property
    def is_expired(self):
        return bool(self.expires_at and self.expires_at <= timezone.now())


class NotificationPreference(models.Model):
    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    user = models.ForeignKey(
        settings.AUTH_USER_MODEL, on_delete=models.CASCADE, related_name="notification_preferences"
    )
    notification_type = models.ForeignKey(
        NotificationType, on_delete=models.CASCADE, related_name="preferences"
    )
    enabled = models.BooleanField(_("Enabled"), default=True)
    email = models.BooleanField(_("Email"), default=True)
    sms = models.BooleanField(_("SMS"), default=False)
    push = models.BooleanField(_("Push"), default=True)
    in_app = models.BooleanField(_("In-App"), default=True)
    updated_at = models.DateTimeField(_("Updated At"), auto_now=True)

    class Meta:
        verbose_name = _("Notification Preference")
        verbose_name_plural = _("Notification Preferences")
        unique_together = ("user", "notification_type")

    def __str__(self):
        return f"{self.user_id} / {self.notification_type_id}"
