import uuid

from django.conf import settings
from django.db import models
from django.utils.translation import gettext_lazy as _

from apps.smsapp.constants import (
    CAMPAIGN_DRAFT,
    CAMPAIGN_STATUS_CHOICES,
    CAMPAIGN_TARGET_CHOICES,
    LANGUAGE_CHOICES,
    PROVIDER_CHOICES,
    QUEUE_MESSAGE_TYPE_CHOICES,
    QUEUE_PENDING,
    QUEUE_STATUS_CHOICES,
)


class SmsTemplate(models.Model):
    """Customer SMS texts for one language."""

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    language = models.CharField(_("Language"), max_length=10, choices=LANGUAGE_CHOICES, unique=True)
    device_registration = models.TextField(_("Device Registration"))
    device_status_update = models.TextField(_("Device Status Update"))
    device_ready_for_pickup = models.TextField(_("Device Ready for Pickup"))
    is_active = models.BooleanField(_("Active"), default=True)
    created_at = models.DateTimeField(_("Created At"), auto_now_add=True)
    updated_at = models.DateTimeField(_("Updated At"), auto_now=True)

    class Meta:
        verbose_name = _("SMS Template")
        verbose_name_plural = _("SMS Templates")
        ordering = ["language"]

    def __str__(self):
        return self.get_language_display()


class EthiopianSmsSettings(models.Model):
    """
    Gateway credentials for the Ethiopian SMS backend. Only one row is used.
    """

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    provider = models.CharField(
        _("Provider"), max_length=20, choices=PROVIDER_CHOICES, default="africas_talking"
    )
    username = models.CharField(_("Username"), max_length=255, blank=True)
    password = models.CharField(_("Password"), max_length=255, blank=True)
    api_key = models.CharField(_("API Key"), max_length=255, blank=True)
    sender_id = models.CharField(_("Sender ID"), max_length=20, default="SolNet")
    base_url = models.URLField(_("Base URL"), blank=True)
    custom_endpoint = models.URLField(_("Custom Endpoint"), blank=True)
    custom_headers = models.JSONField(_("Custom Headers"), default=dict, blank=True)
    created_at = models.DateTimeField(_("Created At"), auto_now_add=True)
    updated_at = models.DateTimeField(_("Updated At"), auto_now=True)

    class Meta:
        verbose_name = _("Ethiopian SMS Settings")
        verbose_name_plural = _("Ethiopian SMS Settings")

    def __str__(self):
        return f"{self.get_provider_display()} ({self.sender_id})"

    @classmethod
    def load(cls):
        settings_row = cls.objects.first()
        if settings_row is None:
            settings_row = cls.objects.create()
        return settings_row

    def as_config(self):
        return {
            "provider": self.provider,
            "username": self.username,
            "password": self.password,
            "api_key": self.api_key,
            "sender_id": self.sender_id,
            "base_url": self.base_url,
            "custom_endpoint": self.custom_endpoint,
            "custom_headers": self.custom_headers or {},
        }


class SmsQueue(models.Model):
    """
    Outgoing SMS. Rows stay ``pending`` until sent or out of attempts.
    """

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    phone_number = models.CharField(_("Phone Number"), max_length=20)
    message = models.TextField(_("Message"))
    message_type = models.CharField(
        _("Message Type"), max_length=20, choices=QUEUE_MESSAGE_TYPE_CHOICES, default="manual"
    )
    status = models.CharField(
        _("Status"), max_length=10, choices=QUEUE_STATUS_CHOICES, default=QUEUE_PENDING
    )
    attempts = models.PositiveSmallIntegerField(_("Attempts"), default=0)
    max_attempts = models.PositiveSmallIntegerField(_("Max Attempts"), default=3)
    last_attempt_at = models.DateTimeField(_("Last Attempt At"), null=True, blank=True)
    error_message = models.TextField(_("Error Message"), blank=True)
    metadata = models.JSONField(_("Metadata"), default=dict, blank=True)
    sent_at = models.DateTimeField(_("Sent At"), null=True, blank=True)
    created_at = models.DateTimeField(_("Created At"), auto_now_add=True)
    updated_at = models.DateTimeField(_("Updated At"), auto_now=True)

    class Meta:
        verbose_name = _("SMS Queue Entry")
        verbose_name_plural = _("SMS Queue")
        ordering = ["-created_at"]
        indexes = [models.Index(fields=["status", "created_at"])]

    def __str__(self):
        return f"{self.phone_number} [{self.status}]"


class RecipientGroup(models.Model):
    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    name = models.CharField(_("Name"), max_length=100, unique=True)
    description = models.TextField(_("Description"), blank=True)
    is_active = models.BooleanField(_("Active"), default=True)
    customers = models.ManyToManyField(
        "customersapp.Customer",
        through="RecipientGroupMember",
        related_name="recipient_groups",
        blank=True,
    )
    created_by = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.SET_NULL,
        related_name="recipient_groups",
        null=True,
        blank=True,
    )
    created_at = models.DateTimeField(_("Created At"), auto_now_add=True)
    updated_at = models.DateTimeField(_("Updated At"), auto_now=True)

    class Meta:
        verbose_name = _("Recipient Group")
        verbose_name_plural = _("Recipient Groups")
        ordering = ["name"]

    def __str__(self):
        return self.name


class RecipientGroupMember(models.Model):
    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    group = models.ForeignKey(RecipientGroup, on_delete=models.CASCADE, related_name="members")
    customer = models.ForeignKey(
        "customersapp.Customer", on_delete=models.CASCADE, related_name="group_memberships"
    )
    added_at = models.DateTimeField(_("Added At"), auto_now_add=True)

    class Meta:
        verbose_name = _("Recipient Group Member")
        verbose_name_plural = _("Recipient Group Members")
        unique_together = ("group", "customer")

    def __str__(self):
        return f"{self.customer_id} in {self.group_id}"


class SmsCampaign(models.Model):
    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    name = models.CharField(_("Name"), max_length=255)
    message = models.TextField(_("Message"))
    target_group = models.CharField(
        _("Target Group"), max_length=20, choices=CAMPAIGN_TARGET_CHOICES, default="all"
    )
    category = models.ForeignKey(
        "customersapp.CustomerCategory",
        on_delete=models.SET_NULL,
        related_name="campaigns",
        null=True,
        blank=True,
    )
    recipient_group = models.ForeignKey(
        RecipientGroup,
        on_delete=models.SET_NULL,
        related_name="campaigns",
        null=True,
        blank=True,
    )
    custom_filters = models.JSONField(_("Custom Filters"), default=dict, blank=True)
    occasion = models.CharField(_("Occasion"), max_length=100, blank=True)
    scheduled_date = models.DateTimeField(_("Scheduled Date"), null=True, blank=True)
    status = models.CharField(
        _("Status"), max_length=10, choices=CAMPAIGN_STATUS_CHOICES, default=CAMPAIGN_DRAFT
    )
    total_count = models.PositiveIntegerField(_("Total Recipients"), default=0)
    sent_count = models.PositiveIntegerField(_("Sent"), default=0)
    sent_at = models.DateTimeField(_("Sent At"), null=True, blank=True)
    created_by = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.SET_NULL,
        related_name="sms_campaigns",
        null=True,
        blank=True,
    )
    created_at = models.DateTimeField(_("Created At"), auto_now_add=True)
    updated_at = models.DateTimeField(_("Updated At"), auto_now=True)

    class Meta:
        verbose_name = _("SMS Campaign")
        verbose_name_plural = _("SMS Campaigns")
        ordering = ["-created_at"]

    def __str__(self):
        return self.name


class SmsCampaignRecipient(models.Model):
    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    campaign = models.ForeignKey(SmsCampaign, on_delete=models.CASCADE, related_name="recipients")
    customer = models.ForeignKey(
        "customersapp.Customer",
        on_delete=models.SET_NULL,
        related_name="campaign_messages",
        null=True,
        blank=True,
    )
    phone_number = models.CharField(_("Phone Number"), max_length=20)
    status = models.CharField(
        _("Status"), max_length=10, choices=QUEUE_STATUS_CHOICES, default=QUEUE_PENDING
    )
    queue_entry = models.ForeignKey(
        SmsQueue,
        on_delete=models.SET_NULL,
        related_name="campaign_recipients",
        null=True,
        blank=True,
    )
    sent_at = models.DateTimeField(_("Sent At"), null=True, blank=True)
    error_message = models.TextField(_("Error Message"), blank=True)

    class Meta:
        verbose_name = _("SMS Campaign Recipient")
        verbose_name_plural = _("SMS Campaign Recipients")
        unique_together = ("campaign", "phone_number")

    def __str__(self):
        return f"{self.phone_number} ({self.status})"
