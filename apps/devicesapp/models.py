import uuid

from django.conf import settings
from django.core.validators import MaxValueValidator, MinValueValidator
from django.db import models
from django.utils.translation import gettext_lazy as _
from model_utils import FieldTracker

from apps.devicesapp.constants import (
    DEVICE_STATUS_CHOICES,
    PAYMENT_PENDING,
    PAYMENT_STATUS_CHOICES,
    PRIORITY_CHOICES,
    PRIORITY_NORMAL,
    STATUS_REGISTERED,
)

SCORE_VALIDATORS = [MinValueValidator(1), MaxValueValidator(5)]


class DeviceType(models.Model):
    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    name = models.CharField(_("Name"), max_length=100, unique=True)
    category = models.CharField(_("Category"), max_length=100, blank=True)
    description = models.TextField(_("Description"), blank=True)
    is_active = models.BooleanField(_("Active"), default=True)
    created_at = models.DateTimeField(_("Created At"), auto_now_add=True)
    updated_at = models.DateTimeField(_("Updated At"), auto_now=True)

    class Meta:
        verbose_name = _("Device Type")
        verbose_name_plural = _("Device Types")
        ordering = ["name"]

    def __str__(self):
        return self.name


class Brand(models.Model):
    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    name = models.CharField(_("Name"), max_length=100, unique=True)
    description = models.TextField(_("Description"), blank=True)
    website = models.URLField(_("Website"), blank=True)
    is_active = models.BooleanField(_("Active"), default=True)
    created_at = models.DateTimeField(_("Created At"), auto_now_add=True)
    updated_at = models.DateTimeField(_("Updated At"), auto_now=True)

    class Meta:
        verbose_name = _("Brand")
        verbose_name_plural = _("Brands")
        ordering = ["name"]

    def __str__(self):
        return self.name


class DeviceModel(models.Model):
    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    name = models.CharField(_("Name"), max_length=100)
    brand = models.ForeignKey(Brand, on_delete=models.CASCADE, related_name="models")
    device_type = models.ForeignKey(DeviceType, on_delete=models.CASCADE, related_name="models")
    specifications = models.JSONField(_("Specifications"), default=dict, blank=True)
    release_year = models.PositiveIntegerField(_("Release Year"), null=True, blank=True)
    is_active = models.BooleanField(_("Active"), default=True)
    created_at = models.DateTimeField(_("Created At"), auto_now_add=True)
    updated_at = models.DateTimeField(_("Updated At"), auto_now=True)

    class Meta:
        verbose_name = _("Device Model")
        verbose_name_plural = _("Device Models")
        ordering = ["brand__name", "name"]
        unique_together = ("brand", "name")

    def __str__(self):
        return f"{self.brand.name} {self.name}"


class ServiceType(models.Model):
    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    name = models.CharField(_("Name"), max_length=100, unique=True)
    category = models.CharField(_("Category"), max_length=100, blank=True)
    description = models.TextField(_("Description"), blank=True)
    base_price = models.DecimalField(_("Base Price"), max_digits=10, decimal_places=2, default=0)
    estimated_duration = models.PositiveIntegerField(
        _("Estimated Duration (minutes)"), null=True, blank=True
    )
    is_public = models.BooleanField(_("Public"), default=True)
    is_active = models.BooleanField(_("Active"), default=True)
    created_at = models.DateTimeField(_("Created At"), auto_now_add=True)
    updated_at = models.DateTimeField(_("Updated At"), auto_now=True)

    class Meta:
        verbose_name = _("Service Type")
        verbose_name_plural = _("Service Types")
        ordering = ["name"]

    def __str__(self):
        return self.name


class PredefinedProblem(models.Model):
    SEVERITY_CHOICES = (
        ("low", _("Low")),
        ("medium", _("Medium")),
        ("high", _("High")),
        ("critical", _("Critical")),
    )

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    name = models.CharField(_("Name"), max_length=150)
    description = models.TextField(_("Description"), blank=True)
    category = models.CharField(_("Category"), max_length=100, blank=True)
    device_type = models.ForeignKey(
        DeviceType,
        on_delete=models.SET_NULL,
        related_name="problems",
        null=True,
        blank=True,
    )
    estimated_cost = models.DecimalField(
        _("Estimated Cost"), max_digits=10, decimal_places=2, null=True, blank=True
    )
    estimated_duration = models.PositiveIntegerField(
        _("Estimated Duration (minutes)"), null=True, blank=True
    )
    severity = models.CharField(_("Severity"), max_length=10, choices=SEVERITY_CHOICES, default="medium")
    is_active = models.BooleanField(_("Active"), default=True)
    created_at = models.DateTimeField(_("Created At"), auto_now_add=True)
    updated_at = models.DateTimeField(_("Updated At"), auto_now=True)

    class Meta:
        verbose_name = _("Predefined Problem")
        verbose_name_plural = _("Predefined Problems")
        ordering = ["category", "name"]

    def __str__(self):
        return self.name


class Device(models.Model):
    """
    A device left at a branch for repair.

    Catalogue links are optional: staff may type the device type, brand and
    model by hand when the catalogue has no entry, in which case only the
    ``*_name`` fields are filled.
    """

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    customer = models.ForeignKey(
        "customersapp.Customer", on_delete=models.PROTECT, related_name="devices"
    )
    location = models.ForeignKey(
        "locationsapp.Location", on_delete=models.PROTECT, related_name="devices"
    )
    assigned_to = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.SET_NULL,
        related_name="assigned_devices",
        null=True,
        blank=True,
    )
    device_type = models.ForeignKey(
        DeviceType, on_delete=models.SET_NULL, related_name="devices", null=True, blank=True
    )
    brand = models.ForeignKey(
        Brand, on_delete=models.SET_NULL, related_name="devices", null=True, blank=True
    )
    device_model = models.ForeignKey(
        DeviceModel, on_delete=models.SET_NULL, related_name="devices", null=True, blank=True
    )
    device_type_name = models.CharField(_("Device Type Name"), max_length=100, blank=True)
    brand_name = models.CharField(_("Brand Name"), max_length=100, blank=True)
    model_name = models.CharField(_("Model Name"), max_length=100, blank=True)
    serial_number = models.CharField(_("Serial Number"), max_length=100, blank=True)
    imei = models.CharField(_("IMEI"), max_length=20, blank=True)
    problem_description = models.TextField(_("Problem Description"))
    diagnosis = models.TextField(_("Diagnosis"), blank=True)
    repair_notes = models.TextField(_("Repair Notes"), blank=True)
    estimated_cost = models.DecimalField(
        _("Estimated Cost"), max_digits=10, decimal_places=2, null=True, blank=True
    )
    final_cost = models.DecimalField(
        _("Final Cost"), max_digits=10, decimal_places=2, null=True, blank=True
    )
    total_cost = models.DecimalField(
        _("Total Cost"), max_digits=10, decimal_places=2, null=True, blank=True
    )
    status = models.CharField(
        _("Status"), max_length=20, choices=DEVICE_STATUS_CHOICES, default=STATUS_REGISTERED
    )
    payment_status = models.CharField(
        _("Payment Status"), max_length=10, choices=PAYMENT_STATUS_CHOICES, default=PAYMENT_PENDING
    )
    priority = models.CharField(
        _("Priority"), max_length=10, choices=PRIORITY_CHOICES, default=PRIORITY_NORMAL
    )
    service_type = models.ForeignKey(
        ServiceType, on_delete=models.SET_NULL, related_name="devices", null=True, blank=True
    )
    receipt_number = models.CharField(_("Receipt Number"), max_length=40, unique=True)
    warranty_expiry = models.DateField(_("Warranty Expiry"), null=True, blank=True)
    estimated_completion_date = models.DateTimeField(
        _("Estimated Completion Date"), null=True, blank=True
    )
    actual_completion_date = models.DateTimeField(
        _("Actual Completion Date"), null=True, blank=True
    )
    pickup_date = models.DateTimeField(_("Pickup Date"), null=True, blank=True)
    delivered_at = models.DateTimeField(_("Delivered At"), null=True, blank=True)
    feedback_requested = models.BooleanField(_("Feedback Requested"), default=False)
    is_active = models.BooleanField(_("Active"), default=True)
    created_at = models.DateTimeField(_("Created At"), auto_now_add=True)
    updated_at = models.DateTimeField(_("Updated At"), auto_now=True)

    tracker = FieldTracker(fields=["status", "assigned_to_id"])

    class Meta:
        verbose_name = _("Device")
        verbose_name_plural = _("Devices")
        ordering = ["-created_at"]
        indexes = [
            models.Index(fields=["location", "status"]),
            models.Index(fields=["customer"]),
            models.Index(fields=["created_at"]),
        ]

    def __str__(self):
        return f"{self.receipt_number} - {self.display_name}"

    @property
    def type_label(self):
        return self.device_type.name if self.device_type_id else self.device_type_name

    @property
    def brand_label(self):
        return self.brand.name if self.brand_id else self.brand_name

    @property
    def model_label(self):
        return self.device_model.name if self.device_model_id else self.model_name

    @property
    def display_name(self):
        parts = [self.type_label, self.brand_label, self.model_label]
        return " ".join(part for part in parts if part) or _("Device")


class DeviceStatusHistory(models.Model):
    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    device = models.ForeignKey(Device, on_delete=models.CASCADE, related_name="status_history")
    old_status = models.CharField(
        _("Old Status"), max_length=20, choices=DEVICE_STATUS_CHOICES, null=True, blank=True
    )
    new_status = models.CharField(_("New Status"), max_length=20, choices=DEVICE_STATUS_CHOICES)
    changed_by = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.SET_NULL,
        related_name="device_status_changes",
        null=True,
        blank=True,
    )
    notes = models.TextField(_("Notes"), blank=True)
    created_at = models.DateTimeField(_("Created At"), auto_now_add=True)

    class Meta:
        verbose_name = _("Device Status History")
        verbose_name_plural = _("Device Status History")
        ordering = ["-created_at"]

    def __str__(self):
        return f"{self.device_id}: {self.old_status} -> {self.new_status}"


class DeviceFeedback(models.Model):
    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    device = models.OneToOneField(Device, on_delete=models.CASCADE, related_name="feedback")
    customer = models.ForeignKey(
        "customersapp.Customer", on_delete=models.CASCADE, related_name="feedback"
    )
    location = models.ForeignKey(
        "locationsapp.Location", on_delete=models.CASCADE, related_name="feedback"
    )
    rating = models.PositiveSmallIntegerField(_("Rating"), validators=SCORE_VALIDATORS)
    service_quality = models.PositiveSmallIntegerField(
        _("Service Quality"), validators=SCORE_VALIDATORS, null=True, blank=True
    )
    communication = models.PositiveSmallIntegerField(
        _("Communication"), validators=SCORE_VALIDATORS, null=True, blank=True
    )
    timeliness = models.PositiveSmallIntegerField(
        _("Timeliness"), validators=SCORE_VALIDATORS, null=True, blank=True
    )
    value_for_money = models.PositiveSmallIntegerField(
        _("Value for Money"), validators=SCORE_VALIDATORS, null=True, blank=True
    )
    overall_satisfaction = models.PositiveSmallIntegerField(
        _("Overall Satisfaction"), validators=SCORE_VALIDATORS
    )
    would_recommend = models.BooleanField(_("Would Recommend"), null=True, blank=True)
    comment = models.TextField(_("Comment"), blank=True)
    submitted_at = models.DateTimeField(_("Submitted At"), auto_now_add=True)

    class Meta:
        verbose_name = _("Device Feedback")
        verbose_name_plural = _("Device Feedback")
        ordering = ["-submitted_at"]

    def __str__(self):
        return f"{self.device_id}: {self.overall_satisfaction}/5"
