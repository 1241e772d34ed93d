"""
Device intake and repair lifecycle.

Every state change writes a DeviceStatusHistory row, tells admins about it
and queues an SMS for the customer. Notification and SMS problems are logged
and never undo the change itself.
"""

import logging
from decimal import Decimal

from django.db import transaction
from django.utils import timezone
from django.utils.translation import gettext_lazy as _

from apps.customersapp.services.customer_service import CustomerService
from apps.devicesapp.constants import (
    DEVICE_STATUSES,
    PAYMENT_PAID,
    PAYMENT_PENDING,
    PAYMENT_STATUSES,
    STATUS_COMPLETED,
    STATUS_DELIVERED,
    STATUS_READY_FOR_PICKUP,
    STATUS_REGISTERED,
    TRACKING_NOT_FOUND_MESSAGE,
)
from apps.devicesapp.models import Device, DeviceStatusHistory
from apps.devicesapp.services.receipt_service import ReceiptService
from utils.exceptions import ResourceNotFoundError, ValidationError

logger = logging.getLogger(__name__)


def resolve_payment_status(new_status, total_cost, current, explicit=None):
    """
    Payment status after moving a device to ``new_status``.

    An explicit value always wins. Finishing a repair settles payment:
    delivered devices with a cost are paid, completed ones await payment, and
    free repairs are paid either way.
    """
    if explicit:
        return explicit
    if new_status not in (STATUS_COMPLETED, STATUS_DELIVERED):
        return current
    if total_cost and Decimal(total_cost) > 0:
        return PAYMENT_PAID if new_status == STATUS_DELIVERED else PAYMENT_PENDING
    return PAYMENT_PAID


class DeviceService:
    @staticmethod
    @transaction.atomic
    def register_device(data, user=None):
        """
        Register a device brought in by a customer.

        Args:
            data: validated serializer data; must contain ``customer`` and
                ``location_id`` (or ``location``)
            user: staff member doing the intake

        Returns:
            The new Device
        """
        data = dict(data)
        location = data.pop("location", None)
        if location is not None:
            data["location_id"] = location.id
        if "location_id" not in data:
            data["location_id"] = data["customer"].location_id
        CustomerService.ensure_at_location(data["customer"], data["location_id"])

        from apps.locationsapp.models import Location

        location = Location.objects.get(pk=data["location_id"])
        device = Device.objects.create(
            receipt_number=ReceiptService.generate(location),
            status=STATUS_REGISTERED,
            **data,
        )
        DeviceStatusHistory.objects.create(
            device=device,
            old_status=None,
            new_status=STATUS_REGISTERED,
            changed_by=user,
            notes=str(_("Device registered")),
        )
        logger.info(f"Device {device.receipt_number} registered at {location.code}")

        DeviceService._announce(
            device,
            "device_registered",
            title=str(_("New device registered")),
            message=f"{device.display_name} for {device.customer.name} ({device.receipt_number})",
            sms_kind="device_registration",
            sender=user,
        )
        return device

    @staticmethod
    @transaction.atomic
    def update_status(device, new_status, user=None, notes="", payment_status=None):
        if new_status not in DEVICE_STATUSES:
            raise ValidationError(
                _("Invalid device status"), detail={"status": [f"'{new_status}' is not a valid status."]}
            )
        if payment_status and payment_status not in PAYMENT_STATUSES:
            raise ValidationError(
                _("Invalid payment status"),
                detail={"payment_status": [f"Must be one of: {', '.join(PAYMENT_STATUSES)}."]},
            )

        old_status = device.status
        if new_status == old_status:
            raise ValidationError(
                _("Device already has this status"), detail={"status": [f"Device is already {old_status}."]}
            )

        now = timezone.now()
        device.status = new_status
        device.payment_status = resolve_payment_status(
            new_status, device.total_cost, device.payment_status, explicit=payment_status
        )
        if new_status == STATUS_COMPLETED and not device.actual_completion_date:
            device.actual_completion_date = now
        if new_status == STATUS_DELIVERED:
            device.delivered_at = now
            device.pickup_date = now
            if not device.actual_completion_date:
                device.actual_completion_date = now
        device.save()

        DeviceStatusHistory.objects.create(
            device=device,
            old_status=old_status,
            new_status=new_status,
            changed_by=user,
            notes=notes or "",
        )
        logger.info(f"Device {device.receipt_number} status {old_status} -> {new_status}")

        sms_kind = (
            "device_ready_for_pickup"
            if new_status == STATUS_READY_FOR_PICKUP
            else "device_status_update"
        )
        DeviceService._announce(
            device,
            "device_status_update",
            title=str(_("Device status updated")),
            message=f"{device.receipt_number}: {old_status} -> {new_status}",
            sms_kind=sms_kind,
            sender=user,
            extra={"old_status": old_status, "new_status": new_status},
        )
        return device

    @staticmethod
    def update_payment_status(device, value):
        if value not in PAYMENT_STATUSES:
            raise ValidationError(
                _("Invalid payment status"),
                detail={"payment_status": [f"Must be one of: {', '.join(PAYMENT_STATUSES)}."]},
            )
        device.payment_status = value
        device.save(update_fields=["payment_status", "updated_at"])
        logger.info(f"Device {device.receipt_number} payment status set to {value}")
        return device

    @staticmethod
    def deactivate(device):
        device.is_active = False
        device.save(update_fields=["is_active", "updated_at"])
        logger.info(f"Device {device.receipt_number} deactivated")

    @staticmethod
    def get_by_receipt(receipt_number):
        device = (
            Device.objects.select_related(
                "customer", "location", "device_type", "brand", "device_model"
            )
            .filter(receipt_number__iexact=(receipt_number or "").strip(), is_active=True)
            .first()
        )
        if device is None:
            raise ResourceNotFoundError(TRACKING_NOT_FOUND_MESSAGE)
        return device

    @classmethod
    def track(cls, receipt_number):
        """
        Public tracking view of a device. Contains nothing about the customer.
        """
        device = cls.get_by_receipt(receipt_number)
        history = device.status_history.order_by("created_at")
        return {
            "receipt_number": device.receipt_number,
            "device": device.display_name,
            "device_type": device.type_label,
            "brand": device.brand_label,
            "model": device.model_label,
            "status": device.status,
            "status_display": device.get_status_display(),
            "estimated_completion_date": device.estimated_completion_date,
            "total_cost": device.total_cost,
            "created_at": device.created_at,
            "location": {"name": device.location.name, "phone": device.location.phone},
            "feedback_submitted": hasattr(device, "feedback"),
            "history": [
                {
                    "status": entry.new_status,
                    "status_display": entry.get_new_status_display(),
                    "notes": entry.notes,
                    "created_at": entry.created_at,
                }
                for entry in history
            ],
        }

    @staticmethod
    def _announce(device, notification_type, title, message, sms_kind, sender=None, extra=None):
        """Notify admins and queue the customer SMS inside a savepoint."""
        from apps.notificationsapp.services.notification_service import NotificationService
        from apps.smsapp.services.sms_service import SmsService

        data = {
            "device_id": str(device.id),
            "receipt_number": device.receipt_number,
            "status": device.status,
        }
        data.update(extra or {})

        try:
            with transaction.atomic():
                NotificationService.notify_admins(
                    notification_type,
                    title=title,
                    message=message,
                    data=data,
                    location_id=device.location_id,
                    sender=sender,
                    related_entity_type="device",
                    related_entity_id=str(device.id),
                )
        except Exception:
            logger.exception(f"Could not notify admins about device {device.receipt_number}")

        try:
            with transaction.atomic():
                SmsService.send_device_sms(device, sms_kind)
        except Exception:
            logger.exception(f"Could not queue SMS for device {device.receipt_number}")
