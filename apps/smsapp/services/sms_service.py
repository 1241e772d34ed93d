"""
SMS queue.

Messages are never sent inline with a request. They are queued here and
sent in batches by the ``process_sms_queue`` task, which retries failures
up to each row's ``max_attempts``.
"""

import logging

from django.conf import settings
from django.db import transaction
from django.db.models import Count, F
from django.utils import timezone
from django.utils.translation import gettext_lazy as _

from apps.smsapp.constants import (
    KIND_MESSAGE_TYPES,
    QUEUE_CANCELLED,
    QUEUE_FAILED,
    QUEUE_PENDING,
    QUEUE_SENT,
    QUEUE_STATUS_CHOICES,
)
from apps.smsapp.models import SmsCampaign, SmsCampaignRecipient, SmsQueue
from apps.smsapp.services.template_service import TemplateService
from utils.exceptions import ResourceNotFoundError, ValidationError
from utils.locks import cache_lock
from utils.phone import format_phone_number
from utils.sms.sender import get_backend

logger = logging.getLogger(__name__)

QUEUE_LOCK_KEY = "sms-queue"


def _knob(name, default):
    return getattr(settings, "REPAIRSHOP", {}).get(name, default)


class SmsService:
    @staticmethod
    def queue_sms(phone_number, message, message_type="manual", metadata=None):
        """
        Add a message to the outgoing queue.

        Returns:
            The pending SmsQueue row
        """
        if not phone_number or not message:
            raise ValidationError(_("Phone number and message are required"))

        entry = SmsQueue.objects.create(
            phone_number=format_phone_number(phone_number),
            message=message,
            message_type=message_type,
            metadata=metadata or {},
            max_attempts=_knob("SMS_MAX_ATTEMPTS", 3),
        )
        logger.info(f"SMS queued for {entry.phone_number} ({message_type})")
        return entry

    @classmethod
    def send_device_sms(cls, device, kind, language=None):
        """Render the device template ``kind`` and queue it for the customer."""
        phone = device.customer.phone
        if not phone:
            logger.info(f"No phone number for device {device.receipt_number}, SMS skipped")
            return None

        message = TemplateService.render(kind, device, language)
        return cls.queue_sms(
            phone,
            message,
            message_type=KIND_MESSAGE_TYPES[kind],
            metadata={
                "device_id": str(device.id),
                "receipt_number": device.receipt_number,
                "status": device.status,
            },
        )

    @staticmethod
    def _send_entry(backend, entry):
        """Returns (success, error message)."""
        try:
            if backend.send(entry.phone_number, entry.message, context=entry.metadata):
                return True, ""
            return False, "Provider rejected the message"
        except Exception as e:
            logger.error(f"Error sending SMS {entry.id} to {entry.phone_number}: {e}")
            return False, str(e)

    @classmethod
    def process_queue(cls, batch_size=None):
        """
        Send the oldest pending messages.

        Only one worker drains the queue at a time; a call made while
        another run holds the lock sends nothing and reports ``skipped``.

        Returns:
            dict: processed, sent, failed
        """
        with cache_lock(QUEUE_LOCK_KEY, _knob("SMS_QUEUE_LOCK_SECONDS", 300)) as acquired:
            if not acquired:
                return {"processed": 0, "sent": 0, "failed": 0, "skipped": True}
            return cls._process_batch(batch_size or _knob("SMS_QUEUE_BATCH_SIZE", 10))

    @classmethod
    def _process_batch(cls, batch_size):
        entries = list(
            SmsQueue.objects.filter(status=QUEUE_PENDING, attempts__lt=F("max_attempts")).order_by(
                "created_at"
            )[:batch_size]
        )
        result = {"processed": 0, "sent": 0, "failed": 0}
        if not entries:
            return result

        backend = get_backend()
        for entry in entries:
            success, error = cls._send_entry(backend, entry)
            now = timezone.now()
            result["processed"] += 1

            if success:
                entry.status = QUEUE_SENT
                entry.sent_at = now
                entry.error_message = ""
                entry.save(update_fields=["status", "sent_at", "error_message", "updated_at"])
                cls._mark_campaign_recipients(entry, QUEUE_SENT, now)
                result["sent"] += 1
                continue

            entry.attempts += 1
            entry.last_attempt_at = now
            entry.error_message = error
            if entry.attempts >= entry.max_attempts:
                entry.status = QUEUE_FAILED
            entry.save(
                update_fields=["attempts", "last_attempt_at", "error_message", "status", "updated_at"]
            )
            if entry.status == QUEUE_FAILED:
                cls._mark_campaign_recipients(entry, QUEUE_FAILED, None, error)
                cls._report_failure(entry)
            result["failed"] += 1

        logger.info(
            f"SMS queue batch: {result['processed']} processed, "
            f"{result['sent']} sent, {result['failed']} failed"
        )
        return result

    @staticmethod
    def _mark_campaign_recipients(entry, status, sent_at, error=""):
        recipients = SmsCampaignRecipient.objects.filter(queue_entry=entry)
        campaign_ids = list(recipients.values_list("campaign_id", flat=True))
        if not campaign_ids:
            return
        recipients.update(status=status, sent_at=sent_at, error_message=error)
        if status == QUEUE_SENT:
            SmsCampaign.objects.filter(pk__in=campaign_ids).update(sent_count=F("sent_count") + 1)

    @staticmethod
    def _report_failure(entry):
        logger.error(
            f"SMS {entry.id} to {entry.phone_number} failed after {entry.attempts} attempts: "
            f"{entry.error_message}"
        )
        from apps.notificationsapp.services.notification_service import NotificationService

        try:
            with transaction.atomic():
                NotificationService.notify_admins(
                    "sms_failed",
                    title="SMS delivery failed",
                    message=f"Message to {entry.phone_number} failed: {entry.error_message}",
                    data={"sms_id": str(entry.id), "message_type": entry.message_type},
                    related_entity_type="sms",
                    related_entity_id=str(entry.id),
                )
        except Exception:
            logger.exception(f"Could not report failed SMS {entry.id}")

    @staticmethod
    def retry_failed(ids=None):
        """Put failed messages back in the queue with a fresh attempt count."""
        queryset = SmsQueue.objects.filter(status=QUEUE_FAILED)
        if ids:
            queryset = queryset.filter(pk__in=ids)
        count = queryset.update(status=QUEUE_PENDING, attempts=0, error_message="")
        logger.info(f"{count} failed SMS messages re-queued")
        return count

    @staticmethod
    def cancel(entry_id):
        entry = SmsQueue.objects.filter(pk=entry_id).first()
        if entry is None:
            raise ResourceNotFoundError(_("SMS message not found"))
        if entry.status != QUEUE_PENDING:
            raise ValidationError(
                _("Only pending messages can be cancelled"), detail={"status": entry.status}
            )
        entry.status = QUEUE_CANCELLED
        entry.save(update_fields=["status", "updated_at"])
        logger.info(f"SMS {entry.id} cancelled")
        return entry

    @staticmethod
    def get_queue_stats():
        counts = dict(
            SmsQueue.objects.values("status").annotate(count=Count("id")).values_list("status", "count")
        )
        stats = {value: counts.get(value, 0) for value, _label in QUEUE_STATUS_CHOICES}
        stats["total"] = sum(counts.values())
        return stats

    @staticmethod
    def send_test_message(phone_number, message=None):
        """Send one message straight through the backend, bypassing the queue."""
        message = message or "RepairShop SMS test message"
        backend = get_backend()
        try:
            success = backend.send(format_phone_number(phone_number), message)
        except Exception as e:
            logger.error(f"Test SMS to {phone_number} failed: {e}")
            return {"success": False, "error": str(e)}
        return {"success": bool(success), "error": "" if success else "Provider rejected the message"}
