import logging

from django.db import transaction
from django.db.models.signals import post_save
from django.dispatch import receiver

from apps.devicesapp.models import Device

logger = logging.getLogger(__name__)


@receiver(post_save, sender=Device)
def notify_technician_on_assignment(sender, instance, created, **kwargs):
    """Tell a technician when a device lands on their bench."""
    if not instance.assigned_to_id:
        return
    if not created and not instance.tracker.has_changed("assigned_to_id"):
        return

    from apps.notificationsapp.services.notification_service import NotificationService

    try:
        with transaction.atomic():
            NotificationService.create_notification(
                instance.assigned_to,
                "device_assigned",
                title="Device assigned to you",
                message=f"{instance.display_name} ({instance.receipt_number})",
                data={"device_id": str(instance.id), "receipt_number": instance.receipt_number},
                related_entity_type="device",
                related_entity_id=str(instance.id),
            )
    except Exception:
        logger.exception(f"Could not notify technician about device {instance.receipt_number}")
