import logging

from celery import shared_task

from apps.notificationsapp.services.notification_service import NotificationService

logger = logging.getLogger(__name__)


@shared_task
def cleanup_expired_notifications():
    """
    Delete expired notifications and old archived ones.

    Returns:
        dict: deleted
    """
    deleted = NotificationService.cleanup_expired()
    return {"deleted": deleted}
