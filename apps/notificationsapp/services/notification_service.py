"""
Staff notifications.

A notification is stored for the in-app inbox and fanned out to email, SMS
and push according to the recipient's preference for its type. Channel
failures are logged; they never fail the operation that triggered them.
"""

import logging
from datetime import timedelta

from django.conf import settings
from django.contrib.auth import get_user_model
from django.db.models import Q
from django.utils import timezone
from django.utils.translation import gettext_lazy as _

from apps.notificationsapp.constants import (
    CHANNELS,
    SMS_CHANNEL_EXCLUDED_TYPES,
    STATUS_ARCHIVED,
    STATUS_READ,
    STATUS_UNREAD,
    SYSTEM_TYPES,
)
from apps.notificationsapp.models import (
    Notification,
    NotificationPreference,
    NotificationTemplate,
    NotificationType,
)
from apps.notificationsapp.services.email_service import EmailService
from apps.notificationsapp.services.push_service import PushService
from utils.exceptions import ResourceNotFoundError

logger = logging.getLogger(__name__)


class _SafeDict(dict):
    def __missing__(self, key):
        return "{" + key + "}"


def render_text(text, data):
    """Fill ``{var}`` placeholders from ``data``, leaving unknown ones as-is."""
    try:
        return text.format_map(_SafeDict({k: v for k, v in (data or {}).items()}))
    except (ValueError, IndexError):
        return text


class NotificationService:
    @staticmethod
    def get_notification_type(type_name):
        """
        Look up a notification type, creating system types on first use.

        Raises:
            ResourceNotFoundError: unknown non-system type
        """
        notification_type = NotificationType.objects.filter(name=type_name).first()
        if notification_type is not None:
            return notification_type
        if type_name in SYSTEM_TYPES:
            notification_type, _created = NotificationType.objects.get_or_create(
                name=type_name, defaults=SYSTEM_TYPES[type_name]
            )
            return notification_type
        raise ResourceNotFoundError(
            _("Unknown notification type"), detail={"notification_type": type_name}
        )

    @staticmethod
    def get_or_create_preference(user, notification_type):
        preference, _created = NotificationPreference.objects.get_or_create(
            user=user, notification_type=notification_type
        )
        return preference

    @classmethod
    def create_notification(
        cls,
        recipient,
        type_name,
        title=None,
        message=None,
        data=None,
        sender=None,
        priority=None,
        expires_at=None,
        related_entity_type="",
        related_entity_id="",
    ):
        """
        Create a notification for ``recipient`` and deliver it.

        Missing title or message are taken from the type's active template,
        rendered with ``data``.

        Returns:
            The stored Notification, or None when the recipient disabled this
            type or only wants external channels
        """
        notification_type = cls.get_notification_type(type_name)
        data = data or {}

        if not (title and message):
            template = (
                NotificationTemplate.objects.filter(notification_type=notification_type, is_active=True)
                .order_by("-updated_at")
                .first()
            )
            if template is not None:
                title = title or render_text(template.title, data)
                message = message or render_text(template.message, data)
        title = title or notification_type.name.replace("_", " ").capitalize()
        message = message or ""

        preference = cls.get_or_create_preference(recipient, notification_type)
        if not preference.enabled or not notification_type.is_active:
            logger.debug(f"{type_name} disabled for user {recipient.pk}, skipped")
            return None

        notification = None
        if preference.in_app:
            notification = Notification.objects.create(
                recipient=recipient,
                sender=sender,
                notification_type=notification_type,
                title=title,
                message=message,
                priority=priority or notification_type.default_priority,
                data=data,
                expires_at=expires_at,
                related_entity_type=related_entity_type or "",
                related_entity_id=related_entity_id or "",
            )

        cls._dispatch_external(recipient, preference, title, message, data)
        return notification

    @staticmethod
    def _dispatch_external(recipient, preference, title, message, data):
        if preference.email and recipient.email:
            EmailService.send_email(recipient.email, title, message)

        sms_allowed = preference.notification_type.name not in SMS_CHANNEL_EXCLUDED_TYPES
        if preference.sms and sms_allowed and recipient.phone:
            from apps.smsapp.services.sms_service import SmsService

            try:
                SmsService.queue_sms(
                    recipient.phone,
                    f"{title}\n{message}",
                    message_type="manual",
                    metadata={"user_id": str(recipient.pk)},
                )
            except Exception as e:
                logger.error(f"Could not queue notification SMS for user {recipient.pk}: {e}")

        if preference.push:
            try:
                PushService.send_push(recipient, title, message, data)
            except Exception as e:
                logger.error(f"Push to user {recipient.pk} failed: {e}")

    @classmethod
    def notify_admins(cls, type_name, location_id=None, **kwargs):
        """
        Notify every active admin, plus the managers of ``location_id``.

        Returns:
            List of stored notifications
        """
        User = get_user_model()
        audience = Q(role="admin") | Q(is_superuser=True)
        if location_id:
            audience |= Q(role="manager", location_id=location_id)
        recipients = User.objects.filter(audience, is_active=True)

        notifications = []
        for recipient in recipients.distinct():
            notification = cls.create_notification(recipient, type_name, **kwargs)
            if notification is not None:
                notifications.append(notification)
        return notifications

    @staticmethod
    def get_user_notifications(user, status=None):
        queryset = Notification.objects.filter(recipient=user).filter(
            Q(expires_at__isnull=True) | Q(expires_at__gt=timezone.now())
        )
        if status:
            queryset = queryset.filter(status=status)
        return queryset.select_related("notification_type").order_by("-created_at")

    @staticmethod
    def _get_own(user, notification_id):
        notification = Notification.objects.filter(pk=notification_id, recipient=user).first()
        if notification is None:
            raise ResourceNotFoundError(_("Notification not found"))
        return notification

    @classmethod
    def mark_as_read(cls, user, notification_id):
        notification = cls._get_own(user, notification_id)
        if notification.status == STATUS_UNREAD:
            notification.status = STATUS_READ
            notification.read_at = timezone.now()
            notification.save(update_fields=["status", "read_at"])
        return notification

    @staticmethod
    def mark_all_as_read(user):
        return Notification.objects.filter(recipient=user, status=STATUS_UNREAD).update(
            status=STATUS_READ, read_at=timezone.now()
        )

    @classmethod
    def archive(cls, user, notification_id):
        notification = cls._get_own(user, notification_id)
        notification.status = STATUS_ARCHIVED
        notification.save(update_fields=["status"])
        return notification

    @classmethod
    def get_unread_count(cls, user):
        return cls.get_user_notifications(user, STATUS_UNREAD).count()

    @classmethod
    def delete(cls, user, notification_id):
        cls._get_own(user, notification_id).delete()

    @staticmethod
    def cleanup_expired(retention_days=None):
        """
        Delete expired notifications and archived ones past the retention period.

        Returns:
            Number of notifications deleted
        """
        retention_days = retention_days or getattr(settings, "REPAIRSHOP", {}).get(
            "NOTIFICATION_RETENTION_DAYS", 90
        )
        now = timezone.now()
        cutoff = now - timedelta(days=retention_days)
        deleted, _detail = Notification.objects.filter(
            Q(expires_at__lte=now) | Q(status=STATUS_ARCHIVED, created_at__lt=cutoff)
        ).delete()
        logger.info(f"Deleted {deleted} expired notifications")
        return deleted

    @staticmethod
    def get_preferences(user):
        """Preferences for every active type, creating defaults where missing."""
        types = list(NotificationType.objects.filter(is_active=True))
        existing = {
            pref.notification_type_id: pref
            for pref in NotificationPreference.objects.filter(user=user).select_related(
                "notification_type"
            )
        }
        missing = [
            NotificationPreference(user=user, notification_type=notification_type)
            for notification_type in types
            if notification_type.id not in existing
        ]
        if missing:
            NotificationPreference.objects.bulk_create(missing, ignore_conflicts=True)
        return (
            NotificationPreference.objects.filter(user=user, notification_type__is_active=True)
            .select_related("notification_type")
            .order_by("notification_type__category", "notification_type__name")
        )

    @classmethod
    def update_preferences(cls, user, type_name, **channels):
        """
        Create or update the user's preference for ``type_name``.

        Accepts ``enabled`` and any of email, sms, push, in_app.
        """
        notification_type = cls.get_notification_type(type_name)
        values = {
            key: bool(value)
            for key, value in channels.items()
            if key in CHANNELS + ("enabled",) and value is not None
        }
        preference, _created = NotificationPreference.objects.update_or_create(
            user=user, notification_type=notification_type, defaults=values
        )
        return preference
