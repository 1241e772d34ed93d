from datetime import timedelta
from unittest.mock import patch

from django.core import mail
from django.test import TestCase
from django.utils import timezone

from apps.notificationsapp.models import (
    Notification,
    NotificationPreference,
    NotificationTemplate,
    NotificationType,
)
from apps.notificationsapp.services.notification_service import NotificationService, render_text
from apps.notificationsapp.tasks import cleanup_expired_notifications
from apps.smsapp.models import SmsQueue
from utils.exceptions import ResourceNotFoundError
from utils.testing import create_admin, create_location, create_user


class RenderTextTest(TestCase):
    def test_fills_known_and_keeps_unknown(self):
        self.assertEqual(
            render_text("{receipt} is {status}", {"receipt": "RCP-1"}), "RCP-1 is {status}"
        )

    def test_malformed_template_is_returned_unchanged(self):
        self.assertEqual(render_text("Broken {", {"a": 1}), "Broken {")


class NotificationServiceTest(TestCase):
    def setUp(self):
        self.user = create_user(email="tech@example.com")

    def test_system_type_created_on_first_use(self):
        notification = NotificationService.create_notification(
            self.user, "low_stock", title="Low stock", message="Chargers"
        )

        self.assertEqual(notification.notification_type.category, "inventory")
        self.assertEqual(notification.priority, "high")

    def test_unknown_type(self):
        with self.assertRaises(ResourceNotFoundError):
            NotificationService.create_notification(self.user, "nope", title="x", message="y")

    def test_template_fills_missing_text(self):
        notification_type = NotificationType.objects.create(name="pickup_reminder")
        NotificationTemplate.objects.create(
            notification_type=notification_type,
            title="Pickup {receipt}",
            message="{customer} has not collected {receipt}",
        )

        notification = NotificationService.create_notification(
            self.user, "pickup_reminder", data={"receipt": "RCP-9", "customer": "Abebe"}
        )

        self.assertEqual(notification.title, "Pickup RCP-9")
        self.assertEqual(notification.message, "Abebe has not collected RCP-9")

    def test_email_sent_by_default(self):
        NotificationService.create_notification(self.user, "low_stock", title="Low stock", message="Chargers")

        self.assertEqual(len(mail.outbox), 1)
        self.assertEqual(mail.outbox[0].to, ["tech@example.com"])

    def test_disabled_preference_skips_everything(self):
        NotificationService.update_preferences(self.user, "low_stock", enabled=False)

        result = NotificationService.create_notification(self.user, "low_stock", title="a", message="b")

        self.assertIsNone(result)
        self.assertFalse(Notification.objects.exists())
        self.assertEqual(len(mail.outbox), 0)

    def test_external_only_preference(self):
        NotificationService.update_preferences(self.user, "low_stock", in_app=False, email=True)

        result = NotificationService.create_notification(self.user, "low_stock", title="a", message="b")

        self.assertIsNone(result)
        self.assertEqual(len(mail.outbox), 1)

    def test_sms_channel_queues_message(self):
        user = create_user(phone="0911000111", email="")
        NotificationService.update_preferences(user, "low_stock", sms=True)

        NotificationService.create_notification(user, "low_stock", title="Low stock", message="Screens running out")

        sms = SmsQueue.objects.get()
        self.assertEqual(sms.phone_number, "+251911000111")
        self.assertEqual(sms.metadata["user_id"], str(user.pk))

    def test_sms_failure_alerts_never_go_out_by_sms(self):
        admin = create_admin(phone="0911000222")
        NotificationService.update_preferences(admin, "sms_failed", sms=True)

        NotificationService.notify_admins("sms_failed", title="SMS failed", message="Check gateway")

        self.assertTrue(Notification.objects.filter(recipient=admin, notification_type__name="sms_failed").exists())
        self.assertFalse(SmsQueue.objects.exists())

    @patch("apps.notificationsapp.services.notification_service.PushService.send_push", side_effect=RuntimeError)
    def test_push_failure_is_logged_not_raised(self, mock_push):
        notification = NotificationService.create_notification(self.user, "low_stock", title="a", message="b")

        self.assertIsNotNone(notification)
        mock_push.assert_called_once()

    def test_notify_admins_audience(self):
        location = create_location()
        other = create_location()
        admin = create_admin()
        manager = create_user(role="manager", location=location)
        create_user(role="manager", location=other)
        create_admin(is_active=False)

        notifications = NotificationService.notify_admins(
            "device_registered", location_id=location.id, title="New", message="Phone"
        )

        self.assertEqual({n.recipient_id for n in notifications}, {admin.id, manager.id})

    def test_inbox_and_status_changes(self):
        first = NotificationService.create_notification(self.user, "low_stock", title="1", message="")
        second = NotificationService.create_notification(self.user, "low_stock", title="2", message="")
        NotificationService.create_notification(
            self.user, "low_stock", title="gone", message="", expires_at=timezone.now() - timedelta(hours=1)
        )

        self.assertEqual(NotificationService.get_unread_count(self.user), 2)

        NotificationService.mark_as_read(self.user, first.pk)
        first.refresh_from_db()
        self.assertEqual(first.status, "read")
        self.assertIsNotNone(first.read_at)

        NotificationService.archive(self.user, second.pk)
        self.assertEqual(NotificationService.get_unread_count(self.user), 0)
        self.assertEqual(
            [n.title for n in NotificationService.get_user_notifications(self.user, "archived")], ["2"]
        )

    def test_cannot_touch_someone_elses_notification(self):
        notification = NotificationService.create_notification(self.user, "low_stock", title="1", message="")
        stranger = create_user()

        with self.assertRaises(ResourceNotFoundError):
            NotificationService.mark_as_read(stranger, notification.pk)

    def test_mark_all_as_read(self):
        for title in ("a", "b"):
            NotificationService.create_notification(self.user, "low_stock", title=title, message="")

        self.assertEqual(NotificationService.mark_all_as_read(self.user), 2)
        self.assertEqual(NotificationService.get_unread_count(self.user), 0)

    def test_get_preferences_creates_defaults(self):
        NotificationType.objects.create(name="weekly_report")
        NotificationType.objects.create(name="retired", is_active=False)

        preferences = list(NotificationService.get_preferences(self.user))

        self.assertEqual([p.notification_type.name for p in preferences], ["weekly_report"])
        self.assertEqual(NotificationPreference.objects.filter(user=self.user).count(), 1)

    def test_cleanup_expired_task(self):
        NotificationService.create_notification(
            self.user, "low_stock", title="expired", message="", expires_at=timezone.now() - timedelta(days=1)
        )
        old = NotificationService.create_notification(self.user, "low_stock", title="old", message="")
        NotificationService.archive(self.user, old.pk)
        Notification.objects.filter(pk=old.pk).update(created_at=timezone.now() - timedelta(days=200))
        NotificationService.create_notification(self.user, "low_stock", title="fresh", message="")

        result = cleanup_expired_notifications()

        self.assertEqual(result, {"deleted": 2})
        self.assertEqual(list(Notification.objects.values_list("title", flat=True)), ["fresh"])
