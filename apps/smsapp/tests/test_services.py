from datetime import datetime, timedelta
from decimal import Decimal
from unittest.mock import MagicMock, patch

from django.test import TestCase, override_settings
from django.utils import timezone

from apps.notificationsapp.models import Notification
from apps.smsapp.models import RecipientGroup, SmsCampaign, SmsCampaignRecipient, SmsQueue, SmsTemplate
from apps.smsapp.services.campaign_service import CampaignService
from apps.smsapp.services.recipient_group_service import RecipientGroupService
from apps.smsapp.services.sms_service import QUEUE_LOCK_KEY, SmsService
from apps.smsapp.services.template_service import TemplateService, fill_placeholders, format_amount
from apps.smsapp.tasks import process_sms_queue, send_scheduled_campaigns
from utils.exceptions import ResourceNotFoundError, ValidationError
from utils.locks import cache_lock
from utils.testing import create_admin, create_customer, create_device, create_location


class TemplateHelpersTest(TestCase):
    def test_format_amount(self):
        self.assertEqual(format_amount(Decimal("1500.00")), "1500")
        self.assertEqual(format_amount(Decimal("1499.5")), "1499.50")

    def test_fill_placeholders_keeps_unknown_markers(self):
        self.assertEqual(
            fill_placeholders("Hi {customerName}, code {promo}", {"customerName": "Sara"}),
            "Hi Sara, code {promo}",
        )


class TemplateServiceTest(TestCase):
    def setUp(self):
        self.customer = create_customer(create_location(), name="Sara Tadesse")
        self.device = create_device(
            self.customer,
            receipt_number="RCP-BOL-240101-AB2C",
            status="in_progress",
            total_cost=Decimal("2500.00"),
            estimated_completion_date=timezone.make_aware(datetime(2024, 1, 15, 12, 0)),
        )

    def test_defaults_when_nothing_stored(self):
        template = TemplateService.get_template("english")

        self.assertTrue(template["is_default"])
        self.assertIn("{receiptNumber}", template["device_registration"])
        self.assertEqual(len(TemplateService.get_all_templates()), 3)

    def test_unknown_language(self):
        with self.assertRaises(ValidationError):
            TemplateService.get_template("french")

    @override_settings(SMS_DEFAULT_LANGUAGE="klingon")
    def test_invalid_default_language_falls_back_to_amharic(self):
        self.assertEqual(TemplateService.default_language(), "amharic")

    def test_update_keeps_untouched_kinds(self):
        TemplateService.update_template("english", {"device_registration": "Hello {customerName}"})

        template = TemplateService.get_template("english")
        self.assertFalse(template["is_default"])
        self.assertEqual(template["device_registration"], "Hello {customerName}")
        self.assertIn("Device Status Update", template["device_status_update"])

    def test_reset_to_default(self):
        TemplateService.update_template("english", {"device_registration": "Custom"})

        template = TemplateService.reset_to_default("english")

        self.assertNotEqual(template["device_registration"], "Custom")
        self.assertEqual(SmsTemplate.objects.filter(language="english").count(), 1)

    def test_render_status_update(self):
        message = TemplateService.render("device_status_update", self.device, "english")

        self.assertIn("Dear Sara Tadesse", message)
        self.assertIn("We're now working on your device repair.", message)
        self.assertIn("Total Cost: 2500 ETB", message)
        self.assertIn("Estimated Completion: 15/01/2024", message)

    def test_render_without_cost_drops_cost_line(self):
        self.device.total_cost = None
        message = TemplateService.render("device_ready_for_pickup", self.device, "english")

        self.assertNotIn("Total Cost", message)
        self.assertIn("RCP-BOL-240101-AB2C", message)

    def test_mixed_status_message_is_english_then_amharic(self):
        message = TemplateService.status_message("completed", "mixed")

        english, amharic = message.split("\n")
        self.assertIn("completed successfully", english)
        self.assertIn("ተጠናቅቋል", amharic)

    def test_unknown_status_gets_generic_message(self):
        self.assertEqual(
            TemplateService.status_message("registered", "english"), "Your device status has been updated."
        )

    def test_render_unknown_kind(self):
        with self.assertRaises(ValidationError):
            TemplateService.render("birthday", self.device)

    def test_preview_uses_sample_data_and_overrides(self):
        message = TemplateService.preview(
            "{customerName} / {receiptNumber}", "english", {"customerName": "Hana"}
        )

        self.assertEqual(message, "Hana / RCP-MAIN-240101-AB2C")


class SmsQueueServiceTest(TestCase):
    def test_queue_formats_phone(self):
        entry = SmsService.queue_sms("0911223344", "Hello")

        self.assertEqual(entry.phone_number, "+251911223344")
        self.assertEqual(entry.status, "pending")

    def test_queue_requires_phone_and_message(self):
        with self.assertRaises(ValidationError):
            SmsService.queue_sms("", "Hello")
        with self.assertRaises(ValidationError):
            SmsService.queue_sms("0911223344", "")

    def test_device_sms_skipped_without_phone(self):
        customer = create_customer(create_location(), phone="")
        device = create_device(customer)

        self.assertIsNone(SmsService.send_device_sms(device, "device_registration"))
        self.assertFalse(SmsQueue.objects.exists())

    def test_process_queue_sends_pending(self):
        SmsService.queue_sms("0911223344", "one")
        SmsService.queue_sms("0911223355", "two")

        result = SmsService.process_queue()

        self.assertEqual(result, {"processed": 2, "sent": 2, "failed": 0})
        self.assertEqual(SmsQueue.objects.filter(status="sent").count(), 2)

    @override_settings(CACHES={"default": {"BACKEND": "django.core.cache.backends.locmem.LocMemCache"}})
    def test_process_queue_skips_while_another_run_holds_lock(self):
        entry = SmsService.queue_sms("0911223344", "Hello")

        with cache_lock(QUEUE_LOCK_KEY):
            result = SmsService.process_queue()

        self.assertTrue(result["skipped"])
        self.assertEqual(result["processed"], 0)
        entry.refresh_from_db()
        self.assertEqual((entry.status, entry.attempts), ("pending", 0))

        self.assertEqual(SmsService.process_queue()["sent"], 1)

    @override_settings(CACHES={"default": {"BACKEND": "django.core.cache.backends.locmem.LocMemCache"}})
    def test_scheduled_campaigns_skip_while_locked(self):
        with cache_lock("sms-scheduled-campaigns"):
            self.assertEqual(CampaignService.send_scheduled_campaigns(), 0)

    def test_process_queue_respects_batch_size(self):
        for n in range(3):
            SmsService.queue_sms(f"091122330{n}", "msg")

        result = process_sms_queue(batch_size=2)

        self.assertEqual(result["processed"], 2)
        self.assertEqual(SmsQueue.objects.filter(status="pending").count(), 1)

    @patch("apps.smsapp.services.sms_service.get_backend")
    def test_failures_retry_until_max_attempts(self, mock_get_backend):
        mock_get_backend.return_value.send.return_value = False
        admin = create_admin()
        entry = SmsService.queue_sms("0911223344", "Hello")

        for _attempt in range(entry.max_attempts):
            SmsService.process_queue()

        entry.refresh_from_db()
        self.assertEqual(entry.status, "failed")
        self.assertEqual(entry.attempts, entry.max_attempts)
        self.assertEqual(entry.error_message, "Provider rejected the message")
        self.assertTrue(
            Notification.objects.filter(recipient=admin, notification_type__name="sms_failed").exists()
        )

        self.assertEqual(SmsService.process_queue()["processed"], 0)

    @patch("apps.smsapp.services.sms_service.get_backend")
    def test_backend_exception_counts_as_failure(self, mock_get_backend):
        mock_get_backend.return_value.send.side_effect = ConnectionError("gateway down")
        entry = SmsService.queue_sms("0911223344", "Hello")

        result = SmsService.process_queue()

        entry.refresh_from_db()
        self.assertEqual(result["failed"], 1)
        self.assertEqual(entry.status, "pending")
        self.assertEqual(entry.error_message, "gateway down")

    def test_retry_failed(self):
        entry = SmsService.queue_sms("0911223344", "Hello")
        SmsQueue.objects.filter(pk=entry.pk).update(status="failed", attempts=3, error_message="x")

        self.assertEqual(SmsService.retry_failed(), 1)

        entry.refresh_from_db()
        self.assertEqual((entry.status, entry.attempts, entry.error_message), ("pending", 0, ""))

    def test_cancel_only_pending(self):
        entry = SmsService.queue_sms("0911223344", "Hello")

        self.assertEqual(SmsService.cancel(entry.pk).status, "cancelled")
        with self.assertRaises(ValidationError):
            SmsService.cancel(entry.pk)

    def test_cancel_unknown(self):
        with self.assertRaises(ResourceNotFoundError):
            SmsService.cancel("00000000-0000-0000-0000-000000000000")

    def test_queue_stats(self):
        SmsService.queue_sms("0911223344", "a")
        sent = SmsService.queue_sms("0911223355", "b")
        SmsQueue.objects.filter(pk=sent.pk).update(status="sent")

        stats = SmsService.get_queue_stats()

        self.assertEqual(stats["pending"], 1)
        self.assertEqual(stats["sent"], 1)
        self.assertEqual(stats["failed"], 0)
        self.assertEqual(stats["total"], 2)

    @patch("apps.smsapp.services.sms_service.get_backend")
    def test_send_test_message_reports_errors(self, mock_get_backend):
        mock_get_backend.return_value.send.side_effect = RuntimeError("bad credentials")

        result = SmsService.send_test_message("0911223344")

        self.assertEqual(result, {"success": False, "error": "bad credentials"})

    def test_send_test_message_bypasses_queue(self):
        result = SmsService.send_test_message("0911223344", "ping")

        self.assertTrue(result["success"])
        self.assertFalse(SmsQueue.objects.exists())


class RecipientGroupServiceTest(TestCase):
    def setUp(self):
        self.location = create_location()
        self.group = RecipientGroup.objects.create(name="Loyal")
        self.alice = create_customer(self.location, name="Alice")
        self.bob = create_customer(self.location, name="Bob")

    def test_add_skips_existing_and_inactive(self):
        inactive = create_customer(self.location, is_active=False)

        self.assertEqual(RecipientGroupService.add_customers(self.group, [self.alice.pk]), 1)
        added = RecipientGroupService.add_customers(self.group, [self.alice.pk, self.bob.pk, inactive.pk])

        self.assertEqual(added, 1)
        self.assertEqual(
            [c.name for c in RecipientGroupService.customers(self.group)], ["Alice", "Bob"]
        )

    def test_remove(self):
        RecipientGroupService.add_customers(self.group, [self.alice.pk, self.bob.pk])

        self.assertEqual(RecipientGroupService.remove_customers(self.group, [self.bob.pk]), 1)
        self.assertEqual(list(RecipientGroupService.customers(self.group)), [self.alice])

    def test_customers_scoped_to_location(self):
        elsewhere = create_customer(create_location())
        RecipientGroupService.add_customers(self.group, [self.alice.pk, elsewhere.pk])

        self.assertEqual(list(RecipientGroupService.customers(self.group, self.location.id)), [self.alice])


class CampaignServiceTest(TestCase):
    def setUp(self):
        self.location = create_location()
        self.alice = create_customer(self.location, name="Alice", phone="0911111111")
        self.twin = create_customer(self.location, name="Alice Twin", phone="+251911111111")
        self.bob = create_customer(self.location, name="Bob", phone="0922222222")
        self.no_phone = create_customer(self.location, name="Nophone", phone="")
        self.other = create_customer(create_location(), name="Zed", phone="0933333333")

    def _campaign(self, **kwargs):
        defaults = {"name": "Holiday", "message": "Happy Genna {customerName}!"}
        defaults.update(kwargs)
        return SmsCampaign.objects.create(**defaults)

    def test_recipients_unique_by_phone(self):
        recipients = CampaignService.resolve_recipients(self._campaign(), self.location.id)

        self.assertEqual([c.name for c in recipients], ["Alice", "Bob"])

    def test_send_campaign_queues_personalised_messages(self):
        campaign = CampaignService.send_campaign(self._campaign())

        self.assertEqual(campaign.status, "sent")
        self.assertEqual(campaign.total_count, 3)
        self.assertIsNotNone(campaign.sent_at)
        self.assertEqual(SmsQueue.objects.filter(message_type="campaign").count(), 3)
        alice_entry = SmsCampaignRecipient.objects.get(campaign=campaign, customer=self.alice).queue_entry
        self.assertEqual(alice_entry.message, "Happy Genna Alice!")

    def test_delivery_updates_recipients_and_counts(self):
        campaign = CampaignService.send_campaign(self._campaign(), self.location.id)

        SmsService.process_queue()

        campaign.refresh_from_db()
        self.assertEqual(campaign.sent_count, 2)
        self.assertFalse(campaign.recipients.exclude(status="sent").exists())

    def test_cannot_send_twice(self):
        campaign = CampaignService.send_campaign(self._campaign())

        with self.assertRaises(ValidationError):
            CampaignService.send_campaign(campaign)

    def test_recipient_group_target(self):
        group = RecipientGroup.objects.create(name="Picked")
        RecipientGroupService.add_customers(group, [self.bob.pk])
        campaign = self._campaign(target_group="recipient_group", recipient_group=group)

        self.assertEqual(CampaignService.resolve_recipients(campaign), [self.bob])

    def test_category_target_requires_category(self):
        with self.assertRaises(ValidationError):
            CampaignService.target_queryset(self._campaign(target_group="category"))

    def test_schedule_must_be_future(self):
        campaign = self._campaign()

        with self.assertRaises(ValidationError):
            CampaignService.schedule(campaign, timezone.now() - timedelta(minutes=5))

        CampaignService.schedule(campaign, timezone.now() + timedelta(days=1))
        self.assertEqual(campaign.status, "scheduled")

    def test_cancel_and_edit_rules(self):
        campaign = CampaignService.cancel(self._campaign())

        self.assertEqual(campaign.status, "cancelled")
        with self.assertRaises(ValidationError):
            CampaignService.ensure_editable(campaign)
        with self.assertRaises(ValidationError):
            CampaignService.send_campaign(campaign)

    def test_scheduled_campaigns_task(self):
        due = self._campaign(name="Due")
        CampaignService.schedule(due, timezone.now() + timedelta(hours=1))
        SmsCampaign.objects.filter(pk=due.pk).update(scheduled_date=timezone.now() - timedelta(minutes=1))
        later = self._campaign(name="Later")
        CampaignService.schedule(later, timezone.now() + timedelta(days=3))

        self.assertEqual(send_scheduled_campaigns(), {"sent": 1})

        due.refresh_from_db()
        later.refresh_from_db()
        self.assertEqual(due.status, "sent")
        self.assertEqual(later.status, "scheduled")
