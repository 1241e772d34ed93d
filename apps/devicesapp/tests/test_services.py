import re
from datetime import date
from decimal import Decimal
from unittest.mock import patch

from django.test import TestCase

from apps.devicesapp.constants import TRACKING_NOT_FOUND_MESSAGE
from apps.devicesapp.models import DeviceFeedback, DeviceStatusHistory
from apps.devicesapp.services.device_service import DeviceService, resolve_payment_status
from apps.devicesapp.services.feedback_service import FeedbackService
from apps.devicesapp.services.receipt_service import ReceiptService
from apps.notificationsapp.models import Notification
from apps.smsapp.models import SmsQueue
from utils.exceptions import (
    DuplicateResourceError,
    ResourceNotFoundError,
    ServiceUnavailableError,
    ValidationError,
)
from utils.testing import create_admin, create_customer, create_device, create_location, create_user


class ReceiptServiceTest(TestCase):
    def test_build_receipt_number(self):
        number = ReceiptService.build_receipt_number("add01", when=date(2024, 3, 7), suffix="AB2C")
        self.assertEqual(number, "RCP-ADD01-240307-AB2C")

    def test_random_suffix_uses_base32_alphabet(self):
        number = ReceiptService.build_receipt_number("BOL")
        self.assertRegex(number, r"^RCP-BOL-\d{6}-[A-Z2-7]{4}$")

    def test_generate_gives_up_after_repeated_collisions(self):
        location = create_location(code="COL")
        customer = create_customer(location)
        create_device(customer, receipt_number="RCP-COL-240101-AAAA")

        with patch.object(ReceiptService, "build_receipt_number", return_value="RCP-COL-240101-AAAA"):
            with self.assertRaises(ServiceUnavailableError):
                ReceiptService.generate(location)


class ResolvePaymentStatusTest(TestCase):
    def test_explicit_value_wins(self):
        self.assertEqual(resolve_payment_status("delivered", Decimal("100"), "pending", "partial"), "partial")

    def test_delivered_with_cost_is_paid(self):
        self.assertEqual(resolve_payment_status("delivered", Decimal("100"), "pending"), "paid")

    def test_completed_with_cost_is_pending(self):
        self.assertEqual(resolve_payment_status("completed", Decimal("100"), "partial"), "pending")

    def test_free_repair_is_paid(self):
        self.assertEqual(resolve_payment_status("completed", None, "pending"), "paid")

    def test_other_statuses_keep_current(self):
        self.assertEqual(resolve_payment_status("in_progress", Decimal("100"), "partial"), "partial")


class DeviceServiceTest(TestCase):
    def setUp(self):
        self.location = create_location(code="ADD")
        self.admin = create_admin()
        self.manager = create_user(role="manager", location=self.location)
        self.technician = create_user(location=self.location)
        self.customer = create_customer(self.location, phone="0911223344")

    def _register(self, **extra):
        data = {
            "customer": self.customer,
            "device_type_name": "Smartphone",
            "brand_name": "Samsung",
            "problem_description": "Does not charge",
            "total_cost": Decimal("800.00"),
        }
        data.update(extra)
        return DeviceService.register_device(data, user=self.technician)

    def test_register_device(self):
        device = self._register()

        self.assertTrue(re.match(r"^RCP-ADD-\d{6}-[A-Z2-7]{4}$", device.receipt_number))
        self.assertEqual(device.location, self.location)
        self.assertEqual(device.status, "registered")

        history = DeviceStatusHistory.objects.get(device=device)
        self.assertIsNone(history.old_status)
        self.assertEqual(history.new_status, "registered")
        self.assertEqual(history.changed_by, self.technician)

    def test_register_notifies_admins_and_queues_sms(self):
        device = self._register()

        recipients = set(
            Notification.objects.filter(notification_type__name="device_registered").values_list(
                "recipient_id", flat=True
            )
        )
        self.assertEqual(recipients, {self.admin.id, self.manager.id})

        sms = SmsQueue.objects.get()
        self.assertEqual(sms.phone_number, "+251911223344")
        self.assertEqual(sms.message_type, "device_registration")
        self.assertIn(device.receipt_number, sms.message)

    @patch("apps.smsapp.services.sms_service.SmsService.send_device_sms", side_effect=RuntimeError("boom"))
    def test_sms_failure_does_not_undo_registration(self, mock_send):
        device = self._register()

        self.assertTrue(device.pk)
        self.assertEqual(DeviceStatusHistory.objects.filter(device=device).count(), 1)
        mock_send.assert_called_once()

    def test_register_rejects_customer_from_other_location(self):
        other = create_location(code="PIA")

        with self.assertRaises(ValidationError) as ctx:
            self._register(location_id=other.id)

        self.assertIn("customer", ctx.exception.detail)
        self.assertFalse(self.customer.devices.exists())

    def test_update_status_records_history(self):
        device = self._register()

        DeviceService.update_status(device, "diagnosed", user=self.technician, notes="Battery swollen")

        device.refresh_from_db()
        self.assertEqual(device.status, "diagnosed")
        entry = device.status_history.order_by("-created_at").first()
        self.assertEqual((entry.old_status, entry.new_status), ("registered", "diagnosed"))
        self.assertEqual(entry.notes, "Battery swollen")

    def test_update_status_rejects_same_status(self):
        device = self._register()

        with self.assertRaises(ValidationError):
            DeviceService.update_status(device, "registered")

    def test_update_status_rejects_unknown_status(self):
        device = self._register()

        with self.assertRaises(ValidationError):
            DeviceService.update_status(device, "lost")

    def test_delivered_sets_dates_and_payment(self):
        device = self._register()

        DeviceService.update_status(device, "delivered")

        device.refresh_from_db()
        self.assertIsNotNone(device.delivered_at)
        self.assertIsNotNone(device.actual_completion_date)
        self.assertEqual(device.payment_status, "paid")

    def test_ready_for_pickup_uses_pickup_template(self):
        device = self._register()

        DeviceService.update_status(device, "ready_for_pickup")

        latest = SmsQueue.objects.order_by("-created_at").first()
        self.assertEqual(latest.message_type, "ready_for_pickup")

    def test_update_payment_status_validates(self):
        device = self._register()

        with self.assertRaises(ValidationError):
            DeviceService.update_payment_status(device, "free")

        DeviceService.update_payment_status(device, "partial")
        device.refresh_from_db()
        self.assertEqual(device.payment_status, "partial")

    def test_assignment_notifies_technician(self):
        device = self._register()

        device.assigned_to = self.technician
        device.save()

        self.assertTrue(
            Notification.objects.filter(
                recipient=self.technician, notification_type__name="device_assigned"
            ).exists()
        )

    def test_track_is_case_insensitive(self):
        device = self._register()

        result = DeviceService.track(device.receipt_number.lower())

        self.assertEqual(result["receipt_number"], device.receipt_number)
        self.assertEqual(result["location"]["name"], self.location.name)
        self.assertFalse(result["feedback_submitted"])
        self.assertEqual([entry["status"] for entry in result["history"]], ["registered"])
        self.assertNotIn("customer", result)

    def test_track_unknown_receipt(self):
        with self.assertRaises(ResourceNotFoundError) as ctx:
            DeviceService.track("RCP-NOPE")
        self.assertEqual(str(ctx.exception), TRACKING_NOT_FOUND_MESSAGE)

    def test_track_ignores_deactivated_devices(self):
        device = self._register()
        DeviceService.deactivate(device)

        with self.assertRaises(ResourceNotFoundError):
            DeviceService.get_by_receipt(device.receipt_number)


class FeedbackServiceTest(TestCase):
    def setUp(self):
        self.customer = create_customer(create_location())
        self.device = create_device(self.customer, status="delivered")

    def test_submit_feedback_defaults_overall_to_rating(self):
        feedback = FeedbackService.submit_feedback(self.device.receipt_number, {"rating": 4})

        self.assertEqual(feedback.overall_satisfaction, 4)
        self.assertEqual(feedback.customer, self.customer)
        self.assertEqual(feedback.location_id, self.device.location_id)

    def test_feedback_only_after_completion(self):
        device = create_device(self.customer, status="in_progress")

        with self.assertRaises(ValidationError):
            FeedbackService.submit_feedback(device.receipt_number, {"rating": 5})

    def test_feedback_only_once(self):
        FeedbackService.submit_feedback(self.device.receipt_number, {"rating": 5})

        with self.assertRaises(DuplicateResourceError):
            FeedbackService.submit_feedback(self.device.receipt_number, {"rating": 3})
        self.assertEqual(DeviceFeedback.objects.count(), 1)
