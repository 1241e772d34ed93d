from django.db import IntegrityError
from django.test import TestCase

from apps.smsapp.models import EthiopianSmsSettings, RecipientGroup, RecipientGroupMember, SmsQueue
from utils.testing import create_customer, create_location


class EthiopianSmsSettingsTest(TestCase):
    def test_load_creates_single_row(self):
        first = EthiopianSmsSettings.load()
        second = EthiopianSmsSettings.load()

        self.assertEqual(first.pk, second.pk)
        self.assertEqual(first.provider, "africas_talking")
        self.assertEqual(first.sender_id, "SolNet")

    def test_as_config(self):
        row = EthiopianSmsSettings.objects.create(provider="bulksms", api_key="k-1")

        config = row.as_config()

        self.assertEqual(config["provider"], "bulksms")
        self.assertEqual(config["api_key"], "k-1")
        self.assertEqual(config["custom_headers"], {})


class SmsQueueTest(TestCase):
    def test_defaults(self):
        entry = SmsQueue.objects.create(phone_number="+251911000000", message="Hi")

        self.assertEqual(entry.status, "pending")
        self.assertEqual(entry.message_type, "manual")
        self.assertEqual(entry.attempts, 0)
        self.assertEqual(str(entry), "+251911000000 [pending]")


class RecipientGroupMemberTest(TestCase):
    def test_customer_listed_once_per_group(self):
        group = RecipientGroup.objects.create(name="VIP")
        customer = create_customer(create_location())
        RecipientGroupMember.objects.create(group=group, customer=customer)

        with self.assertRaises(IntegrityError):
            RecipientGroupMember.objects.create(group=group, customer=customer)
