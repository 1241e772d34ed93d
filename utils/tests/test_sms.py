import io
from unittest.mock import MagicMock, patch

import requests
from django.test import SimpleTestCase, TestCase, override_settings
from twilio.base.exceptions import TwilioRestException

from apps.smsapp.models import EthiopianSmsSettings
from utils.sms import sender
from utils.sms.backends.console import ConsoleBackend, segment_count
from utils.sms.backends.dummy import DummyBackend
from utils.sms.backends.ethiopian import EthiopianBackend, load_config
from utils.sms.backends.twilio import TwilioBackend

MISSING_BACKEND = "utils.sms.backends.missing.NopeBackend"


class SenderTest(SimpleTestCase):
    def test_default_backend_comes_from_settings(self):
        self.assertIsInstance(sender.get_backend(), DummyBackend)
        self.assertTrue(sender.send_sms("+251911223344", "Selam"))

    def test_missing_phone_or_message(self):
        with self.assertRaises(ValueError):
            sender.send_sms("", "Selam")
        self.assertFalse(sender.send_sms("+251911223344", "", fail_silently=True))

    def test_unknown_backend(self):
        with self.assertRaises(ImportError):
            sender.send_sms("+251911223344", "Selam", backend=MISSING_BACKEND)
        self.assertFalse(sender.send_sms("+251911223344", "Selam", backend=MISSING_BACKEND, fail_silently=True))
        self.assertFalse(sender.is_configured(MISSING_BACKEND))

    @patch.object(DummyBackend, "send", side_effect=RuntimeError("boom"))
    def test_backend_errors(self, mock_send):
        with self.assertRaises(RuntimeError):
            sender.send_sms("+251911223344", "Selam")
        self.assertFalse(sender.send_sms("+251911223344", "Selam", fail_silently=True))


class ConsoleBackendTest(SimpleTestCase):
    def test_writes_message(self):
        stream = io.StringIO()

        self.assertTrue(ConsoleBackend(stream=stream).send("+251911223344", "Selam"))

        self.assertIn("To: +251911223344", stream.getvalue())
        self.assertIn("Selam", stream.getvalue())
        self.assertIn("Length: 5 chars, 1 part(s)", stream.getvalue())

    def test_segment_count(self):
        self.assertEqual(segment_count("a" * 160), 1)
        self.assertEqual(segment_count("a" * 161), 2)
        self.assertEqual(segment_count("\u1230" * 71), 2)
        self.assertEqual(segment_count(""), 1)


class EthiopianBackendTest(TestCase):
    def _response(self, status_code=200, text="ok"):
        response = MagicMock(status_code=status_code, text=text)
        return response

    @patch("utils.sms.backends.ethiopian.requests.post")
    def test_demo_mode_without_credentials(self, mock_post):
        backend = EthiopianBackend(config={"provider": "bulksms"})

        self.assertFalse(backend.is_configured())
        self.assertTrue(backend.send("0911223344", "Selam"))
        mock_post.assert_not_called()

    @patch("utils.sms.backends.ethiopian.requests.post")
    def test_africas_talking(self, mock_post):
        mock_post.return_value = self._response()
        backend = EthiopianBackend(config={"provider": "africas_talking", "api_key": "key", "username": "shop"})

        self.assertTrue(backend.send("0911223344", "Selam"))

        args, kwargs = mock_post.call_args
        self.assertEqual(args[0], "https://api.africastalking.com/version1/messaging")
        self.assertEqual(kwargs["data"]["to"], "+251911223344")
        self.assertEqual(kwargs["data"]["from"], "SolNet")
        self.assertEqual(kwargs["headers"]["apiKey"], "key")

    @patch("utils.sms.backends.ethiopian.requests.post")
    def test_ethio_telecom_uses_credentials_and_base_url(self, mock_post):
        mock_post.return_value = self._response()
        backend = EthiopianBackend(
            config={
                "provider": "ethio_telecom",
                "username": "shop",
                "password": "secret",
                "sender_id": "FIXIT",
                "base_url": "https://gateway.example.et/send",
            }
        )

        self.assertTrue(backend.send("+251911223344", "Selam"))

        args, kwargs = mock_post.call_args
        self.assertEqual(args[0], "https://gateway.example.et/send")
        self.assertEqual(kwargs["json"]["sender_id"], "FIXIT")
        self.assertEqual(kwargs["json"]["encoding"], "UTF-8")

    @patch("utils.sms.backends.ethiopian.requests.post")
    def test_gateway_rejection(self, mock_post):
        mock_post.return_value = self._response(status_code=401, text="unauthorized")
        backend = EthiopianBackend(config={"provider": "bulksms", "api_key": "key"})

        self.assertFalse(backend.send("0911223344", "Selam"))

    @patch("utils.sms.backends.ethiopian.requests.post", side_effect=requests.Timeout("slow"))
    def test_network_error(self, mock_post):
        backend = EthiopianBackend(config={"provider": "local_aggregator", "api_key": "key"})

        self.assertFalse(backend.send("0911223344", "Selam"))

    def test_custom_provider_without_endpoint(self):
        backend = EthiopianBackend(config={"provider": "custom", "api_key": "key"})

        self.assertFalse(backend.send("0911223344", "Selam"))

    def test_unknown_provider(self):
        backend = EthiopianBackend(config={"provider": "carrier_pigeon", "api_key": "key"})

        self.assertFalse(backend.send("0911223344", "Selam"))

    def test_load_config_prefers_stored_settings(self):
        self.assertEqual(load_config()["sender_id"], "SolNet")

        stored = EthiopianSmsSettings.load()
        stored.provider = "bulksms"
        stored.api_key = "stored-key"
        stored.save()

        config = load_config()
        self.assertEqual(config["provider"], "bulksms")
        self.assertEqual(config["api_key"], "stored-key")


class TwilioBackendTest(SimpleTestCase):
    @patch("utils.sms.backends.twilio.Client")
    def test_send(self, mock_client):
        mock_client.return_value.messages.create.return_value = MagicMock(sid="SM123")
        backend = TwilioBackend("AC123", "token", "+15550000000")

        self.assertTrue(backend.send("4155550100", "Your phone is ready"))

        mock_client.assert_called_once_with("AC123", "token")
        mock_client.return_value.messages.create.assert_called_once_with(
            body="Your phone is ready", from_="+15550000000", to="+14155550100"
        )

    @patch("utils.sms.backends.twilio.Client")
    def test_rejected_by_twilio(self, mock_client):
        mock_client.return_value.messages.create.side_effect = TwilioRestException(
            400, "/Messages", msg="Invalid number"
        )
        backend = TwilioBackend("AC123", "token", "+15550000000")

        self.assertFalse(backend.send("4155550100", "Hi"))

    @override_settings(TWILIO_ACCOUNT_SID="", TWILIO_AUTH_TOKEN="", TWILIO_FROM_NUMBER="")
    def test_not_configured(self):
        backend = TwilioBackend()

        self.assertFalse(backend.is_configured())
        with self.assertRaises(ValueError):
            backend.send("4155550100", "Hi")
