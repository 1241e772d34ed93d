"""
Ethiopian SMS gateway backend.

Supports the gateways local shops actually use: Africa's Talking, BulkSMS,
Ethio Telecom, a local aggregator, or any custom HTTP endpoint. Credentials
come from the ``EthiopianSmsSettings`` row managed through the API, falling
back to ``settings.ETHIOPIAN_SMS``.

Without any credentials the backend runs in demo mode: messages are logged
and reported as sent so a fresh install can be exercised end to end.
"""

import logging
from typing import Dict, Optional

import requests
from django.conf import settings

from utils.phone import format_ethiopian_number

logger = logging.getLogger(__name__)

DEFAULT_SENDER_ID = "SolNet"

PROVIDER_URLS = {
    "africas_talking": "https://api.africastalking.com/version1/messaging",
    "bulksms": "https://api.bulksms.com/v1/messages",
    "ethio_telecom": "https://sms.ethiotelecom.et/api/send",
    "local_aggregator": "https://api.ethiopiansms.com/send",
}

PROVIDERS = ("africas_talking", "bulksms", "ethio_telecom", "local_aggregator", "custom")


def _config_from_settings() -> Dict:
    conf = getattr(settings, "ETHIOPIAN_SMS", {})
    return {
        "provider": conf.get("PROVIDER", "africas_talking"),
        "username": conf.get("USERNAME", ""),
        "password": conf.get("PASSWORD", ""),
        "api_key": conf.get("API_KEY", ""),
        "sender_id": conf.get("SENDER_ID", DEFAULT_SENDER_ID),
        "base_url": conf.get("BASE_URL", ""),
        "custom_endpoint": "",
        "custom_headers": {},
    }


def load_config() -> Dict:
    """
    Return the active gateway configuration.

    The stored settings row wins over Django settings once an admin has saved it.
    """
    from apps.smsapp.models import EthiopianSmsSettings

    stored = EthiopianSmsSettings.objects.first()
    if stored is None or not stored.provider:
        return _config_from_settings()
    return stored.as_config()


class EthiopianBackend:
    """
    SMS backend posting to an Ethiopian gateway over HTTP.
    """

    def __init__(self, config: Optional[Dict] = None, timeout: Optional[int] = None):
        self.config = config if config is not None else load_config()
        self.timeout = timeout or getattr(settings, "ETHIOPIAN_SMS", {}).get("TIMEOUT", 15)

    @property
    def provider(self) -> str:
        return self.config.get("provider") or "africas_talking"

    @property
    def sender_id(self) -> str:
        return self.config.get("sender_id") or DEFAULT_SENDER_ID

    def has_credentials(self) -> bool:
        return bool(
            self.config.get("api_key")
            or (self.config.get("username") and self.config.get("password"))
            or self.config.get("custom_endpoint")
        )

    def is_configured(self) -> bool:
        return self.has_credentials()

    def send(self, phone_number: str, message: str, context: Optional[Dict] = None) -> bool:
        """
        Send ``message`` to ``phone_number`` via the configured gateway.

        Returns:
            True when the gateway answered HTTP 200 (or in demo mode)
        """
        if not self.has_credentials():
            logger.info(
                f"Ethiopian SMS (DEMO MODE) via {self.provider} to {phone_number}: {message[:50]}..."
            )
            return True

        handler = getattr(self, f"_send_via_{self.provider}", None)
        if handler is None:
            logger.error(f"Unknown Ethiopian SMS provider: {self.provider}")
            return False

        try:
            response = handler(format_ethiopian_number(phone_number), message)
        except requests.RequestException as e:
            logger.error(f"{self.provider} SMS error for {phone_number}: {e}")
            return False

        if response.status_code != 200:
            logger.error(
                f"{self.provider} rejected SMS to {phone_number}: "
                f"HTTP {response.status_code} {response.text[:200]}"
            )
            return False

        logger.info(f"SMS sent to {phone_number} via {self.provider}")
        return True

    # ------------------------------------------------------------------
    # Provider adapters
    # ------------------------------------------------------------------
    def _url(self) -> str:
        return self.config.get("base_url") or PROVIDER_URLS[self.provider]

    def _headers(self, content_type="application/json") -> Dict:
        headers = {"Content-Type": content_type}
        headers.update(self.config.get("custom_headers") or {})
        return headers

    def _send_via_africas_talking(self, to, message):
        payload = {
            "username": self.config.get("username") or "sandbox",
            "to": to,
            "message": message,
            "from": self.sender_id,
        }
        headers = self._headers("application/x-www-form-urlencoded")
        headers["apiKey"] = self.config.get("api_key") or ""
        return requests.post(self._url(), data=payload, headers=headers, timeout=self.timeout)

    def _send_via_bulksms(self, to, message):
        payload = {
            "api_key": self.config.get("api_key"),
            "sender_id": self.sender_id,
            "phone": to,
            "message": message,
        }
        return requests.post(self._url(), json=payload, headers=self._headers(), timeout=self.timeout)

    def _send_via_ethio_telecom(self, to, message):
        payload = {
            "username": self.config.get("username"),
            "password": self.config.get("password"),
            "sender_id": self.sender_id,
            "phone": to,
            "message": message,
            "message_type": "text",
            "encoding": "UTF-8",
        }
        return requests.post(self._url(), json=payload, headers=self._headers(), timeout=self.timeout)

    def _send_via_local_aggregator(self, to, message):
        payload = {
            "api_key": self.config.get("api_key"),
            "sender_id": self.sender_id,
            "phone": to,
            "message": message,
        }
        return requests.post(self._url(), json=payload, headers=self._headers(), timeout=self.timeout)

    def _send_via_custom(self, to, message):
        endpoint = self.config.get("custom_endpoint")
        if not endpoint:
            raise requests.RequestException("Custom provider selected without an endpoint")
        payload = {"to": to, "message": message, "from": self.sender_id}
        return requests.post(endpoint, json=payload, headers=self._headers(), timeout=self.timeout)
