"""
Twilio SMS backend for the RepairShop platform.

Used by shops outside Ethiopia. Requires these settings:
- TWILIO_ACCOUNT_SID
- TWILIO_AUTH_TOKEN
- TWILIO_FROM_NUMBER
"""

import logging
from typing import Dict, Optional

from django.conf import settings
from twilio.base.exceptions import TwilioRestException
from twilio.rest import Client

from utils.phone import format_phone_number

logger = logging.getLogger(__name__)


class TwilioBackend:
    """
    SMS backend that sends messages through Twilio.
    """

    def __init__(self, account_sid=None, auth_token=None, from_number=None):
        self.account_sid = account_sid or getattr(settings, "TWILIO_ACCOUNT_SID", None)
        self.auth_token = auth_token or getattr(settings, "TWILIO_AUTH_TOKEN", None)
        self.from_number = from_number or getattr(settings, "TWILIO_FROM_NUMBER", None)
        self._client = None

    def is_configured(self) -> bool:
        return bool(self.account_sid and self.auth_token and self.from_number)

    @property
    def client(self) -> Client:
        if self._client is None:
            if not self.is_configured():
                raise ValueError("Twilio settings not configured correctly")
            self._client = Client(self.account_sid, self.auth_token)
        return self._client

    def send(self, phone_number: str, message: str, context: Optional[Dict] = None) -> bool:
        """
        Send an SMS message through Twilio.

        Returns:
            True if Twilio accepted the message, False otherwise
        """
        phone_number = format_phone_number(phone_number)
        try:
            message_obj = self.client.messages.create(
                body=message, from_=self.from_number, to=phone_number
            )
        except TwilioRestException as e:
            logger.error(f"Failed to send SMS to {phone_number}: {e.msg}")
            return False

        logger.info(f"SMS sent to {phone_number} (SID: {message_obj.sid})")
        return True
