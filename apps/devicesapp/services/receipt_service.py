import logging
import secrets

from django.utils import timezone

from utils.exceptions import ServiceUnavailableError

logger = logging.getLogger(__name__)

RECEIPT_ALPHABET = "ABCDEFGHIJKLMNOPQRSTUVWXYZ234567"
RECEIPT_SUFFIX_LENGTH = 4
MAX_ATTEMPTS = 10


class ReceiptService:
    """
    Receipt numbers look like ``RCP-<LOCATIONCODE>-<YYMMDD>-<XXXX>`` where the
    suffix is random base32 text.
    """

    @staticmethod
    def build_receipt_number(location_code, when=None, suffix=None):
        when = when or timezone.localdate()
        if suffix is None:
            suffix = "".join(
                secrets.choice(RECEIPT_ALPHABET) for _ in range(RECEIPT_SUFFIX_LENGTH)
            )
        return f"RCP-{location_code.upper()}-{when:%y%m%d}-{suffix}"

    @classmethod
    def generate(cls, location):
        from apps.devicesapp.models import Device

        for _attempt in range(MAX_ATTEMPTS):
            receipt_number = cls.build_receipt_number(location.code)
            if not Device.objects.filter(receipt_number=receipt_number).exists():
                return receipt_number
            logger.warning(f"Receipt number collision on {receipt_number}, retrying")

        raise ServiceUnavailableError("Could not allocate a unique receipt number")
