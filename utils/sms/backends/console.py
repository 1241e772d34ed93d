"""
Console SMS backend for the RepairShop platform.

Prints messages to stdout, which is handy while developing templates in
Amharic since the rendered text can be checked without a provider account.
"""

import logging
import sys
from typing import Dict, Optional

from django.utils import timezone

logger = logging.getLogger(__name__)

# Characters per SMS segment
GSM_SEGMENT = 160
UNICODE_SEGMENT = 70


def segment_count(message: str) -> int:
    """Number of SMS parts ``message`` needs; Ge'ez script forces UCS-2."""
    size = UNICODE_SEGMENT if any(ord(char) > 127 for char in message) else GSM_SEGMENT
    return max(1, -(-len(message) // size))


class ConsoleBackend:
    def __init__(self, stream=None):
        self.stream = stream or sys.stdout

    def is_configured(self) -> bool:
        return True

    def send(self, phone_number: str, message: str, context: Optional[Dict] = None) -> bool:
        parts = segment_count(message)
        lines = [
            "",
            f"=== SMS {timezone.now():%Y-%m-%d %H:%M:%S} ===",
            f"To: {phone_number}",
            f"Length: {len(message)} chars, {parts} part(s)",
        ]
        if context:
            lines.append(f"Context: {context}")
        lines.extend([message, "=" * 30, ""])

        self.stream.write("\n".join(lines))
        self.stream.flush()

        logger.debug(f"SMS to {phone_number} printed to console ({parts} part(s))")
        return True
