"""
Dummy SMS backend.

Logs messages without sending them. Used by the test settings.
"""

import logging
from typing import Dict, Optional

logger = logging.getLogger(__name__)


class DummyBackend:
    """
    SMS backend that does nothing but log.
    """

    def is_configured(self) -> bool:
        return True

    def send(self, phone_number: str, message: str, context: Optional[Dict] = None) -> bool:
        logger.info(f"DUMMY SMS to {phone_number}: {message[:50]}...")
        return True
