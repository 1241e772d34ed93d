"""
SMS sending functionality for the RepairShop platform.

This module provides a central function for sending SMS messages through
configurable backends. Backends are plain classes with a
``send(phone_number, message, context=None) -> bool`` method.
"""

import importlib
import logging
from typing import Dict, Optional

from django.conf import settings

logger = logging.getLogger(__name__)

DEFAULT_BACKEND = "utils.sms.backends.dummy.DummyBackend"


def get_backend(backend: Optional[str] = None, **kwargs):
    """
    Instantiate an SMS backend from its dotted path.

    Args:
        backend: Optional backend path override, defaults to ``settings.SMS_BACKEND``
        **kwargs: Passed to the backend constructor

    Returns:
        Backend instance
    """
    if not backend:
        backend = getattr(settings, "SMS_BACKEND", DEFAULT_BACKEND)

    module_path, class_name = backend.rsplit(".", 1)
    module = importlib.import_module(module_path)
    backend_class = getattr(module, class_name)
    return backend_class(**kwargs)


def is_configured(backend: Optional[str] = None) -> bool:
    """Whether the configured backend would actually reach a provider."""
    try:
        instance = get_backend(backend)
    except Exception as e:
        logger.warning(f"SMS backend cannot be loaded: {e}")
        return False
    return bool(getattr(instance, "is_configured", lambda: True)())


def send_sms(
    phone_number: str,
    message: str,
    context: Optional[Dict] = None,
    backend: Optional[str] = None,
    fail_silently: bool = False,
) -> bool:
    """
    Send an SMS message using the configured backend.

    Args:
        phone_number: Recipient phone number
        message: Message content
        context: Optional extra data passed through to the backend
        backend: Optional backend path override
        fail_silently: Whether to suppress exceptions

    Returns:
        True if successful, False otherwise
    """
    if not phone_number or not message:
        if fail_silently:
            return False
        raise ValueError("Phone number and message are required")

    try:
        backend_instance = get_backend(backend)
    except (ImportError, AttributeError, ValueError) as e:
        logger.error(f"Error loading SMS backend '{backend or settings.SMS_BACKEND}': {str(e)}")
        if fail_silently:
            return False
        raise

    try:
        return backend_instance.send(phone_number, message, context=context)
    except Exception as e:
        logger.error(f"Error sending SMS to {phone_number}: {str(e)}")
        if fail_silently:
            return False
        raise
