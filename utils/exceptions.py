"""
Custom exceptions for the RepairShop platform.

Services raise these instead of DRF exceptions so they can be used outside
request handling (Celery tasks, management commands). The API exception
handler turns them into JSON responses.
"""

from typing import Any

from django.utils.translation import gettext_lazy as _
from rest_framework import status


class RepairShopError(Exception):
    """
    Base exception for all RepairShop domain errors.

    Attributes:
        message: Error message
        detail: Additional error details (field errors, ids, ...)
        status_code: HTTP status code for API responses
    """

    default_message = _("An error occurred")
    default_status_code = status.HTTP_400_BAD_REQUEST

    def __init__(self, message: str = None, detail: Any = None, status_code: int = None):
        self.message = message if message else self.default_message
        self.detail = detail
        self.status_code = status_code or self.default_status_code
        super().__init__(self.message)

    def __str__(self):
        return str(self.message)


class ValidationError(RepairShopError):
    """Invalid input that passed serializer validation but breaks a business rule."""

    default_message = _("Validation error")


class PermissionDeniedError(RepairShopError):
    default_message = _("Permission denied")
    default_status_code = status.HTTP_403_FORBIDDEN


class ResourceNotFoundError(RepairShopError):
    default_message = _("Resource not found")
    default_status_code = status.HTTP_404_NOT_FOUND


class DuplicateResourceError(RepairShopError):
    default_message = _("Resource already exists")
    default_status_code = status.HTTP_409_CONFLICT


class ServiceUnavailableError(RepairShopError):
    default_message = _("Service unavailable")
    default_status_code = status.HTTP_503_SERVICE_UNAVAILABLE


class ExternalServiceError(RepairShopError):
    """
    Raised by integrations (SMS providers) when the remote side rejects a request.
    """

    default_message = _("External service error")
    default_status_code = status.HTTP_502_BAD_GATEWAY
