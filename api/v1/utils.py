# api/v1/utils.py
import logging

from django.http import Http404
from rest_framework import status
from rest_framework.response import Response
from rest_framework.views import exception_handler as drf_exception_handler

from utils.exceptions import RepairShopError

logger = logging.getLogger(__name__)


def custom_exception_handler(exc, context):
    """
    Wrap DRF's default exception handler so that
    * domain errors raised by services become proper JSON responses
    * every error payload carries its ``status_code``
    * server-side failures end up in the log file
    """
    view = context.get("view")

    if isinstance(exc, RepairShopError):
        data = {"detail": str(exc.message), "status_code": exc.status_code}
        if exc.detail is not None:
            data["errors"] = exc.detail
        if exc.status_code >= status.HTTP_500_INTERNAL_SERVER_ERROR:
            logger.error(f"{exc.__class__.__name__} in {view.__class__.__name__}: {exc}")
        else:
            logger.info(f"{exc.__class__.__name__} in {view.__class__.__name__}: {exc}")
        return Response(data, status=exc.status_code)

    response = drf_exception_handler(exc, context)

    if response is None:
        logger.exception("Unhandled API exception", exc_info=exc, extra={"view": view})
        return None

    if isinstance(response.data, dict):
        response.data["status_code"] = response.status_code
    elif isinstance(response.data, list):
        response.data = {"detail": response.data, "status_code": response.status_code}

    if not isinstance(exc, Http404) and response.status_code >= status.HTTP_500_INTERNAL_SERVER_ERROR:
        logger.error("API error", exc_info=exc, extra={"view": view})

    return response
