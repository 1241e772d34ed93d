import logging

from django.db import IntegrityError, transaction
from django.utils.translation import gettext_lazy as _

from apps.devicesapp.constants import FEEDBACK_ALLOWED_STATUSES
from apps.devicesapp.models import DeviceFeedback
from apps.devicesapp.services.device_service import DeviceService
from utils.exceptions import DuplicateResourceError, ValidationError

logger = logging.getLogger(__name__)


class FeedbackService:
    @staticmethod
    def submit_feedback(receipt_number, data):
        """
        Store the customer's rating for a finished repair.

        ``overall_satisfaction`` defaults to ``rating`` when not given.
        """
        device = DeviceService.get_by_receipt(receipt_number)

        if device.status not in FEEDBACK_ALLOWED_STATUSES:
            raise ValidationError(
                _("Feedback can only be submitted once the repair is completed"),
                detail={"status": device.status},
            )
        if DeviceFeedback.objects.filter(device=device).exists():
            raise DuplicateResourceError(_("Feedback has already been submitted for this device"))

        data = dict(data)
        if not data.get("overall_satisfaction"):
            data["overall_satisfaction"] = data["rating"]
        try:
            with transaction.atomic():
                feedback = DeviceFeedback.objects.create(
                    device=device,
                    customer_id=device.customer_id,
                    location_id=device.location_id,
                    **data,
                )
        except IntegrityError:
            raise DuplicateResourceError(_("Feedback has already been submitted for this device"))

        logger.info(
            f"Feedback {feedback.overall_satisfaction}/5 received for {device.receipt_number}"
        )
        return feedback
