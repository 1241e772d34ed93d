import logging

from celery import shared_task

from apps.smsapp.services.campaign_service import CampaignService
from apps.smsapp.services.sms_service import SmsService

logger = logging.getLogger(__name__)


@shared_task
def process_sms_queue(batch_size=None):
    """
    Send the next batch of pending SMS messages.

    Returns:
        dict: processed, sent, failed
    """
    return SmsService.process_queue(batch_size=batch_size)


@shared_task
def send_scheduled_campaigns():
    """Queue messages for every scheduled campaign that is due."""
    sent = CampaignService.send_scheduled_campaigns()
    if sent:
        logger.info(f"{sent} scheduled campaigns sent")
    return {"sent": sent}
