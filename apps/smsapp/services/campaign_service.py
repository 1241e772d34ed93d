"""
Bulk SMS campaigns.

Sending a campaign does not talk to the provider: it writes one recipient
row and one queued SMS per unique phone number. Delivery happens through the
SMS queue like every other message.
"""

import logging

from django.db import transaction
from django.utils import timezone
from django.utils.translation import gettext_lazy as _

from apps.customersapp.models import Customer
from apps.customersapp.services.categorization_service import CategorizationService
from apps.smsapp.constants import (
    CAMPAIGN_CANCELLED,
    CAMPAIGN_EDITABLE_STATUSES,
    CAMPAIGN_SCHEDULED,
    CAMPAIGN_SENDING,
    CAMPAIGN_SENT,
)
from apps.smsapp.models import SmsCampaign, SmsCampaignRecipient
from apps.smsapp.services.recipient_group_service import RecipientGroupService
from apps.smsapp.services.sms_service import SmsService
from apps.smsapp.services.template_service import fill_placeholders
from utils.exceptions import ValidationError
from utils.locks import single_flight
from utils.phone import format_phone_number

logger = logging.getLogger(__name__)


class CampaignService:
    @staticmethod
    def target_queryset(campaign, location_id=None):
        target = campaign.target_group
        if target == "category":
            if campaign.category is None:
                raise ValidationError(_("Campaign has no customer category"), detail={"category": ["Required."]})
            return CategorizationService.customers_for_category(campaign.category, location_id)
        if target == "recipient_group":
            if campaign.recipient_group is None:
                raise ValidationError(
                    _("Campaign has no recipient group"), detail={"recipient_group": ["Required."]}
                )
            return RecipientGroupService.customers(campaign.recipient_group, location_id)
        if target == "custom":
            return CategorizationService.customers_for_criteria(campaign.custom_filters, location_id)

        queryset = Customer.objects.filter(is_active=True)
        if location_id:
            queryset = queryset.filter(location_id=location_id)
        return queryset.order_by("name")

    @classmethod
    def resolve_recipients(cls, campaign, location_id=None):
        """Customers with a phone number, one per formatted number."""
        recipients = []
        seen = set()
        for customer in cls.target_queryset(campaign, location_id):
            if not customer.phone:
                continue
            phone = format_phone_number(customer.phone)
            if phone in seen:
                continue
            seen.add(phone)
            recipients.append(customer)
        return recipients

    @staticmethod
    def personalise(message, customer):
        return fill_placeholders(message, {"customerName": customer.name})

    @classmethod
    @transaction.atomic
    def send_campaign(cls, campaign, location_id=None):
        campaign = SmsCampaign.objects.select_for_update().get(pk=campaign.pk)
        if campaign.status in (CAMPAIGN_SENT, CAMPAIGN_SENDING, CAMPAIGN_CANCELLED):
            raise ValidationError(
                _("This campaign cannot be sent"), detail={"status": campaign.status}
            )

        campaign.status = CAMPAIGN_SENDING
        campaign.save(update_fields=["status", "updated_at"])

        recipients = cls.resolve_recipients(campaign, location_id)
        for customer in recipients:
            entry = SmsService.queue_sms(
                customer.phone,
                cls.personalise(campaign.message, customer),
                message_type="campaign",
                metadata={"campaign_id": str(campaign.id), "customer_id": str(customer.id)},
            )
            SmsCampaignRecipient.objects.create(
                campaign=campaign,
                customer=customer,
                phone_number=entry.phone_number,
                queue_entry=entry,
            )

        campaign.total_count = len(recipients)
        campaign.status = CAMPAIGN_SENT
        campaign.sent_at = timezone.now()
        campaign.save(update_fields=["total_count", "status", "sent_at", "updated_at"])
        logger.info(f"Campaign {campaign.name} queued for {len(recipients)} recipients")
        return campaign

    @staticmethod
    def schedule(campaign, when):
        if campaign.status not in CAMPAIGN_EDITABLE_STATUSES:
            raise ValidationError(_("This campaign cannot be scheduled"), detail={"status": campaign.status})
        if when is None or when <= timezone.now():
            raise ValidationError(
                _("Scheduled date must be in the future"),
                detail={"scheduled_date": ["Must be in the future."]},
            )
        campaign.scheduled_date = when
        campaign.status = CAMPAIGN_SCHEDULED
        campaign.save(update_fields=["scheduled_date", "status", "updated_at"])
        logger.info(f"Campaign {campaign.name} scheduled for {when}")
        return campaign

    @staticmethod
    def cancel(campaign):
        if campaign.status not in CAMPAIGN_EDITABLE_STATUSES:
            raise ValidationError(_("This campaign cannot be cancelled"), detail={"status": campaign.status})
        campaign.status = CAMPAIGN_CANCELLED
        campaign.save(update_fields=["status", "updated_at"])
        return campaign

    @staticmethod
    def ensure_editable(campaign):
        if campaign.status not in CAMPAIGN_EDITABLE_STATUSES:
            raise ValidationError(
                _("Only draft or scheduled campaigns can be changed"),
                detail={"status": campaign.status},
            )

    @classmethod
    @single_flight("sms-scheduled-campaigns", busy_result=0)
    def send_scheduled_campaigns(cls):
        """Send every scheduled campaign whose date has passed."""
        due = SmsCampaign.objects.filter(
            status=CAMPAIGN_SCHEDULED, scheduled_date__lte=timezone.now()
        )
        sent = 0
        for campaign in due:
            try:
                cls.send_campaign(campaign)
                sent += 1
            except ValidationError as e:
                logger.warning(f"Scheduled campaign {campaign.id} skipped: {e}")
        return sent
