import logging

from apps.customersapp.models import Customer
from apps.smsapp.models import RecipientGroupMember

logger = logging.getLogger(__name__)


class RecipientGroupService:
    @staticmethod
    def add_customers(group, customer_ids):
        """
        Add customers to ``group``; existing members are skipped.

        Returns:
            Number of customers added
        """
        existing = set(
            RecipientGroupMember.objects.filter(group=group).values_list("customer_id", flat=True)
        )
        customers = Customer.objects.filter(pk__in=customer_ids, is_active=True).exclude(
            pk__in=existing
        )
        members = [RecipientGroupMember(group=group, customer=customer) for customer in customers]
        RecipientGroupMember.objects.bulk_create(members, ignore_conflicts=True)
        logger.info(f"{len(members)} customers added to recipient group {group.name}")
        return len(members)

    @staticmethod
    def remove_customers(group, customer_ids):
        removed, _detail = RecipientGroupMember.objects.filter(
            group=group, customer_id__in=customer_ids
        ).delete()
        logger.info(f"{removed} customers removed from recipient group {group.name}")
        return removed

    @staticmethod
    def customers(group, location_id=None):
        queryset = Customer.objects.filter(group_memberships__group=group, is_active=True)
        if location_id:
            queryset = queryset.filter(location_id=location_id)
        return queryset.order_by("name")
