"""
Customer categorisation.

A category is a stored set of criteria. Matching customers are computed on
demand so that a category used by an SMS campaign always reflects current
spending and visit data.
"""

import logging
from datetime import timedelta
from decimal import Decimal

from django.db.models import F, Q
from django.utils import timezone

from apps.customersapp.models import Customer
from apps.customersapp.services.customer_service import CustomerService

logger = logging.getLogger(__name__)

CRITERIA_KEYS = (
    "locations",
    "deviceTypes",
    "minSpending",
    "maxSpending",
    "lastVisitDays",
    "ageMin",
    "ageMax",
    "occupations",
)


def years_ago(today, years):
    """The same calendar day ``years`` years before ``today`` (Feb 29 maps to Feb 28)."""
    try:
        return today.replace(year=today.year - years)
    except ValueError:
        return today.replace(year=today.year - years, day=28)


class CategorizationService:
    @staticmethod
    def base_queryset(location_id=None):
        queryset = Customer.objects.filter(is_active=True)
        if location_id:
            queryset = queryset.filter(location_id=location_id)
        return queryset

    @classmethod
    def customers_for_criteria(cls, criteria, location_id=None):
        """
        Return the active customers matching ``criteria``.

        Args:
            criteria: dict using the keys in ``CRITERIA_KEYS``; missing or empty
                values do not restrict the result
            location_id: optional location the caller is scoped to

        Returns:
            QuerySet of Customer annotated with ``total_spent``
        """
        criteria = criteria or {}
        queryset = CustomerService.annotate_stats(cls.base_queryset(location_id)).annotate(
            total_spent=F("device_spent") + F("sales_spent")
        )

        locations = criteria.get("locations") or []
        if locations:
            queryset = queryset.filter(location_id__in=locations)

        device_types = criteria.get("deviceTypes") or []
        if device_types:
            queryset = queryset.filter(
                Q(devices__device_type__name__in=device_types)
                | Q(devices__device_type_name__in=device_types)
            )

        if criteria.get("minSpending") not in (None, ""):
            queryset = queryset.filter(total_spent__gte=Decimal(str(criteria["minSpending"])))
        if criteria.get("maxSpending") not in (None, ""):
            queryset = queryset.filter(total_spent__lte=Decimal(str(criteria["maxSpending"])))

        if criteria.get("lastVisitDays"):
            cutoff = timezone.now() - timedelta(days=int(criteria["lastVisitDays"]))
            queryset = queryset.filter(
                Q(last_device_visit__gte=cutoff) | Q(last_sale_visit__gte=cutoff)
            )

        today = timezone.localdate()
        if criteria.get("ageMin") not in (None, ""):
            queryset = queryset.filter(date_of_birth__lte=years_ago(today, int(criteria["ageMin"])))
        if criteria.get("ageMax") not in (None, ""):
            queryset = queryset.filter(
                date_of_birth__gt=years_ago(today, int(criteria["ageMax"]) + 1)
            )

        occupations = [o for o in criteria.get("occupations") or [] if o]
        if occupations:
            occupation_filter = Q()
            for occupation in occupations:
                occupation_filter |= Q(occupation__iexact=occupation)
            queryset = queryset.filter(occupation_filter)

        return queryset.distinct().order_by("name")

    @classmethod
    def customers_for_category(cls, category, location_id=None):
        return cls.customers_for_criteria(category.criteria, location_id=location_id)
