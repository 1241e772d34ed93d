import logging
from decimal import Decimal

from django.db.models import (
    DecimalField,
    OuterRef,
    Q,
    Subquery,
    Sum,
    Value,
)
from django.db.models.functions import Coalesce
from django.utils.translation import gettext_lazy as _

from apps.customersapp.models import Customer
from utils.exceptions import ValidationError

logger = logging.getLogger(__name__)

MONEY = DecimalField(max_digits=12, decimal_places=2)
ZERO = Value(Decimal("0.00"), output_field=MONEY)


def _sum_subquery(queryset, field):
    """Correlated ``SUM(field)`` per customer, for use in ``annotate``."""
    return Subquery(
        queryset.filter(customer=OuterRef("pk"))
        .order_by()
        .values("customer")
        .annotate(total=Sum(field))
        .values("total")[:1],
        output_field=MONEY,
    )


def _latest_subquery(queryset):
    return Subquery(
        queryset.filter(customer=OuterRef("pk")).order_by("-created_at").values("created_at")[:1]
    )


class CustomerService:
    """
    Service class for customer lookups and spending statistics
    """

    @staticmethod
    def annotate_stats(queryset):
        """
        Annotate customers with spending and last-visit figures.

        Spending counts delivered repairs and sales. A visit is either a device
        intake or a sale.
        """
        from apps.devicesapp.models import Device
        from apps.salesapp.models import Sale

        devices = Device.objects.filter(is_active=True)
        delivered = devices.filter(status="delivered")
        sales = Sale.objects.all()

        return queryset.annotate(
            device_spent=Coalesce(_sum_subquery(delivered, "total_cost"), ZERO),
            sales_spent=Coalesce(_sum_subquery(sales, "total_amount"), ZERO),
            last_device_visit=_latest_subquery(devices),
            last_sale_visit=_latest_subquery(sales),
        )

    @staticmethod
    def search(queryset, term):
        if not term:
            return queryset
        return queryset.filter(
            Q(name__icontains=term) | Q(phone__icontains=term) | Q(email__icontains=term)
        )

    @classmethod
    def get_customer_stats(cls, customer):
        """
        Get totals for one customer

        Returns:
            dict: total_devices, active_devices, total_spent, visit_count, last_visit
        """
        from apps.devicesapp.constants import CLOSED_STATUSES

        annotated = cls.annotate_stats(Customer.objects.filter(pk=customer.pk)).get()
        devices = customer.devices.filter(is_active=True)

        visits = [v for v in (annotated.last_device_visit, annotated.last_sale_visit) if v]
        return {
            "total_devices": devices.count(),
            "active_devices": devices.exclude(status__in=CLOSED_STATUSES).count(),
            "total_spent": float(annotated.device_spent + annotated.sales_spent),
            "visit_count": devices.count() + customer.sales.count(),
            "last_visit": max(visits) if visits else None,
        }

    @staticmethod
    def ensure_at_location(customer, location_id):
        """
        Reject records that would tie a customer to another branch.

        Raises:
            ValidationError: the customer is registered at a different location
        """
        if customer is None or location_id is None:
            return customer
        if str(customer.location_id) != str(location_id):
            raise ValidationError(
                _("Customer belongs to another location"),
                detail={"customer": ["Customer is not registered at this location."]},
            )
        return customer

    @staticmethod
    def find_by_phone(phone, location_id=None):
        from utils.phone import digits_only

        digits = digits_only(phone)
        if len(digits) < 9:
            return Customer.objects.none()
        queryset = Customer.objects.filter(phone__endswith=digits[-9:], is_active=True)
        if location_id:
            queryset = queryset.filter(location_id=location_id)
        return queryset

    @staticmethod
    def deactivate(customer):
        customer.is_active = False
        customer.save(update_fields=["is_active", "updated_at"])
        logger.info(f"Customer {customer.pk} deactivated")
