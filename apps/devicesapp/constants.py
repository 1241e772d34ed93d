"""
Device lifecycle values shared by models, services and analytics.
"""

from django.utils.translation import gettext_lazy as _

STATUS_REGISTERED = "registered"
STATUS_DIAGNOSED = "diagnosed"
STATUS_IN_PROGRESS = "in_progress"
STATUS_WAITING_PARTS = "waiting_parts"
STATUS_COMPLETED = "completed"
STATUS_READY_FOR_PICKUP = "ready_for_pickup"
STATUS_DELIVERED = "delivered"
STATUS_CANCELLED = "cancelled"

DEVICE_STATUS_CHOICES = (
    (STATUS_REGISTERED, _("Registered")),
    (STATUS_DIAGNOSED, _("Diagnosed")),
    (STATUS_IN_PROGRESS, _("In Progress")),
    (STATUS_WAITING_PARTS, _("Waiting for Parts")),
    (STATUS_COMPLETED, _("Completed")),
    (STATUS_READY_FOR_PICKUP, _("Ready for Pickup")),
    (STATUS_DELIVERED, _("Delivered")),
    (STATUS_CANCELLED, _("Cancelled")),
)
DEVICE_STATUSES = tuple(value for value, _label in DEVICE_STATUS_CHOICES)

# A device in one of these states no longer counts as an active repair
CLOSED_STATUSES = (STATUS_DELIVERED, STATUS_CANCELLED)

# Customers may rate the repair once the work is done
FEEDBACK_ALLOWED_STATUSES = (STATUS_COMPLETED, STATUS_READY_FOR_PICKUP, STATUS_DELIVERED)

PRIORITY_NORMAL = "normal"
PRIORITY_HIGH = "high"
PRIORITY_URGENT = "urgent"

PRIORITY_CHOICES = (
    (PRIORITY_NORMAL, _("Normal")),
    (PRIORITY_HIGH, _("High")),
    (PRIORITY_URGENT, _("Urgent")),
)

PAYMENT_PENDING = "pending"
PAYMENT_PAID = "paid"
PAYMENT_PARTIAL = "partial"
PAYMENT_REFUNDED = "refunded"

PAYMENT_STATUS_CHOICES = (
    (PAYMENT_PENDING, _("Pending")),
    (PAYMENT_PAID, _("Paid")),
    (PAYMENT_PARTIAL, _("Partial")),
    (PAYMENT_REFUNDED, _("Refunded")),
)
PAYMENT_STATUSES = tuple(value for value, _label in PAYMENT_STATUS_CHOICES)

TRACKING_NOT_FOUND_MESSAGE = _("Device not found. Please check your tracking code.")
