from django.utils.translation import gettext_lazy as _

CATEGORY_CHOICES = (
    ("device", _("Device")),
    ("inventory", _("Inventory")),
    ("appointment", _("Appointment")),
    ("sales", _("Sales")),
    ("system", _("System")),
    ("customer", _("Customer")),
)

PRIORITY_LOW = "low"
PRIORITY_NORMAL = "normal"
PRIORITY_HIGH = "high"
PRIORITY_URGENT = "urgent"

PRIORITY_CHOICES = (
    (PRIORITY_LOW, _("Low")),
    (PRIORITY_NORMAL, _("Normal")),
    (PRIORITY_HIGH, _("High")),
    (PRIORITY_URGENT, _("Urgent")),
)

STATUS_UNREAD = "unread"
STATUS_READ = "read"
STATUS_ARCHIVED = "archived"

STATUS_CHOICES = (
    (STATUS_UNREAD, _("Unread")),
    (STATUS_READ, _("Read")),
    (STATUS_ARCHIVED, _("Archived")),
)

CHANNELS = ("email", "sms", "push", "in_app")

# Types the system itself sends; created with these defaults on first use
SYSTEM_TYPES = {
    "device_registered": {
        "category": "device",
        "default_priority": PRIORITY_NORMAL,
        "description": "A device was registered for repair",
    },
    "device_status_update": {
        "category": "device",
        "default_priority": PRIORITY_NORMAL,
        "description": "A device moved to a new repair status",
    },
    "device_assigned": {
        "category": "device",
        "default_priority": PRIORITY_NORMAL,
        "description": "A device was assigned to a technician",
    },
    "low_stock": {
        "category": "inventory",
        "default_priority": PRIORITY_HIGH,
        "description": "An inventory item is at or below its minimum level",
    },
    "appointment_scheduled": {
        "category": "appointment",
        "default_priority": PRIORITY_NORMAL,
        "description": "A customer appointment was booked",
    },
    "sms_failed": {
        "category": "system",
        "default_priority": PRIORITY_HIGH,
        "description": "An SMS could not be delivered",
    },
}

# Alerts about SMS delivery never go out over SMS themselves
SMS_CHANNEL_EXCLUDED_TYPES = ("sms_failed",)
