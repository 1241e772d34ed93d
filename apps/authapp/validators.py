from django.core.exceptions import ValidationError
from django.utils.translation import gettext_lazy as _

from utils.phone import digits_only


def validate_phone_number(value):
    """
    Accept anything with 9 to 15 digits; formatting happens at send time.
    """
    digits = digits_only(value)
    if not 9 <= len(digits) <= 15:
        raise ValidationError(
            _("Enter a valid phone number. Examples: 0911234567, +251911234567, 5551234567"),
            code="invalid_phone",
        )
    return value
