"""
Phone number normalisation.

Shops run in Ethiopia but also register North-American numbers, so the
general formatter knows both numbering plans. SMS providers in Ethiopia get
the narrower Ethiopian formatter.
"""

import re

_NON_DIGITS = re.compile(r"\D")


def digits_only(phone_number: str) -> str:
    return _NON_DIGITS.sub("", phone_number or "")


def format_ethiopian_number(phone_number: str) -> str:
    """
    Normalise a number to E.164 assuming the Ethiopian (+251) plan.

    Numbers already carrying a ``+`` are trusted as-is, and anything that does
    not match a known shape is returned unchanged.
    """
    if not phone_number:
        return phone_number
    if phone_number.startswith("+"):
        return phone_number

    cleaned = digits_only(phone_number)

    if len(cleaned) == 12 and cleaned.startswith("251"):
        return f"+{cleaned}"
    if len(cleaned) == 9 and cleaned.startswith("9"):
        return f"+251{cleaned}"
    if len(cleaned) == 10 and cleaned.startswith("09"):
        return f"+251{cleaned[1:]}"

    return phone_number


def format_phone_number(phone_number: str) -> str:
    """
    Normalise a number to E.164.

    Local Ethiopian mobile numbers (``09xxxxxxxx``) are checked before the
    generic 10-digit North-American rule.
    """
    if not phone_number:
        return phone_number
    if phone_number.startswith("+"):
        return phone_number

    cleaned = digits_only(phone_number)

    if len(cleaned) == 10 and cleaned.startswith("09"):
        return f"+251{cleaned[1:]}"
    if len(cleaned) == 10:
        return f"+1{cleaned}"
    if len(cleaned) == 11 and cleaned.startswith("1"):
        return f"+{cleaned}"

    return format_ethiopian_number(phone_number)
