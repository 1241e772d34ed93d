"""
SMS template lookup and rendering.

Stored templates override the built-in texts per language. Rendering fills
``{placeholder}`` markers from a device; markers it does not know are left
in the text as written.
"""

import logging
import re
from decimal import Decimal

from django.conf import settings
from django.utils.translation import gettext_lazy as _

from apps.smsapp.constants import (
    COMPLETION_INFO,
    COST_INFO,
    DEFAULT_TEMPLATES,
    GENERIC_STATUS_MESSAGES,
    LANGUAGE_AMHARIC,
    LANGUAGE_ENGLISH,
    LANGUAGE_MIXED,
    LANGUAGES,
    STATUS_MESSAGES,
    TEMPLATE_KINDS,
)
from apps.smsapp.models import SmsTemplate
from utils.exceptions import ValidationError

logger = logging.getLogger(__name__)

PLACEHOLDER_RE = re.compile(r"\{(\w+)\}")


def format_amount(value):
    """1500.00 -> "1500", 1499.50 -> "1499.50"."""
    amount = Decimal(str(value))
    if amount == amount.to_integral_value():
        return str(amount.quantize(Decimal("1")))
    return str(amount.quantize(Decimal("0.01")))


def fill_placeholders(text, context):
    return PLACEHOLDER_RE.sub(
        lambda match: str(context[match.group(1)]) if match.group(1) in context else match.group(0),
        text,
    )


class TemplateService:
    @staticmethod
    def default_language():
        language = getattr(settings, "SMS_DEFAULT_LANGUAGE", LANGUAGE_AMHARIC)
        return language if language in LANGUAGES else LANGUAGE_AMHARIC

    @staticmethod
    def validate_language(language):
        if language not in LANGUAGES:
            raise ValidationError(
                _("Unsupported template language"),
                detail={"language": [f"Must be one of: {', '.join(LANGUAGES)}."]},
            )
        return language

    @classmethod
    def get_template(cls, language=None):
        """
        Template texts for ``language`` as a dict keyed by template kind.

        Falls back to the built-in defaults when no active row is stored.
        """
        language = cls.validate_language(language or cls.default_language())
        stored = SmsTemplate.objects.filter(language=language, is_active=True).first()
        if stored is None:
            return dict(DEFAULT_TEMPLATES[language], language=language, is_default=True)
        texts = {kind: getattr(stored, kind) for kind in TEMPLATE_KINDS}
        return dict(texts, language=language, is_default=False)

    @classmethod
    def get_all_templates(cls):
        return [cls.get_template(language) for language in LANGUAGES]

    @classmethod
    def update_template(cls, language, texts):
        cls.validate_language(language)
        defaults = {kind: texts[kind] for kind in TEMPLATE_KINDS if texts.get(kind)}
        template, created = SmsTemplate.objects.get_or_create(
            language=language,
            defaults=dict(DEFAULT_TEMPLATES[language], **defaults),
        )
        if not created:
            for kind, text in defaults.items():
                setattr(template, kind, text)
            template.is_active = True
            template.save()
        logger.info(f"SMS template for {language} saved")
        return cls.get_template(language)

    @classmethod
    def reset_to_default(cls, language):
        cls.validate_language(language)
        SmsTemplate.objects.update_or_create(
            language=language,
            defaults=dict(DEFAULT_TEMPLATES[language], is_active=True),
        )
        logger.info(f"SMS template for {language} reset to defaults")
        return cls.get_template(language)

    @staticmethod
    def status_message(status, language):
        if language == LANGUAGE_MIXED:
            english = STATUS_MESSAGES[LANGUAGE_ENGLISH].get(
                status, GENERIC_STATUS_MESSAGES[LANGUAGE_ENGLISH]
            )
            amharic = STATUS_MESSAGES[LANGUAGE_AMHARIC].get(
                status, GENERIC_STATUS_MESSAGES[LANGUAGE_AMHARIC]
            )
            return f"{english}\n{amharic}"
        return STATUS_MESSAGES[language].get(status, GENERIC_STATUS_MESSAGES[language])

    @classmethod
    def build_context(cls, device, language):
        total_cost = format_amount(device.total_cost) if device.total_cost else ""
        completion = (
            device.estimated_completion_date.strftime("%d/%m/%Y")
            if device.estimated_completion_date
            else ""
        )
        return {
            "customerName": device.customer.name,
            "customerPhone": device.customer.phone,
            "deviceType": device.type_label or "",
            "brand": device.brand_label or "",
            "model": device.model_label or "",
            "problemDescription": device.problem_description,
            "receiptNumber": device.receipt_number,
            "status": device.get_status_display(),
            "statusMessage": cls.status_message(device.status, language),
            "totalCost": total_cost,
            "costInfo": COST_INFO[language].format(totalCost=total_cost) if total_cost else "",
            "estimatedCompletionDate": completion,
            "completionInfo": COMPLETION_INFO[language].format(date=completion) if completion else "",
        }

    @classmethod
    def render(cls, kind, device, language=None):
        if kind not in TEMPLATE_KINDS:
            raise ValidationError(
                _("Unknown template"), detail={"kind": [f"Must be one of: {', '.join(TEMPLATE_KINDS)}."]}
            )
        language = language or cls.default_language()
        template = cls.get_template(language)
        return fill_placeholders(template[kind], cls.build_context(device, language))

    @classmethod
    def preview(cls, text, language=None, context=None):
        """Render ``text`` against sample values, overridden by ``context``."""
        language = cls.validate_language(language or cls.default_language())
        sample = {
            "customerName": "Abebe Kebede",
            "customerPhone": "+251911234567",
            "deviceType": "Smartphone",
            "brand": "Samsung",
            "model": "Galaxy S21",
            "problemDescription": "Cracked screen",
            "receiptNumber": "RCP-MAIN-240101-AB2C",
            "status": "In Progress",
            "statusMessage": cls.status_message("in_progress", language),
            "totalCost": "2500",
            "costInfo": COST_INFO[language].format(totalCost="2500"),
            "estimatedCompletionDate": "15/01/2024",
            "completionInfo": COMPLETION_INFO[language].format(date="15/01/2024"),
        }
        sample.update(context or {})
        return fill_placeholders(text, sample)
