"""
Development settings for the RepairShop project.

These settings override the base settings for local development environments.
"""

from .base import *  # noqa: F401,F403

DEBUG = config("DEBUG", default=True, cast=bool)

ALLOWED_HOSTS = ["*"]

CORS_ALLOW_ALL_ORIGINS = True

# Print outgoing mail and SMS instead of sending them
EMAIL_BACKEND = "django.core.mail.backends.console.EmailBackend"
SMS_BACKEND = config("SMS_BACKEND", default="utils.sms.backends.console.ConsoleBackend")

CELERY_TASK_ALWAYS_EAGER = config("CELERY_TASK_ALWAYS_EAGER", default=True, cast=bool)

LOGGING["loggers"]["apps"]["level"] = "DEBUG"
