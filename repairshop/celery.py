"""
Celery configuration for the RepairShop platform.

This module sets up the Celery application used for background work such as
draining the SMS queue, sending scheduled campaigns and nightly housekeeping.
"""

import logging
import os

from celery import Celery
from celery.signals import task_failure, task_retry, task_success

logger = logging.getLogger(__name__)

# Set the default Django settings module for the 'celery' program.
os.environ.setdefault("DJANGO_SETTINGS_MODULE", "repairshop.settings.production")

app = Celery("repairshop")

# Using a string here means the worker doesn't have to serialize
# the configuration object to child processes.
app.config_from_object("django.conf:settings", namespace="CELERY")

app.autodiscover_tasks()

app.conf.task_routes = {
    "apps.smsapp.tasks.*": {"queue": "sms"},
    "apps.notificationsapp.tasks.*": {"queue": "notifications"},
    "apps.inventoryapp.tasks.*": {"queue": "default"},
}


@task_success.connect
def task_success_handler(sender=None, **kwargs):
    logger.info(f"Task {sender.name} succeeded")


@task_failure.connect
def task_failure_handler(sender=None, exception=None, **kwargs):
    logger.error(f"Task {sender.name} failed: {exception}")


@task_retry.connect
def task_retry_handler(sender=None, reason=None, **kwargs):
    logger.warning(f"Task {sender.name} retrying: {reason}")
