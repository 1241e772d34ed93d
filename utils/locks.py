"""
Cache-backed locks for work that must not run twice at the same time,
such as draining the SMS queue from Celery beat and the admin endpoint.
"""

import functools
import logging
import uuid
from contextlib import contextmanager

from django.core.cache import cache

logger = logging.getLogger(__name__)


class CacheLock:
    """
    Non-blocking lock stored in the default cache.

    ``expires`` bounds how long a crashed holder can keep the lock.
    """

    def __init__(self, key, expires=300):
        self.key = f"lock:{key}"
        self.expires = expires
        self.token = uuid.uuid4().hex

    def acquire(self):
        acquired = cache.add(self.key, self.token, self.expires)
        if not acquired:
            logger.info(f"Lock {self.key} is held elsewhere")
        return acquired

    def release(self):
        # Only the holder may release
        if cache.get(self.key) == self.token:
            cache.delete(self.key)
            return True
        logger.warning(f"Lock {self.key} expired before release")
        return False


@contextmanager
def cache_lock(key, expires=300):
    """
    Yields True when the lock was taken, False when another worker holds it.
    """
    lock = CacheLock(key, expires)
    acquired = lock.acquire()
    try:
        yield acquired
    finally:
        if acquired:
            lock.release()


def single_flight(key, expires=300, busy_result=None):
    """
    Decorator: skip the call and return ``busy_result`` while ``key`` is locked.
    """

    def decorator(func):
        @functools.wraps(func)
        def wrapper(*args, **kwargs):
            with cache_lock(key, expires) as acquired:
                if not acquired:
                    return busy_result
                return func(*args, **kwargs)

        return wrapper

    return decorator
