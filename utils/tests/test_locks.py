from django.core.cache import cache
from django.test import SimpleTestCase, override_settings

from utils.locks import CacheLock, cache_lock, single_flight

LOCMEM_CACHE = {"default": {"BACKEND": "django.core.cache.backends.locmem.LocMemCache"}}


@override_settings(CACHES=LOCMEM_CACHE)
class CacheLockTest(SimpleTestCase):
    def tearDown(self):
        cache.clear()

    def test_second_holder_is_refused(self):
        first = CacheLock("nightly")
        second = CacheLock("nightly")

        self.assertTrue(first.acquire())
        self.assertFalse(second.acquire())

        self.assertTrue(first.release())
        self.assertTrue(second.acquire())

    def test_only_owner_releases(self):
        owner = CacheLock("nightly")
        owner.acquire()

        self.assertFalse(CacheLock("nightly").release())
        self.assertFalse(CacheLock("nightly").acquire())

    def test_context_manager_releases_on_error(self):
        with self.assertRaises(RuntimeError):
            with cache_lock("nightly") as acquired:
                self.assertTrue(acquired)
                raise RuntimeError("boom")

        with cache_lock("nightly") as acquired:
            self.assertTrue(acquired)

    def test_single_flight_returns_busy_result(self):
        calls = []

        @single_flight("report", busy_result="busy")
        def build():
            calls.append(1)
            return "done"

        with cache_lock("report"):
            self.assertEqual(build(), "busy")
        self.assertEqual(build(), "done")
        self.assertEqual(calls, [1])
