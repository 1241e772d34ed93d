import importlib

from django.test import TestCase
from django.urls import resolve, reverse
from rest_framework import status
from rest_framework.test import APIClient

from utils.testing import create_admin


class UrlConfTest(TestCase):
    def test_api_urls_import(self):
        module = importlib.import_module("api.v1.urls")

        self.assertTrue(module.urlpatterns)

    def test_documented_function_views_resolve(self):
        self.assertEqual(resolve(reverse("system-health")).func.__name__, "system_health")
        self.assertEqual(resolve(reverse("system-metrics")).func.__name__, "system_metrics")

    def test_schema_covers_multi_method_actions(self):
        client = APIClient()
        client.force_authenticate(create_admin())

        response = client.get(reverse("schema-json", kwargs={"format": "json"}))

        self.assertEqual(response.status_code, status.HTTP_200_OK)
        paths = response.json()["paths"]
        me = next(value for key, value in paths.items() if key.endswith("/auth/me/"))
        self.assertEqual(me["get"]["summary"], "Current user")
        self.assertEqual(me["patch"]["summary"], "Update profile")
        preferences = next(value for key, value in paths.items() if key.endswith("/notifications/preferences/"))
        self.assertEqual(set(preferences) & {"get", "put"}, {"get", "put"})
