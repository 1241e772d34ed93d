from django.test import SimpleTestCase
from rest_framework.request import Request
from rest_framework.test import APIRequestFactory

from utils.pagination import StandardResultsSetPagination


class StandardResultsSetPaginationTest(SimpleTestCase):
    def _paginate(self, items, **params):
        request = Request(APIRequestFactory().get("/", params))
        paginator = StandardResultsSetPagination()
        page = paginator.paginate_queryset(items, request)
        return paginator.get_paginated_response(page).data

    def test_envelope(self):
        data = self._paginate(list(range(120)), page=2, limit=50)

        self.assertEqual(data["data"], list(range(50, 100)))
        self.assertEqual(
            data["pagination"],
            {"page": 2, "limit": 50, "total": 120, "totalPages": 3, "hasNext": True, "hasPrev": True},
        )

    def test_default_and_maximum_limit(self):
        self.assertEqual(self._paginate(list(range(120)))["pagination"]["limit"], 50)
        self.assertEqual(self._paginate(list(range(120)), limit=500)["pagination"]["limit"], 100)
