"""
Pagination utilities for the RepairShop platform.

Every list endpoint returns the same envelope so the dashboard client can use
one table component for all of them.
"""

from django.conf import settings
from rest_framework.pagination import PageNumberPagination
from rest_framework.response import Response


def _knob(name, default):
    return getattr(settings, "REPAIRSHOP", {}).get(name, default)


class StandardResultsSetPagination(PageNumberPagination):
    """
    Page/limit pagination.

    Features:
    - ``page`` query parameter (1-based)
    - ``limit`` query parameter, capped at ``MAX_PAGE_LIMIT``
    - ``{"data": [...], "pagination": {...}}`` response envelope
    """

    page_query_param = "page"
    page_size_query_param = "limit"

    @property
    def page_size(self):
        return _knob("DEFAULT_PAGE_LIMIT", 50)

    @property
    def max_page_size(self):
        return _knob("MAX_PAGE_LIMIT", 100)

    def get_paginated_response(self, data):
        """
        Return paginated response with standardized metadata.

        Args:
            data: Serialized page items

        Returns:
            Response object
        """
        paginator = self.page.paginator
        return Response(
            {
                "data": data,
                "pagination": {
                    "page": self.page.number,
                    "limit": paginator.per_page,
                    "total": paginator.count,
                    "totalPages": paginator.num_pages,
                    "hasNext": self.page.has_next(),
                    "hasPrev": self.page.has_previous(),
                },
            }
        )

    def get_paginated_response_schema(self, schema):
        return {
            "type": "object",
            "properties": {
                "data": schema,
                "pagination": {
                    "type": "object",
                    "properties": {
                        "page": {"type": "integer"},
                        "limit": {"type": "integer"},
                        "total": {"type": "integer"},
                        "totalPages": {"type": "integer"},
                        "hasNext": {"type": "boolean"},
                        "hasPrev": {"type": "boolean"},
                    },
                },
            },
        }
