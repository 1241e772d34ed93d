"""
API Documentation Decorators

Thin wrappers over drf-yasg's ``swagger_auto_schema`` so views declare their
docs in one consistent shape.
"""

from typing import Any, Dict, List

from drf_yasg import openapi
from drf_yasg.utils import swagger_auto_schema
from rest_framework import status

DEFAULT_RESPONSES = {
    status.HTTP_200_OK: "Success",
    status.HTTP_400_BAD_REQUEST: "Bad Request",
    status.HTTP_401_UNAUTHORIZED: "Unauthorized",
    status.HTTP_403_FORBIDDEN: "Forbidden",
    status.HTTP_404_NOT_FOUND: "Not Found",
}

LOCATION_HEADER = openapi.Parameter(
    "X-Selected-Location",
    openapi.IN_HEADER,
    description="Admins only: location id to scope the request to, or 'all'",
    type=openapi.TYPE_STRING,
    required=False,
)


def _query_parameters(query_params: List[Dict]) -> List[openapi.Parameter]:
    params = []
    seen = set()
    for param in query_params or []:
        if param["name"] in seen:
            continue
        seen.add(param["name"])
        params.append(
            openapi.Parameter(
                param["name"],
                openapi.IN_QUERY,
                description=param.get("description", ""),
                type=param.get("type", openapi.TYPE_STRING),
                required=param.get("required", False),
                enum=param.get("enum"),
            )
        )
    return params


def document_api_endpoint(
    summary: str = None,
    description: str = None,
    request_body: Any = None,
    responses: Dict = None,
    tags: List[str] = None,
    query_params: List[Dict] = None,
    location_scoped: bool = False,
    method: str = None,
    methods: List[str] = None,
):
    """
    Decorator for documenting API endpoints.

    Args:
        summary: Short summary of what the operation does
        description: Verbose explanation of the operation behavior
        request_body: Request body schema or serializer
        responses: Response schemas for different HTTP status codes
        tags: A list of tags for API documentation control
        query_params: List of query parameters with name, description, required, and type
        location_scoped: Document the ``X-Selected-Location`` header
        method: HTTP method to document; required on function views and on
            actions that answer more than one method
        methods: Same as ``method`` for several methods sharing one schema
    """
    manual_parameters = _query_parameters(query_params)
    if location_scoped:
        manual_parameters.append(LOCATION_HEADER)

    return swagger_auto_schema(
        operation_summary=summary,
        operation_description=description,
        request_body=request_body,
        responses=responses or DEFAULT_RESPONSES,
        tags=tags,
        manual_parameters=manual_parameters or None,
        method=method,
        methods=methods,
    )
