# api/v1/views/index.py
from rest_framework.decorators import api_view, permission_classes
from rest_framework.permissions import AllowAny
from rest_framework.response import Response
from rest_framework.reverse import reverse


@api_view(["GET"])
@permission_classes([AllowAny])
def api_root(request, format=None):
    """
    The RepairShop API root.

    This endpoint provides links to the main API endpoints.
    """

    def link(name):
        return reverse(name, request=request, format=format)

    return Response(
        {
            "auth": {
                "login": link("auth-login"),
                "refresh": link("token-refresh"),
            },
            "locations": link("location-list"),
            "users": link("user-list"),
            "customers": link("customer-list"),
            "devices": link("device-list"),
            "inventory": link("inventory-list"),
            "sales": link("sale-list"),
            "appointments": link("appointment-list"),
            "notifications": link("notification-list"),
            "sms": {
                "templates": link("sms-template-list"),
                "queue": link("sms-queue-list"),
                "settings": link("sms-settings"),
            },
            "tracking": "/api/v1/public/track/{receipt_number}/",
            "documentation": {
                "swagger": link("schema-swagger-ui"),
                "redoc": link("schema-redoc"),
            },
        }
    )
