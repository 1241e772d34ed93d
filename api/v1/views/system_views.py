# api/v1/views/system_views.py
from rest_framework import status
from rest_framework.decorators import api_view, authentication_classes, permission_classes
from rest_framework.permissions import AllowAny
from rest_framework.response import Response

from api.documentation.decorators import document_api_endpoint
from apps.authapp.permissions import IsAdmin
from monitoring.system_monitor import SystemMonitor


@api_view(["GET"])
@authentication_classes([])
@permission_classes([AllowAny])
def health(request):
    """
    Minimal liveness check for load balancers.
    """
    database = SystemMonitor.check_database()
    healthy = database["status"] == "healthy"
    return Response(
        {"status": "ok" if healthy else "error"},
        status=status.HTTP_200_OK if healthy else status.HTTP_503_SERVICE_UNAVAILABLE,
    )


@document_api_endpoint(summary="System health", tags=["System"], method="get")
@api_view(["GET"])
@permission_classes([IsAdmin])
def system_health(request):
    return Response(SystemMonitor.get_health())


@document_api_endpoint(summary="System metrics", tags=["System"], method="get")
@api_view(["GET"])
@permission_classes([IsAdmin])
def system_metrics(request):
    return Response(SystemMonitor.get_system_metrics())
