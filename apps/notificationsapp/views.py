"""
Notifications app views
The signed-in user's notification inbox and channel preferences, plus admin
management of notification types and templates.
"""

from rest_framework import mixins, permissions, viewsets
from rest_framework.decorators import action
from rest_framework.response import Response

from api.documentation.decorators import document_api_endpoint
from apps.authapp.permissions import IsAdmin
from apps.notificationsapp.constants import STATUS_CHOICES
from apps.notificationsapp.models import NotificationTemplate, NotificationType
from apps.notificationsapp.permissions import IsNotificationOwner
from apps.notificationsapp.serializers import (
    NotificationPreferenceSerializer,
    NotificationSerializer,
    NotificationTemplateSerializer,
    NotificationTypeSerializer,
    PreferenceUpdateSerializer,
)
from apps.notificationsapp.services.notification_service import NotificationService


class NotificationViewSet(
    mixins.ListModelMixin,
    mixins.RetrieveModelMixin,
    mixins.DestroyModelMixin,
    viewsets.GenericViewSet,
):
    """
    ViewSet for the current user's notifications

    - GET /api/v1/notifications/?status=unread|read|archived
    - POST /api/v1/notifications/{id}/read/
    - POST /api/v1/notifications/read-all/
    - POST /api/v1/notifications/{id}/archive/
    - GET /api/v1/notifications/unread-count/
    - GET/PUT /api/v1/notifications/preferences/
    """

    serializer_class = NotificationSerializer
    permission_classes = [permissions.IsAuthenticated, IsNotificationOwner]

    def get_queryset(self):
        return NotificationService.get_user_notifications(
            self.request.user, self.request.query_params.get("status")
        )

    @document_api_endpoint(
        summary="List notifications",
        query_params=[
            {
                "name": "status",
                "description": "Filter by status",
                "enum": [value for value, _label in STATUS_CHOICES],
            }
        ],
        tags=["Notifications"],
    )
    def list(self, request, *args, **kwargs):
        return super().list(request, *args, **kwargs)

    def perform_destroy(self, instance):
        NotificationService.delete(self.request.user, instance.pk)

    @document_api_endpoint(summary="Mark notification as read", tags=["Notifications"])
    @action(detail=True, methods=["post"])
    def read(self, request, pk=None):
        notification = NotificationService.mark_as_read(request.user, pk)
        return Response(self.get_serializer(notification).data)

    @document_api_endpoint(summary="Mark all notifications as read", tags=["Notifications"])
    @action(detail=False, methods=["post"], url_path="read-all")
    def read_all(self, request):
        updated = NotificationService.mark_all_as_read(request.user)
        return Response({"updated": updated})

    @document_api_endpoint(summary="Archive notification", tags=["Notifications"])
    @action(detail=True, methods=["post"])
    def archive(self, request, pk=None):
        notification = NotificationService.archive(request.user, pk)
        return Response(self.get_serializer(notification).data)

    @action(detail=False, methods=["get"], url_path="unread-count")
    def unread_count(self, request):
        return Response({"count": NotificationService.get_unread_count(request.user)})

    @document_api_endpoint(summary="Notification preferences", tags=["Notifications"], method="get")
    @document_api_endpoint(
        summary="Update notification preferences",
        request_body=PreferenceUpdateSerializer(many=True),
        tags=["Notifications"],
        method="put",
    )
    @action(detail=False, methods=["get", "put"])
    def preferences(self, request):
        if request.method == "PUT":
            payload = request.data if isinstance(request.data, list) else [request.data]
            serializer = PreferenceUpdateSerializer(data=payload, many=True)
            serializer.is_valid(raise_exception=True)
            for item in serializer.validated_data:
                item = dict(item)
                NotificationService.update_preferences(
                    request.user, item.pop("notification_type"), **item
                )

        preferences = NotificationService.get_preferences(request.user)
        return Response(NotificationPreferenceSerializer(preferences, many=True).data)


class NotificationTypeViewSet(viewsets.ModelViewSet):
    """Admin management of notification types."""

    queryset = NotificationType.objects.all()
    serializer_class = NotificationTypeSerializer
    permission_classes = [IsAdmin]
    filterset_fields = ["category", "is_active"]
    search_fields = ["name"]


class NotificationTemplateViewSet(viewsets.ModelViewSet):
    """Admin management of notification templates."""

    queryset = NotificationTemplate.objects.select_related("notification_type")
    serializer_class = NotificationTemplateSerializer
    permission_classes = [IsAdmin]
    filterset_fields = ["notification_type", "is_active"]
