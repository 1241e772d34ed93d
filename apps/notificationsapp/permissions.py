from rest_framework import permissions


class IsNotificationOwner(permissions.BasePermission):
    """
    Permission to only allow the recipient of a notification to view or modify it.
    """

    def has_object_permission(self, request, view, obj):
        return obj.recipient_id == request.user.id
