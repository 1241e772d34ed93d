from rest_framework import permissions


class IsAdmin(permissions.BasePermission):
    """
    Allow only admins (role ``admin`` or Django superusers).
    """

    message = "Only administrators can perform this action."

    def has_permission(self, request, view):
        return bool(request.user and request.user.is_authenticated and request.user.is_admin)


class IsAdminOrManager(permissions.BasePermission):
    message = "Only administrators and managers can perform this action."

    def has_permission(self, request, view):
        return bool(request.user and request.user.is_authenticated and request.user.can_manage)


class IsManagerOrReadOnly(permissions.BasePermission):
    """
    Any signed-in user may read; writes need an admin or manager.
    """

    message = "Only administrators and managers can change this data."

    def has_permission(self, request, view):
        if not (request.user and request.user.is_authenticated):
            return False
        if request.method in permissions.SAFE_METHODS:
            return True
        return request.user.can_manage
