"""
Location scoping for multi-location shops.

Admins may look at one location or all of them by sending the
``X-Selected-Location`` header (empty or ``all`` means every location).
Everyone else is pinned to the location on their user record.
"""

import uuid

from django.utils.translation import gettext_lazy as _

from utils.exceptions import PermissionDeniedError, ValidationError

LOCATION_HEADER = "X-Selected-Location"
ALL_LOCATIONS = ("", "all")


def resolve_location_id(request):
    """
    Return the location id the request is scoped to, or None for "all locations".

    Non-admins always get their own location id, which may be None when the
    account has not been assigned to a branch yet.
    """
    user = request.user
    if not getattr(user, "is_authenticated", False):
        return None

    if not user.is_admin:
        return user.location_id

    selected = (request.headers.get(LOCATION_HEADER) or "").strip()
    if selected.lower() in ALL_LOCATIONS:
        return None
    try:
        return uuid.UUID(selected)
    except ValueError:
        raise ValidationError(_("Invalid location selected"), detail={"location": selected})


class LocationScopedMixin:
    """
    ViewSet mixin filtering querysets by the effective location and stamping
    new records with it.

    ``location_field`` is the lookup path from the model to its Location FK.
    """

    location_field = "location"

    def get_location_id(self):
        if not hasattr(self, "_location_id"):
            self._location_id = resolve_location_id(self.request)
        return self._location_id

    def scope_queryset(self, queryset):
        location_id = self.get_location_id()
        if location_id:
            return queryset.filter(**{f"{self.location_field}_id": location_id})
        if self.request.user.is_admin:
            return queryset
        return queryset.none()

    def get_service_location_id(self):
        """
        Location id to hand to services; None means all locations and is only
        possible for admins.
        """
        location_id = self.get_location_id()
        if location_id is None and not self.request.user.is_admin:
            raise PermissionDeniedError(_("Your account is not assigned to a location"))
        return location_id

    def get_location_for_create(self, requested_location=None):
        """
        Pick the location a new record belongs to.

        An explicit location from the payload is honoured for admins and must
        match the user's own location for everyone else.
        """
        user = self.request.user
        if requested_location is not None:
            if not user.is_admin and requested_location.id != user.location_id:
                raise PermissionDeniedError(_("You can only create records for your own location"))
            return requested_location.id

        location_id = self.get_location_id()
        if location_id is None:
            if user.is_admin:
                raise ValidationError(
                    _("Select a location before creating records"),
                    detail={"location": [_("This field is required when viewing all locations.")]},
                )
            raise PermissionDeniedError(_("Your account is not assigned to a location"))
        return location_id

    def perform_create(self, serializer):
        location_id = self.get_location_for_create(serializer.validated_data.pop("location", None))
        serializer.save(location_id=location_id)
