"""
Login, token and password operations for staff accounts.
"""

import logging

from django.contrib.auth import authenticate
from django.contrib.auth.models import update_last_login
from django.contrib.auth.password_validation import validate_password
from django.core.exceptions import ValidationError as DjangoValidationError
from django.utils.translation import gettext_lazy as _
from rest_framework import status
from rest_framework_simplejwt.exceptions import TokenError
from rest_framework_simplejwt.tokens import RefreshToken

from utils.exceptions import RepairShopError, ValidationError

logger = logging.getLogger(__name__)


class AuthenticationError(RepairShopError):
    default_message = _("Invalid username or password")
    default_status_code = status.HTTP_401_UNAUTHORIZED


class AuthService:
    @staticmethod
    def issue_tokens(user):
        refresh = RefreshToken.for_user(user)
        refresh["role"] = user.role
        refresh["location_id"] = str(user.location_id) if user.location_id else None
        return {"refresh": str(refresh), "access": str(refresh.access_token)}

    @classmethod
    def login(cls, username, password, request=None):
        """
        Authenticate a staff member and issue a JWT pair.

        Raises:
            AuthenticationError: wrong credentials or disabled account
        """
        user = authenticate(request, username=username, password=password)
        if user is None:
            logger.info(f"Failed login for '{username}'")
            raise AuthenticationError()

        # ModelBackend already refuses inactive users; this guards custom backends.
        if not user.is_active:
            raise AuthenticationError(_("User account is disabled"))

        update_last_login(None, user)
        logger.info(f"User {user.username} logged in")
        return user, cls.issue_tokens(user)

    @staticmethod
    def logout(refresh_token):
        try:
            RefreshToken(refresh_token).blacklist()
        except TokenError as e:
            raise ValidationError(_("Invalid refresh token"), detail={"refresh": str(e)})

    @staticmethod
    def change_password(user, current_password, new_password):
        if not user.check_password(current_password):
            raise ValidationError(
                _("Current password is incorrect"),
                detail={"current_password": [_("Current password is incorrect")]},
            )
        try:
            validate_password(new_password, user)
        except DjangoValidationError as e:
            raise ValidationError(_("Password is too weak"), detail={"new_password": list(e.messages)})

        user.set_password(new_password)
        user.save(update_fields=["password"])
        logger.info(f"User {user.username} changed password")
