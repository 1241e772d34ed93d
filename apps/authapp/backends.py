from rest_framework_simplejwt.authentication import JWTAuthentication
from rest_framework_simplejwt.exceptions import AuthenticationFailed


class RepairShopJWTAuthentication(JWTAuthentication):
    """
    JWT authentication that re-checks ``is_active`` on every request, so a
    disabled staff account loses access before its token expires.
    """

    def get_user(self, validated_token):
        user = super().get_user(validated_token)
        if not user.is_active:
            raise AuthenticationFailed("User account is disabled", code="user_inactive")
        return user
