"""
Authentication Views

Staff login with JWT, profile management and admin user management.
"""

import logging

from rest_framework import permissions, status, viewsets
from rest_framework.decorators import action
from rest_framework.response import Response

from api.documentation.decorators import document_api_endpoint
from api.v1.throttling import AuthenticationRateThrottle
from apps.authapp.models import User
from apps.authapp.permissions import IsAdmin
from apps.authapp.serializers import (
    ChangePasswordSerializer,
    LoginSerializer,
    LogoutSerializer,
    ProfileUpdateSerializer,
    UserSerializer,
)
from apps.authapp.services.auth_service import AuthService

logger = logging.getLogger(__name__)


class AuthViewSet(viewsets.GenericViewSet):
    """
    Authentication viewset.

    - POST /api/v1/auth/login/ - Exchange username/password for a JWT pair
    - POST /api/v1/auth/logout/ - Blacklist a refresh token
    - GET/PATCH /api/v1/auth/me/ - Current user's profile
    - POST /api/v1/auth/change-password/ - Change own password

    Token refresh is served by simplejwt at /api/v1/auth/refresh/.
    """

    queryset = User.objects.none()
    serializer_class = UserSerializer
    permission_classes = [permissions.IsAuthenticated]
    pagination_class = None

    @document_api_endpoint(
        summary="Log in",
        request_body=LoginSerializer,
        responses={200: "Tokens and user profile", 401: "Invalid credentials"},
        tags=["Authentication"],
    )
    @action(
        detail=False,
        methods=["post"],
        permission_classes=[permissions.AllowAny],
        throttle_classes=[AuthenticationRateThrottle],
    )
    def login(self, request):
        serializer = LoginSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        user, tokens = AuthService.login(
            serializer.validated_data["username"],
            serializer.validated_data["password"],
            request=request,
        )
        return Response({**tokens, "user": UserSerializer(user).data})

    @document_api_endpoint(summary="Log out", request_body=LogoutSerializer, tags=["Authentication"])
    @action(detail=False, methods=["post"])
    def logout(self, request):
        serializer = LogoutSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        AuthService.logout(serializer.validated_data["refresh"])
        return Response(status=status.HTTP_205_RESET_CONTENT)

    @document_api_endpoint(summary="Current user", tags=["Authentication"], method="get")
    @document_api_endpoint(
        summary="Update profile", request_body=ProfileUpdateSerializer, tags=["Authentication"], method="patch"
    )
    @action(detail=False, methods=["get", "patch"])
    def me(self, request):
        if request.method == "PATCH":
            serializer = ProfileUpdateSerializer(request.user, data=request.data, partial=True)
            serializer.is_valid(raise_exception=True)
            serializer.save()
        return Response(UserSerializer(request.user).data)

    @document_api_endpoint(
        summary="Change password", request_body=ChangePasswordSerializer, tags=["Authentication"]
    )
    @action(detail=False, methods=["post"], url_path="change-password")
    def change_password(self, request):
        serializer = ChangePasswordSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        AuthService.change_password(
            request.user,
            serializer.validated_data["current_password"],
            serializer.validated_data["new_password"],
        )
        return Response({"detail": "Password changed successfully"})


class UserViewSet(viewsets.ModelViewSet):
    """
    Admin management of staff accounts.

    Deleting a user deactivates the account so history (status changes,
    sales) keeps pointing at a real row.
    """

    queryset = User.objects.select_related("location").all()
    serializer_class = UserSerializer
    permission_classes = [permissions.IsAuthenticated, IsAdmin]
    filterset_fields = ["role", "location", "is_active"]
    search_fields = ["username", "email", "first_name", "last_name", "phone"]
    ordering_fields = ["username", "date_joined", "last_login"]

    def perform_update(self, serializer):
        user = serializer.save()
        if user.tracker.has_changed("role"):
            logger.info(
                f"Role of {user.username} changed from {user.tracker.previous('role')} to {user.role}"
            )
        if user.tracker.has_changed("location_id"):
            logger.info(f"{user.username} moved to location {user.location_id}")

    def destroy(self, request, *args, **kwargs):
        user = self.get_object()
        if user == request.user:
            return Response(
                {"detail": "You cannot deactivate your own account."},
                status=status.HTTP_400_BAD_REQUEST,
            )
        user.is_active = False
        user.save(update_fields=["is_active"])
        logger.info(f"User {user.username} deactivated by {request.user.username}")
        return Response(status=status.HTTP_204_NO_CONTENT)
