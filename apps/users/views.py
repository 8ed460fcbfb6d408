"""User API views."""

from __future__ import annotations

from rest_framework import permissions, status  # type: ignore
from rest_framework.views import APIView  # type: ignore
from rest_framework_simplejwt.tokens import RefreshToken  # type: ignore

from shared.infrastructure.api import success_response

from .serializers import RegisterSerializer, UserSerializer


def _tokens_for_user(user) -> dict[str, str]:
    refresh = RefreshToken.for_user(user)
    return {"refresh": str(refresh), "access": str(refresh.access_token)}


class RegisterView(APIView):
    permission_classes = [permissions.AllowAny]

    def post(self, request):  # type: ignore
        serializer = RegisterSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        user = serializer.save()
        data = {
            "user": UserSerializer(user).data,
            "tokens": _tokens_for_user(user),
        }
        return success_response("User registered successfully", data, status_code=status.HTTP_201_CREATED)


class MeView(APIView):
    """Profile of the authenticated user."""

    permission_classes = [permissions.IsAuthenticated]

    def get(self, request):  # type: ignore
        return success_response("Profile fetched successfully", UserSerializer(request.user).data)

    def patch(self, request):  # type: ignore
        serializer = UserSerializer(request.user, data=request.data, partial=True)
        serializer.is_valid(raise_exception=True)
        serializer.save()
        return success_response("Profile updated successfully", serializer.data)
