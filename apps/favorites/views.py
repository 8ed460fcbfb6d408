"""API views for the current user's favorites."""

from __future__ import annotations

from rest_framework import permissions, viewsets  # type: ignore

from shared.infrastructure.api import success_response

from .models import Favorite
from .serializers import FavoriteSerializer


class FavoriteViewSet(viewsets.GenericViewSet):
    """
    Lists the favorites of the signed-in user.

    Listings that are no longer bookable stay in the table but are left
    out of the list. Adding and removing happens through
    ``POST /api/v1/properties/{id}/favorite/``.
    """

    serializer_class = FavoriteSerializer
    permission_classes = [permissions.IsAuthenticated]

    def get_queryset(self):  # type: ignore
        return (
            Favorite.objects.select_related('property')
            .filter(user=self.request.user, property__is_active=True, property__is_verified=True)
        )

    def list(self, request):  # type: ignore
        data = self.get_serializer(self.get_queryset(), many=True).data
        return success_response("Favorites fetched successfully", data, count=len(data))
