"""Property API views."""

from __future__ import annotations

import logging

from rest_framework import permissions, status, viewsets  # type: ignore
from rest_framework.decorators import action  # type: ignore
from rest_framework.pagination import PageNumberPagination  # type: ignore

from apps.favorites.services import toggle_favorite
from shared.domain.exceptions import NotFound
from shared.infrastructure.api import success_response

from .filters import PropertyFilterSet
from .models import Property
from .permissions import IsPlatformAdmin, IsPropertyOwnerOrAdmin, is_platform_admin
from .serializers import PropertySerializer, PropertyVerificationSerializer

logger = logging.getLogger(__name__)


class AdminPropertyPagination(PageNumberPagination):
    page_size = 10
    page_size_query_param = "limit"
    max_page_size = 100

    def get_paginated_response(self, data):  # type: ignore
        total = self.page.paginator.count
        return success_response(
            "Properties fetched successfully",
            data,
            pagination={
                "total": total,
                "page": self.page.number,
                "pages": self.page.paginator.num_pages,
            },
        )


class PropertyViewSet(viewsets.GenericViewSet):
    """Listings: public browsing, owner management, admin moderation."""

    serializer_class = PropertySerializer
    permission_classes = [IsPropertyOwnerOrAdmin]
    filterset_class = PropertyFilterSet

    def get_queryset(self):  # type: ignore
        return Property.objects.select_related("owner")

    def _filtered(self, queryset):
        return PropertyFilterSet(self.request.query_params, queryset=queryset).qs

    def list(self, request):  # type: ignore
        queryset = self._filtered(self.get_queryset().filter(is_active=True, is_verified=True))
        data = self.get_serializer(queryset, many=True).data
        return success_response("Properties fetched successfully", data, count=len(data))

    def retrieve(self, request, pk=None):  # type: ignore
        property_obj = self.get_object()
        user = request.user
        if not property_obj.is_bookable and not (
            is_platform_admin(user) or (user.is_authenticated and property_obj.owner_id == user.id)
        ):
            raise NotFound("Property not found")
        return success_response("Property fetched successfully", self.get_serializer(property_obj).data)

    def create(self, request):  # type: ignore
        serializer = self.get_serializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        property_obj = serializer.save(owner=request.user)
        logger.info(f"Property {property_obj.id} listed by user {request.user.id}")
        return success_response(
            "Property created successfully",
            self.get_serializer(property_obj).data,
            status_code=status.HTTP_201_CREATED,
        )

    def partial_update(self, request, pk=None):  # type: ignore
        property_obj = self.get_object()
        serializer = self.get_serializer(property_obj, data=request.data, partial=True)
        serializer.is_valid(raise_exception=True)
        serializer.save()
        property_obj.refresh_from_db()
        logger.info(f"Property {property_obj.id} updated by user {request.user.id}")
        return success_response("Property updated successfully", self.get_serializer(property_obj).data)

    def destroy(self, request, pk=None):  # type: ignore
        """Hide the listing. Rows stay so bookings keep their property."""
        property_obj = self.get_object()
        property_obj.is_active = False
        property_obj.save(update_fields=["is_active", "updated_at"])
        logger.info(f"Property {property_obj.id} deactivated by user {request.user.id}")
        return success_response("Property deleted successfully")

    @action(detail=True, methods=["post"], permission_classes=[permissions.IsAuthenticated])
    def favorite(self, request, pk=None):  # type: ignore
        property_obj = self.get_object()
        is_favorite = toggle_favorite(request.user, property_obj)
        message = "Property added to favorites" if is_favorite else "Property removed from favorites"
        return success_response(
            message,
            {"property_id": property_obj.id, "is_favorite": is_favorite},
            status_code=status.HTTP_201_CREATED if is_favorite else status.HTTP_200_OK,
        )

    @action(detail=False, methods=["get"], permission_classes=[permissions.IsAuthenticated])
    def mine(self, request):  # type: ignore
        queryset = self._filtered(self.get_queryset().filter(owner=request.user))
        data = self.get_serializer(queryset, many=True).data
        return success_response("Properties fetched successfully", data, count=len(data))

    @action(
        detail=False,
        methods=["get"],
        url_path="admin",
        permission_classes=[IsPlatformAdmin],
        pagination_class=AdminPropertyPagination,
    )
    def admin_list(self, request):  # type: ignore
        queryset = self._filtered(self.get_queryset().filter(is_active=True))
        page = self.paginate_queryset(queryset)
        return self.get_paginated_response(self.get_serializer(page, many=True).data)

    @action(detail=True, methods=["post"], permission_classes=[IsPlatformAdmin])
    def verify(self, request, pk=None):  # type: ignore
        property_obj = self.get_object()
        serializer = PropertyVerificationSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        property_obj.is_verified = serializer.validated_data["is_verified"]
        property_obj.save(update_fields=["is_verified", "updated_at"])
        logger.info(f"Property {property_obj.id} verification set to {property_obj.is_verified} by {request.user.id}")
        state = "verified" if property_obj.is_verified else "unverified"
        return success_response(f"Property {state} successfully", self.get_serializer(property_obj).data)
