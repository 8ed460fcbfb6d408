"""API views for notifications."""

from __future__ import annotations

from rest_framework import mixins, permissions, viewsets  # type: ignore
from rest_framework.decorators import action  # type: ignore

from shared.infrastructure.api import success_response

from .models import Notification
from .serializers import NotificationSerializer


class NotificationViewSet(mixins.ListModelMixin, viewsets.GenericViewSet):
    """List notifications of the authenticated user and mark them read."""

    serializer_class = NotificationSerializer
    permission_classes = [permissions.IsAuthenticated]

    def get_queryset(self):  # type: ignore
        return Notification.objects.filter(user=self.request.user)

    def list(self, request, *args, **kwargs):  # type: ignore
        queryset = self.get_queryset()
        unread = request.query_params.get('unread')
        if unread in ('1', 'true', 'True'):
            queryset = queryset.filter(is_read=False)
        data = self.get_serializer(queryset, many=True).data
        return success_response('Notifications fetched successfully', data, count=len(data))

    @action(detail=True, methods=['post'])
    def mark_read(self, request, pk=None):  # type: ignore
        notification = self.get_object()
        notification.is_read = True
        notification.save(update_fields=['is_read'])
        return success_response('Notification marked as read', self.get_serializer(notification).data)
