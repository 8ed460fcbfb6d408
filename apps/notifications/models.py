"""Notification model.

In-app copy of every message sent to a user about a booking. Each
notification can be marked as read.
"""

from __future__ import annotations

from django.db import models  # type: ignore

from .emails import EmailType


class Notification(models.Model):
    """A message sent to a user about some event."""

    user = models.ForeignKey(
        'users.CustomUser', on_delete=models.CASCADE, related_name='notifications'
    )
    kind = models.CharField(max_length=40, choices=EmailType.choices, blank=True)
    title = models.CharField(max_length=255)
    message = models.TextField()
    is_read = models.BooleanField(default=False)
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        ordering = ['-created_at']

    def __str__(self) -> str:
        return f"Notification to {self.user_id}: {self.title}"
