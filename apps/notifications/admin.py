"""Admin registration for notifications."""

from __future__ import annotations

from django.contrib import admin  # type: ignore

from .models import Notification


@admin.register(Notification)
class NotificationAdmin(admin.ModelAdmin):
    list_display = ("user", "kind", "title", "is_read", "created_at")
    list_filter = ("kind", "is_read")
    search_fields = ("user__email", "title")
