"""App configuration for notifications."""

from __future__ import annotations

from django.apps import AppConfig  # type: ignore


class NotificationsConfig(AppConfig):
    default_auto_field = "django.db.models.BigAutoField"
    name = "apps.notifications"
    label = "notifications"

    def ready(self) -> None:
        from shared.application.message_bus import message_bus

        from .handlers import register_event_handlers

        register_event_handlers(message_bus)
