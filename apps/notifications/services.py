"""Notification services for sending e-mails and in-app notifications."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any, Protocol

from django.conf import settings  # type: ignore
from django.contrib.auth import get_user_model  # type: ignore
from django.core.mail import send_mail  # type: ignore
from django.utils.html import strip_tags  # type: ignore
from django.utils.module_loading import import_string  # type: ignore

from .emails import render_email

if TYPE_CHECKING:  # pragma: no cover
    from apps.users.models import CustomUser

logger = logging.getLogger(__name__)


class NotificationSender(Protocol):
    """Delivers one message of ``kind`` to ``to_address``."""

    def send(self, to_address: str, kind: str, payload: dict[str, Any]) -> None:
        ...


# ============================================================================
# EMAIL NOTIFICATIONS
# ============================================================================

class EmailNotificationSender:
    """
    Sends rendered e-mails through Django's mail backend

    The recipient also gets an in-app notification with the same
    subject. Delivery errors propagate; callers decide whether to
    swallow them.
    """

    def send(self, to_address: str, kind: str, payload: dict[str, Any]) -> None:
        rendered = render_email(kind, payload)

        send_mail(
            subject=rendered.subject,
            message=strip_tags(rendered.html),
            from_email=settings.DEFAULT_FROM_EMAIL,
            recipient_list=[to_address],
            html_message=rendered.html,
            fail_silently=False,
        )
        logger.info(f"Email sent successfully to {to_address}: {rendered.subject}")

        recipient = payload.get("recipient")
        if recipient is None:
            recipient = get_user_model().objects.filter(email__iexact=to_address).first()
        if recipient is not None:
            create_in_app_notification(recipient, rendered.subject, rendered.message, kind=kind)


def get_notification_sender() -> NotificationSender:
    sender_path = getattr(
        settings,
        "NOTIFICATION_SENDER",
        "apps.notifications.services.EmailNotificationSender",
    )
    return import_string(sender_path)()


# ============================================================================
# IN-APP NOTIFICATIONS
# ============================================================================

def create_in_app_notification(user: "CustomUser", title: str, message: str, *, kind: str = "") -> bool:
    """
    Create an in-app notification in the database.

    Args:
        user: Recipient
        title: Notification title
        message: Notification text
        kind: E-mail kind that produced it, if any

    Returns:
        bool: True if the notification was stored
    """
    try:
        from .models import Notification

        Notification.objects.create(
            user=user,
            kind=kind,
            title=title,
            message=message,
        )

        logger.info(f"In-app notification created for {user.email}: {title}")
        return True

    except Exception as e:
        logger.error(f"Failed to create in-app notification for {user.email}: {e}", exc_info=True)
        return False
