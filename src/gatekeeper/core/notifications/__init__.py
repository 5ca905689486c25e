from src.gatekeeper.core.notifications.email import (
    NotificationSender,
    ResendNotificationSender,
    dispatch_notification,
    drain_notifications,
    password_reset_email_html,
    verification_email_html,
)

__all__ = [
    "NotificationSender",
    "ResendNotificationSender",
    "dispatch_notification",
    "drain_notifications",
    "password_reset_email_html",
    "verification_email_html",
]
