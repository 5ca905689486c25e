"""Outbound email through the Resend API."""

import asyncio
import html
from concurrent.futures import ThreadPoolExecutor
from concurrent.futures import TimeoutError as FuturesTimeoutError
from typing import Any, Protocol
from uuid import UUID

import resend

from src.gatekeeper.core.config import get_settings
from src.gatekeeper.core.logging import get_logger

logger = get_logger(__name__)

# Thread pool for email sending with timeout support
_email_executor = ThreadPoolExecutor(max_workers=4, thread_name_prefix="email_sender")

# Deliveries handed off by dispatch_notification and not finished yet
_pending_deliveries: set[asyncio.Task[None]] = set()

_BODY_STYLE = (
    "font-family: -apple-system, BlinkMacSystemFont, 'Segoe UI', Roboto, sans-serif; "
    "line-height: 1.6; color: #333; max-width: 600px; margin: 0 auto; padding: 20px;"
)
_BUTTON_STYLE = (
    "background-color: #2563eb; color: white; padding: 12px 24px; "
    "text-decoration: none; border-radius: 6px; display: inline-block; font-weight: 500;"
)
_MUTED_STYLE = "color: #666; font-size: 14px;"


class NotificationSender(Protocol):
    """Delivers a rendered message. Returns False on failure, never raises.

    Implementations may block; request handlers go through dispatch_notification.
    """

    def send(self, to: str, tenant_id: UUID, subject: str, html_body: str) -> bool: ...


def _recipient(to: str) -> dict[str, Any]:
    """Log fields naming the recipient, honouring settings.log_user_emails."""
    return {"to": to} if get_settings().log_user_emails else {}


class ResendNotificationSender:
    """NotificationSender backed by Resend.

    Without RESEND_API_KEY the message is logged (without the body, which
    carries single-use links) and reported as sent.
    """

    def send(self, to: str, tenant_id: UUID, subject: str, html_body: str) -> bool:
        settings = get_settings()
        log_fields = {"tenant_id": str(tenant_id), "subject": subject, **_recipient(to)}

        if not settings.resend_api_key:
            logger.warning("RESEND_API_KEY not set - email not sent", **log_fields)
            return True

        resend.api_key = settings.resend_api_key

        def _send() -> None:
            resend.Emails.send(
                {
                    "from": settings.email_from,
                    "to": [to],
                    "subject": subject,
                    "html": html_body,
                }
            )

        try:
            # Bounded wait so a slow provider never holds the delivery thread
            future = _email_executor.submit(_send)
            future.result(timeout=settings.email_send_timeout_seconds)
            logger.info("Email sent", **log_fields)
            return True
        except FuturesTimeoutError:
            logger.error(
                "Email send timed out", timeout=settings.email_send_timeout_seconds, **log_fields
            )
            return False
        except Exception as e:
            logger.error("Failed to send email", error=str(e), **log_fields)
            return False


async def _deliver(
    notifier: NotificationSender, to: str, tenant_id: UUID, subject: str, html_body: str
) -> None:
    try:
        sent = await asyncio.to_thread(notifier.send, to, tenant_id, subject, html_body)
    except Exception:
        logger.exception("Notification sender raised", tenant_id=str(tenant_id), subject=subject)
        return
    if not sent:
        logger.warning("Notification not delivered", tenant_id=str(tenant_id), subject=subject)


def dispatch_notification(
    notifier: NotificationSender, to: str, tenant_id: UUID, subject: str, html_body: str
) -> None:
    """Hand a message to `notifier` on a worker thread and return immediately.

    The caller never waits on the provider. Failures are logged by the task.
    """
    task = asyncio.get_running_loop().create_task(
        _deliver(notifier, to, tenant_id, subject, html_body)
    )
    _pending_deliveries.add(task)
    task.add_done_callback(_pending_deliveries.discard)


async def drain_notifications() -> None:
    """Wait for every delivery dispatched from the running event loop to finish."""
    loop = asyncio.get_running_loop()
    while pending := [t for t in _pending_deliveries if t.get_loop() is loop and not t.done()]:
        await asyncio.gather(*pending)


def _render(title: str, greeting_name: str, intro: str, action_label: str, url: str, note: str) -> str:
    safe_name = html.escape(greeting_name)
    return f"""<!DOCTYPE html>
<html>
<head>
    <meta charset="utf-8">
    <meta name="viewport" content="width=device-width, initial-scale=1.0">
</head>
<body style="{_BODY_STYLE}">
    <h1 style="color: #2563eb; margin-bottom: 24px;">{title}</h1>
    <p>Hi {safe_name},</p>
    <p>{intro}</p>
    <p style="margin: 32px 0;">
        <a href="{url}" style="{_BUTTON_STYLE}">{action_label}</a>
    </p>
    <p style="{_MUTED_STYLE}">{note}</p>
</body>
</html>"""


def verification_email_html(user_name: str, verification_url: str) -> str:
    """HTML body for the email verification link."""
    return _render(
        title="Verify your email",
        greeting_name=user_name,
        intro="Please verify your email address by clicking below:",
        action_label="Verify Email",
        url=html.escape(verification_url, quote=True),
        note="If you did not request this, you can ignore this email.",
    )


def password_reset_email_html(user_name: str, reset_url: str, expires_minutes: int) -> str:
    """HTML body for the password reset link."""
    return _render(
        title="Reset your password",
        greeting_name=user_name,
        intro="We received a request to reset your password. Click below to choose a new one:",
        action_label="Reset Password",
        url=html.escape(reset_url, quote=True),
        note=(
            f"This link expires in {expires_minutes} minutes. "
            "If you did not request a reset, your password stays unchanged."
        ),
    )
