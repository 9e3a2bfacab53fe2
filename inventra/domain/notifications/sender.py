# inventra/domain/notifications/sender.py
"""Outbound email through the Resend HTTP API.

Delivery is fire-and-forget: every failure is logged and dropped, nothing
is retried, and nothing is raised to the caller.
"""
from dataclasses import dataclass, field
from typing import List, Optional

import requests

from inventra.core.config import settings
from inventra.core.logging_config import get_logger

logger = get_logger("notifications")

RESEND_URL = "https://api.resend.com/emails"
TIMEOUT_SECONDS = 10


@dataclass
class OutgoingEmail:
    recipients: List[str]
    subject: str
    html: str
    skipped: List[str] = field(default_factory=list)


def send_email(to: Optional[str], subject: str, html: str, session: Optional[requests.Session] = None) -> bool:
    """Send one message; returns False when skipped or when delivery failed."""
    if not to or not settings.RESEND_API_KEY:
        logger.debug("email_skipped", extra={"to": to, "subject": subject})
        return False

    http = session or requests
    try:
        response = http.post(
            RESEND_URL,
            headers={"Authorization": f"Bearer {settings.RESEND_API_KEY}"},
            json={
                "from": f"{settings.APP_EMAIL_FROM_NAME} <{settings.APP_EMAIL_FROM}>",
                "to": [to],
                "subject": subject,
                "html": html,
            },
            timeout=TIMEOUT_SECONDS,
        )
    except requests.RequestException:
        logger.warning("email_delivery_failed", exc_info=True, extra={"to": to, "subject": subject})
        return False

    if not response.ok:
        logger.warning(
            "email_delivery_rejected",
            extra={"to": to, "subject": subject, "status": response.status_code},
        )
        return False
    return True


def deliver(email: OutgoingEmail, session: Optional[requests.Session] = None) -> int:
    """Send ``email`` to each recipient; returns how many were accepted."""
    sent = 0
    for to in email.recipients:
        if send_email(to, email.subject, email.html, session=session):
            sent += 1
        else:
            email.skipped.append(to)
    logger.info(
        "email_batch_delivered",
        extra={"subject": email.subject, "sent": sent, "recipients": len(email.recipients)},
    )
    return sent
