"""Transactional email delivery over SMTP."""
from __future__ import annotations

import smtplib
import ssl
from dataclasses import dataclass
from email.message import EmailMessage
from email.utils import formataddr, make_msgid
from typing import Optional

import structlog
from fastapi.concurrency import run_in_threadpool

from kadi.core.config import Settings

logger = structlog.get_logger(__name__)


@dataclass(frozen=True)
class MailResult:
    sent: bool
    reason: Optional[str] = None
    message_id: Optional[str] = None


def _build_sender(settings: Settings) -> Optional[str]:
    sender_email = settings.MAIL_FROM or settings.SMTP_USER
    if not sender_email:
        return None
    return formataddr((settings.MAIL_FROM_NAME or settings.APP_NAME, sender_email))


def _message_id(settings: Settings) -> str:
    """Message-ID under the sender's domain, or the local hostname when it has none"""
    _, at, domain = (settings.MAIL_FROM or settings.SMTP_USER or "").rpartition("@")
    return make_msgid(domain=domain if at and domain else None)


def _deliver(settings: Settings, msg: EmailMessage) -> None:
    host = settings.SMTP_HOST
    port = int(settings.SMTP_PORT or 587)
    if port == 465:
        with smtplib.SMTP_SSL(host, port, context=ssl.create_default_context()) as server:
            server.login(settings.SMTP_USER, settings.SMTP_PASS)
            server.send_message(msg)
    else:
        with smtplib.SMTP(host, port) as server:
            server.starttls(context=ssl.create_default_context())
            server.login(settings.SMTP_USER, settings.SMTP_PASS)
            server.send_message(msg)


async def send_mail(settings: Settings, *, to: str, subject: str, html: str, text: str) -> MailResult:
    """Send a multipart email; failures are reported, never raised."""
    if not (settings.SMTP_HOST and settings.SMTP_USER and settings.SMTP_PASS):
        logger.warning("smtp_not_configured", recipient=to)
        return MailResult(sent=False, reason="transporter_not_configured")

    msg = EmailMessage()
    msg["Subject"] = subject
    sender = _build_sender(settings)
    if sender:
        msg["From"] = sender
    msg["To"] = to
    msg["Message-ID"] = _message_id(settings)
    msg.set_content(text)
    msg.add_alternative(html, subtype="html")

    try:
        await run_in_threadpool(_deliver, settings, msg)
    except (smtplib.SMTPException, OSError) as exc:
        logger.error("smtp_send_failed", recipient=to, error=str(exc))
        return MailResult(sent=False, reason="smtp_error")

    return MailResult(sent=True, message_id=msg.get("Message-ID"))
