from __future__ import annotations

import asyncio
import logging
import smtplib
from email.message import EmailMessage

from ..config import Settings, get_settings
from ..domain.errors import DeliveryError
from .otp_ledger import OTP_TTL

logger = logging.getLogger(__name__)

SUBJECT = "Password reset OTP code"


def build_otp_message(*, to: str, from_addr: str, code: str) -> EmailMessage:
    minutes = int(OTP_TTL.total_seconds() // 60)
    msg = EmailMessage()
    msg["From"] = from_addr
    msg["To"] = to
    msg["Subject"] = SUBJECT
    msg.set_content(f"Your OTP code is {code}. The code expires in {minutes} minutes.")
    msg.add_alternative(
        f"<p>Your OTP code is <strong>{code}</strong>.</p>"
        f"<p>The code expires in {minutes} minutes.</p>",
        subtype="html",
    )
    return msg


class SmtpOtpSender:
    """Mails OTP codes over SMTP; the blocking client runs in the default executor."""

    def __init__(self, settings: Settings | None = None) -> None:
        self._settings = settings or get_settings()

    def _send_blocking(self, msg: EmailMessage) -> None:
        s = self._settings
        if s.SMTP_SECURE:
            server = smtplib.SMTP_SSL(s.SMTP_HOST, s.SMTP_PORT, timeout=s.SMTP_TIMEOUT_SEC)
        else:
            server = smtplib.SMTP(s.SMTP_HOST, s.SMTP_PORT, timeout=s.SMTP_TIMEOUT_SEC)
        with server:
            if not s.SMTP_SECURE:
                server.starttls()
            if s.SMTP_USER and s.SMTP_PASS:
                server.login(s.SMTP_USER, s.SMTP_PASS)
            server.send_message(msg)

    async def send_otp(self, identity: str, code: str) -> None:
        from_addr = self._settings.mail_from
        if not from_addr:
            raise DeliveryError("MAIL_FROM/SMTP_USER not configured")

        msg = build_otp_message(to=identity, from_addr=from_addr, code=code)
        loop = asyncio.get_running_loop()
        try:
            await loop.run_in_executor(None, self._send_blocking, msg)
        except (smtplib.SMTPException, OSError) as exc:
            raise DeliveryError(str(exc)) from exc


class LogOtpSender:
    """DEV sender: writes the code to the log instead of mailing it."""

    async def send_otp(self, identity: str, code: str) -> None:
        logger.warning("[DEV] OTP for %s: %s", identity, code, extra={"identity": identity})


def build_otp_sender(settings: Settings | None = None):
    settings = settings or get_settings()
    if settings.OTP_DELIVERY == "log":
        return LogOtpSender()
    return SmtpOtpSender(settings)
