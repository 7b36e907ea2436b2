"""Outbound email delivery for one-time passwords."""

from __future__ import annotations

import smtplib
from dataclasses import dataclass
from email.mime.text import MIMEText
from typing import Optional, Protocol

from ..config import BaseConfig
from ..logging_config import get_logger

logger = get_logger(__name__)


@dataclass(frozen=True)
class MailResult:
    success: bool
    error: Optional[str] = None


class Mailer(Protocol):
    def send(self, to_address: str, subject: str, html_body: str) -> MailResult:  # pragma: no cover
        ...


class SMTPMailer:
    """Send HTML mail through an SMTP relay.

    Never raises for delivery problems; the outcome is reported through
    :class:`MailResult` so callers can show the reason to the user.
    """

    def __init__(
        self,
        host: str,
        port: int,
        *,
        username: Optional[str] = None,
        password: Optional[str] = None,
        sender: Optional[str] = None,
        use_tls: bool = True,
        timeout: float = 10.0,
    ) -> None:
        self.host = host
        self.port = port
        self.username = username
        self.password = password
        self.sender = sender or username or ""
        self.use_tls = use_tls
        self.timeout = timeout

    @classmethod
    def from_config(cls, config: BaseConfig) -> "SMTPMailer":
        return cls(
            config.SMTP_HOST,
            config.SMTP_PORT,
            username=config.SMTP_USERNAME,
            password=config.SMTP_PASSWORD,
            sender=config.SMTP_SENDER,
            use_tls=config.SMTP_USE_TLS,
        )

    @property
    def configured(self) -> bool:
        return bool(self.host and self.username and self.password)

    def send(self, to_address: str, subject: str, html_body: str) -> MailResult:
        if not self.configured:
            logger.error("Mail transport not configured; set GRIDBOOK_SMTP_USERNAME/PASSWORD")
            return MailResult(
                False,
                "Email service not configured. Set GRIDBOOK_SMTP_USERNAME and "
                "GRIDBOOK_SMTP_PASSWORD and restart the server.",
            )

        message = MIMEText(html_body, "html", "utf-8")
        message["Subject"] = subject
        message["From"] = self.sender
        message["To"] = to_address

        try:
            with smtplib.SMTP(self.host, self.port, timeout=self.timeout) as smtp:
                if self.use_tls:
                    smtp.starttls()
                smtp.login(self.username or "", self.password or "")
                smtp.sendmail(self.sender, [to_address], message.as_string())
        except smtplib.SMTPAuthenticationError:
            logger.error("SMTP authentication failed for %s", self.username)
            return MailResult(False, "Mail server authentication failed. Check the app password.")
        except smtplib.SMTPException as exc:
            logger.error("SMTP error sending to %s: %s", to_address, exc)
            return MailResult(False, f"Mail server error: {exc}")
        except OSError as exc:
            logger.error("Could not reach mail server %s:%s: %s", self.host, self.port, exc)
            return MailResult(False, "Could not connect to the mail server.")

        logger.info("Mail sent", extra={"to": to_address, "subject": subject})
        return MailResult(True)


def render_otp_email(code: str, ttl_minutes: int) -> str:
    """HTML body of the sign-in code message."""

    return (
        '<div style="font-family: Arial, sans-serif; max-width: 600px; margin: 0 auto;">'
        '<h1 style="color: #667eea;">Gridbook</h1>'
        "<h2>Your OTP Code</h2>"
        "<p>Use the following OTP to complete your login:</p>"
        f'<p style="font-size: 36px; letter-spacing: 8px; font-weight: bold;">{code}</p>'
        f"<p>This OTP will expire in {ttl_minutes} minutes. "
        "Do not share this code with anyone.</p>"
        "</div>"
    )


__all__ = ["MailResult", "Mailer", "SMTPMailer", "render_otp_email"]
