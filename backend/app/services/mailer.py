"""SMTP delivery of the project request confirmation email.

One attempt per message: no retries, no queue. Failures are raised as
MailDeliveryError (server refused / unreachable) or MailConfigurationError
(nothing to connect to) so the caller can log them and answer the client.
"""

from __future__ import annotations

from email.mime.multipart import MIMEMultipart
from email.mime.text import MIMEText
from email.utils import formatdate, make_msgid, parseaddr

import aiosmtplib
from loguru import logger

from app.config import Settings
from app.models.project_request import OutboundEmail


class MailConfigurationError(Exception):
    """Raised when the SMTP transport is not configured."""


class MailDeliveryError(Exception):
    """Raised when the SMTP server could not accept the message."""

    def __init__(self, recipient: str, detail: str):
        self.recipient = recipient
        self.detail = detail
        super().__init__(f"Delivery to {recipient} failed: {detail}")


def build_mime_message(email: OutboundEmail, message_id: str) -> MIMEMultipart:
    """Build a multipart/alternative message with text and HTML parts."""
    msg = MIMEMultipart("alternative")
    msg["From"] = email.sender
    msg["To"] = email.to
    if email.cc:
        msg["Cc"] = email.cc
    msg["Subject"] = email.subject
    msg["Date"] = formatdate(localtime=True)
    msg["Message-ID"] = message_id

    if email.text:
        msg.attach(MIMEText(email.text, "plain", "utf-8"))
    msg.attach(MIMEText(email.html, "html", "utf-8"))
    return msg


class SmtpMailer:
    """Sends OutboundEmail messages through a single SMTP server."""

    def __init__(
        self,
        host: str,
        port: int,
        *,
        use_tls: bool = False,
        username: str = "",
        password: str = "",
    ) -> None:
        self.host = host
        self.port = port
        self.use_tls = use_tls
        self.username = username
        self.password = password

    @classmethod
    def from_settings(cls, settings: Settings) -> SmtpMailer:
        return cls(
            settings.smtp_host,
            settings.smtp_port,
            use_tls=settings.use_implicit_tls,
            username=settings.smtp_user,
            password=settings.smtp_pass,
        )

    async def send(self, email: OutboundEmail) -> str:
        """Deliver ``email`` once and return its Message-ID.

        Raises:
            MailConfigurationError: If no SMTP host or sender is configured.
            MailDeliveryError: If the SMTP exchange fails.
        """
        if not self.host:
            raise MailConfigurationError("SMTP_HOST is not configured")
        if not email.sender:
            raise MailConfigurationError("No sender address configured (SMTP_USER / FROM_EMAIL)")

        domain = parseaddr(email.sender)[1].partition("@")[2] or None
        message_id = make_msgid(domain=domain)
        msg = build_mime_message(email, message_id)

        logger.info("Sending email to {} (cc {}) via {}:{}", email.to, email.cc, self.host, self.port)
        try:
            await aiosmtplib.send(
                msg,
                hostname=self.host,
                port=self.port,
                username=self.username or None,
                password=self.password or None,
                use_tls=self.use_tls,
                start_tls=False if self.use_tls else None,
            )
        except (aiosmtplib.SMTPException, OSError) as e:
            raise MailDeliveryError(email.to, str(e)) from e

        logger.info("Message sent: {}", message_id)
        return message_id
