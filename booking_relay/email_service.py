"""
Mail dispatch capability.

``MailSender`` is what the HTTP layer depends on. ``SMTPEmailService`` sends
HTML mail through an authenticated SMTP account (Gmail by default) using
smtplib in the threadpool so a slow server only stalls its own request.
"""
import asyncio
import logging
import smtplib
import time
from abc import ABC, abstractmethod
from dataclasses import dataclass
from email.mime.multipart import MIMEMultipart
from email.mime.text import MIMEText
from email.utils import formataddr
from typing import Optional

from fastapi.concurrency import run_in_threadpool

from .config import Settings
from .errors import ErrorKind

logger = logging.getLogger(__name__)


@dataclass
class OutgoingEmail:
    """A rendered email ready to send."""
    to_email: str
    subject: str
    html: str
    from_name: str


@dataclass
class SendResult:
    """Result from a single send."""
    ok: bool
    to_email: str
    error: Optional[str] = None
    error_kind: Optional[ErrorKind] = None
    latency_ms: int = 0


class MailSender(ABC):
    """Abstract interface for sending email."""

    @property
    @abstractmethod
    def sender_address(self) -> str:
        """Account address mail is sent from."""
        pass

    @property
    @abstractmethod
    def admin_address(self) -> str:
        """Where booking alerts and contact notifications go."""
        pass

    @abstractmethod
    async def send(self, email: OutgoingEmail) -> SendResult:
        """
        Send one email.

        Transport failures and missing credentials come back as a failed
        SendResult rather than an exception.
        """
        pass

    @abstractmethod
    async def verify(self) -> tuple[bool, Optional[str]]:
        """
        Check that the transport accepts our credentials.

        Returns:
            Tuple of (success, error_message)
        """
        pass


class SMTPEmailService(MailSender):
    """SMTP implementation of MailSender."""

    def __init__(self, settings: Settings):
        self.settings = settings

    @property
    def sender_address(self) -> str:
        return self.settings.EMAIL_USER

    @property
    def admin_address(self) -> str:
        return self.settings.admin_email

    @property
    def is_configured(self) -> bool:
        return self.settings.is_email_configured

    def _connect(self) -> smtplib.SMTP:
        """Open an authenticated SMTP connection."""
        timeout = self.settings.SMTP_TIMEOUT_SECONDS
        use_ssl = self.settings.SMTP_PORT == 465
        smtp_class = smtplib.SMTP_SSL if use_ssl else smtplib.SMTP
        connection = smtp_class(self.settings.SMTP_SERVER, self.settings.SMTP_PORT, timeout=timeout)

        try:
            if not use_ssl:
                connection.starttls()
            connection.login(self.settings.EMAIL_USER, self.settings.EMAIL_PASSWORD)
        except BaseException:
            # Handshake failed: drop the socket we already opened
            connection.close()
            raise
        return connection

    def build_message(self, email: OutgoingEmail) -> MIMEMultipart:
        msg = MIMEMultipart("alternative")
        msg["From"] = formataddr((email.from_name, self.sender_address))
        msg["To"] = email.to_email
        msg["Subject"] = email.subject
        msg.attach(MIMEText(email.html, "html", "utf-8"))
        return msg

    def _send_sync(self, email: OutgoingEmail):
        msg = self.build_message(email)
        with self._connect() as connection:
            connection.send_message(msg)

    def _verify_sync(self):
        with self._connect() as connection:
            connection.noop()

    async def send(self, email: OutgoingEmail) -> SendResult:
        if not self.is_configured:
            return SendResult(
                ok=False,
                to_email=email.to_email,
                error="Email credentials are not configured",
                error_kind=ErrorKind.MAIL_NOT_CONFIGURED,
            )

        start_time = time.time()
        try:
            await asyncio.wait_for(
                run_in_threadpool(self._send_sync, email),
                timeout=self.settings.SMTP_TIMEOUT_SECONDS,
            )
        except asyncio.TimeoutError:
            return SendResult(
                ok=False,
                to_email=email.to_email,
                error=f"SMTP server did not respond within {self.settings.SMTP_TIMEOUT_SECONDS:g}s",
                error_kind=ErrorKind.TIMEOUT,
                latency_ms=int((time.time() - start_time) * 1000),
            )
        except (smtplib.SMTPException, OSError) as e:
            return SendResult(
                ok=False,
                to_email=email.to_email,
                error=str(e) or e.__class__.__name__,
                error_kind=ErrorKind.MAIL_TRANSPORT,
                latency_ms=int((time.time() - start_time) * 1000),
            )

        return SendResult(
            ok=True,
            to_email=email.to_email,
            latency_ms=int((time.time() - start_time) * 1000),
        )

    async def verify(self) -> tuple[bool, Optional[str]]:
        if not self.is_configured:
            return False, "Email credentials are not configured"

        try:
            await asyncio.wait_for(
                run_in_threadpool(self._verify_sync),
                timeout=self.settings.SMTP_TIMEOUT_SECONDS,
            )
        except asyncio.TimeoutError:
            return False, "SMTP server did not respond in time"
        except (smtplib.SMTPException, OSError) as e:
            return False, str(e) or e.__class__.__name__
        return True, None
