"""Email notification channel."""
import asyncio
import logging
import re
import smtplib
from email.mime.multipart import MIMEMultipart
from email.mime.text import MIMEText

from ..config import EmailConfig
from ..errors import DeliveryFailed, InvalidRecipient
from ..models import DeliveryOutcome

logger = logging.getLogger(__name__)

_EMAIL_RE = re.compile(r"^[^@\s]+@[^@\s]+\.[^@\s]+$")


class EmailNotifier:
    """Send notifications via SMTP."""

    channel = "email"
    # The SMTP send runs in a worker thread that a timeout cannot stop.
    cancellable = False

    def __init__(self, config: EmailConfig) -> None:
        self._smtp_server = config.smtp_server
        self._smtp_port = config.smtp_port
        self._use_tls = config.use_tls
        self._sender_email = config.sender_email
        self._sender_password = config.sender_password
        self._subject = config.subject
        self._timeout = config.timeout_seconds

    async def notify(self, recipient: str, message: str) -> DeliveryOutcome:
        """Send ``message`` to the email address ``recipient``."""
        recipient = (recipient or "").strip()
        if not _EMAIL_RE.match(recipient):
            raise InvalidRecipient(
                f"Not a valid email address: {recipient!r}", channel=self.channel
            )

        if not self._sender_email or not self._sender_password:
            raise DeliveryFailed("Email credentials not configured", channel=self.channel)

        msg = MIMEMultipart()
        msg["From"] = self._sender_email
        msg["To"] = recipient
        msg["Subject"] = self._subject
        msg.attach(MIMEText(message, "plain"))

        await asyncio.to_thread(self._send, msg, recipient)
        logger.info("Email sent to %s", recipient)
        return DeliveryOutcome.ok(self.channel, recipient)

    def _send(self, msg: MIMEMultipart, recipient: str) -> None:
        try:
            with smtplib.SMTP(
                self._smtp_server, self._smtp_port, timeout=self._timeout
            ) as server:
                if self._use_tls:
                    server.starttls()
                server.login(self._sender_email, self._sender_password)
                server.send_message(msg)
        except smtplib.SMTPRecipientsRefused as e:
            raise InvalidRecipient(
                f"SMTP server refused recipient {recipient}", channel=self.channel
            ) from e
        except (smtplib.SMTPException, OSError) as e:
            raise DeliveryFailed(f"Failed to send email: {e}", channel=self.channel) from e
