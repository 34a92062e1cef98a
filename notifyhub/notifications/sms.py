"""SMS notification channel (Twilio Messages API)."""
import asyncio
import json
import logging
import re
import ssl

import aiohttp
import certifi

from ..config import SmsConfig
from ..errors import DeliveryFailed, InvalidRecipient
from ..models import DeliveryOutcome

logger = logging.getLogger(__name__)

_E164_RE = re.compile(r"^\+[1-9]\d{7,14}$")

# Twilio error codes for an invalid or non-mobile "To" number.
_INVALID_TO_CODES = {21211, 21614}


class SmsNotifier:
    """Send notifications as SMS through Twilio."""

    channel = "sms"

    def __init__(self, config: SmsConfig) -> None:
        self._account_sid = config.account_sid
        self._auth_token = config.auth_token
        self._from_phone = config.from_phone
        self._base_url = config.api_base_url.rstrip("/")
        self._timeout = config.timeout_seconds

    async def notify(self, recipient: str, message: str) -> DeliveryOutcome:
        """Send ``message`` to the E.164 phone number ``recipient``."""
        recipient = (recipient or "").strip()
        if not _E164_RE.match(recipient):
            raise InvalidRecipient(
                f"Not an E.164 phone number: {recipient!r}", channel=self.channel
            )

        if not self._account_sid or not self._auth_token or not self._from_phone:
            raise DeliveryFailed("Twilio credentials not configured", channel=self.channel)

        url = f"{self._base_url}/2010-04-01/Accounts/{self._account_sid}/Messages.json"
        payload = {"To": recipient, "From": self._from_phone, "Body": message}

        ssl_context = ssl.create_default_context(cafile=certifi.where())
        connector = aiohttp.TCPConnector(ssl=ssl_context)
        timeout = aiohttp.ClientTimeout(total=self._timeout)
        auth = aiohttp.BasicAuth(self._account_sid, self._auth_token)

        try:
            async with aiohttp.ClientSession(
                connector=connector, timeout=timeout, auth=auth
            ) as session:
                async with session.post(url, data=payload) as response:
                    status = response.status
                    body = await response.text()
        except asyncio.TimeoutError as e:
            raise DeliveryFailed("Twilio SMS send timed out", channel=self.channel) from e
        except aiohttp.ClientError as e:
            raise DeliveryFailed(f"Twilio SMS send failed: {e}", channel=self.channel) from e

        if 200 <= status < 300:
            logger.info("SMS sent to %s", recipient)
            return DeliveryOutcome.ok(self.channel, recipient)

        if status == 400 and _error_code(body) in _INVALID_TO_CODES:
            raise InvalidRecipient(
                f"Twilio rejected recipient {recipient}", channel=self.channel
            )

        logger.error("Failed to send SMS: HTTP %s", status)
        raise DeliveryFailed(
            f"Twilio SMS send failed HTTP {status}: {body[:300]}", channel=self.channel
        )


def _error_code(body: str) -> int | None:
    try:
        data = json.loads(body)
    except ValueError:
        return None
    if not isinstance(data, dict):
        return None
    code = data.get("code")
    return code if isinstance(code, int) else None
