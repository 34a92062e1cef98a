"""Console notifier for local runs and dry runs."""
import logging
from typing import TextIO

from ..config import ConsoleConfig
from ..errors import InvalidRecipient
from ..models import DeliveryOutcome

logger = logging.getLogger(__name__)


class ConsoleNotifier:
    """Log deliveries instead of sending them anywhere."""

    def __init__(self, config: ConsoleConfig | None = None, stream: TextIO | None = None) -> None:
        config = config or ConsoleConfig(enabled=True)
        self._channel = config.channel
        self._stream = stream

    @property
    def channel(self) -> str:
        return self._channel

    async def notify(self, recipient: str, message: str) -> DeliveryOutcome:
        recipient = (recipient or "").strip()
        if not recipient:
            raise InvalidRecipient("Recipient is empty", channel=self._channel)

        logger.info("[%s] to=%s message=%s", self._channel.upper(), recipient, message)
        if self._stream is not None:
            print(f"[{self._channel.upper()}] to={recipient}", file=self._stream)
            print(f"message={message}", file=self._stream)
        return DeliveryOutcome.ok(self._channel, recipient)
