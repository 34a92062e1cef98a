"""Notifier protocol — notification channel abstraction."""
from typing import Protocol

from ..models import DeliveryOutcome


class Notifier(Protocol):
    """Abstract interface for delivering a message to a recipient.

    Implementations return a successful ``DeliveryOutcome`` and raise
    ``InvalidRecipient`` or ``DeliveryFailed`` on failure. A notifier whose
    send cannot be cancelled may set ``cancellable = False`` so a timed-out
    send is not retried.
    """

    @property
    def channel(self) -> str: ...

    async def notify(self, recipient: str, message: str) -> DeliveryOutcome: ...
