"""Notification error taxonomy."""
from __future__ import annotations


class NotificationError(Exception):
    """Base class for failures raised by a notifier."""

    kind = "notification_error"

    def __init__(self, message: str, channel: str = "") -> None:
        super().__init__(message)
        self.channel = channel


class InvalidRecipient(NotificationError):
    """Recipient is malformed or unknown for the channel. Never retried."""

    kind = "invalid_recipient"


class DeliveryFailed(NotificationError):
    """Transport rejected the message or could not be reached."""

    kind = "delivery_failed"
