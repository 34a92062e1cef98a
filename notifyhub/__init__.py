"""Notification fan-out service built on injected notifier channels."""
from .errors import DeliveryFailed, InvalidRecipient, NotificationError
from .models import DeliveryOutcome, NotificationReport
from .services import NotificationService

__all__ = [
    "DeliveryFailed",
    "DeliveryOutcome",
    "InvalidRecipient",
    "NotificationError",
    "NotificationReport",
    "NotificationService",
]
