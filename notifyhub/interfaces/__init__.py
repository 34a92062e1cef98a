"""Protocol interfaces for the notification service."""
from .notifier import Notifier

__all__ = ["Notifier"]
