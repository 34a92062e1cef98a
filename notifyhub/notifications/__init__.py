"""Notification channel implementations."""
from .console import ConsoleNotifier
from .email import EmailNotifier
from .sms import SmsNotifier

__all__ = ["ConsoleNotifier", "EmailNotifier", "SmsNotifier"]
