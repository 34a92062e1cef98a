"""Composition root — the only place concrete notifiers are chosen."""
from __future__ import annotations

import logging
from typing import Sequence

from .config import AppConfig
from .interfaces.notifier import Notifier
from .notifications import ConsoleNotifier, EmailNotifier, SmsNotifier
from .services import NotificationService

logger = logging.getLogger(__name__)


def build_notifiers(config: AppConfig) -> list[Notifier]:
    """Build one notifier per enabled channel, in dispatch order."""
    notifications = config.notifications
    notifiers: list[Notifier] = []
    if notifications.email.enabled:
        notifiers.append(EmailNotifier(notifications.email))
    if notifications.sms.enabled:
        notifiers.append(SmsNotifier(notifications.sms))
    if notifications.console.enabled:
        notifiers.append(ConsoleNotifier(notifications.console))

    logger.debug("Built notifiers: %s", ", ".join(n.channel for n in notifiers) or "none")
    return notifiers


def build_service(
    config: AppConfig, notifiers: Sequence[Notifier] | None = None
) -> NotificationService:
    """Wire a NotificationService from config.

    ``notifiers`` replaces the configured channels, e.g. with test doubles.
    """
    if notifiers is None:
        notifiers = build_notifiers(config)
    service_cfg = config.service
    return NotificationService(
        notifiers,
        concurrent=service_cfg.dispatch == "concurrent",
        timeout_seconds=service_cfg.timeout_seconds,
        max_attempts=service_cfg.max_attempts,
        retry_delay_seconds=service_cfg.retry_delay_seconds,
    )
