"""Fan-out of one notification request to every injected notifier."""
from __future__ import annotations

import asyncio
import logging
from dataclasses import replace
from typing import Mapping, Sequence, Union

from ..errors import DeliveryFailed, InvalidRecipient, NotificationError
from ..interfaces.notifier import Notifier
from ..models import DeliveryOutcome, NotificationReport

logger = logging.getLogger(__name__)

Recipients = Union[str, Mapping[str, str]]


class NotificationService:
    """Deliver a message through every notifier it was constructed with.

    The service only knows notifiers through the ``Notifier`` protocol and
    never builds one itself; the caller (see ``bootstrap``) decides which
    concrete channels are used.

    A failure in one notifier is recorded in the report and never stops the
    remaining notifiers. ``DeliveryFailed`` and timeouts are retried up to
    ``max_attempts`` in total; ``InvalidRecipient`` is not. A timeout is not
    retried for a notifier whose ``cancellable`` attribute is False, since its
    first send may still complete.

    Channel names must be unique across the injected notifiers.
    """

    def __init__(
        self,
        notifiers: Sequence[Notifier],
        *,
        concurrent: bool = False,
        timeout_seconds: float | None = None,
        max_attempts: int = 1,
        retry_delay_seconds: float = 0.0,
    ) -> None:
        if max_attempts < 1:
            raise ValueError("max_attempts must be at least 1")
        if timeout_seconds is not None and timeout_seconds <= 0:
            raise ValueError("timeout_seconds must be > 0")
        if retry_delay_seconds < 0:
            raise ValueError("retry_delay_seconds must be >= 0")

        self._notifiers: tuple[Notifier, ...] = tuple(notifiers)
        channels = [_channel_of(n) for n in self._notifiers]
        duplicates = sorted({c for c in channels if channels.count(c) > 1})
        if duplicates:
            raise ValueError(f"Duplicate notifier channel(s): {', '.join(duplicates)}")
        self._concurrent = concurrent
        self._timeout = timeout_seconds
        self._max_attempts = max_attempts
        self._retry_delay = retry_delay_seconds

    @property
    def notifiers(self) -> tuple[Notifier, ...]:
        return self._notifiers

    async def send_notification(self, to: Recipients, message: str) -> NotificationReport:
        """Send ``message`` through every notifier and aggregate the outcomes.

        Args:
            to: One recipient used for every notifier, or a mapping of
                channel name to recipient.
            message: Non-empty message body.
        """
        if not message or not message.strip():
            raise ValueError("message must be non-empty")

        if not self._notifiers:
            logger.debug("No notifiers configured, nothing to send")
            return NotificationReport()

        if self._concurrent:
            outcomes = await asyncio.gather(
                *(self._deliver(n, to, message) for n in self._notifiers)
            )
        else:
            outcomes = [await self._deliver(n, to, message) for n in self._notifiers]

        report = NotificationReport(outcomes=tuple(outcomes))
        if report.all_succeeded:
            logger.info("Notification delivered via %d channel(s)", report.attempted)
        else:
            logger.warning(
                "Notification failed on: %s", ", ".join(report.failed_channels)
            )
        return report

    async def _deliver(
        self, notifier: Notifier, to: Recipients, message: str
    ) -> DeliveryOutcome:
        channel = _channel_of(notifier)

        if isinstance(to, Mapping):
            recipient = to.get(channel)
            if not recipient:
                logger.warning("No recipient given for channel '%s'", channel)
                return DeliveryOutcome.failed(
                    channel, "", f"No recipient for channel '{channel}'",
                    InvalidRecipient.kind, attempts=0,
                )
        else:
            recipient = to

        attempt = 0
        while True:
            attempt += 1
            try:
                outcome = await self._notify_once(notifier, recipient, message)
                if isinstance(outcome, DeliveryOutcome) and not outcome.success:
                    logger.error("Notifier '%s' reported failure: %s", channel, outcome.error)
                    return replace(outcome, channel=channel, attempts=attempt)
                return DeliveryOutcome.ok(channel, recipient, attempts=attempt)
            except InvalidRecipient as e:
                logger.warning("Notifier '%s' rejected recipient: %s", channel, e)
                return DeliveryOutcome.failed(
                    channel, recipient, str(e), e.kind, attempts=attempt
                )
            except (DeliveryFailed, asyncio.TimeoutError) as e:
                if isinstance(e, asyncio.TimeoutError):
                    error_kind, error = "timeout", f"Notifier '{channel}' timed out"
                else:
                    error_kind, error = e.kind, str(e)
                retryable = not (
                    error_kind == "timeout" and not getattr(notifier, "cancellable", True)
                )
                if retryable and attempt < self._max_attempts:
                    logger.warning(
                        "Notifier '%s' attempt %d/%d failed: %s",
                        channel, attempt, self._max_attempts, error,
                    )
                    if self._retry_delay:
                        await asyncio.sleep(self._retry_delay)
                    continue
                logger.error("Notifier '%s' failed: %s", channel, error)
                return DeliveryOutcome.failed(
                    channel, recipient, error, error_kind, attempts=attempt
                )
            except NotificationError as e:
                logger.error("Notifier '%s' failed: %s", channel, e)
                return DeliveryOutcome.failed(
                    channel, recipient, str(e), e.kind, attempts=attempt
                )
            except Exception as e:
                logger.exception("Notifier '%s' raised unexpectedly", channel)
                return DeliveryOutcome.failed(
                    channel, recipient, f"{type(e).__name__}: {e}", "unexpected",
                    attempts=attempt,
                )

    async def _notify_once(
        self, notifier: Notifier, recipient: str, message: str
    ) -> DeliveryOutcome:
        if self._timeout is None:
            return await notifier.notify(recipient, message)
        return await asyncio.wait_for(notifier.notify(recipient, message), self._timeout)


def _channel_of(notifier: Notifier) -> str:
    channel = getattr(notifier, "channel", None)
    if isinstance(channel, str) and channel:
        return channel
    return type(notifier).__name__
