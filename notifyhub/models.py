"""Data models — all frozen (immutable)."""
from __future__ import annotations

from dataclasses import dataclass
from typing import Any


@dataclass(frozen=True)
class DeliveryOutcome:
    """Result of delivering one message through one notifier."""

    channel: str
    recipient: str
    success: bool
    error: str | None = None
    error_kind: str | None = None
    attempts: int = 1

    @classmethod
    def ok(cls, channel: str, recipient: str, attempts: int = 1) -> DeliveryOutcome:
        return cls(channel=channel, recipient=recipient, success=True, attempts=attempts)

    @classmethod
    def failed(
        cls,
        channel: str,
        recipient: str,
        error: str,
        error_kind: str,
        attempts: int = 1,
    ) -> DeliveryOutcome:
        return cls(
            channel=channel,
            recipient=recipient,
            success=False,
            error=error,
            error_kind=error_kind,
            attempts=attempts,
        )


@dataclass(frozen=True)
class NotificationReport:
    """Aggregated outcomes of one fan-out, in notifier injection order."""

    outcomes: tuple[DeliveryOutcome, ...] = ()

    @property
    def attempted(self) -> int:
        return len(self.outcomes)

    @property
    def all_succeeded(self) -> bool:
        return all(o.success for o in self.outcomes)

    @property
    def failed_channels(self) -> tuple[str, ...]:
        return tuple(o.channel for o in self.outcomes if not o.success)

    @property
    def succeeded_channels(self) -> tuple[str, ...]:
        return tuple(o.channel for o in self.outcomes if o.success)

    def as_dict(self) -> dict[str, Any]:
        return {
            "all_succeeded": self.all_succeeded,
            "failed_channels": list(self.failed_channels),
            "outcomes": [
                {
                    "channel": o.channel,
                    "recipient": o.recipient,
                    "success": o.success,
                    "error": o.error,
                    "error_kind": o.error_kind,
                    "attempts": o.attempts,
                }
                for o in self.outcomes
            ],
        }
