"""Shared test fixtures and sample data."""
from __future__ import annotations

import textwrap
from pathlib import Path

import pytest

from notifyhub.config import (
    AppConfig,
    ConsoleConfig,
    EmailConfig,
    NotificationsConfig,
    ServiceConfig,
    SmsConfig,
)
from notifyhub.errors import DeliveryFailed, InvalidRecipient
from notifyhub.models import DeliveryOutcome


# ---------------------------------------------------------------------------
# Config fixtures
# ---------------------------------------------------------------------------


@pytest.fixture()
def sample_email_config() -> EmailConfig:
    return EmailConfig(
        enabled=True,
        smtp_server="smtp.example.com",
        smtp_port=587,
        sender_email="sender@example.com",
        sender_password="password123",
        subject="Test subject",
    )


@pytest.fixture()
def sample_sms_config() -> SmsConfig:
    return SmsConfig(
        enabled=True,
        account_sid="AC123",
        auth_token="secret-token",
        from_phone="+15550000000",
        api_base_url="https://api.twilio.example.com/",
    )


@pytest.fixture()
def sample_app_config(
    sample_email_config: EmailConfig, sample_sms_config: SmsConfig
) -> AppConfig:
    return AppConfig(
        service=ServiceConfig(dispatch="sequential", timeout_seconds=5.0, max_attempts=1),
        notifications=NotificationsConfig(
            email=sample_email_config,
            sms=sample_sms_config,
            console=ConsoleConfig(enabled=False),
        ),
    )


# ---------------------------------------------------------------------------
# Notifier test doubles
# ---------------------------------------------------------------------------


class RecordingNotifier:
    """Notifier double that records calls and can be told to fail."""

    def __init__(self, channel: str, fail_with: Exception | None = None) -> None:
        self.channel = channel
        self.fail_with = fail_with
        self.calls: list[tuple[str, str]] = []

    async def notify(self, recipient: str, message: str) -> DeliveryOutcome:
        self.calls.append((recipient, message))
        if self.fail_with is not None:
            raise self.fail_with
        return DeliveryOutcome.ok(self.channel, recipient)


class FlakyNotifier(RecordingNotifier):
    """Fails with DeliveryFailed for the first ``failures`` calls."""

    def __init__(self, channel: str, failures: int) -> None:
        super().__init__(channel)
        self.failures = failures

    async def notify(self, recipient: str, message: str) -> DeliveryOutcome:
        self.calls.append((recipient, message))
        if len(self.calls) <= self.failures:
            raise DeliveryFailed("gateway unavailable", channel=self.channel)
        return DeliveryOutcome.ok(self.channel, recipient)


@pytest.fixture()
def make_notifier() -> type[RecordingNotifier]:
    return RecordingNotifier


@pytest.fixture()
def make_flaky_notifier() -> type[FlakyNotifier]:
    return FlakyNotifier


@pytest.fixture()
def email_double() -> RecordingNotifier:
    return RecordingNotifier("email")


@pytest.fixture()
def sms_double() -> RecordingNotifier:
    return RecordingNotifier("sms")


@pytest.fixture()
def failing_sms_double() -> RecordingNotifier:
    return RecordingNotifier("sms", fail_with=InvalidRecipient("not a phone", channel="sms"))


# ---------------------------------------------------------------------------
# Config YAML fixture
# ---------------------------------------------------------------------------

SAMPLE_YAML = textwrap.dedent("""\
    service:
      dispatch: concurrent
      timeout_seconds: 3
      max_attempts: 2
      retry_delay_seconds: 0.5
    notifications:
      email:
        enabled: true
        smtp_server: smtp.example.com
        smtp_port: 2525
        sender_email: "sender@example.com"
        sender_password: "pw"
      sms:
        enabled: true
        account_sid: "AC999"
        auth_token: "tok"
        from_phone: "+15551112222"
      console:
        enabled: false
""")


@pytest.fixture()
def sample_yaml_path(tmp_path: Path) -> Path:
    cfg_file = tmp_path / "config.yaml"
    cfg_file.write_text(SAMPLE_YAML)
    return cfg_file
