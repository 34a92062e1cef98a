"""Configuration loader — reads config.yaml, interpolates env vars, validates."""
from __future__ import annotations

import logging
import os
import re
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

import yaml
from dotenv import load_dotenv

logger = logging.getLogger(__name__)

DISPATCH_MODES = ("sequential", "concurrent")

# ---------------------------------------------------------------------------
# Frozen config dataclasses
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class ServiceConfig:
    dispatch: str = "sequential"
    timeout_seconds: float | None = 10.0
    max_attempts: int = 1
    retry_delay_seconds: float = 0.0


@dataclass(frozen=True)
class EmailConfig:
    enabled: bool = False
    smtp_server: str = "smtp.gmail.com"
    smtp_port: int = 587
    use_tls: bool = True
    sender_email: str = ""
    sender_password: str = ""
    subject: str = "Notification"
    timeout_seconds: float = 10.0


@dataclass(frozen=True)
class SmsConfig:
    enabled: bool = False
    account_sid: str = ""
    auth_token: str = ""
    from_phone: str = ""
    api_base_url: str = "https://api.twilio.com"
    timeout_seconds: float = 10.0


@dataclass(frozen=True)
class ConsoleConfig:
    enabled: bool = False
    channel: str = "console"


@dataclass(frozen=True)
class NotificationsConfig:
    email: EmailConfig = field(default_factory=EmailConfig)
    sms: SmsConfig = field(default_factory=SmsConfig)
    console: ConsoleConfig = field(default_factory=ConsoleConfig)


@dataclass(frozen=True)
class AppConfig:
    service: ServiceConfig = field(default_factory=ServiceConfig)
    notifications: NotificationsConfig = field(default_factory=NotificationsConfig)


# ---------------------------------------------------------------------------
# Env interpolation
# ---------------------------------------------------------------------------

_ENV_VAR_RE = re.compile(r"\$\{([^}]+)}")


def _interpolate_env(value: Any) -> Any:
    """Recursively replace ${VAR} references with environment variable values."""
    if isinstance(value, str):
        return _ENV_VAR_RE.sub(lambda m: os.environ.get(m.group(1), ""), value)
    if isinstance(value, dict):
        return {k: _interpolate_env(v) for k, v in value.items()}
    if isinstance(value, list):
        return [_interpolate_env(item) for item in value]
    return value


def _as_bool(value: Any) -> bool:
    # Interpolated env values arrive as strings, so "false" must not be truthy.
    if isinstance(value, str):
        return value.strip().lower() in {"1", "true", "yes", "on"}
    return bool(value)


def _as_optional_float(value: Any) -> float | None:
    if value is None or value == "":
        return None
    return float(value)


# ---------------------------------------------------------------------------
# YAML → dataclass builders
# ---------------------------------------------------------------------------


def _build_service(raw: dict[str, Any]) -> ServiceConfig:
    timeout = raw.get("timeout_seconds", ServiceConfig.timeout_seconds)
    return ServiceConfig(
        dispatch=str(raw.get("dispatch", "sequential")).strip().lower(),
        timeout_seconds=_as_optional_float(timeout),
        max_attempts=int(raw.get("max_attempts", 1)),
        retry_delay_seconds=float(raw.get("retry_delay_seconds", 0.0)),
    )


def _build_notifications(raw: dict[str, Any]) -> NotificationsConfig:
    em = raw.get("email") or {}
    sms = raw.get("sms") or {}
    con = raw.get("console") or {}
    return NotificationsConfig(
        email=EmailConfig(
            enabled=_as_bool(em.get("enabled", False)),
            smtp_server=em.get("smtp_server", "smtp.gmail.com"),
            smtp_port=int(em.get("smtp_port", 587)),
            use_tls=_as_bool(em.get("use_tls", True)),
            sender_email=em.get("sender_email", ""),
            sender_password=em.get("sender_password", ""),
            subject=em.get("subject", "Notification"),
            timeout_seconds=float(em.get("timeout_seconds", 10.0)),
        ),
        sms=SmsConfig(
            enabled=_as_bool(sms.get("enabled", False)),
            account_sid=sms.get("account_sid", ""),
            auth_token=sms.get("auth_token", ""),
            from_phone=sms.get("from_phone", ""),
            api_base_url=sms.get("api_base_url", "https://api.twilio.com"),
            timeout_seconds=float(sms.get("timeout_seconds", 10.0)),
        ),
        console=ConsoleConfig(
            enabled=_as_bool(con.get("enabled", False)),
            channel=con.get("channel", "console"),
        ),
    )


# ---------------------------------------------------------------------------
# Public API
# ---------------------------------------------------------------------------


def load_config(config_path: str | Path | None = None) -> AppConfig:
    """Load and validate application configuration from YAML + .env.

    Args:
        config_path: Path to config.yaml. Defaults to ``config.yaml`` in the
            project root (two levels up from this file).
    """
    load_dotenv()

    if config_path is None:
        config_path = Path(__file__).resolve().parent.parent / "config.yaml"
    config_path = Path(config_path)

    if not config_path.exists():
        raise FileNotFoundError(f"Config file not found: {config_path}")

    with open(config_path) as f:
        raw = yaml.safe_load(f) or {}

    raw = _interpolate_env(raw)

    cfg = AppConfig(
        service=_build_service(raw.get("service") or {}),
        notifications=_build_notifications(raw.get("notifications") or {}),
    )

    _validate(cfg)
    logger.info("Configuration loaded from %s", config_path)
    return cfg


def _validate(cfg: AppConfig) -> None:
    """Raise on invalid configuration."""
    service = cfg.service
    if service.dispatch not in DISPATCH_MODES:
        raise ValueError(
            f"Unknown dispatch mode '{service.dispatch}' "
            f"(expected one of: {', '.join(DISPATCH_MODES)})"
        )
    if service.max_attempts < 1:
        raise ValueError("max_attempts must be at least 1")
    if service.timeout_seconds is not None and service.timeout_seconds <= 0:
        raise ValueError("timeout_seconds must be > 0")
    if service.retry_delay_seconds < 0:
        raise ValueError("retry_delay_seconds must be >= 0")

    notifications = cfg.notifications
    if notifications.email.enabled and not notifications.email.sender_email:
        raise ValueError("Email channel is enabled but sender_email is not set")

    if notifications.sms.enabled:
        for name in ("account_sid", "auth_token", "from_phone"):
            if not getattr(notifications.sms, name):
                raise ValueError(f"SMS channel is enabled but {name} is not set")

    if notifications.console.enabled:
        taken = {
            name
            for name, enabled in (
                ("email", notifications.email.enabled),
                ("sms", notifications.sms.enabled),
            )
            if enabled
        }
        if notifications.console.channel in taken:
            raise ValueError(
                f"Console channel name '{notifications.console.channel}' "
                "clashes with an enabled channel"
            )

    if not (
        notifications.email.enabled
        or notifications.sms.enabled
        or notifications.console.enabled
    ):
        raise ValueError("At least one notification channel must be enabled")
