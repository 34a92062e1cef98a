"""Command-line interface for the notification service."""
from __future__ import annotations

import argparse
import asyncio
import sys

from .bootstrap import build_service
from .config import load_config
from .logging_setup import configure_logging
from .models import NotificationReport
from .services import NotificationService


def _route(value: str) -> tuple[str, str]:
    channel, sep, recipient = value.partition("=")
    if not sep or not channel.strip() or not recipient.strip():
        raise argparse.ArgumentTypeError(
            f"Expected CHANNEL=RECIPIENT, got {value!r}"
        )
    return channel.strip(), recipient.strip()


def build_parser() -> argparse.ArgumentParser:
    """Build the argparse CLI parser."""
    parser = argparse.ArgumentParser(
        prog="notifyhub",
        description="Send one notification through every configured channel",
    )
    parser.add_argument(
        "--config",
        default=None,
        help="Path to config.yaml (default: config.yaml in project root)",
    )
    parser.add_argument(
        "--log-level",
        default="INFO",
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        help="Logging level (default: INFO)",
    )

    sub = parser.add_subparsers(dest="command")

    send_parser = sub.add_parser("send", help="Send a notification")
    send_parser.add_argument("to", help="Recipient used for every channel")
    send_parser.add_argument("message", help="Message body")
    send_parser.add_argument(
        "--route",
        action="append",
        type=_route,
        default=[],
        metavar="CHANNEL=RECIPIENT",
        help="Per-channel recipient override (repeatable)",
    )

    sub.add_parser("channels", help="List enabled channels in dispatch order")

    return parser


def _recipients(
    service: NotificationService, to: str, routes: list[tuple[str, str]]
) -> str | dict[str, str]:
    if not routes:
        return to
    recipients = {notifier.channel: to for notifier in service.notifiers}
    recipients.update(dict(routes))
    return recipients


def _print_report(report: NotificationReport) -> None:
    for outcome in report.outcomes:
        if outcome.success:
            print(f"{outcome.channel}: ok -> {outcome.recipient}")
        else:
            print(f"{outcome.channel}: FAILED ({outcome.error_kind}) {outcome.error}")
    if not report.outcomes:
        print("No channels configured; nothing sent.")


async def _run(args: argparse.Namespace) -> int:
    """Execute the selected command and return the exit code."""
    configure_logging(args.log_level)
    config = load_config(args.config)
    service = build_service(config)

    if args.command == "channels":
        for notifier in service.notifiers:
            print(notifier.channel)
        return 0

    if args.command == "send":
        to = _recipients(service, args.to, args.route)
        try:
            report = await service.send_notification(to, args.message)
        except ValueError as e:
            print(f"error: {e}", file=sys.stderr)
            return 1
        _print_report(report)
        return 0 if report.all_succeeded else 1

    build_parser().print_help()
    return 1


def main(argv: list[str] | None = None) -> None:
    """Entry point."""
    parser = build_parser()
    args = parser.parse_args(argv)

    if not args.command:
        parser.print_help()
        sys.exit(1)

    sys.exit(asyncio.run(_run(args)))
