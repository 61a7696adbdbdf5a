"""Command-line entry point: dispatch one tracker webhook payload to Zendesk."""

from dotenv import load_dotenv
load_dotenv()

import argparse
import json
import os
import sys
from pathlib import Path
from typing import Any, Dict, Optional, TextIO

from zendesk_notifier.config.environment import load_log_level_override, load_tracker_auth
from zendesk_notifier.config.exceptions import ConfigurationError
from zendesk_notifier.config.loader import load_config
from zendesk_notifier.config.models import AppConfig, NotificationPolicy
from zendesk_notifier.config.notifier import NotifierConfiguration
from zendesk_notifier.events.webhook import WebhookPayloadError, parse_webhook
from zendesk_notifier.logging import configure_logging, get_logger
from zendesk_notifier.notifications.dispatcher import NotificationDispatcher
from zendesk_notifier.transport.dry_run import DryRunTransport
from zendesk_notifier.transport.zendesk import ZendeskAttachmentUploader, ZendeskTransport

logger = get_logger(__name__, component="cli")

# Statuses that mean the event was handled as intended
OK_STATUSES = {"sent", "filtered", "empty", "skipped"}


def build_dispatcher(app_config: AppConfig, dry_run: bool = False) -> NotificationDispatcher:
    """
    Wire configuration, transport and attachment handling into a dispatcher.

    Args:
        app_config: Loaded application configuration
        dry_run: Log documents instead of sending them; attachments are not uploaded

    Returns:
        Ready-to-use NotificationDispatcher

    Raises:
        ConfigurationError: If the listener options are invalid
    """
    configuration = NotifierConfiguration(
        policy=NotificationPolicy(field_mappings=app_config.field_mappings)
    )
    configuration.apply_options(app_config.options)

    if dry_run:
        transport = DryRunTransport()
        uploader = None
    else:
        transport = ZendeskTransport(
            timeout=app_config.transport.timeout,
            user_agent=app_config.transport.user_agent,
        )
        uploader = ZendeskAttachmentUploader(
            tracker_auth=load_tracker_auth(),
            timeout=app_config.transport.timeout,
            user_agent=app_config.transport.user_agent,
        )

    return NotificationDispatcher(
        configuration=configuration,
        transport=transport,
        attachment_handler=uploader,
        tracker_name=app_config.tracker_name,
    )


def read_payload(source: str, stdin: Optional[TextIO] = None) -> Dict[str, Any]:
    """Read a webhook payload from a file path, or from stdin when source is '-'."""
    try:
        if source == "-":
            return json.load(stdin or sys.stdin)
        with open(source, "r", encoding="utf-8") as f:
            return json.load(f)
    except json.JSONDecodeError as e:
        raise WebhookPayloadError(f"Webhook payload is not valid JSON: {e}") from e
    except UnicodeDecodeError as e:
        raise WebhookPayloadError(f"Webhook payload is not valid UTF-8: {e}") from e


def main(argv: Optional[list] = None) -> int:
    """
    Main entry point.

    Returns:
        Exit code (0 when the event was handled, non-zero on failure)
    """
    parser = argparse.ArgumentParser(
        description="Zendesk Notifier - forward a tracker issue event to the linked Zendesk ticket"
    )
    parser.add_argument(
        "--config",
        type=Path,
        default=None,
        help="Path to configuration file (default: config.yaml)",
    )
    parser.add_argument(
        "--event",
        default="-",
        help="Path to a webhook payload JSON file, or '-' for stdin (default)",
    )
    parser.add_argument(
        "--dry-run",
        action="store_true",
        help="Log the Zendesk documents instead of sending them",
    )
    parser.add_argument(
        "--log-level",
        default=None,
        choices=["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"],
        help="Log level (overrides config and environment)",
    )

    args = parser.parse_args(argv)

    try:
        app_config = load_config(args.config)

        # CLI > environment > config file
        log_level = args.log_level or load_log_level_override() or app_config.logging.level
        configure_logging(
            level=log_level,
            format_type=app_config.logging.format,
            environment=os.environ.get("ENVIRONMENT", "local"),
        )

        dispatcher = build_dispatcher(app_config, dry_run=args.dry_run)
        event = parse_webhook(read_payload(args.event))

        result = dispatcher.dispatch(event)
        logger.info(
            f"Event for {result.issue_key} finished with status {result.status}",
            extra={
                "event": "cli.dispatch.completed",
                "status": result.status,
                "reason": result.reason,
                "dry_run": args.dry_run,
            },
        )
        return 0 if result.status in OK_STATUSES else 1

    except ConfigurationError as e:
        print(f"Configuration Error: {e}", file=sys.stderr)
        return 1
    except (WebhookPayloadError, OSError) as e:
        print(f"Cannot read event: {e}", file=sys.stderr)
        return 1
    except KeyboardInterrupt:
        print("\nInterrupted by user", file=sys.stderr)
        return 130


if __name__ == "__main__":
    sys.exit(main())
