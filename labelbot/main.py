"""
Application Entry Point

Runs the label rules for a single webhook event read from a JSON file.
Defaults follow the GitHub Actions convention (GITHUB_EVENT_NAME and
GITHUB_EVENT_PATH), so the bot can run as a workflow step.

Exit codes:
    0  event processed or ignored
    1  GitHub API failure
    2  malformed payload or unreadable input
"""

import argparse
import json
import os
from pathlib import Path
from typing import Any, Dict, List, Optional

from pydantic import ValidationError

from labelbot.config import get_settings
from labelbot.logging_config import get_logger, setup_logging
from labelbot.models import MalformedPayloadError, ProcessingResult
from labelbot.services.github_client import GitHubClient
from labelbot.services.remote import RemoteError, RemoteIssueClient
from labelbot.webhook.processor import HookProcessor

logger = get_logger(__name__)

EXIT_OK = 0
EXIT_REMOTE_ERROR = 1
EXIT_BAD_INPUT = 2


def load_payload(path: Path) -> Dict[str, Any]:
    """
    Read a webhook payload from a JSON file.

    Raises:
        MalformedPayloadError: If the file cannot be read or decoded
    """
    try:
        return json.loads(path.read_text(encoding="utf-8"))
    except (OSError, ValueError) as e:
        raise MalformedPayloadError(f"Cannot read payload {path}: {e}") from e


def run_event(
    client: RemoteIssueClient,
    event_name: str,
    payload: Dict[str, Any]
) -> ProcessingResult:
    """Apply the label rules to one event using the given client."""
    return HookProcessor(client).handle_event(event_name, payload)


def parse_args(argv: Optional[List[str]] = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        description="Apply label rules to a GitHub webhook event."
    )
    parser.add_argument(
        "--event-name",
        default=os.environ.get("GITHUB_EVENT_NAME"),
        help="Webhook event name (default: $GITHUB_EVENT_NAME)"
    )
    parser.add_argument(
        "--payload",
        type=Path,
        default=os.environ.get("GITHUB_EVENT_PATH"),
        help="Path to the JSON event payload (default: $GITHUB_EVENT_PATH)"
    )
    return parser.parse_args(argv)


def main(argv: Optional[List[str]] = None) -> int:
    """Run the bot for one event and return the process exit code."""
    args = parse_args(argv)

    try:
        settings = get_settings()
    except ValidationError as e:
        setup_logging()
        logger.error("Configuration validation failed", error=str(e))
        return EXIT_BAD_INPUT

    setup_logging(settings)

    if not args.event_name or not args.payload:
        logger.error("Event name and payload path are required")
        return EXIT_BAD_INPUT

    try:
        payload = load_payload(Path(args.payload))
        with GitHubClient(
            token=settings.github_token,
            api_base=settings.github_api_base,
            timeout=settings.github_timeout
        ) as client:
            result = run_event(client, args.event_name, payload)
    except MalformedPayloadError as e:
        logger.error("Malformed webhook payload", webhook_event=args.event_name, error=str(e))
        return EXIT_BAD_INPUT
    except RemoteError as e:
        logger.error(
            "GitHub label update failed",
            webhook_event=args.event_name,
            error=str(e),
            error_type=type(e).__name__,
            status_code=getattr(e, "status_code", None)
        )
        return EXIT_REMOTE_ERROR

    logger.info(
        "Webhook event handled",
        webhook_event=result.event,
        action=result.action,
        status=result.status,
        reason=result.reason
    )
    return EXIT_OK
