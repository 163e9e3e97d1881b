"""
Hook Processor Module

This module applies the label rules to GitHub webhook events.

Rules:
- Pending author: when the issue/PR author comments or pushes, the
  "pending author" label is removed.
- Review labels: opened or updated PRs get "review required"; an update
  also drops "RTM", since new commits invalidate a ready-to-merge approval.

Design Decisions:
- Decisions are a pure function of event name and payload
- The remote client is injected; nothing is cached between events
- Payload errors are raised before any remote call is made
- Errors are not logged here; the host decides how to report them
"""

from typing import Any, Dict, Optional, Tuple

from labelbot.logging_config import get_logger
from labelbot.models import (
    CommentRef,
    IssueRef,
    IssueSubject,
    ProcessingResult,
    WebhookAction,
    WebhookEventName,
    get_action,
    get_repository,
    parse_field,
)
from labelbot.services.labels import LabelMutator
from labelbot.services.remote import RemoteIssueClient

logger = get_logger(__name__)

PENDING_AUTHOR_LABEL = "pending author"
REVIEW_REQUIRED_LABEL = "review required"
RTM_LABEL = "RTM"

PENDING_AUTHOR_ACTIONS = frozenset({WebhookAction.CREATED.value, WebhookAction.SYNCHRONIZE.value})
REVIEW_LABEL_ACTIONS = frozenset({WebhookAction.OPENED.value, WebhookAction.SYNCHRONIZE.value})


class HookProcessor:
    """
    Applies label rules to webhook events.

    Usage:
        processor = HookProcessor(GitHubClient(token=...))
        processor.handle_event("issue_comment", payload)
    """

    def __init__(self, client: RemoteIssueClient):
        """
        Initialize the processor.

        Args:
            client: Remote issue client used for all label operations
        """
        self.mutator = LabelMutator(client)

    def _resolve_pending_author(
        self, event_name: str, payload: Dict[str, Any]
    ) -> Tuple[bool, Optional[IssueRef]]:
        """
        Validate the pending-author inputs without touching labels.

        Returns:
            (applies, ref) where ref is the issue to clear, or None when the
            responder is not the issue author
        """
        action = get_action(payload)
        if action not in PENDING_AUTHOR_ACTIONS:
            return False, None

        subject_key = "issue" if event_name == WebhookEventName.ISSUE_COMMENT.value else "pull_request"

        repository = get_repository(payload)
        subject = parse_field(payload, subject_key, IssueSubject)
        ref = IssueRef.from_full_name(repository.full_name, subject.number)

        issue_author_id = subject.user.id
        # A push to the PR branch is always done by its author.
        if action == WebhookAction.SYNCHRONIZE.value:
            comment_author_id = issue_author_id
        else:
            comment_author_id = parse_field(payload, "comment", CommentRef).user.id

        if comment_author_id != issue_author_id:
            logger.debug(
                "Comment not from issue author",
                issue=str(ref),
                issue_author_id=issue_author_id,
                comment_author_id=comment_author_id
            )
            return True, None

        return True, ref

    def _resolve_review_labels(self, payload: Dict[str, Any]) -> Tuple[Optional[IssueRef], bool]:
        """
        Validate the review-label inputs without touching labels.

        Returns:
            (ref, remove_rtm) with ref None when the action is not handled
        """
        action = get_action(payload)
        if action not in REVIEW_LABEL_ACTIONS:
            return None, False

        repository = get_repository(payload)
        ref = IssueRef.from_full_name(repository.full_name, payload.get("number"))

        return ref, action == WebhookAction.SYNCHRONIZE.value

    def _apply_review_labels(self, ref: IssueRef, remove_rtm: bool) -> None:
        self.mutator.ensure_present(ref, REVIEW_REQUIRED_LABEL)

        if remove_rtm:
            self.mutator.ensure_absent(ref, RTM_LABEL)

    def process_pending_author(self, event_name: str, payload: Dict[str, Any]) -> bool:
        """
        Remove "pending author" when the issue author responds.

        GitHub events: issue_comment, pull_request_review_comment and
        pull_request (synchronize).

        Returns:
            True if the rule applied to the action (whether or not the
            label had to be removed)

        Raises:
            MalformedPayloadError: If a required field is missing
        """
        applies, ref = self._resolve_pending_author(event_name, payload)
        if ref is not None:
            self.mutator.ensure_absent(ref, PENDING_AUTHOR_LABEL)
        return applies

    def process_review_labels(self, event_name: str, payload: Dict[str, Any]) -> bool:
        """
        Manage the "review required" and "RTM" labels.

        - If a PR is opened or updated, "review required" is set.
        - If a PR is updated and "RTM" is set, it is removed.

        GitHub events: pull_request

        Returns:
            True if the rule applied to the action

        Raises:
            MalformedPayloadError: If a required field is missing
        """
        ref, remove_rtm = self._resolve_review_labels(payload)
        if ref is None:
            return False

        self._apply_review_labels(ref, remove_rtm)
        return True

    def handle_event(self, event_name: str, payload: Dict[str, Any]) -> ProcessingResult:
        """
        Route a webhook event to the rules that apply to it.

        Every routed rule validates its inputs before any label is changed.

        Args:
            event_name: Value of the X-GitHub-Event header
            payload: Decoded webhook body

        Returns:
            ProcessingResult describing whether any rule applied
        """
        try:
            event = WebhookEventName(event_name)
        except ValueError:
            action = payload.get("action") if isinstance(payload, dict) else None
            if not isinstance(action, str):
                action = None
            logger.debug("Ignoring unsupported event", webhook_event=event_name, action=action)
            return ProcessingResult(
                event=event_name,
                action=action,
                status="ignored",
                reason=f"Event type '{event_name}' not processed"
            )

        action = get_action(payload)

        applied, pending_ref = self._resolve_pending_author(event.value, payload)
        review_ref, remove_rtm = None, False
        if event is WebhookEventName.PULL_REQUEST:
            review_ref, remove_rtm = self._resolve_review_labels(payload)
            applied = applied or review_ref is not None

        if not applied:
            logger.debug("Ignoring event action", webhook_event=event.value, action=action)
            return ProcessingResult(
                event=event.value,
                action=action,
                status="ignored",
                reason=f"Action '{action}' not processed for '{event.value}'"
            )

        if pending_ref is not None:
            self.mutator.ensure_absent(pending_ref, PENDING_AUTHOR_LABEL)
        if review_ref is not None:
            self._apply_review_labels(review_ref, remove_rtm)

        logger.info("Processed webhook event", webhook_event=event.value, action=action)
        return ProcessingResult(event=event.value, action=action)
