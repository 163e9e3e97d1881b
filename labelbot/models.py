"""
Data Models Module

This module defines the Pydantic models and error types shared by the
classifier, the label mutator and the remote client.

Design Decisions:
- Use Pydantic models to read only the webhook fields we act on
- Convert validation failures into MalformedPayloadError so callers never
  see raw KeyError/ValidationError from payload access
- Label identity is the exact name string
"""

from enum import Enum
from typing import Any, Dict, Optional, Type, TypeVar

from pydantic import BaseModel, ConfigDict, StrictInt, ValidationError


# =============================================================================
# Errors
# =============================================================================

class LabelbotError(Exception):
    """Base exception for all labelbot errors."""
    pass


class MalformedPayloadError(LabelbotError):
    """Raised when a webhook payload is missing a required field or has the wrong shape."""
    pass


# =============================================================================
# Enums
# =============================================================================

class WebhookEventName(str, Enum):
    """Webhook events we route to a rule."""
    ISSUE_COMMENT = "issue_comment"
    PULL_REQUEST_REVIEW_COMMENT = "pull_request_review_comment"
    PULL_REQUEST = "pull_request"


class WebhookAction(str, Enum):
    """Payload actions the rules react to."""
    CREATED = "created"
    OPENED = "opened"
    SYNCHRONIZE = "synchronize"


# =============================================================================
# Core Models
# =============================================================================

class Label(BaseModel):
    """A label attached to an issue or pull request."""
    model_config = ConfigDict(frozen=True, extra="ignore")

    name: str


class IssueRef(BaseModel):
    """
    Identifies an issue or pull request in a repository.

    Pull requests share the issue number space, so the same reference
    is used for both when labeling.
    """
    model_config = ConfigDict(frozen=True)

    repo_owner: str
    repo_name: str
    issue_number: int

    @classmethod
    def from_full_name(cls, full_name: Any, issue_number: Any) -> "IssueRef":
        """
        Build a reference from ``repository.full_name`` and a number.

        Raises:
            MalformedPayloadError: If full_name is not ``owner/name``
        """
        if not isinstance(full_name, str):
            raise MalformedPayloadError(
                f"repository.full_name must be a string, got {type(full_name).__name__}"
            )

        parts = full_name.split("/")
        if len(parts) != 2 or not all(parts):
            raise MalformedPayloadError(f"Invalid repository full_name: {full_name!r}")

        if isinstance(issue_number, bool) or not isinstance(issue_number, int):
            raise MalformedPayloadError(f"Invalid issue number: {issue_number!r}")

        return cls(repo_owner=parts[0], repo_name=parts[1], issue_number=issue_number)

    @property
    def full_repo_name(self) -> str:
        """Get the full repository name (owner/repo)."""
        return f"{self.repo_owner}/{self.repo_name}"

    def __str__(self) -> str:
        return f"{self.full_repo_name}#{self.issue_number}"


# =============================================================================
# GitHub Webhook Payload Models
# =============================================================================
# Only the fields the rules read are declared; everything else GitHub sends
# is ignored.

class UserRef(BaseModel):
    """Author of an issue, pull request or comment."""
    model_config = ConfigDict(extra="ignore")

    id: StrictInt


class RepositoryRef(BaseModel):
    """Repository the event belongs to."""
    model_config = ConfigDict(extra="ignore")

    full_name: str


class IssueSubject(BaseModel):
    """The issue or pull request a comment was made on."""
    model_config = ConfigDict(extra="ignore")

    number: StrictInt
    user: UserRef


class CommentRef(BaseModel):
    """An issue comment or pull request review comment."""
    model_config = ConfigDict(extra="ignore")

    user: UserRef


class ProcessingResult(BaseModel):
    """Outcome of dispatching one webhook event."""
    event: str
    action: Optional[str] = None
    status: str = "processed"
    reason: Optional[str] = None


# =============================================================================
# Payload Access Helpers
# =============================================================================

ModelT = TypeVar("ModelT", bound=BaseModel)


def get_action(payload: Any) -> str:
    """
    Read ``payload.action``.

    Raises:
        MalformedPayloadError: If the payload is not a mapping or has no
            string action
    """
    if not isinstance(payload, dict):
        raise MalformedPayloadError(
            f"Payload must be an object, got {type(payload).__name__}"
        )

    action = payload.get("action")
    if not isinstance(action, str):
        raise MalformedPayloadError("Payload has no 'action' field")

    return action


def parse_field(payload: Dict[str, Any], key: str, model: Type[ModelT]) -> ModelT:
    """
    Validate ``payload[key]`` against a payload model.

    Raises:
        MalformedPayloadError: If the field is missing or fails validation
    """
    if key not in payload:
        raise MalformedPayloadError(f"Payload has no '{key}' field")

    try:
        return model.model_validate(payload[key])
    except ValidationError as e:
        raise MalformedPayloadError(f"Invalid '{key}' field: {e}") from e


def get_repository(payload: Dict[str, Any]) -> RepositoryRef:
    """Read ``payload.repository``."""
    return parse_field(payload, "repository", RepositoryRef)
