"""
Test Configuration

Pytest configuration and fixtures for the test suite.
"""

from typing import Dict, List, Optional, Tuple

import pytest

from labelbot.models import Label
from labelbot.services.remote import RemoteError, RemoteIssueClient


class FakeIssueClient(RemoteIssueClient):
    """In-memory RemoteIssueClient that records every call."""

    def __init__(self, labels: Optional[Dict[int, List[str]]] = None, fail_on: Optional[str] = None):
        self.labels = {number: list(names) for number, names in (labels or {}).items()}
        self.fail_on = fail_on
        self.calls: List[Tuple] = []

    def _maybe_fail(self, method: str) -> None:
        if self.fail_on == method:
            raise RemoteError(f"{method} failed")

    def list_labels(self, repo_owner, repo_name, issue_number):
        self.calls.append(("list", repo_owner, repo_name, issue_number))
        self._maybe_fail("list")
        return [Label(name=name) for name in self.labels.get(issue_number, [])]

    def add_label(self, repo_owner, repo_name, issue_number, label_name):
        self.calls.append(("add", repo_owner, repo_name, issue_number, label_name))
        self._maybe_fail("add")
        self.labels.setdefault(issue_number, []).append(label_name)

    def remove_label(self, repo_owner, repo_name, issue_number, label_name):
        self.calls.append(("remove", repo_owner, repo_name, issue_number, label_name))
        self._maybe_fail("remove")
        self.labels[issue_number].remove(label_name)

    def writes(self) -> List[Tuple]:
        """Calls that mutate labels."""
        return [call for call in self.calls if call[0] in ("add", "remove")]


@pytest.fixture
def fake_client() -> FakeIssueClient:
    """Client with no labels set anywhere."""
    return FakeIssueClient()


@pytest.fixture
def issue_comment_payload() -> dict:
    """Sample issue_comment webhook payload written by the issue author."""
    return {
        "action": "created",
        "issue": {
            "number": 42,
            "title": "Crash on startup",
            "user": {"login": "author", "id": 7}
        },
        "comment": {
            "id": 1001,
            "body": "Here is the stack trace you asked for.",
            "user": {"login": "author", "id": 7}
        },
        "repository": {
            "id": 111,
            "name": "repo",
            "full_name": "org/repo"
        },
        "sender": {"login": "author", "id": 7}
    }


@pytest.fixture
def review_comment_payload() -> dict:
    """Sample pull_request_review_comment webhook payload from a reviewer."""
    return {
        "action": "created",
        "pull_request": {
            "number": 12,
            "title": "Add feature",
            "user": {"login": "author", "id": 7}
        },
        "comment": {
            "id": 2002,
            "path": "src/app.py",
            "body": "Please rename this.",
            "user": {"login": "reviewer", "id": 99}
        },
        "repository": {"full_name": "org/repo"}
    }


@pytest.fixture
def pull_request_payload() -> dict:
    """Sample pull_request webhook payload."""
    return {
        "action": "opened",
        "number": 12,
        "pull_request": {
            "id": 123456789,
            "number": 12,
            "state": "open",
            "title": "Add feature",
            "user": {"login": "author", "id": 7},
            "draft": False
        },
        "repository": {
            "id": 111,
            "name": "repo",
            "full_name": "org/repo"
        },
        "sender": {"login": "author", "id": 7}
    }
