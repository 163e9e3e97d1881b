"""
Remote Issue Client Interface

This module defines the capability the label mutator needs from a
source-hosting service: list, add and remove labels on one issue.

Design Decisions:
- Abstract base class so a test double can be substituted without network
- Authentication belongs to the concrete client's constructor
- Every failure is reported as RemoteError (or a subclass)
"""

from abc import ABC, abstractmethod
from typing import List

from labelbot.models import Label, LabelbotError


class RemoteError(LabelbotError):
    """Raised by a remote issue client when a call fails."""
    pass


class RemoteIssueClient(ABC):
    """Label operations on a single issue or pull request."""

    @abstractmethod
    def list_labels(self, repo_owner: str, repo_name: str, issue_number: int) -> List[Label]:
        """Return the labels currently set on the issue."""

    @abstractmethod
    def add_label(
        self, repo_owner: str, repo_name: str, issue_number: int, label_name: str
    ) -> None:
        """Add a label to the issue."""

    @abstractmethod
    def remove_label(
        self, repo_owner: str, repo_name: str, issue_number: int, label_name: str
    ) -> None:
        """Remove a label from the issue."""
