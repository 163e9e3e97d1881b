"""
Label Mutator Module

Idempotent add/remove of a single label on an issue or pull request.

Each operation performs exactly one label listing followed by at most one
write. Remote errors are not caught here; they reach the caller unchanged.
"""

from labelbot.logging_config import get_logger
from labelbot.models import IssueRef
from labelbot.services.remote import RemoteIssueClient

logger = get_logger(__name__)


class LabelMutator:
    """
    Ensures a label is present on, or absent from, an issue.

    Usage:
        mutator = LabelMutator(client)
        mutator.ensure_label_present("owner", "repo", 42, "review required")
    """

    def __init__(self, client: RemoteIssueClient):
        self.client = client

    def _has_label(self, repo_owner: str, repo_name: str, issue_number: int, label_name: str) -> bool:
        labels = self.client.list_labels(repo_owner, repo_name, issue_number)
        return any(label.name == label_name for label in labels)

    def ensure_label_present(
        self, repo_owner: str, repo_name: str, issue_number: int, label_name: str
    ) -> bool:
        """
        Add a label unless it is already set.

        Returns:
            True if an add call was made
        """
        if self._has_label(repo_owner, repo_name, issue_number, label_name):
            logger.debug(
                "Label already present",
                owner=repo_owner,
                repo=repo_name,
                issue_number=issue_number,
                label=label_name
            )
            return False

        self.client.add_label(repo_owner, repo_name, issue_number, label_name)
        return True

    def ensure_label_absent(
        self, repo_owner: str, repo_name: str, issue_number: int, label_name: str
    ) -> bool:
        """
        Remove a label if it is set.

        A single remove call is issued even if the listing repeats the name.

        Returns:
            True if a remove call was made
        """
        if not self._has_label(repo_owner, repo_name, issue_number, label_name):
            logger.debug(
                "Label not present",
                owner=repo_owner,
                repo=repo_name,
                issue_number=issue_number,
                label=label_name
            )
            return False

        self.client.remove_label(repo_owner, repo_name, issue_number, label_name)
        return True

    def ensure_present(self, ref: IssueRef, label_name: str) -> bool:
        """``ensure_label_present`` for an IssueRef."""
        return self.ensure_label_present(ref.repo_owner, ref.repo_name, ref.issue_number, label_name)

    def ensure_absent(self, ref: IssueRef, label_name: str) -> bool:
        """``ensure_label_absent`` for an IssueRef."""
        return self.ensure_label_absent(ref.repo_owner, ref.repo_name, ref.issue_number, label_name)
