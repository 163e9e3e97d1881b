"""
Services Package

This package contains the label services:
- remote: RemoteIssueClient interface and RemoteError
- github_client: GitHub REST implementation of RemoteIssueClient
- labels: idempotent label mutator
"""

from labelbot.services.github_client import (
    GitHubAPIError,
    GitHubAuthError,
    GitHubClient,
    GitHubRateLimitError,
)
from labelbot.services.labels import LabelMutator
from labelbot.services.remote import RemoteError, RemoteIssueClient


__all__ = [
    "GitHubAPIError",
    "GitHubAuthError",
    "GitHubClient",
    "GitHubRateLimitError",
    "LabelMutator",
    "RemoteError",
    "RemoteIssueClient",
]
