"""
GitHub API Client Module

This module provides the GitHub implementation of RemoteIssueClient.
It only covers the issue label endpoints.

Design Decisions:
- Use httpx for HTTP requests, one Client per GitHubClient instance
- Token authentication is configured once at construction
- Retry only transport failures (tenacity); HTTP errors are surfaced as-is
- Support pagination for issues with many labels
"""

from typing import Any, Dict, List, Optional
from urllib.parse import quote

import httpx
from tenacity import (
    retry,
    retry_if_exception_type,
    stop_after_attempt,
    wait_exponential,
)

from labelbot.logging_config import get_logger
from labelbot.models import Label
from labelbot.services.remote import RemoteError, RemoteIssueClient

logger = get_logger(__name__)


class GitHubAPIError(RemoteError):
    """Custom exception for GitHub API errors."""
    def __init__(self, message: str, status_code: int = None, response_body: str = None):
        super().__init__(message)
        self.status_code = status_code
        self.response_body = response_body


class GitHubAuthError(GitHubAPIError):
    """Exception raised when GitHub rejects the token."""
    pass


class GitHubRateLimitError(GitHubAPIError):
    """Exception raised when GitHub rate limit is exceeded."""
    pass


class GitHubClient(RemoteIssueClient):
    """
    GitHub issue label client.

    Usage:
        client = GitHubClient(token="...")
        labels = client.list_labels("owner", "repo", 42)
        client.add_label("owner", "repo", 42, "review required")
    """

    GITHUB_API_BASE = "https://api.github.com"
    PER_PAGE = 100

    def __init__(
        self,
        token: Optional[str] = None,
        api_base: str = GITHUB_API_BASE,
        timeout: float = 30.0,
        transport: Optional[httpx.BaseTransport] = None,
    ):
        """
        Initialize the GitHub client.

        Args:
            token: Personal access or installation token; anonymous if None
            api_base: API root URL (GitHub Enterprise uses a different one)
            timeout: Per-request timeout in seconds
            transport: Optional httpx transport, used by tests
        """
        headers = {
            "Accept": "application/vnd.github+json",
            "X-GitHub-Api-Version": "2022-11-28",
        }
        if token:
            headers["Authorization"] = f"token {token}"

        self._client = httpx.Client(
            base_url=api_base.rstrip("/"),
            headers=headers,
            timeout=timeout,
            transport=transport,
        )

    def close(self) -> None:
        """Close the underlying HTTP connection pool."""
        self._client.close()

    def __enter__(self) -> "GitHubClient":
        return self

    def __exit__(self, *exc_info: Any) -> None:
        self.close()

    def _check_rate_limit(self, response: httpx.Response) -> bool:
        """
        Inspect rate limit headers from a GitHub response.

        Returns:
            True if the rate limit is exhausted
        """
        remaining = response.headers.get("x-ratelimit-remaining")
        if not remaining or not remaining.isdigit():
            return False

        remaining_int = int(remaining)
        if remaining_int < 100:
            logger.warning(
                "GitHub API rate limit running low",
                remaining=remaining_int,
                reset_at=response.headers.get("x-ratelimit-reset")
            )

        return remaining_int == 0

    @retry(
        stop=stop_after_attempt(3),
        wait=wait_exponential(multiplier=1, min=2, max=30),
        retry=retry_if_exception_type(httpx.TransportError),
        reraise=True
    )
    def _send(self, method: str, endpoint: str, **kwargs) -> httpx.Response:
        return self._client.request(method, endpoint, **kwargs)

    def _request(self, method: str, endpoint: str, **kwargs) -> httpx.Response:
        """
        Make an authenticated request to the GitHub API.

        Args:
            method: HTTP method (GET, POST, etc.)
            endpoint: API endpoint (without base URL)
            **kwargs: Additional arguments to pass to httpx

        Returns:
            httpx.Response object

        Raises:
            GitHubAPIError: If the request fails
        """
        try:
            response = self._send(method, endpoint, **kwargs)
        except httpx.HTTPError as e:
            raise GitHubAPIError(f"GitHub request failed: {e}") from e

        exhausted = self._check_rate_limit(response)

        if response.status_code == 401:
            raise GitHubAuthError(
                "GitHub authentication failed",
                status_code=response.status_code,
                response_body=response.text
            )

        if response.status_code in (403, 429) and exhausted:
            raise GitHubRateLimitError(
                "GitHub rate limit exceeded",
                status_code=response.status_code,
                response_body=response.text
            )

        if response.status_code >= 400:
            logger.debug(
                "GitHub API error response",
                status_code=response.status_code,
                endpoint=endpoint,
                error=response.text[:500]
            )
            raise GitHubAPIError(
                f"GitHub API error: {response.status_code}",
                status_code=response.status_code,
                response_body=response.text
            )

        return response

    @staticmethod
    def _labels_endpoint(repo_owner: str, repo_name: str, issue_number: int) -> str:
        return f"/repos/{quote(repo_owner, safe='')}/{quote(repo_name, safe='')}/issues/{issue_number}/labels"

    def list_labels(self, repo_owner: str, repo_name: str, issue_number: int) -> List[Label]:
        """
        Fetch all labels set on an issue or pull request.

        Handles pagination for issues with many labels.
        """
        endpoint = self._labels_endpoint(repo_owner, repo_name, issue_number)
        labels: List[Label] = []
        page = 1

        while True:
            response = self._request(
                "GET",
                endpoint,
                params={"page": page, "per_page": self.PER_PAGE}
            )

            try:
                labels_data: List[Dict[str, Any]] = response.json()
                if not labels_data:
                    break

                labels.extend(Label(name=item["name"]) for item in labels_data)
            except (ValueError, KeyError, TypeError) as e:
                raise GitHubAPIError(
                    f"Unexpected label list response: {e}",
                    status_code=response.status_code,
                    response_body=response.text
                ) from e

            if len(labels_data) < self.PER_PAGE:
                break

            page += 1

        return labels

    def add_label(
        self, repo_owner: str, repo_name: str, issue_number: int, label_name: str
    ) -> None:
        """Add a label to an issue or pull request."""
        self._request(
            "POST",
            self._labels_endpoint(repo_owner, repo_name, issue_number),
            json={"labels": [label_name]}
        )

        logger.info(
            "Label added",
            owner=repo_owner,
            repo=repo_name,
            issue_number=issue_number,
            label=label_name
        )

    def remove_label(
        self, repo_owner: str, repo_name: str, issue_number: int, label_name: str
    ) -> None:
        """Remove a label from an issue or pull request."""
        endpoint = self._labels_endpoint(repo_owner, repo_name, issue_number)
        self._request("DELETE", f"{endpoint}/{quote(label_name, safe='')}")

        logger.info(
            "Label removed",
            owner=repo_owner,
            repo=repo_name,
            issue_number=issue_number,
            label=label_name
        )
