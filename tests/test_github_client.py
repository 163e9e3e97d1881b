"""
Tests for the GitHub Client

Uses httpx.MockTransport so no network access is needed.
"""

import json

import httpx
import pytest
from tenacity import wait_none

from labelbot.models import Label
from labelbot.services.github_client import (
    GitHubAPIError,
    GitHubAuthError,
    GitHubClient,
    GitHubRateLimitError,
)
from labelbot.services.remote import RemoteError


def make_client(handler, requests=None, token="ghp_testtoken"):
    """Build a GitHubClient whose requests are answered by handler."""
    def recording_handler(request: httpx.Request) -> httpx.Response:
        if requests is not None:
            requests.append(request)
        return handler(request)

    return GitHubClient(token=token, transport=httpx.MockTransport(recording_handler))


class TestListLabels:
    """Tests for list_labels."""

    def test_returns_label_names(self):
        requests = []
        client = make_client(
            lambda request: httpx.Response(200, json=[
                {"id": 1, "name": "bug", "color": "ff0000"},
                {"id": 2, "name": "RTM", "color": "00ff00"},
            ]),
            requests
        )

        labels = client.list_labels("org", "repo", 42)

        assert labels == [Label(name="bug"), Label(name="RTM")]
        assert requests[0].method == "GET"
        assert requests[0].url.path == "/repos/org/repo/issues/42/labels"
        assert requests[0].url.params["per_page"] == "100"

    def test_sends_auth_headers(self):
        requests = []
        client = make_client(lambda request: httpx.Response(200, json=[]), requests)

        client.list_labels("org", "repo", 1)

        assert requests[0].headers["Authorization"] == "token ghp_testtoken"
        assert requests[0].headers["Accept"] == "application/vnd.github+json"

    def test_anonymous_client_has_no_auth_header(self):
        requests = []
        client = make_client(lambda request: httpx.Response(200, json=[]), requests, token=None)

        client.list_labels("org", "repo", 1)

        assert "Authorization" not in requests[0].headers

    def test_paginates(self):
        def handler(request):
            page = int(request.url.params["page"])
            if page == 1:
                return httpx.Response(200, json=[{"name": f"l{i}"} for i in range(100)])
            return httpx.Response(200, json=[{"name": "last"}])

        client = make_client(handler)

        labels = client.list_labels("org", "repo", 1)

        assert len(labels) == 101
        assert labels[-1].name == "last"

    def test_empty(self):
        client = make_client(lambda request: httpx.Response(200, json=[]))

        assert client.list_labels("org", "repo", 1) == []


class TestMutations:
    """Tests for add_label and remove_label."""

    def test_add_label(self):
        requests = []
        client = make_client(lambda request: httpx.Response(200, json=[{"name": "RTM"}]), requests)

        client.add_label("org", "repo", 7, "review required")

        request = requests[0]
        assert request.method == "POST"
        assert request.url.path == "/repos/org/repo/issues/7/labels"
        assert json.loads(request.content) == {"labels": ["review required"]}

    def test_remove_label_quotes_name(self):
        requests = []
        client = make_client(lambda request: httpx.Response(200, json=[]), requests)

        client.remove_label("org", "repo", 7, "pending author")

        request = requests[0]
        assert request.method == "DELETE"
        assert request.url.raw_path == b"/repos/org/repo/issues/7/labels/pending%20author"


class TestErrors:
    """Tests for error mapping."""

    def test_not_found(self):
        client = make_client(lambda request: httpx.Response(404, json={"message": "Label does not exist"}))

        with pytest.raises(GitHubAPIError) as exc_info:
            client.remove_label("org", "repo", 7, "RTM")

        assert exc_info.value.status_code == 404
        assert "Label does not exist" in exc_info.value.response_body
        assert isinstance(exc_info.value, RemoteError)

    def test_unauthorized(self):
        client = make_client(lambda request: httpx.Response(401, json={"message": "Bad credentials"}))

        with pytest.raises(GitHubAuthError):
            client.list_labels("org", "repo", 1)

    def test_rate_limited(self):
        client = make_client(lambda request: httpx.Response(
            403,
            headers={"x-ratelimit-remaining": "0", "x-ratelimit-reset": "1700000000"},
            json={"message": "API rate limit exceeded"}
        ))

        with pytest.raises(GitHubRateLimitError):
            client.add_label("org", "repo", 1, "RTM")

    def test_forbidden_without_rate_limit(self):
        client = make_client(lambda request: httpx.Response(
            403,
            headers={"x-ratelimit-remaining": "4000"},
            json={"message": "Resource not accessible by integration"}
        ))

        with pytest.raises(GitHubAPIError) as exc_info:
            client.add_label("org", "repo", 1, "RTM")

        assert not isinstance(exc_info.value, GitHubRateLimitError)
        assert exc_info.value.status_code == 403


def test_context_manager_closes_client():
    with make_client(lambda request: httpx.Response(200, json=[])) as client:
        client.list_labels("org", "repo", 1)

    with pytest.raises(RuntimeError):
        client.list_labels("org", "repo", 1)


class TestUnexpectedResponses:
    """Tests for label list bodies that are not a label array."""

    def test_non_json_body(self):
        client = make_client(lambda request: httpx.Response(200, text="<html>maintenance</html>"))

        with pytest.raises(GitHubAPIError) as exc_info:
            client.list_labels("org", "repo", 1)

        assert isinstance(exc_info.value, RemoteError)
        assert exc_info.value.status_code == 200
        assert "<html>" in exc_info.value.response_body

    def test_label_without_name(self):
        client = make_client(lambda request: httpx.Response(200, json=[{"id": 1}]))

        with pytest.raises(GitHubAPIError, match="Unexpected label list response"):
            client.list_labels("org", "repo", 1)

    def test_body_is_not_a_list_of_objects(self):
        client = make_client(lambda request: httpx.Response(200, json=[1, 2]))

        with pytest.raises(GitHubAPIError):
            client.list_labels("org", "repo", 1)


def test_transport_failures_are_retried_then_wrapped(monkeypatch):
    monkeypatch.setattr(GitHubClient._send.retry, "wait", wait_none())
    attempts = []

    def handler(request):
        attempts.append(request)
        raise httpx.ConnectError("connection refused", request=request)

    client = make_client(handler)

    with pytest.raises(GitHubAPIError, match="GitHub request failed") as exc_info:
        client.list_labels("org", "repo", 1)

    assert len(attempts) == 3
    assert isinstance(exc_info.value, RemoteError)
    assert isinstance(exc_info.value.__cause__, httpx.ConnectError)


def test_transport_failure_recovers_on_retry(monkeypatch):
    monkeypatch.setattr(GitHubClient._send.retry, "wait", wait_none())
    attempts = []

    def handler(request):
        attempts.append(request)
        if len(attempts) == 1:
            raise httpx.ReadTimeout("timed out", request=request)
        return httpx.Response(200, json=[{"name": "RTM"}])

    client = make_client(handler)

    assert client.list_labels("org", "repo", 1) == [Label(name="RTM")]
    assert len(attempts) == 2
