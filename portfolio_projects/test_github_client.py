"""
Pytest tests for github_client.py (remote fetch of pinned repositories).

Network calls are replaced by monkeypatching `requests.get` inside the module.

Run from the repo root:
    pytest portfolio_projects/test_github_client.py -v
"""

import sys
from pathlib import Path

import pytest
import requests

# Set up path for imports
parent_dir = Path(__file__).parent.parent
if str(parent_dir) not in sys.path:
    sys.path.insert(0, str(parent_dir))

from portfolio_projects import github_client
from portfolio_projects.exceptions import EmptyResultError, GitHubAuthRequiredError, SourceUnavailableError
from portfolio_projects.github_client import GitHubProjectsClient


class FakeResponse:
    def __init__(self, status_code=200, payload=None, headers=None, text=None):
        self.status_code = status_code
        self._payload = payload
        self.headers = headers or {}
        self.text = text if text is not None else ("" if payload is None else repr(payload))

    def json(self):
        if isinstance(self._payload, Exception):
            raise self._payload
        return self._payload


class RecordingGet:
    """Stand-in for requests.get that records calls and returns/raises a canned outcome."""

    def __init__(self, outcome):
        self.outcome = outcome
        self.calls = []

    def __call__(self, url, headers=None, params=None, timeout=None, **kwargs):
        self.calls.append({"url": url, "headers": dict(headers or {}), "params": params, "timeout": timeout})
        if isinstance(self.outcome, Exception):
            raise self.outcome
        return self.outcome


REPOS = [
    {"id": 1, "name": "demo-repo", "html_url": "https://github.com/u/demo-repo", "stargazers_count": 4},
    {"id": 2, "name": "Expense-Splitter", "html_url": "https://github.com/u/Expense-Splitter", "description": "Split"},
    {"id": 3, "name": "scratch", "html_url": "https://github.com/u/scratch"},
]


def _client(**kwargs):
    kwargs.setdefault("discover_token", False)
    return GitHubProjectsClient(**kwargs)


def _patch_get(monkeypatch, outcome):
    fake = RecordingGet(outcome)
    monkeypatch.setattr(github_client.requests, "get", fake)
    return fake


# ============================================================================
# Request shape
# ============================================================================

def test_request_is_sorted_by_updated_with_timeout(monkeypatch):
    fake = _patch_get(monkeypatch, FakeResponse(200, REPOS))
    _client(timeout_s=3).fetch_projects("someone", ["demo-repo"])

    assert len(fake.calls) == 1
    call = fake.calls[0]
    assert call["url"] == "https://api.github.com/users/someone/repos"
    assert call["params"]["sort"] == "updated"
    assert call["params"]["direction"] == "desc"
    assert call["timeout"] == 3


def test_authorization_only_when_token_configured(monkeypatch):
    fake = _patch_get(monkeypatch, FakeResponse(200, REPOS))

    _client().fetch_projects("someone", ["demo-repo"])
    _client(token="abc123").fetch_projects("someone", ["demo-repo"])

    assert "Authorization" not in fake.calls[0]["headers"]
    assert fake.calls[1]["headers"]["Authorization"] == "token abc123"


def test_require_auth_without_token_fails_before_network(monkeypatch):
    fake = _patch_get(monkeypatch, FakeResponse(200, REPOS))

    with pytest.raises(GitHubAuthRequiredError):
        _client(require_auth=True).fetch_projects("someone", ["demo-repo"])
    assert fake.calls == []


def test_token_discovered_from_token_file(monkeypatch, tmp_path):
    (tmp_path / ".config").mkdir()
    (tmp_path / ".config" / "github-token").write_text("filetoken\n")
    monkeypatch.setattr(github_client.Path, "home", classmethod(lambda cls: tmp_path))

    client = GitHubProjectsClient()
    assert client.token == "filetoken"
    assert client.headers["Authorization"] == "token filetoken"


def test_token_discovered_from_gh_cli_config(monkeypatch, tmp_path):
    gh_dir = tmp_path / ".config" / "gh"
    gh_dir.mkdir(parents=True)
    (gh_dir / "hosts.yml").write_text("github.com:\n  users:\n    someone:\n      oauth_token: clitoken\n")
    monkeypatch.setattr(github_client.Path, "home", classmethod(lambda cls: tmp_path))

    assert GitHubProjectsClient().token == "clitoken"


# ============================================================================
# Filtering + normalization
# ============================================================================

def test_output_is_subset_of_pinned_case_insensitive(monkeypatch):
    _patch_get(monkeypatch, FakeResponse(200, REPOS))

    projects = _client().fetch_projects("someone", ["DEMO-REPO", "expense-splitter", "not-there"])

    names = {p.github_url.rsplit("/", 1)[-1].lower() for p in projects}
    assert names == {"demo-repo", "expense-splitter"}
    assert names <= {"demo-repo", "expense-splitter", "not-there"}


def test_order_follows_api_order(monkeypatch):
    _patch_get(monkeypatch, FakeResponse(200, REPOS))
    projects = _client().fetch_projects("someone", ["expense-splitter", "demo-repo"])
    assert [p.id for p in projects] == [1, 2]


def test_empty_pinned_set_lets_everything_through(monkeypatch):
    _patch_get(monkeypatch, FakeResponse(200, REPOS))
    assert len(_client().fetch_projects("someone", [])) == 3


def test_no_match_is_empty_result(monkeypatch):
    _patch_get(monkeypatch, FakeResponse(200, REPOS))
    with pytest.raises(EmptyResultError):
        _client().fetch_projects("someone", ["nothing-matches"])


def test_normalizes_missing_description_and_stars(monkeypatch):
    _patch_get(monkeypatch, FakeResponse(200, [{"id": 9, "name": "demo-repo", "html_url": "https://github.com/u/demo-repo"}]))
    (project,) = _client().fetch_projects("someone", ["demo-repo"])
    assert project.description == "No description provided on GitHub."
    assert project.stars == 0
    assert project.title == "demo repo"


# ============================================================================
# Failures
# ============================================================================

def test_timeout_is_source_unavailable(monkeypatch):
    _patch_get(monkeypatch, requests.Timeout("slow"))
    client = _client(timeout_s=0.5)
    with pytest.raises(SourceUnavailableError, match="timed out"):
        client.fetch_projects("someone", ["demo-repo"])
    assert client.stats.rest_errors_total == 1


def test_connection_error_is_source_unavailable(monkeypatch):
    _patch_get(monkeypatch, requests.ConnectionError("refused"))
    with pytest.raises(SourceUnavailableError):
        _client().fetch_projects("someone", ["demo-repo"])


@pytest.mark.parametrize("status", [401, 403, 404, 500, 502])
def test_non_success_status_is_source_unavailable(monkeypatch, status):
    _patch_get(monkeypatch, FakeResponse(status, {"message": "nope"}))
    client = _client()
    with pytest.raises(SourceUnavailableError) as excinfo:
        client.fetch_projects("someone", ["demo-repo"])
    assert excinfo.value.status_code == status
    assert client.stats.rest_errors_by_status == {status: 1}


def test_non_list_body_is_source_unavailable(monkeypatch):
    _patch_get(monkeypatch, FakeResponse(200, {"message": "Not Found"}))
    with pytest.raises(SourceUnavailableError):
        _client().fetch_projects("someone", ["demo-repo"])


def test_invalid_json_is_source_unavailable(monkeypatch):
    _patch_get(monkeypatch, FakeResponse(200, ValueError("bad json"), text="<html>"))
    with pytest.raises(SourceUnavailableError):
        _client().fetch_projects("someone", ["demo-repo"])


def test_rate_limit_headers_are_recorded(monkeypatch):
    headers = {"X-RateLimit-Remaining": "59", "X-RateLimit-Limit": "60", "X-RateLimit-Reset": "1700000000"}
    _patch_get(monkeypatch, FakeResponse(200, REPOS, headers=headers))
    client = _client()
    client.fetch_projects("someone", [])
    assert client.stats.rate_limit == {"remaining": 59, "limit": 60, "reset_epoch": 1700000000}
    assert client.stats.rest_calls_total == 1
    assert client.stats.rest_success_total == 1
