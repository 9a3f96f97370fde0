# SPDX-FileCopyrightText: Copyright (c) 2025 NVIDIA CORPORATION & AFFILIATES. All rights reserved.
# SPDX-License-Identifier: Apache-2.0
"""GitHub REST client for the pinned-projects listing.

Resource:
  GET /users/{username}/repos?sort=updated&direction=desc&per_page=100

Only the first page is requested (no pagination): the portfolio shows a short
allow-list of pinned repositories and 100 most-recently-updated repos is plenty.

Failure policy (caller falls through to the local fallback file):
  - token required but not found       -> GitHubAuthRequiredError (no network I/O)
  - timeout / connection error          -> SourceUnavailableError
  - non-2xx status / non-list JSON body -> SourceUnavailableError
  - no repo matches the pinned names    -> EmptyResultError
"""

from __future__ import annotations

import logging
import time
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, Iterable, List, Optional

import requests
import yaml

from .exceptions import EmptyResultError, GitHubAuthRequiredError, SourceUnavailableError
from .normalize import normalize_project, pinned_name_set
from .project_types import ListingSource, ProjectRecord

_logger = logging.getLogger(__name__)

DEFAULT_TIMEOUT_S: float = 10.0
GITHUB_API_BASE_URL = "https://api.github.com"


@dataclass
class GitHubApiStats:
    """Per-client REST statistics (reported by the CLI in verbose mode)."""

    rest_calls_total: int = 0
    rest_success_total: int = 0
    rest_errors_total: int = 0
    rest_errors_by_status: Dict[int, int] = field(default_factory=dict)
    rest_time_total_s: float = 0.0
    rest_last_error: Dict[str, Any] = field(default_factory=dict)
    # Snapshot of X-RateLimit-* headers from the last response.
    rate_limit: Dict[str, Optional[int]] = field(default_factory=dict)


class GitHubProjectsClient:
    """GitHub API client with token detection, bounded timeouts and call statistics.

    Example:
        client = GitHubProjectsClient(token=os.environ.get("GITHUB_TOKEN"))
        projects = client.fetch_projects("octocat", ["hello-world"])
    """

    @staticmethod
    def get_github_token_from_file() -> Optional[str]:
        """Get GitHub token from a local config file.

        Currently supported locations (first match wins):
        - ~/.config/github-token   (single line token)
        - ~/.config/gh/hosts.yml   (GitHub CLI login; oauth_token)
        """
        try:
            token_file = Path.home() / ".config" / "github-token"
            if token_file.exists():
                tok = (token_file.read_text() or "").strip()
                if tok:
                    return tok
        except OSError:
            pass
        return GitHubProjectsClient.get_github_token_from_cli()

    @staticmethod
    def get_github_token_from_cli() -> Optional[str]:
        """Get GitHub token from GitHub CLI configuration (~/.config/gh/hosts.yml)."""
        try:
            gh_config_path = Path.home() / ".config" / "gh" / "hosts.yml"
            if gh_config_path.exists():
                with open(gh_config_path, "r") as f:
                    config = yaml.safe_load(f)
                    if config and "github.com" in config:
                        github_config = config["github.com"] or {}
                        if "oauth_token" in github_config:
                            return github_config["oauth_token"]
                        for _user, user_config in (github_config.get("users") or {}).items():
                            if isinstance(user_config, dict) and "oauth_token" in user_config:
                                return user_config["oauth_token"]
        except (OSError, yaml.YAMLError, AttributeError):
            pass
        return None

    def __init__(
        self,
        token: Optional[str] = None,
        *,
        require_auth: bool = False,
        discover_token: bool = True,
        timeout_s: float = DEFAULT_TIMEOUT_S,
        base_url: str = GITHUB_API_BASE_URL,
        user_agent: str = "portfolio-projects",
    ):
        """Initialize GitHub API client.

        Args:
            token: GitHub personal access token. If not provided and discover_token is set,
                   ~/.config/github-token and then the GitHub CLI config are tried.
            require_auth: If True, refuse to call GitHub without a token (fetches raise
                          GitHubAuthRequiredError so the caller can fall back).
            timeout_s: Per-request timeout; exceeding it is a failure.
        """
        self.token = (token or "").strip() or (self.get_github_token_from_file() if discover_token else None)
        self.require_auth = bool(require_auth)
        self.timeout_s = float(timeout_s)
        self.base_url = str(base_url).rstrip("/")
        self.headers = {
            "Accept": "application/vnd.github+json",
            "User-Agent": user_agent,
            "X-GitHub-Api-Version": "2022-11-28",
        }
        if self.token:
            self.headers["Authorization"] = f"token {self.token}"
        self.logger = logging.getLogger(self.__class__.__name__)
        self.stats = GitHubApiStats()

    @property
    def authenticated(self) -> bool:
        return bool(self.token)

    def _record_response(self, resp: requests.Response, url: str) -> None:
        try:
            code = int(resp.status_code or 0)
        except (ValueError, TypeError):
            code = 0
        if code and code < 400:
            self.stats.rest_success_total += 1
        else:
            self.stats.rest_errors_total += 1
            if code:
                self.stats.rest_errors_by_status[code] = int(self.stats.rest_errors_by_status.get(code, 0)) + 1
            body = ""
            try:
                body = (resp.text or "")[:300]
            except (ValueError, TypeError):
                body = ""
            self.stats.rest_last_error = {"status": code, "url": url, "body": body}

        rate_limit: Dict[str, Optional[int]] = {}
        for key, hdr in (("remaining", "X-RateLimit-Remaining"), ("limit", "X-RateLimit-Limit"), ("reset_epoch", "X-RateLimit-Reset")):
            try:
                val = resp.headers.get(hdr)
                rate_limit[key] = int(val) if val is not None else None
            except (ValueError, TypeError, AttributeError):
                rate_limit[key] = None
        if any(v is not None for v in rate_limit.values()):
            self.stats.rate_limit = rate_limit

    def _rest_get(self, path: str, *, params: Optional[Dict[str, Any]] = None) -> Any:
        """requests.get wrapper: auth policy, timeout, stats, status check, JSON decode."""
        src = ListingSource.REMOTE.value
        if self.require_auth and not self.token:
            raise GitHubAuthRequiredError(
                source=src,
                message="GitHub API authentication is required but no token is configured.",
            )

        url = f"{self.base_url}{path}"
        self.stats.rest_calls_total += 1
        self.logger.debug("GH REST GET %s params=%s auth=%s", url, params, self.authenticated)

        t0 = time.monotonic()
        try:
            resp = requests.get(url, headers=dict(self.headers), params=params, timeout=self.timeout_s)
        except requests.Timeout as e:
            self.stats.rest_errors_total += 1
            raise SourceUnavailableError(source=src, message=f"GitHub request timed out after {self.timeout_s:g}s") from e
        except requests.RequestException as e:
            self.stats.rest_errors_total += 1
            raise SourceUnavailableError(source=src, message=f"GitHub request failed: {e}") from e
        finally:
            self.stats.rest_time_total_s += max(0.0, time.monotonic() - t0)

        self._record_response(resp, url)
        code = int(resp.status_code or 0)
        if not (200 <= code < 300):
            message = ""
            try:
                payload = resp.json()
                if isinstance(payload, dict):
                    message = str(payload.get("message") or "")
            except ValueError:
                message = ""
            raise SourceUnavailableError(
                source=src,
                message=f"GitHub returned {code}" + (f": {message}" if message else ""),
                status_code=code,
            )

        try:
            return resp.json()
        except ValueError as e:  # requests raises a ValueError subclass on bad JSON
            raise SourceUnavailableError(source=src, message="GitHub returned a non-JSON body", status_code=code) from e

    def list_user_repos(self, username: str) -> List[Dict[str, Any]]:
        """Return the raw repository list for `username`, most recently updated first."""
        user = str(username or "").strip()
        if not user:
            raise SourceUnavailableError(source=ListingSource.REMOTE.value, message="No GitHub username configured")
        data = self._rest_get(
            f"/users/{user}/repos",
            params={"sort": "updated", "direction": "desc", "per_page": 100},
        )
        if not isinstance(data, list):
            raise SourceUnavailableError(
                source=ListingSource.REMOTE.value,
                message=f"Expected a list of repositories, got {type(data).__name__}",
            )
        return [r for r in data if isinstance(r, dict)]

    def fetch_projects(self, username: str, pinned: Iterable[str]) -> List[ProjectRecord]:
        """Fetch `username`'s repositories restricted to the pinned names (case-insensitive).

        An empty `pinned` lets every repository through. Raises EmptyResultError when
        nothing matches, so an empty-but-successful call is never a terminal result.
        """
        wanted = pinned_name_set(pinned)
        repos = self.list_user_repos(username)
        if wanted:
            repos = [r for r in repos if str(r.get("name") or "").strip().lower() in wanted]

        projects = [normalize_project(r) for r in repos]
        if not projects:
            raise EmptyResultError(
                source=ListingSource.REMOTE.value,
                message=f"No repositories of {username!r} match pinned names {sorted(wanted)}",
            )
        _logger.debug("GitHub served %d pinned project(s) for %s", len(projects), username)
        return projects
