# SPDX-FileCopyrightText: Copyright (c) 2025 NVIDIA CORPORATION & AFFILIATES. All rights reserved.
# SPDX-License-Identifier: Apache-2.0
"""Normalize raw project records into `ProjectRecord`.

Two input shapes go through the same code path:

GitHub REST (GET /users/{user}/repos) item, truncated:
  {
    "id": 123456789,
    "name": "Expense-Splitter",
    "html_url": "https://github.com/OWNER/Expense-Splitter",
    "description": null,
    "stargazers_count": 3,
    "language": "Python",
    "created_at": "2024-02-11T18:22:04Z"
  }

Hand-written fallback file entry:
  {
    "title": "Expense Splitter",
    "githubUrl": "https://github.com/OWNER/Expense-Splitter",
    "stars": 3,
    "technologies": ["Python", "Flask"],
    "createdAt": "2024-02-11"
  }
"""

from __future__ import annotations

import math
import re
from typing import Any, Dict, Iterable, List, Mapping, Optional, Tuple

from .project_types import (
    DEFAULT_DESCRIPTION,
    DEFAULT_GITHUB_URL,
    DEFAULT_TITLE,
    ProjectRecord,
)


# Alternative source keys per canonical field, highest priority first.
FIELD_ALIASES: Dict[str, Tuple[str, ...]] = {
    "id": ("id",),
    "title": ("title",),
    "name": ("name", "full_name"),
    "description": ("description",),
    "github_url": ("html_url", "githubUrl", "github_url", "url"),
    "stars": ("stargazers_count", "stars", "stargazersCount", "stargazers"),
    "language": ("language",),
    "technologies": ("technologies", "topics"),
    "created_at": ("created_at", "createdAt", "created"),
}

_NAME_SEPARATORS_RE = re.compile(r"[-_]")


def _first_present(raw: Mapping[str, Any], field_name: str) -> Any:
    """Return the first non-empty value among the aliases for `field_name`."""
    for key in FIELD_ALIASES[field_name]:
        value = raw.get(key)
        if value is None:
            continue
        if isinstance(value, str) and not value.strip():
            continue
        return value
    return None


def _as_text(value: Any) -> Optional[str]:
    if value is None:
        return None
    s = str(value).strip()
    return s or None


def _stars(value: Any) -> int:
    # bool is an int subclass; it is not a star count.
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return 0
    if value != value:  # NaN
        return 0
    try:
        return max(0, int(value))
    except (ValueError, OverflowError):
        return 0


def _title(raw: Mapping[str, Any]) -> str:
    title = _as_text(_first_present(raw, "title"))
    if title:
        return title
    name = _as_text(_first_present(raw, "name"))
    if name:
        # full_name is "owner/repo"; only the repo part is a title.
        name = name.rsplit("/", 1)[-1]
        readable = _NAME_SEPARATORS_RE.sub(" ", name).strip()
        if readable:
            return readable
    return DEFAULT_TITLE


def _language(raw: Mapping[str, Any]) -> Optional[str]:
    language = _as_text(_first_present(raw, "language"))
    if language:
        return language
    techs = _first_present(raw, "technologies")
    if isinstance(techs, (list, tuple)):
        for tech in techs:
            t = _as_text(tech)
            if t:
                return t
    return None


def repo_name_from_url(url: Optional[str]) -> str:
    """Return the lower-cased last path segment of a repository URL.

    Examples:
      https://github.com/OWNER/Expense-Splitter   -> expense-splitter
      https://github.com/OWNER/demo-repo.git/     -> demo-repo
      #                                            -> ""
    """
    s = str(url or "").strip()
    s = s.split("?", 1)[0].split("#", 1)[0].rstrip("/")
    if not s:
        return ""
    segment = s.rsplit("/", 1)[-1]
    if segment.lower().endswith(".git"):
        segment = segment[: -len(".git")]
    return segment.strip().lower()


def normalize_project(raw: Any) -> ProjectRecord:
    """Map one raw record (GitHub API or fallback file) to a ProjectRecord.

    Never raises: anything missing or malformed gets its documented default.
    """
    if not isinstance(raw, Mapping):
        raw = {}

    title = _title(raw)
    url = _as_text(_first_present(raw, "github_url")) or DEFAULT_GITHUB_URL

    raw_id = _first_present(raw, "id")
    if isinstance(raw_id, bool) or not isinstance(raw_id, (str, int, float)):
        raw_id = None
    elif isinstance(raw_id, float) and not math.isfinite(raw_id):
        # NaN/inf would not survive JSON serialization.
        raw_id = None
    if isinstance(raw_id, str):
        raw_id = raw_id.strip() or None
    if raw_id is None:
        raw_id = url if url != DEFAULT_GITHUB_URL else title

    return ProjectRecord(
        id=raw_id,
        title=title,
        description=_as_text(_first_present(raw, "description")) or DEFAULT_DESCRIPTION,
        github_url=url,
        stars=_stars(_first_present(raw, "stars")),
        language=_language(raw),
        created_at=_as_text(_first_present(raw, "created_at")),
    )


def normalize_projects(raws: Iterable[Any]) -> List[ProjectRecord]:
    return [normalize_project(r) for r in raws]


def pinned_name_set(pinned: Iterable[str]) -> frozenset:
    """Lower-cased, whitespace-stripped pinned names (empty entries dropped)."""
    return frozenset(str(p).strip().lower() for p in (pinned or ()) if str(p or "").strip())
