# SPDX-FileCopyrightText: Copyright (c) 2025 NVIDIA CORPORATION & AFFILIATES. All rights reserved.
# SPDX-License-Identifier: Apache-2.0
"""Shared types for the project-listing pipeline.

This module MUST NOT import any other portfolio_projects module to avoid cycles.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, List, Optional, Tuple, Union


DEFAULT_TITLE = "Untitled Project"
DEFAULT_DESCRIPTION = "No description provided on GitHub."
DEFAULT_GITHUB_URL = "#"


class ListingSource(str, Enum):
    """Which source served a project listing (also sent as a diagnostic header)."""

    REMOTE = "remote"
    LOCAL = "local"


class FailureKind(str, Enum):
    """Why a source attempt did not produce a usable listing."""

    SOURCE_UNAVAILABLE = "source_unavailable"
    EMPTY_RESULT = "empty_result"
    MALFORMED_LOCAL_FILE = "malformed_local_file"


@dataclass(frozen=True)
class ProjectRecord:
    """Canonical project shape served to the front end."""

    id: Union[str, int, float]
    title: str
    description: str = DEFAULT_DESCRIPTION
    github_url: str = DEFAULT_GITHUB_URL
    stars: int = 0
    language: Optional[str] = None
    created_at: Optional[str] = None

    def to_json_dict(self) -> Dict[str, Any]:
        # Key names are the wire format consumed by the front end.
        return {
            "id": self.id,
            "title": self.title,
            "description": self.description,
            "githubUrl": self.github_url,
            "stars": self.stars,
            "language": self.language,
            "createdAt": self.created_at,
        }


@dataclass(frozen=True)
class SourceResult:
    """Tagged result of a single source attempt: either records or a failure."""

    source: ListingSource
    records: Tuple[ProjectRecord, ...] = ()
    failure_kind: Optional[FailureKind] = None
    reason: str = ""
    error: Optional[BaseException] = field(default=None, compare=False, repr=False)

    @property
    def ok(self) -> bool:
        return self.failure_kind is None

    @classmethod
    def success(cls, source: ListingSource, records: List[ProjectRecord]) -> "SourceResult":
        return cls(source=source, records=tuple(records))

    @classmethod
    def failure(
        cls,
        source: ListingSource,
        kind: FailureKind,
        reason: str,
        error: Optional[BaseException] = None,
    ) -> "SourceResult":
        return cls(source=source, failure_kind=kind, reason=str(reason or ""), error=error)
