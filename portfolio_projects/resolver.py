# SPDX-FileCopyrightText: Copyright (c) 2025 NVIDIA CORPORATION & AFFILIATES. All rights reserved.
# SPDX-License-Identifier: Apache-2.0
"""Listing resolver: try each project source in order, first non-empty success wins.

Each source attempt is a zero-argument callable. `attempt_source()` turns its
outcome into a SourceResult, and `resolve_first()` folds over the attempts.
Every source runs at most once per resolution; there are no retries.
"""

from __future__ import annotations

import logging
from typing import Callable, Iterable, List, Optional, Sequence, Tuple

from .exceptions import (
    AllSourcesExhaustedError,
    EmptyResultError,
    MalformedLocalFileError,
    ProjectSourceError,
)
from .github_client import GitHubProjectsClient
from .local_fallback import LocalProjectsReader
from .project_types import FailureKind, ListingSource, ProjectRecord, SourceResult

_logger = logging.getLogger(__name__)

SourceFetch = Callable[[], List[ProjectRecord]]
SourceAttempt = Tuple[ListingSource, SourceFetch]


def _failure_kind(exc: BaseException) -> FailureKind:
    if isinstance(exc, EmptyResultError):
        return FailureKind.EMPTY_RESULT
    if isinstance(exc, MalformedLocalFileError):
        return FailureKind.MALFORMED_LOCAL_FILE
    return FailureKind.SOURCE_UNAVAILABLE


def attempt_source(source: ListingSource, fetch: SourceFetch) -> SourceResult:
    """Run one source fetch and tag the outcome. Never raises for source errors."""
    try:
        records = list(fetch() or [])
    except ProjectSourceError as e:
        return SourceResult.failure(source, _failure_kind(e), str(e), error=e)
    except Exception as e:  # unexpected errors also fall through to the next source
        _logger.exception("Unexpected error from %s project source", source.value)
        return SourceResult.failure(source, FailureKind.SOURCE_UNAVAILABLE, f"{type(e).__name__}: {e}", error=e)

    if not records:
        return SourceResult.failure(source, FailureKind.EMPTY_RESULT, "source returned no projects")
    return SourceResult.success(source, records)


def resolve_first(attempts: Iterable[SourceAttempt]) -> Tuple[List[ProjectRecord], ListingSource]:
    """Return (records, source) from the first attempt that succeeds with data.

    Raises AllSourcesExhaustedError carrying every failure when none does.
    """
    failures: List[SourceResult] = []
    for source, fetch in attempts:
        result = attempt_source(source, fetch)
        if result.ok:
            if failures:
                _logger.info("Serving %d project(s) from %s source", len(result.records), source.value)
            return list(result.records), source
        _logger.warning(
            "Project source %s failed (%s): %s",
            source.value,
            result.failure_kind.value if result.failure_kind else "unknown",
            result.reason,
        )
        failures.append(result)
    raise AllSourcesExhaustedError(failures)


class ListingResolver:
    """Remote GitHub listing first, local fallback file second."""

    def __init__(
        self,
        *,
        client: Optional[GitHubProjectsClient],
        reader: Optional[LocalProjectsReader],
        username: str,
        pinned: Sequence[str],
    ):
        self.client = client
        self.reader = reader
        self.username = str(username or "")
        self.pinned = list(pinned or [])

    def attempts(self) -> List[SourceAttempt]:
        out: List[SourceAttempt] = []
        if self.client is not None:
            client = self.client
            out.append((ListingSource.REMOTE, lambda: client.fetch_projects(self.username, self.pinned)))
        if self.reader is not None:
            reader = self.reader
            out.append((ListingSource.LOCAL, lambda: reader.read(self.pinned)))
        return out

    def resolve(self) -> Tuple[List[ProjectRecord], ListingSource]:
        return resolve_first(self.attempts())
