# SPDX-FileCopyrightText: Copyright (c) 2025 NVIDIA CORPORATION & AFFILIATES. All rights reserved.
# SPDX-License-Identifier: Apache-2.0
"""Project-listing and contact-relay error types.

These are intentionally lightweight so the resolver can map specific error
classes onto failure kinds without importing the source modules.
"""

from __future__ import annotations

from typing import List, Optional, TYPE_CHECKING

if TYPE_CHECKING:  # pragma: no cover
    from .project_types import SourceResult


class ProjectSourceError(Exception):
    def __init__(self, *, source: str, message: str):
        super().__init__(message)
        self.source = str(source or "")


class SourceUnavailableError(ProjectSourceError):
    def __init__(self, *, source: str, message: str, status_code: Optional[int] = None):
        super().__init__(source=source, message=message)
        self.status_code = int(status_code) if status_code is not None else None


class GitHubAuthRequiredError(SourceUnavailableError):
    pass


class EmptyResultError(ProjectSourceError):
    pass


class MalformedLocalFileError(ProjectSourceError):
    pass


class AllSourcesExhaustedError(Exception):
    """Every configured source failed; carries the per-source failures for logging."""

    def __init__(self, failures: List["SourceResult"]):
        self.failures = list(failures)
        detail = "; ".join(f"{f.source.value}: {f.reason}" for f in self.failures) or "no sources configured"
        super().__init__(f"All project sources failed ({detail})")


class MailConfigError(Exception):
    pass


class MailRelayError(Exception):
    pass
