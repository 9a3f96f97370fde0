# SPDX-FileCopyrightText: Copyright (c) 2025 NVIDIA CORPORATION & AFFILIATES. All rights reserved.
# SPDX-License-Identifier: Apache-2.0
"""Hand-curated fallback project list (JSON file on disk).

Used when GitHub is unreachable or none of the pinned repos matched. The file is
a JSON array; each element may carry any of:
  id, title, description, githubUrl, stars, language, technologies, createdAt

Entries have no structured repo name, so pinned filtering uses the last path
segment of githubUrl. If that filter removes everything, the unfiltered list is
served: the local file is curated by hand and taken as intentional.
"""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any, Iterable, List, Union

from .exceptions import MalformedLocalFileError
from .normalize import normalize_projects, pinned_name_set, repo_name_from_url
from .project_types import ListingSource, ProjectRecord

_logger = logging.getLogger(__name__)


class LocalProjectsReader:
    def __init__(self, path: Union[str, Path]):
        self.path = Path(path)

    def _load_entries(self) -> List[Any]:
        src = ListingSource.LOCAL.value
        try:
            text = self.path.read_text(encoding="utf-8")
        except FileNotFoundError as e:
            raise MalformedLocalFileError(source=src, message=f"Fallback file not found: {self.path}") from e
        except (OSError, UnicodeDecodeError) as e:
            raise MalformedLocalFileError(source=src, message=f"Cannot read fallback file {self.path}: {e}") from e

        try:
            data = json.loads(text)
        except json.JSONDecodeError as e:
            raise MalformedLocalFileError(source=src, message=f"Invalid JSON in {self.path}: {e}") from e

        if not isinstance(data, list):
            raise MalformedLocalFileError(
                source=src,
                message=f"Fallback file {self.path} must contain a JSON array, got {type(data).__name__}",
            )
        return data

    def read(self, pinned: Iterable[str]) -> List[ProjectRecord]:
        """Return normalized entries matching `pinned`, or all of them when none match."""
        projects = normalize_projects(self._load_entries())

        wanted = pinned_name_set(pinned)
        if not wanted:
            return projects

        matched = [p for p in projects if repo_name_from_url(p.github_url) in wanted]
        if not matched and projects:
            _logger.info(
                "No fallback entry in %s matches pinned names %s; serving all %d entries",
                self.path,
                sorted(wanted),
                len(projects),
            )
            return projects
        return matched
