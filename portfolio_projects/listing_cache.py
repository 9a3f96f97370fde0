# SPDX-FileCopyrightText: Copyright (c) 2025 NVIDIA CORPORATION & AFFILIATES. All rights reserved.
# SPDX-License-Identifier: Apache-2.0
"""In-process TTL cache in front of the listing resolver.

One instance is built at app start-up and handed to the HTTP handlers; its
lifetime is the process lifetime (a new process starts with an empty cache).

TTL:
  Fixed 10 minutes (600 seconds) by default.

Semantics:
  - fresh entry (now <= expires_at)  -> returned, no I/O
  - missing or expired entry         -> resolve, store, return
  - resolver failure                 -> entry left untouched, error propagates

Concurrent misses are not coalesced: two requests may both resolve and the
later write wins. Resolution has no side effects, so that is harmless.
"""

from __future__ import annotations

import logging
import time
from dataclasses import dataclass
from typing import Callable, List, Optional, Tuple

from .project_types import ListingSource, ProjectRecord

_logger = logging.getLogger(__name__)

DEFAULT_LISTING_TTL_S: int = 10 * 60

Resolve = Callable[[], Tuple[List[ProjectRecord], ListingSource]]


@dataclass
class CacheStats:
    """Basic cache statistics tracked automatically by ProjectListingCache."""
    hit: int = 0
    miss: int = 0
    write: int = 0


@dataclass(frozen=True)
class CacheEntry:
    data: Tuple[ProjectRecord, ...]
    source: ListingSource
    expires_at: float

    def is_fresh(self, now: float) -> bool:
        return now <= self.expires_at


class ProjectListingCache:
    def __init__(
        self,
        resolve: Resolve,
        *,
        ttl_s: float = DEFAULT_LISTING_TTL_S,
        clock: Callable[[], float] = time.time,
    ):
        self._resolve = resolve
        self._ttl_s = float(ttl_s)
        self._clock = clock
        self._entry: Optional[CacheEntry] = None
        self.stats = CacheStats()

    @property
    def ttl_s(self) -> float:
        return self._ttl_s

    def peek(self) -> Optional[CacheEntry]:
        """Current entry if still fresh, else None (no resolution, no stats)."""
        entry = self._entry
        if entry is not None and entry.is_fresh(self._clock()):
            return entry
        return None

    def get_with_source(self) -> Tuple[List[ProjectRecord], ListingSource]:
        entry = self._entry
        if entry is not None:
            if entry.is_fresh(self._clock()):
                self.stats.hit += 1
                _logger.debug("Project listing cache hit (%s, %d projects)", entry.source.value, len(entry.data))
                return list(entry.data), entry.source
            _logger.debug("Project listing cache expired; resolving")
        else:
            _logger.debug("Project listing cache empty; resolving")
        self.stats.miss += 1

        records, source = self._resolve()
        # Expiry is measured from when the resolution finished.
        self._entry = CacheEntry(data=tuple(records), source=source, expires_at=self._clock() + self._ttl_s)
        self.stats.write += 1
        return list(records), source

    def get(self) -> List[ProjectRecord]:
        records, _source = self.get_with_source()
        return records

    def invalidate(self) -> None:
        self._entry = None
