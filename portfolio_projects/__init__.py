# SPDX-FileCopyrightText: Copyright (c) 2025 NVIDIA CORPORATION & AFFILIATES. All rights reserved.
# SPDX-License-Identifier: Apache-2.0
"""
Portfolio backend: pinned GitHub projects listing + contact relay.

This package contains the implementation for:
- project normalization (GitHub REST items and hand-written fallback entries)
- the remote -> local-file listing resolver and its TTL cache
- the Flask app serving the listing, the contact form and the static site

Public API is re-exported from:
- `portfolio_projects.listing_cache` for the cached listing
- `portfolio_projects.resolver` for the source chain
- `portfolio_projects.server` for the Flask app factory
"""

from .listing_cache import ProjectListingCache  # noqa: F401
from .normalize import normalize_project  # noqa: F401
from .project_types import ListingSource, ProjectRecord  # noqa: F401
from .resolver import ListingResolver, resolve_first  # noqa: F401

__all__ = [
    "ListingResolver",
    "ListingSource",
    "ProjectListingCache",
    "ProjectRecord",
    "normalize_project",
    "resolve_first",
]
