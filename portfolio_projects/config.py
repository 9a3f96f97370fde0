# SPDX-FileCopyrightText: Copyright (c) 2025 NVIDIA CORPORATION & AFFILIATES. All rights reserved.
# SPDX-License-Identifier: Apache-2.0
"""Environment configuration for the portfolio backend.

`load_config()` reads the process environment (the CLI loads an optional `.env`
first via python-dotenv). Everything has a default except the mail credentials,
which only the contact endpoint needs.
"""

from __future__ import annotations

import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Mapping, Optional, Tuple

from .github_client import DEFAULT_TIMEOUT_S
from .listing_cache import DEFAULT_LISTING_TTL_S

DEFAULT_GITHUB_USERNAME = "aashish000000"
DEFAULT_PINNED_REPOS: Tuple[str, ...] = ("Expense-Splitter", "CS230-Stock_Price")
DEFAULT_FALLBACK_FILE = "data/projects.json"
DEFAULT_STATIC_DIR = "public"
DEFAULT_SMTP_HOST = "smtp.gmail.com"
DEFAULT_SMTP_PORT: int = 465
DEFAULT_PORT: int = 3000

_TRUE_VALUES = {"1", "true", "yes", "on"}
_FALSE_VALUES = {"0", "false", "no", "off", ""}


@dataclass(frozen=True)
class PortfolioConfig:
    github_token: Optional[str] = None
    github_username: str = DEFAULT_GITHUB_USERNAME
    pinned_repos: Tuple[str, ...] = DEFAULT_PINNED_REPOS
    github_require_token: bool = False
    github_timeout_s: float = DEFAULT_TIMEOUT_S
    fallback_file: Path = field(default_factory=lambda: Path(DEFAULT_FALLBACK_FILE))
    cache_ttl_s: float = float(DEFAULT_LISTING_TTL_S)
    static_dir: Path = field(default_factory=lambda: Path(DEFAULT_STATIC_DIR))
    email_user: Optional[str] = None
    email_pass: Optional[str] = None
    smtp_host: str = DEFAULT_SMTP_HOST
    smtp_port: int = DEFAULT_SMTP_PORT
    port: int = DEFAULT_PORT

    @property
    def mail_configured(self) -> bool:
        return bool(self.email_user and self.email_pass)


def parse_pinned_repos(value: Optional[str]) -> Tuple[str, ...]:
    """Comma-separated allow-list; unset or blank means the built-in default pair."""
    if value is None or not value.strip():
        return DEFAULT_PINNED_REPOS
    return tuple(p.strip() for p in value.split(",") if p.strip())


def _get_optional(env: Mapping[str, str], name: str) -> Optional[str]:
    value = env.get(name)
    if value is None:
        return None
    value = value.strip()
    return value or None


def _get_bool(env: Mapping[str, str], name: str, default: bool) -> bool:
    value = env.get(name)
    if value is None:
        return default
    lowered = value.strip().lower()
    if lowered in _TRUE_VALUES:
        return True
    if lowered in _FALSE_VALUES:
        return False
    raise ValueError(f"Invalid boolean for {name}: {value!r}")


def _get_number(env: Mapping[str, str], name: str, default: float, *, cast=float, minimum: float = 0):
    value = _get_optional(env, name)
    if value is None:
        return cast(default)
    try:
        parsed = cast(value)
    except (ValueError, TypeError):
        raise ValueError(f"Invalid number for {name}: {value!r}") from None
    if parsed < minimum:
        raise ValueError(f"{name} must be >= {minimum}, got {value!r}")
    return parsed


def load_config(environ: Optional[Mapping[str, str]] = None) -> PortfolioConfig:
    env = os.environ if environ is None else environ

    # Both paths resolve against the working directory; the fallback file is not
    # placed under the public static root.
    cwd = Path.cwd()
    static_dir = cwd / Path(_get_optional(env, "PORTFOLIO_STATIC_DIR") or DEFAULT_STATIC_DIR).expanduser()
    fallback = cwd / Path(_get_optional(env, "PROJECTS_FALLBACK_FILE") or DEFAULT_FALLBACK_FILE).expanduser()

    return PortfolioConfig(
        github_token=_get_optional(env, "GITHUB_TOKEN"),
        github_username=_get_optional(env, "GITHUB_USERNAME") or DEFAULT_GITHUB_USERNAME,
        pinned_repos=parse_pinned_repos(env.get("PINNED_REPOS")),
        github_require_token=_get_bool(env, "GITHUB_REQUIRE_TOKEN", False),
        github_timeout_s=_get_number(env, "GITHUB_TIMEOUT_S", DEFAULT_TIMEOUT_S, minimum=0.1),
        fallback_file=fallback,
        cache_ttl_s=_get_number(env, "PROJECTS_CACHE_TTL_S", DEFAULT_LISTING_TTL_S),
        static_dir=static_dir,
        email_user=_get_optional(env, "EMAIL_USER"),
        email_pass=_get_optional(env, "EMAIL_PASS"),
        smtp_host=_get_optional(env, "SMTP_HOST") or DEFAULT_SMTP_HOST,
        smtp_port=_get_number(env, "SMTP_PORT", DEFAULT_SMTP_PORT, cast=int, minimum=1),
        port=_get_number(env, "PORT", DEFAULT_PORT, cast=int, minimum=1),
    )
