# SPDX-FileCopyrightText: Copyright (c) 2025 NVIDIA CORPORATION & AFFILIATES. All rights reserved.
# SPDX-License-Identifier: Apache-2.0
"""Flask app for the portfolio site.

Routes:
  GET  /api/github-projects   cached pinned-project listing (JSON array)
  POST /api/send              contact-form relay
  GET  /                      index.html from the static root
  GET  /<path>                any other file under the static root (dotfiles excluded)

The listing cache is built once in `create_app()` and kept in
`app.extensions["portfolio_projects"]`; handlers reach it through that handle.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

from flask import Flask, abort, current_app, jsonify, request, send_from_directory

from .config import PortfolioConfig, load_config
from .exceptions import MailConfigError, MailRelayError
from .github_client import GitHubProjectsClient
from .listing_cache import ProjectListingCache
from .local_fallback import LocalProjectsReader
from .mailer import ContactMessage, send_contact_message
from .resolver import ListingResolver

_logger = logging.getLogger(__name__)

EXTENSION_KEY = "portfolio_projects"

PROJECTS_CACHE_CONTROL = "public, max-age=300, stale-while-revalidate=60"
SOURCE_HEADER = "X-Projects-Source"

PROJECTS_ERROR_MESSAGE = "Failed to fetch projects from GitHub."
SEND_OK_MESSAGE = "Message sent successfully! Thank you."
SEND_INVALID_MESSAGE = "Name, email, and message are required."
SEND_CONFIG_ERROR_MESSAGE = "Server configuration error."
SEND_ERROR_MESSAGE = "Failed to send message."


@dataclass
class PortfolioState:
    config: PortfolioConfig
    cache: ProjectListingCache


def build_listing_cache(config: PortfolioConfig) -> ProjectListingCache:
    """Wire GitHub client -> fallback reader -> resolver -> cache from config."""
    client = GitHubProjectsClient(
        config.github_token,
        require_auth=config.github_require_token,
        timeout_s=config.github_timeout_s,
    )
    reader = LocalProjectsReader(config.fallback_file)
    resolver = ListingResolver(
        client=client,
        reader=reader,
        username=config.github_username,
        pinned=list(config.pinned_repos),
    )
    return ProjectListingCache(resolver.resolve, ttl_s=config.cache_ttl_s)


def _state() -> PortfolioState:
    return current_app.extensions[EXTENSION_KEY]


def github_projects():
    state = _state()
    try:
        records, source = state.cache.get_with_source()
    except Exception:
        _logger.exception("Error fetching GitHub projects")
        return jsonify({"message": PROJECTS_ERROR_MESSAGE}), 500

    resp = jsonify([r.to_json_dict() for r in records])
    resp.headers["Cache-Control"] = PROJECTS_CACHE_CONTROL
    resp.headers[SOURCE_HEADER] = source.value
    return resp


def send_message():
    state = _state()
    contact = ContactMessage.from_payload(request.get_json(silent=True))
    if contact is None:
        return jsonify({"message": SEND_INVALID_MESSAGE}), 400
    try:
        send_contact_message(state.config, contact)
    except MailConfigError:
        _logger.error("Contact form submitted but mail credentials are not configured")
        return jsonify({"message": SEND_CONFIG_ERROR_MESSAGE}), 500
    except MailRelayError:
        _logger.exception("Contact message relay failed")
        return jsonify({"message": SEND_ERROR_MESSAGE}), 500
    return jsonify({"message": SEND_OK_MESSAGE}), 200


def index():
    return send_from_directory(_state().config.static_dir, "index.html")


def _is_hidden_path(filename: str) -> bool:
    return any(part.startswith(".") for part in filename.replace("\\", "/").split("/"))


def static_file(filename: str):
    # Dotfiles (.env, .git/...) are never served.
    if _is_hidden_path(filename):
        abort(404)
    # send_from_directory refuses paths escaping the static root and 404s on missing files.
    return send_from_directory(_state().config.static_dir, filename)


def _add_cors_headers(resp):
    resp.headers.setdefault("Access-Control-Allow-Origin", "*")
    if request.method == "OPTIONS":
        resp.headers.setdefault("Access-Control-Allow-Methods", "GET, POST, OPTIONS")
        resp.headers.setdefault("Access-Control-Allow-Headers", "Content-Type")
    return resp


def create_app(
    config: Optional[PortfolioConfig] = None,
    *,
    cache: Optional[ProjectListingCache] = None,
) -> Flask:
    """Build the Flask app. Pass `cache` to inject a pre-wired listing cache (tests)."""
    config = config or load_config()
    app = Flask(__name__, static_folder=None)
    app.extensions[EXTENSION_KEY] = PortfolioState(
        config=config,
        cache=cache if cache is not None else build_listing_cache(config),
    )

    app.add_url_rule("/api/github-projects", "github_projects", github_projects, methods=["GET"])
    app.add_url_rule("/api/send", "send_message", send_message, methods=["POST"])
    app.add_url_rule("/", "index", index, methods=["GET"])
    app.add_url_rule("/<path:filename>", "static_file", static_file, methods=["GET"])
    app.after_request(_add_cors_headers)

    _logger.info(
        "Portfolio app ready: user=%s pinned=%s fallback=%s static=%s",
        config.github_username,
        ",".join(config.pinned_repos) or "(all)",
        config.fallback_file,
        Path(config.static_dir),
    )
    return app
