# SPDX-FileCopyrightText: Copyright (c) 2025 NVIDIA CORPORATION & AFFILIATES. All rights reserved.
# SPDX-License-Identifier: Apache-2.0
"""
CLI wrapper for portfolio_projects.

Examples:
  python3 -m portfolio_projects serve --port 3000
  python3 -m portfolio_projects list --pinned Expense-Splitter,demo-repo -v
"""

from __future__ import annotations

import argparse
import json
import logging
import sys
from dataclasses import replace
from typing import Optional, Sequence

from dotenv import find_dotenv, load_dotenv

from .config import load_config, parse_pinned_repos
from .exceptions import AllSourcesExhaustedError
from .github_client import GitHubProjectsClient
from .local_fallback import LocalProjectsReader
from .resolver import ListingResolver

logger = logging.getLogger(__name__)


def _cmd_serve(args: argparse.Namespace) -> int:
    # Imported here so `list` works without touching Flask.
    from .server import create_app

    config = load_config()
    app = create_app(config)
    port = int(args.port) if args.port else int(config.port)
    logger.info("Server is listening on port %d", port)
    logger.info("View your live portfolio at: http://localhost:%d", port)
    app.run(host=str(args.host), port=port, debug=bool(args.debug), threaded=True)
    return 0


def _cmd_list(args: argparse.Namespace) -> int:
    config = load_config()
    if args.username:
        config = replace(config, github_username=str(args.username))
    if args.pinned is not None:
        config = replace(config, pinned_repos=parse_pinned_repos(args.pinned))

    client = None
    if not args.local_only:
        client = GitHubProjectsClient(
            config.github_token,
            require_auth=config.github_require_token,
            timeout_s=config.github_timeout_s,
        )
    resolver = ListingResolver(
        client=client,
        reader=LocalProjectsReader(config.fallback_file),
        username=config.github_username,
        pinned=list(config.pinned_repos),
    )
    try:
        records, source = resolver.resolve()
    except AllSourcesExhaustedError as e:
        logger.error("%s", e)
        return 1
    finally:
        if client is not None:
            logger.debug("GitHub REST stats: %s", client.stats)

    logger.info("source: %s (%d projects)", source.value, len(records))
    sys.stdout.write(json.dumps([r.to_json_dict() for r in records], indent=2) + "\n")
    return 0


def _cli(argv: Optional[Sequence[str]] = None) -> int:
    parser = argparse.ArgumentParser(
        description="Portfolio backend: pinned GitHub projects listing and contact relay.",
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    parser.add_argument("-v", "--verbose", action="store_true", help="Enable debug logging.")
    parser.add_argument("--env-file", default=None, help="Path to a .env file (default: ./.env if present).")
    sub = parser.add_subparsers(dest="command")

    p_serve = sub.add_parser("serve", help="Run the HTTP server.")
    p_serve.add_argument("--host", default="0.0.0.0", help="Bind address (default: 0.0.0.0)")
    p_serve.add_argument("--port", type=int, default=None, help="Port (default: $PORT or 3000)")
    p_serve.add_argument("--debug", action="store_true", help="Flask debug mode (auto-reload).")
    p_serve.set_defaults(func=_cmd_serve)

    p_list = sub.add_parser("list", help="Resolve the project listing once and print it as JSON.")
    p_list.add_argument("--username", default=None, help="GitHub username (default: $GITHUB_USERNAME)")
    p_list.add_argument("--pinned", default=None, help="Comma-separated pinned repo names (default: $PINNED_REPOS)")
    p_list.add_argument("--local-only", action="store_true", help="Skip GitHub; read the fallback file only.")
    p_list.set_defaults(func=_cmd_list)

    args = parser.parse_args(list(argv) if argv is not None else None)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="[%(levelname)s] %(message)s",
    )
    # Real environment variables win over .env entries.
    if args.env_file:
        load_dotenv(args.env_file)
    else:
        load_dotenv(find_dotenv(usecwd=True))

    if not getattr(args, "func", None):
        parser.print_help()
        return 2
    return int(args.func(args))
