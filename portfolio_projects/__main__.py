#!/usr/bin/env python3
"""Module entrypoint for `portfolio_projects`.

Usage:
  - `python3 -m portfolio_projects serve`
  - `python3 -m portfolio_projects list -v`
"""

from __future__ import annotations

from .cli import _cli


if __name__ == "__main__":
    raise SystemExit(_cli())
