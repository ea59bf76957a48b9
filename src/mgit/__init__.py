"""mgit - multi-repository workspace updater.

Keeps the git checkouts of a workspace's packages in sync with their
declared remote branches.
"""

from __future__ import annotations


def main() -> None:
    """Entry point for the mgit CLI."""
    # Lazy import for faster startup
    from mgit.cli import app

    app()


__all__ = ["main"]
