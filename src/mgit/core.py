"""Core functionality for mgit.

This module contains the shared paths, the error taxonomy and the
subprocess wrapper used by the git collaborators.
"""

from __future__ import annotations

import logging
import os
import shlex
import subprocess
from pathlib import Path

from .models import CommandOutcome

# XDG Base Directory paths
CONFIG_DIR = Path(os.getenv("XDG_CONFIG_HOME", Path.home() / ".config")) / "mgit"

WORKSPACE_FILE = "mgit.toml"

logger = logging.getLogger(__name__)


class MgitError(Exception):
    """Custom exception for mgit operations."""


class WorkspaceError(MgitError):
    """The workspace file is missing or malformed."""


class InvalidRepositoryError(MgitError):
    """A repository descriptor lacks a branch or a directory."""


class UncommittedChangesError(MgitError):
    """The local checkout has changes that would be lost."""

    def __init__(self, package_name: str):
        super().__init__(f'Package "{package_name}" has uncommitted changes. Aborted.')
        self.package_name = package_name


class BranchNotOnServerError(MgitError):
    """The requested branch has no remote-tracking reference on origin."""

    def __init__(self, branch: str):
        super().__init__(f'Branch "{branch}" is not available on server.')
        self.branch = branch


class CommandFailedError(MgitError):
    """A git command failed; carries whatever output was captured."""

    def __init__(self, message: str, outcome: CommandOutcome | None = None):
        super().__init__(message)
        self.outcome = outcome


def split_lines(text: str | None) -> tuple[str, ...]:
    """Split captured output into lines, dropping trailing blank lines."""
    if not text:
        return ()
    return tuple(text.rstrip().splitlines())


def run_command(
    command: str, cwd: Path | None = None, timeout: float | None = None
) -> subprocess.CompletedProcess:
    """Run a command string with error handling.

    The command is split with shlex, never passed through a shell. A timeout
    of None waits for the process forever.
    """
    cmd = shlex.split(command)
    if not cmd:
        raise CommandFailedError("Empty command")

    logger.debug("Running %r in %s", command, cwd)
    try:
        return subprocess.run(
            cmd,
            cwd=cwd,
            capture_output=True,
            text=True,
            check=True,
            timeout=timeout,
        )
    except subprocess.CalledProcessError as e:
        error_lines = split_lines(e.stderr) or (f"Command failed: {command}",)
        raise CommandFailedError(
            f"Command failed: {command}\n{e.stderr if e.stderr else str(e)}".rstrip(),
            CommandOutcome(info=split_lines(e.stdout), error=error_lines),
        ) from e
    except subprocess.TimeoutExpired as e:
        message = f"Command timed out after {timeout}s: {command}"
        raise CommandFailedError(message, CommandOutcome(error=(message,))) from e
    except FileNotFoundError as e:
        message = f"Command not found: {cmd[0]}"
        raise CommandFailedError(message, CommandOutcome(error=(message,))) from e
