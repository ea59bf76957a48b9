"""Default command executor: runs git commands inside a package checkout."""

from __future__ import annotations

import logging
from pathlib import Path

from mgit.core import run_command, split_lines
from mgit.models import CommandOutcome, PackageContext

logger = logging.getLogger(__name__)


class GitExecutor:
    """Run command strings in a checkout and capture their output.

    Args:
        timeout: Seconds before a command is killed; None waits forever
    """

    def __init__(self, timeout: float | None = None):
        self.timeout = timeout or None

    def execute(self, command: str, package: PackageContext, directory: Path) -> CommandOutcome:
        """Execute command in directory.

        Returns the captured stdout lines as info lines. Raises
        CommandFailedError, carrying the captured stderr as error lines, when
        the command exits non-zero, cannot be started or times out.
        """
        logger.debug("%s: %s", package.name, command)
        result = run_command(command, cwd=directory, timeout=self.timeout)
        return CommandOutcome(info=split_lines(result.stdout))
