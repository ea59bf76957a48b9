"""Update command for mgit.

Brings one package's checkout up to date with its remote branch:

    status -> (fetch) -> checkout -> branch -a -> pull

A missing checkout is handed to the bootstrap command instead. Each step
waits for the previous one and the first failure ends the workflow. Every
outcome, successful or not, carries the log lines gathered up to that point.
"""

from __future__ import annotations

import logging
import re
import shlex
from pathlib import Path

from rich import print as rprint

from mgit.core import BranchNotOnServerError, CommandFailedError, MgitError, UncommittedChangesError
from mgit.logs import LogAggregator
from mgit.models import CommandOutcome, PackageContext, RepositoryDescriptor, WorkflowResult
from mgit.resolver import Resolved, Strategy, resolve_descriptor

from .bootstrap import Bootstrap
from .exec import GitExecutor

logger = logging.getLogger(__name__)

DETACHED_HEAD_PATTERN = re.compile(r"HEAD detached at+")


class UpdateCommand:
    """Run the update workflow for single packages.

    Args:
        executor: Object with ``execute(command, package, directory)``
        bootstrap: Object with ``execute(package, descriptor)``, used for
            packages that are not cloned yet
    """

    def __init__(self, executor=None, bootstrap=None):
        self.executor = executor or GitExecutor()
        self.bootstrap = bootstrap or Bootstrap(self.executor)

    def execute(self, package: PackageContext, strategy: Strategy) -> WorkflowResult:
        log = LogAggregator()

        try:
            return self._update(package, strategy, log)
        except MgitError as e:
            if isinstance(e, CommandFailedError) and e.outcome is not None:
                log.append(e.outcome)
            else:
                log.error(str(e))
            logger.debug("%s: update failed: %s", package.name, e)
            return WorkflowResult.failure(log.snapshot(), e)

    def _update(self, package: PackageContext, strategy: Strategy, log: LogAggregator) -> WorkflowResult:
        descriptor = resolve_descriptor(package, strategy)
        if descriptor is None:
            log.error(
                f'Package "{package.name}" was skipped because its '
                "repository could not be resolved."
            )
            return WorkflowResult.success(log.snapshot())

        # Bootstrap clones into the descriptor directory, not the package name.
        checkout_path = Path(package.working_directory) / descriptor.directory
        if not checkout_path.exists():
            return self._clone(package, descriptor, log)

        return self._synchronize(package, descriptor, checkout_path, log)

    def _clone(
        self,
        package: PackageContext,
        descriptor: RepositoryDescriptor,
        log: LogAggregator,
    ) -> WorkflowResult:
        log.info(f'Package "{package.name}" was not found. Cloning...')

        response = self.bootstrap.execute(package, descriptor)
        log.concat(response.logs)

        if response.succeeded:
            return WorkflowResult.success(log.snapshot())
        return WorkflowResult.failure(log.snapshot(), response.error)

    def _synchronize(
        self,
        package: PackageContext,
        descriptor: RepositoryDescriptor,
        checkout_path: Path,
        log: LogAggregator,
    ) -> WorkflowResult:
        branch = descriptor.branch
        quoted_branch = shlex.quote(branch)

        def run(command: str) -> CommandOutcome:
            return self.executor.execute(command, package, checkout_path)

        # Status output is only inspected, never part of the transcript.
        if run("git status -s").stdout:
            raise UncommittedChangesError(package.name)

        if package.options.should_fetch():
            log.append(run("git fetch"))

        response = run(f"git checkout {quoted_branch}")
        log.append(response)
        if response.error:
            raise CommandFailedError(
                f'Could not check out branch "{branch}" in package "{package.name}".'
            )

        branches = run("git branch -a").stdout

        # A detached checkout has no branch to fast-forward.
        if DETACHED_HEAD_PATTERN.search(branches):
            log.info(f'Package "{package.name}" is on a detached commit.')
            return WorkflowResult.success(log.snapshot())

        if not re.search(rf"remotes/origin/{re.escape(branch)}", branches):
            raise BranchNotOnServerError(branch)

        log.append(run(f"git pull origin {quoted_branch}"))

        return WorkflowResult.success(log.snapshot())


def update(
    package: PackageContext,
    strategy: Strategy,
    executor=None,
    bootstrap=None,
) -> WorkflowResult:
    """Update a single package, filling in the default collaborators."""
    executor = executor or GitExecutor()
    if bootstrap is None and isinstance(strategy, Resolved):
        bootstrap = Bootstrap(executor, strategy.resolver)
    return UpdateCommand(executor, bootstrap).execute(package, strategy)


def after_all(processed_count: int):
    """Report how many packages a run went through."""
    rprint(f"[cyan]{processed_count} packages have been processed.[/cyan]")
