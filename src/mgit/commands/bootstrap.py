"""Bootstrap command: clone a package that has no local checkout yet."""

from __future__ import annotations

import logging
import shlex
from pathlib import Path

from mgit.core import CommandFailedError, MgitError
from mgit.logs import LogAggregator
from mgit.models import PackageContext, RepositoryDescriptor, WorkflowResult
from mgit.resolver import Resolver, Resolved, resolve_descriptor

logger = logging.getLogger(__name__)


class Bootstrap:
    """Clone packages into the workspace.

    Args:
        executor: Command executor used for ``git clone``
        resolver: Used when execute() is called without a descriptor
    """

    def __init__(self, executor, resolver: Resolver | None = None):
        self.executor = executor
        self.resolver = resolver

    def execute(
        self, package: PackageContext, descriptor: RepositoryDescriptor | None = None
    ) -> WorkflowResult:
        log = LogAggregator()

        try:
            if descriptor is None:
                if self.resolver is None:
                    raise MgitError(
                        f'Cannot clone package "{package.name}": no repository given.'
                    )
                descriptor = resolve_descriptor(package, Resolved(self.resolver))
                if descriptor is None:
                    log.error(
                        f'Package "{package.name}" was skipped because its '
                        "repository could not be resolved."
                    )
                    return WorkflowResult.success(log.snapshot())

            working_directory = Path(package.working_directory)
            working_directory.mkdir(parents=True, exist_ok=True)

            command = clone_command(descriptor)
            logger.debug("Cloning %s: %s", package.name, command)
            log.append(self.executor.execute(command, package, working_directory))

        except MgitError as e:
            if isinstance(e, CommandFailedError) and e.outcome is not None:
                log.append(e.outcome)
            else:
                log.error(str(e))
            return WorkflowResult.failure(log.snapshot(), e)

        return WorkflowResult.success(log.snapshot())


def clone_command(descriptor: RepositoryDescriptor) -> str:
    return (
        f"git clone --progress -b {shlex.quote(descriptor.branch)} "
        f"{shlex.quote(descriptor.url)} {shlex.quote(descriptor.directory)}"
    )
