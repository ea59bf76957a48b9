"""Repository descriptor resolution.

A run uses one of two strategies: ``Explicit`` when the caller already has a
descriptor for the package, ``Resolved`` when the descriptor is looked up by
package name through a resolver callable.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Callable, Union

from .core import InvalidRepositoryError
from .models import PackageContext, RepositoryDescriptor
from .workspace import Workspace

Resolver = Callable[[str, str], Union[RepositoryDescriptor, None]]

# scheme://..., git@host:..., or a local path
_URL_PATTERN = re.compile(r"^(?:[a-zA-Z][a-zA-Z0-9+.-]*://|[\w.-]+@|[./~])")


@dataclass(frozen=True)
class Explicit:
    descriptor: RepositoryDescriptor


@dataclass(frozen=True)
class Resolved:
    resolver: Resolver


Strategy = Union[Explicit, Resolved]


def resolve_descriptor(
    package: PackageContext, strategy: Strategy
) -> RepositoryDescriptor | None:
    """Return the package's descriptor, or None when it cannot be resolved.

    Raises:
        InvalidRepositoryError: if the descriptor lacks a branch or directory
    """
    if isinstance(strategy, Explicit):
        descriptor = strategy.descriptor
    else:
        descriptor = strategy.resolver(package.name, package.working_directory)
        if descriptor is None:
            return None

    if not descriptor.is_valid():
        raise InvalidRepositoryError(
            f'Repository "{descriptor.url or descriptor}" of package '
            f'"{package.name}" is invalid.'
        )

    return descriptor


def parse_repository_url(
    value: str, url_template: str, default_branch: str
) -> RepositoryDescriptor:
    """Parse a dependency value into a descriptor.

    Accepts GitHub-style shorthands (``owner/repo``) expanded through
    url_template, or full URLs and local paths. An optional ``#branch``
    suffix selects the branch. Parsing never fails; values that yield no
    branch or directory produce an invalid descriptor.
    """
    if "#" in value:
        location, _, branch = value.partition("#")
    else:
        location, branch = value, default_branch

    location = location.strip()
    if _URL_PATTERN.match(location):
        url = location
    else:
        url = url_template.format(path=location) if location else ""

    directory = re.split(r"[/:]", location.rstrip("/"))[-1] if location else ""
    if directory.endswith(".git"):
        directory = directory[: -len(".git")]

    return RepositoryDescriptor(branch=branch.strip(), directory=directory, url=url)


class WorkspaceResolver:
    """Resolve packages through the workspace ``dependencies`` table."""

    def __init__(self, workspace: Workspace):
        self.workspace = workspace

    def __call__(self, package_name: str, working_directory: str) -> RepositoryDescriptor | None:
        value = self.workspace.dependencies.get(package_name)
        if value is None:
            return None

        if not isinstance(value, str):
            raise InvalidRepositoryError(
                f'Repository of package "{package_name}" must be a string, got {value!r}.'
            )

        return parse_repository_url(
            value,
            self.workspace.resolver_url_template,
            self.workspace.resolver_default_branch,
        )
