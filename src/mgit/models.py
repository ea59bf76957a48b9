"""Data types shared by the update workflow and its collaborators."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from .core import MgitError


class ResolverStrategy(str, Enum):
    """How a package's repository descriptor is obtained."""

    EXPLICIT = "explicit"
    RESOLVED = "resolved"


@dataclass(frozen=True)
class RepositoryDescriptor:
    """Remote branch, checkout directory and clone URL of one package."""

    branch: str
    directory: str
    url: str = ""

    def is_valid(self) -> bool:
        return bool(self.branch) and bool(self.directory)


@dataclass(frozen=True)
class OptionSet:
    """Per-run options for the update workflow.

    ``fetch_before_checkout`` set to None means "use the strategy default":
    fetch always under the explicit strategy, never under the resolved one.
    """

    fetch_before_checkout: bool | None = None
    resolver_strategy: ResolverStrategy = ResolverStrategy.EXPLICIT

    def should_fetch(self) -> bool:
        if self.fetch_before_checkout is None:
            return self.resolver_strategy is ResolverStrategy.EXPLICIT
        return self.fetch_before_checkout


@dataclass(frozen=True)
class PackageContext:
    name: str
    working_directory: str
    options: OptionSet = field(default_factory=OptionSet)


@dataclass(frozen=True)
class CommandOutcome:
    """Captured output of one executed command."""

    info: tuple[str, ...] = ()
    error: tuple[str, ...] = ()

    @property
    def stdout(self) -> str:
        return "\n".join(self.info).strip()


@dataclass(frozen=True)
class LogBundle:
    """Read-only view of the lines accumulated for one package."""

    info: tuple[str, ...] = ()
    error: tuple[str, ...] = ()


@dataclass(frozen=True)
class WorkflowResult:
    """Terminal outcome of one workflow invocation."""

    succeeded: bool
    logs: LogBundle = field(default_factory=LogBundle)
    error: MgitError | None = None

    @classmethod
    def success(cls, logs: LogBundle) -> WorkflowResult:
        return cls(succeeded=True, logs=logs)

    @classmethod
    def failure(cls, logs: LogBundle, error: MgitError | None = None) -> WorkflowResult:
        return cls(succeeded=False, logs=logs, error=error)
