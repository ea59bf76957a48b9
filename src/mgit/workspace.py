"""Workspace file loading.

A workspace is described by ``mgit.toml`` at its root: where package
checkouts live and which repository each package comes from.
"""

from __future__ import annotations

import tomllib
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

from .core import WORKSPACE_FILE, WorkspaceError

DEFAULT_PACKAGES_DIR = "packages"
DEFAULT_URL_TEMPLATE = "git@github.com:{path}.git"
DEFAULT_BRANCH = "master"


@dataclass
class Workspace:
    root: Path
    packages: Path
    dependencies: dict[str, Any] = field(default_factory=dict)
    resolver_url_template: str = DEFAULT_URL_TEMPLATE
    resolver_default_branch: str = DEFAULT_BRANCH

    @property
    def package_names(self) -> list[str]:
        return list(self.dependencies.keys())


def load_workspace(cwd: Path, packages: str | None = None) -> Workspace:
    """Load ``mgit.toml`` from cwd.

    Args:
        cwd: Workspace root containing the workspace file
        packages: Optional override for the packages directory

    Raises:
        WorkspaceError: if the file is missing, unreadable or malformed
    """
    workspace_file = cwd / WORKSPACE_FILE
    if not workspace_file.exists():
        raise WorkspaceError(f"No {WORKSPACE_FILE} found in {cwd}")

    try:
        with open(workspace_file, "rb") as f:
            data = tomllib.load(f)
    except (OSError, tomllib.TOMLDecodeError) as e:
        raise WorkspaceError(f"Could not read {workspace_file}: {e}") from e

    dependencies = data.get("dependencies", {})
    if not isinstance(dependencies, dict):
        raise WorkspaceError(f"'dependencies' in {workspace_file} must be a table")

    packages_dir = Path(packages or data.get("packages", DEFAULT_PACKAGES_DIR))
    if not packages_dir.is_absolute():
        packages_dir = cwd / packages_dir

    return Workspace(
        root=cwd,
        packages=packages_dir,
        dependencies=dependencies,
        resolver_url_template=data.get("resolver_url_template", DEFAULT_URL_TEMPLATE),
        resolver_default_branch=data.get("resolver_default_branch", DEFAULT_BRANCH),
    )
