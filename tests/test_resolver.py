from __future__ import annotations

from pathlib import Path

import pytest

from mgit.core import InvalidRepositoryError
from mgit.models import PackageContext, RepositoryDescriptor
from mgit.resolver import Explicit, Resolved, WorkspaceResolver, parse_repository_url, resolve_descriptor
from mgit.workspace import Workspace

TEMPLATE = "git@github.com:{path}.git"


def test_parse_shorthand_uses_template_and_default_branch() -> None:
    descriptor = parse_repository_url("org/utils", TEMPLATE, "master")

    assert descriptor == RepositoryDescriptor(
        branch="master", directory="utils", url="git@github.com:org/utils.git"
    )


def test_parse_shorthand_with_branch() -> None:
    descriptor = parse_repository_url("org/utils#develop", TEMPLATE, "master")

    assert descriptor.branch == "develop"
    assert descriptor.url == "git@github.com:org/utils.git"


@pytest.mark.parametrize(
    ("value", "url", "directory"),
    [
        ("https://example.com/team/engine.git", "https://example.com/team/engine.git", "engine"),
        ("git@gitlab.com:team/engine.git", "git@gitlab.com:team/engine.git", "engine"),
        ("file:///srv/git/engine", "file:///srv/git/engine", "engine"),
        ("../mirrors/engine/", "../mirrors/engine/", "engine"),
    ],
)
def test_parse_full_urls_are_kept(value: str, url: str, directory: str) -> None:
    descriptor = parse_repository_url(value, TEMPLATE, "main")

    assert descriptor.url == url
    assert descriptor.directory == directory
    assert descriptor.branch == "main"


def test_parse_empty_branch_gives_invalid_descriptor() -> None:
    assert not parse_repository_url("org/utils#", TEMPLATE, "master").is_valid()


def test_parse_empty_value_gives_invalid_descriptor() -> None:
    assert not parse_repository_url("", TEMPLATE, "master").is_valid()


def make_workspace(tmp_path: Path, **dependencies) -> Workspace:
    return Workspace(root=tmp_path, packages=tmp_path / "packages", dependencies=dependencies)


def test_workspace_resolver_looks_up_dependencies(tmp_path: Path) -> None:
    resolver = WorkspaceResolver(make_workspace(tmp_path, utils="org/utils#stable"))

    assert resolver("utils", str(tmp_path)) == RepositoryDescriptor(
        branch="stable", directory="utils", url="git@github.com:org/utils.git"
    )
    assert resolver("unknown", str(tmp_path)) is None


def test_workspace_resolver_rejects_non_string_values(tmp_path: Path) -> None:
    resolver = WorkspaceResolver(make_workspace(tmp_path, utils=42))

    with pytest.raises(InvalidRepositoryError):
        resolver("utils", str(tmp_path))


def test_resolve_explicit_descriptor(tmp_path: Path) -> None:
    package = PackageContext(name="utils", working_directory=str(tmp_path))
    descriptor = RepositoryDescriptor(branch="main", directory="utils")

    assert resolve_descriptor(package, Explicit(descriptor)) is descriptor

    with pytest.raises(InvalidRepositoryError, match='package "utils"'):
        resolve_descriptor(package, Explicit(RepositoryDescriptor(branch="main", directory="")))


def test_resolve_through_resolver(tmp_path: Path) -> None:
    package = PackageContext(name="utils", working_directory=str(tmp_path))

    assert resolve_descriptor(package, Resolved(lambda name, cwd: None)) is None

    with pytest.raises(InvalidRepositoryError):
        resolve_descriptor(
            package,
            Resolved(lambda name, cwd: RepositoryDescriptor(branch="", directory="utils", url="org/utils#")),
        )

