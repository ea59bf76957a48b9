from __future__ import annotations

from pathlib import Path

from mgit.commands.bootstrap import Bootstrap, clone_command
from mgit.core import CommandFailedError, InvalidRepositoryError, MgitError
from mgit.models import CommandOutcome, PackageContext, RepositoryDescriptor

DESCRIPTOR = RepositoryDescriptor(branch="main", directory="utils", url="git@github.com:org/utils.git")


def make_package(tmp_path: Path) -> PackageContext:
    return PackageContext(name="utils", working_directory=str(tmp_path / "packages"))


def test_clone_command() -> None:
    assert clone_command(DESCRIPTOR) == "git clone --progress -b main git@github.com:org/utils.git utils"


def test_clones_into_working_directory(tmp_path, executor) -> None:
    executor.responses[clone_command(DESCRIPTOR)] = "Cloning into 'utils'..."

    result = Bootstrap(executor).execute(make_package(tmp_path), DESCRIPTOR)

    assert result.succeeded
    assert result.logs.info == ("Cloning into 'utils'...",)
    assert executor.calls == [("utils", clone_command(DESCRIPTOR), tmp_path / "packages")]
    assert (tmp_path / "packages").is_dir()


def test_resolves_descriptor_when_missing(tmp_path, executor) -> None:
    bootstrap = Bootstrap(executor, resolver=lambda name, cwd: DESCRIPTOR)

    result = bootstrap.execute(make_package(tmp_path))

    assert result.succeeded
    assert executor.commands == [clone_command(DESCRIPTOR)]


def test_unresolvable_package_is_skipped(tmp_path, executor) -> None:
    result = Bootstrap(executor, resolver=lambda name, cwd: None).execute(make_package(tmp_path))

    assert result.succeeded
    assert "was skipped" in result.logs.error[0]
    assert executor.commands == []


def test_invalid_descriptor_fails(tmp_path, executor) -> None:
    bootstrap = Bootstrap(executor, resolver=lambda name, cwd: RepositoryDescriptor(branch="", directory="utils"))

    result = bootstrap.execute(make_package(tmp_path))

    assert not result.succeeded
    assert isinstance(result.error, InvalidRepositoryError)
    assert executor.commands == []


def test_without_descriptor_or_resolver_fails(tmp_path, executor) -> None:
    result = Bootstrap(executor).execute(make_package(tmp_path))

    assert not result.succeeded
    assert isinstance(result.error, MgitError)
    assert "no repository given" in result.logs.error[0]


def test_failed_clone_keeps_git_output(tmp_path, executor) -> None:
    executor.responses[clone_command(DESCRIPTOR)] = CommandFailedError(
        "Command failed",
        CommandOutcome(error=("fatal: repository 'org/utils' not found",)),
    )

    result = Bootstrap(executor).execute(make_package(tmp_path), DESCRIPTOR)

    assert not result.succeeded
    assert result.logs.error == ("fatal: repository 'org/utils' not found",)
