from __future__ import annotations

from pathlib import Path

import pytest

from mgit import config
from mgit.models import CommandOutcome, LogBundle, PackageContext, RepositoryDescriptor, WorkflowResult

BRANCHES_WITH_MAIN = "* main\n  remotes/origin/HEAD -> origin/main\n  remotes/origin/main"


class FakeExecutor:
    """Executor answering git commands from a table, recording every call.

    Values in ``responses`` are a CommandOutcome, a string (stdout) or an
    exception to raise. Keys are either a command or (package name, command).
    """

    def __init__(self, responses: dict | None = None):
        self.responses = dict(responses or {})
        self.calls: list[tuple[str, str, Path]] = []

    @property
    def commands(self) -> list[str]:
        return [command for _, command, _ in self.calls]

    def execute(self, command: str, package: PackageContext, directory: Path) -> CommandOutcome:
        self.calls.append((package.name, command, directory))

        response = self.responses.get((package.name, command), self.responses.get(command))
        if isinstance(response, Exception):
            raise response
        if isinstance(response, str):
            return CommandOutcome(info=tuple(response.splitlines()))
        if response is None:
            return CommandOutcome()
        return response


class FakeBootstrap:
    def __init__(self, result: WorkflowResult | None = None):
        self.result = result or WorkflowResult.success(LogBundle(info=("Cloning into 'pkg'...",)))
        self.calls: list[tuple[PackageContext, RepositoryDescriptor | None]] = []

    def execute(self, package: PackageContext, descriptor: RepositoryDescriptor | None = None) -> WorkflowResult:
        self.calls.append((package, descriptor))
        return self.result


@pytest.fixture
def executor() -> FakeExecutor:
    return FakeExecutor({"git branch -a": BRANCHES_WITH_MAIN})


@pytest.fixture
def bootstrap() -> FakeBootstrap:
    return FakeBootstrap()


@pytest.fixture(autouse=True)
def isolated_config(tmp_path: Path, monkeypatch: pytest.MonkeyPatch):
    config_dir = tmp_path / "config"
    monkeypatch.setattr(config, "CONFIG_DIR", config_dir)
    monkeypatch.setattr(config, "CONFIG_FILE", config_dir / "config.toml")
    config.invalidate_config_cache()
    yield config_dir
    config.invalidate_config_cache()
