"""Pytest configuration for tests.

Provides a fake command runner so shell-level tests never spawn processes.
"""

from __future__ import annotations

from collections.abc import Mapping, Sequence
from pathlib import Path

import pytest

from auto_updater.config import RunConfig
from auto_updater.shell import CompletedCommand, Shell


class FakeRunner:
    """Return scripted results keyed by the full argument tuple."""

    def __init__(self, responses: Mapping[tuple[str, ...], tuple[int, str, str]] | None = None):
        self.responses = dict(responses or {})
        self.calls: list[tuple[str, ...]] = []
        self.envs: list[dict[str, str]] = []
        self.cwds: list[Path] = []

    def __call__(
        self, args: Sequence[str], *, cwd: Path, env: Mapping[str, str]
    ) -> CompletedCommand:
        key = tuple(args)
        self.calls.append(key)
        self.envs.append(dict(env))
        self.cwds.append(cwd)
        code, out, err = self.responses.get(key, (0, "", ""))
        return CompletedCommand(code, out, err)


@pytest.fixture
def options(tmp_path: Path) -> RunConfig:
    return RunConfig(dry_run=False, working_dir=tmp_path, github_token="tok")


@pytest.fixture
def runner() -> FakeRunner:
    return FakeRunner()


@pytest.fixture
def shell(options: RunConfig, runner: FakeRunner) -> Shell:
    return Shell(options, runner=runner, base_env={"PATH": "/usr/bin"})
