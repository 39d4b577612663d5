"""Command execution for the update agent.

A ``Shell`` runs external commands for one ``RunConfig``. It records the exit
code and captured streams of the most recent command so callers can inspect
them right after a run. With errexit on (the default) a non-zero exit raises
``CommandFailed``; the combinators in ``outcome`` switch it off to treat
failures as data.

The process itself is spawned by a ``Runner``. The default uses
``subprocess``; tests inject a fake.
"""

from __future__ import annotations

import logging
import subprocess
from collections.abc import Callable, Iterator, Mapping, Sequence
from contextlib import contextmanager
from dataclasses import dataclass
from pathlib import Path
from typing import Protocol, TypeVar

from ..config import RunConfig

logger = logging.getLogger(__name__)

T = TypeVar("T")


@dataclass(frozen=True)
class CompletedCommand:
    exit_code: int
    stdout: str
    stderr: str


class Runner(Protocol):
    def __call__(
        self, args: Sequence[str], *, cwd: Path, env: Mapping[str, str]
    ) -> CompletedCommand: ...


class CommandFailed(RuntimeError):
    """Raised when a command exits non-zero while errexit is on."""

    def __init__(self, command: Sequence[str], exit_code: int, stderr: str) -> None:
        super().__init__(f"Command {' '.join(command)!r} failed with exit code {exit_code}")
        self.command = list(command)
        self.exit_code = exit_code
        self.stderr = stderr


def subprocess_runner(
    args: Sequence[str], *, cwd: Path, env: Mapping[str, str]
) -> CompletedCommand:
    try:
        completed = subprocess.run(
            list(args),
            cwd=cwd,
            env=dict(env),
            capture_output=True,
            text=True,
            check=False,
        )
    except OSError as exc:
        # Same status a shell reports for a program it cannot run
        return CompletedCommand(127, "", str(exc))
    return CompletedCommand(completed.returncode, completed.stdout, completed.stderr)


class Shell:
    """Runs commands sequentially and remembers the last result."""

    def __init__(
        self,
        options: RunConfig,
        *,
        runner: Runner = subprocess_runner,
        verbose: bool = True,
        base_env: Mapping[str, str] | None = None,
    ) -> None:
        self.options = options
        self.runner = runner
        self.verbose = verbose
        self.errexit = True
        self.cwd = Path(options.working_dir)
        self.env = options.environment(base_env)
        self.last_exit_code = 0
        self.last_stdout = ""
        self.last_stderr = ""

    def run(self, *args: str) -> str:
        """Run a command and return its stdout.

        Raises:
            CommandFailed: If the command exits non-zero and errexit is on.
        """
        level = logging.INFO if self.verbose else logging.DEBUG
        logger.log(level, "$ %s", " ".join(args))

        result = self.runner(args, cwd=self.cwd, env=self.env)
        self.last_exit_code = result.exit_code
        self.last_stdout = result.stdout
        self.last_stderr = result.stderr

        if result.exit_code != 0:
            logger.debug("exit code %d: %s", result.exit_code, result.stderr.strip())
            if self.errexit:
                raise CommandFailed(args, result.exit_code, result.stderr)
        return result.stdout

    @contextmanager
    def errexit_disabled(self) -> Iterator[Shell]:
        previous = self.errexit
        self.errexit = False
        try:
            yield self
        finally:
            self.errexit = previous


Action = Callable[[Shell], T]


def our_shell(options: RunConfig, action: Action[T], *, runner: Runner = subprocess_runner) -> T:
    """Run ``action`` in a fresh shell that logs every command."""
    return action(Shell(options, runner=runner, verbose=True))


def our_silent_shell(
    options: RunConfig, action: Action[T], *, runner: Runner = subprocess_runner
) -> T:
    """Run ``action`` in a fresh shell that keeps command echo at DEBUG."""
    return action(Shell(options, runner=runner, verbose=False))
