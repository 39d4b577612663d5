"""Combinators that turn command runs into ``Ok`` / ``Err`` values.

An *action* is a callable taking a ``Shell`` and running one or more commands
through it, e.g. ``lambda sh: sh.run("git", "fetch", "upstream")``. The
combinators never choose what to run; they only run the given action with
failures tolerated and translate the shell's last exit code and captured
streams into a result. Everything is synchronous: the caller blocks until each
command finishes.
"""

from __future__ import annotations

from collections.abc import Callable
from typing import TypeVar

from ..config import RunConfig
from ..models import Err, Ok, Result
from .runner import Action, Runner, Shell, subprocess_runner

T = TypeVar("T")


def can_fail(shell: Shell, action: Action[T]) -> T:
    """Run ``action`` without raising on a non-zero exit.

    ``shell.last_exit_code`` and the captured streams stay available for
    inspection afterwards.
    """
    with shell.errexit_disabled():
        return action(shell)


def result_of(shell: Shell, action: Action[T]) -> Result[T]:
    value = can_fail(shell, action)
    status = shell.last_exit_code
    if status == 0:
        return Ok(value)
    return Err(f"Exit code: {status}")


def expected_failure_output(shell: Shell, action: Action[object]) -> Result[str]:
    """Run a command that is expected to fail and return its stderr.

    A non-zero exit yields ``Ok(stderr)``. A zero exit yields ``Err("")``:
    the empty reason is how callers tell an unexpected success apart from
    other errors.
    """
    can_fail(shell, action)
    if shell.last_exit_code == 0:
        return Err("")
    return Ok(shell.last_stderr)


def or_else(shell: Shell, primary: Action[T], fallback: Action[T]) -> T:
    """Run ``primary``; run ``fallback`` only if ``primary`` exited non-zero."""
    value = can_fail(shell, primary)
    if shell.last_exit_code == 0:
        return value
    return fallback(shell)


def succeeded(shell: Shell, action: Action[object]) -> bool:
    can_fail(shell, action)
    return shell.last_exit_code == 0


def map_reason(reason: str, result: Result[T]) -> Result[T]:
    """Replace the failure reason of ``result``; successes pass through."""
    if isinstance(result, Err):
        return Err(reason)
    return result


def overwrite_reason(reason: str, action: Action[Result[T]]) -> Action[Result[T]]:
    """Wrap an action returning a result so its failure reason becomes ``reason``."""

    def wrapped(shell: Shell) -> Result[T]:
        return map_reason(reason, action(shell))

    return wrapped


def unwrap_or(on_error: Callable[[str], T], result: Result[T]) -> T:
    """Return the success value, or whatever ``on_error(reason)`` produces.

    ``on_error`` may also raise to end the workflow.
    """
    if isinstance(result, Err):
        return on_error(result.reason)
    return result.value


def run_result(
    options: RunConfig,
    action: Action[T],
    *,
    runner: Runner = subprocess_runner,
    verbose: bool = True,
) -> Result[T]:
    """Open a fresh shell for ``options`` and return ``result_of(action)``."""
    shell = Shell(options, runner=runner, verbose=verbose)
    return result_of(shell, action)
