"""Command execution and result combinators."""

from __future__ import annotations

from .outcome import (
    can_fail,
    expected_failure_output,
    map_reason,
    or_else,
    overwrite_reason,
    result_of,
    run_result,
    succeeded,
    unwrap_or,
)
from .runner import (
    Action,
    CommandFailed,
    CompletedCommand,
    Runner,
    Shell,
    our_shell,
    our_silent_shell,
    subprocess_runner,
)

__all__ = [
    # Execution
    "Action",
    "CommandFailed",
    "CompletedCommand",
    "Runner",
    "Shell",
    "our_shell",
    "our_silent_shell",
    "subprocess_runner",
    # Combinators
    "can_fail",
    "expected_failure_output",
    "map_reason",
    "or_else",
    "overwrite_reason",
    "result_of",
    "run_result",
    "succeeded",
    "unwrap_or",
]
