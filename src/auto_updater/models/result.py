"""Success/failure values returned by commands and checks."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Generic, TypeAlias, TypeVar, Union

T = TypeVar("T")


@dataclass(frozen=True)
class Ok(Generic[T]):
    """Successful outcome carrying a value."""

    value: T

    @property
    def ok(self) -> bool:
        return True


@dataclass(frozen=True)
class Err:
    """Failed outcome carrying a textual reason.

    The reason may be empty; ``expected_failure_output`` uses an empty reason
    to report a command that succeeded when it was expected to fail.
    """

    reason: str

    @property
    def ok(self) -> bool:
        return False


Result: TypeAlias = Union[Ok[T], Err]
