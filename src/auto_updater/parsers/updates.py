"""Parse update proposals, one ``<package> <old> <new>`` record per line."""

from __future__ import annotations

import ast

from ..models import Err, Ok, Result, UpdateProposal


def _parse_line(line: str) -> Result[UpdateProposal]:
    tokens = line.split()
    if len(tokens) != 3:
        return Err("Unable to parse update: " + " ".join(tokens))
    package, old_version, new_version = tokens
    return Ok(UpdateProposal(package, old_version, new_version))


def parse_updates(text: str) -> list[Result[UpdateProposal]]:
    """Return one result per line of ``text``, in line order.

    Malformed lines become ``Err`` values instead of being dropped, so
    callers can report them and keep processing the rest.
    """
    return [_parse_line(line) for line in text.splitlines()]


def read_value(text: str) -> int | float | bool:
    """Read a numeric or boolean literal from command output."""
    try:
        value = ast.literal_eval(text.strip())
    except (ValueError, SyntaxError) as exc:
        raise ValueError(f"Not a literal value: {text!r}") from exc
    if not isinstance(value, (int, float, bool)):
        raise ValueError(f"Not a literal value: {text!r}")
    return value
