"""Pure text parsers: update proposals and attribute-path pins."""

from __future__ import annotations

from .pin import PinViolation, check_compatible, ensure_compatible, is_compatible
from .updates import parse_updates, read_value

__all__ = [
    "PinViolation",
    "check_compatible",
    "ensure_compatible",
    "is_compatible",
    "parse_updates",
    "read_value",
]
