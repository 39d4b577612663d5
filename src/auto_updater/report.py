"""Report aggregation and JSON-friendly output."""

from __future__ import annotations

from typing import Any


def aggregate(updates: list[dict[str, Any]], errors: list[str]) -> dict[str, Any]:
    """Aggregate gated updates and parse errors into a single report.

    ``updates`` holds dicts with at least ``package`` and ``status`` keys;
    ``status`` is ``"ok"`` or ``"pin-violation"``. ``errors`` holds the
    messages of lines that could not be parsed.
    """

    total_violations = sum(1 for u in updates if u.get("status") == "pin-violation")

    report: dict[str, Any] = {
        "version": "1",
        "hasViolations": total_violations > 0,
        "updates": updates,
        "errors": errors,
        "totals": {
            "updates": len(updates),
            "violations": total_violations,
            "errors": len(errors),
        },
    }

    return report
