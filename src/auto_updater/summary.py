"""Human-readable Markdown summary of a gating report."""

from __future__ import annotations

from typing import Any


def render_summary(report: dict[str, Any]) -> str:
    """Return a Markdown string with totals and a table of proposed updates."""
    totals = report.get("totals", {})
    updates = report.get("updates", [])
    errors = report.get("errors", [])

    lines = []
    lines.append("# auto-updater Summary")
    lines.append("")
    lines.append(
        f"Updates: {totals.get('updates', 0)} | Pin violations: {totals.get('violations', 0)}"
        f" | Unparsed lines: {totals.get('errors', 0)}"
    )
    lines.append("")
    lines.append("| Package | Attr path | Old | New | Status |")
    lines.append("| --- | --- | --- | --- | --- |")

    for update in updates:
        lines.append(
            f"| {update.get('package', '')} | {update.get('attrPath', '')} "
            f"| {update.get('oldVersion', '')} | {update.get('newVersion', '')} "
            f"| {update.get('status', '')} |"
        )

    if not updates:
        lines.append("| (no updates) | n/a | n/a | n/a | n/a |")

    if errors:
        lines.append("")
        lines.append("## Unparsed lines")
        lines.append("")
        lines.extend(f"- {error}" for error in errors)

    return "\n".join(lines) + "\n"
