"""Core gating entrypoint.

This module MUST NOT run commands so it can gate proposals before any
version-control or forge work starts.
"""

from __future__ import annotations

import logging
from collections.abc import Mapping
from typing import Any

from .models import Err, branch_name
from .parsers.pin import check_compatible
from .parsers.updates import parse_updates
from .report import aggregate

logger = logging.getLogger(__name__)


def gate_updates(text: str, attr_paths: Mapping[str, str] | None = None) -> dict[str, Any]:
    """Check every proposal in ``text`` against the pin in its attr path.

    Params:
        text: update proposals, one ``<package> <old> <new>`` per line
        attr_paths: optional package -> catalog attr path mapping; packages
            not listed use their own name as attr path

    Returns: dict report (see ``report.aggregate``)
    """
    attr_paths = attr_paths or {}

    updates: list[dict[str, Any]] = []
    errors: list[str] = []

    for parsed in parse_updates(text):
        if isinstance(parsed, Err):
            logger.warning("%s", parsed.reason)
            errors.append(parsed.reason)
            continue

        proposal = parsed.value
        attr_path = attr_paths.get(proposal.package_name, proposal.package_name)
        entry: dict[str, Any] = {
            **proposal.to_dict(),
            "attrPath": attr_path,
            "branch": branch_name(proposal),
            "status": "ok",
        }

        checked = check_compatible(attr_path, proposal.old_version, proposal.new_version)
        if isinstance(checked, Err):
            logger.info("%s", checked.reason)
            entry["status"] = "pin-violation"
            entry["reason"] = checked.reason

        updates.append(entry)

    return aggregate(updates, errors)
