"""Data models for the package-update agent."""

from __future__ import annotations

from .result import Err, Ok, Result
from .update_proposal import BRANCH_PREFIX, UpdateEnv, UpdateProposal, branch_name

__all__ = [
    "BRANCH_PREFIX",
    "Err",
    "Ok",
    "Result",
    "UpdateEnv",
    "UpdateProposal",
    "branch_name",
]
