"""Forge (code hosting) integrations."""

from .github_pr import ForgeError, ensure_pull_request

__all__ = [
    "ForgeError",
    "ensure_pull_request",
]
