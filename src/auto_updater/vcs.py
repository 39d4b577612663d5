"""Git operations used to publish an update branch."""

from __future__ import annotations

import logging

from .models import Ok, Result, UpdateEnv
from .shell import Shell, or_else, overwrite_reason, result_of, succeeded

logger = logging.getLogger(__name__)

UPSTREAM_REMOTE = "upstream"
UPSTREAM_BRANCH = "master"


def remote_branch_exists(shell: Shell, branch: str, remote: str = "origin") -> bool:
    return succeeded(
        shell, lambda sh: sh.run("git", "ls-remote", "--exit-code", "--heads", remote, branch)
    )


def checkout_branch(shell: Shell, branch: str, start_point: str) -> str:
    """Switch to ``branch``, creating it from ``start_point`` if it does not exist."""
    return or_else(
        shell,
        lambda sh: sh.run("git", "checkout", branch),
        lambda sh: sh.run("git", "checkout", "-b", branch, start_point),
    )


def fetch_upstream(shell: Shell) -> Result[str]:
    fetch = overwrite_reason(
        f"Could not fetch {UPSTREAM_REMOTE}",
        lambda sh: result_of(sh, lambda s: s.run("git", "fetch", UPSTREAM_REMOTE)),
    )
    return fetch(shell)


def push_update_branch(shell: Shell, env: UpdateEnv) -> Result[str]:
    """Force-push the update branch to ``origin``; a no-op in dry-run mode."""
    branch = env.branch_name
    if env.options.dry_run:
        logger.info("dry run: not pushing %s", branch)
        return Ok("")
    push = overwrite_reason(
        f"Could not push {branch}",
        lambda sh: result_of(sh, lambda s: s.run("git", "push", "--force", "origin", branch)),
    )
    return push(shell)


def prepare_update_branch(shell: Shell, env: UpdateEnv) -> Result[str]:
    """Fetch upstream and check out the update branch from its tip."""
    fetched = fetch_upstream(shell)
    if not fetched.ok:
        return fetched
    start_point = f"{UPSTREAM_REMOTE}/{UPSTREAM_BRANCH}"
    return result_of(shell, lambda sh: checkout_branch(sh, env.branch_name, start_point))
