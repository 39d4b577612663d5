"""One-time bootstrap of the local catalog checkout."""

from __future__ import annotations

import logging
import os
from dataclasses import replace
from pathlib import Path

from .config import RunConfig
from .shell import Runner, Shell, subprocess_runner

logger = logging.getLogger(__name__)

CATALOG_REPOSITORY = "nixpkgs"
UPSTREAM_URL = "https://github.com/NixOS/nixpkgs"


def default_catalog_path() -> Path:
    cache_home = os.environ.get("XDG_CACHE_HOME")
    base = Path(cache_home) if cache_home else Path.home() / ".cache"
    return base / CATALOG_REPOSITORY


def setup_catalog(
    options: RunConfig,
    path: Path | None = None,
    *,
    runner: Runner = subprocess_runner,
) -> RunConfig:
    """Clone the catalog fork if missing and return options rooted in it.

    The returned options run commands inside the checkout with ``NIX_PATH``
    pointing ``<nixpkgs>`` at it.

    Cloning goes through the forge CLI, so the user must already have a fork
    of the catalog. An existing directory is reused as is. Command failures
    raise ``CommandFailed``.
    """
    path = path or default_catalog_path()

    if not path.is_dir():
        logger.info("cloning catalog into %s", path)
        path.parent.mkdir(parents=True, exist_ok=True)
        Shell(replace(options, working_dir=path.parent), runner=runner).run(
            "hub", "clone", CATALOG_REPOSITORY, str(path)
        )
        shell = Shell(replace(options, working_dir=path), runner=runner)
        shell.run("git", "remote", "add", "upstream", UPSTREAM_URL)
        shell.run("git", "fetch", "upstream")

    return replace(options, working_dir=path, nix_path=f"{CATALOG_REPOSITORY}={path}")
