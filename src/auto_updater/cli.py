"""Command-line entrypoint for gating, publishing and bootstrapping the catalog.

Usage:
  auto-updater gate --updates FILE [--attr-path PKG=ATTR ...] [--summary FILE] [--warn-only]
  auto-updater setup-catalog [--path DIR] [--config FILE]
  auto-updater publish --package PKG --old-version OLD --new-version NEW
                       --repository OWNER/REPO --head-owner OWNER [--attr-path ATTR]
                       [--config FILE] [--dry-run]
"""

from __future__ import annotations

import argparse
import json
import logging
import os
import sys
from dataclasses import replace
from pathlib import Path
from typing import NoReturn

from .catalog import setup_catalog
from .config import ConfigError, RunConfig, load_config
from .core import gate_updates
from .forge import ForgeError, ensure_pull_request
from .models import Err, UpdateEnv, UpdateProposal
from .parsers.pin import check_compatible
from .shell import CommandFailed, Runner, Shell, subprocess_runner, unwrap_or
from .summary import render_summary
from .vcs import UPSTREAM_BRANCH, prepare_update_branch, push_update_branch

EXIT_VIOLATIONS = 10

RUNNER: Runner = subprocess_runner  # patched in tests


class PublishAborted(RuntimeError):
    """Raised when a publish step fails."""


def _abort(reason: str) -> NoReturn:
    raise PublishAborted(reason)


def _load_options(path: Path | None) -> RunConfig:
    return load_config(path) if path else RunConfig.from_dict({})


def _attr_path_mapping(values: list[str]) -> dict[str, str]:
    mapping: dict[str, str] = {}
    for value in values:
        package, sep, attr_path = value.partition("=")
        if not sep or not package or not attr_path:
            raise ValueError(f"Expected PACKAGE=ATTR, got {value!r}")
        mapping[package] = attr_path
    return mapping


def _gate(args: argparse.Namespace) -> int:
    try:
        text = Path(args.updates).read_text(encoding="utf-8")
        attr_paths = _attr_path_mapping(args.attr_path)
    except (OSError, ValueError) as exc:
        print(f"ERROR: {exc}", file=sys.stderr)
        return 1

    report = gate_updates(text, attr_paths)
    print(json.dumps(report, indent=2))

    if args.summary:
        Path(args.summary).write_text(render_summary(report), encoding="utf-8")

    if report.get("hasViolations") and not args.warn_only:
        warn_env = os.getenv("AUTO_UPDATER_WARN_ONLY", "").strip().lower()
        if warn_env in {"1", "true", "yes", "y"}:
            return 0
        return EXIT_VIOLATIONS

    return 0


def _setup_catalog(args: argparse.Namespace) -> int:
    try:
        options = setup_catalog(_load_options(args.config), args.path, runner=RUNNER)
    except (ConfigError, CommandFailed) as exc:
        print(f"ERROR: {exc}", file=sys.stderr)
        return 1

    print(options.working_dir)
    return 0


def _publish(args: argparse.Namespace) -> int:
    try:
        options = _load_options(args.config)
    except ConfigError as exc:
        print(f"ERROR: {exc}", file=sys.stderr)
        return 1
    if args.dry_run:
        options = replace(options, dry_run=True)

    proposal = UpdateProposal(args.package, args.old_version, args.new_version)
    env = UpdateEnv(proposal, options)

    checked = check_compatible(args.attr_path or args.package, env.old_version, env.new_version)
    if isinstance(checked, Err):
        print(f"ERROR: {checked.reason}", file=sys.stderr)
        return EXIT_VIOLATIONS

    shell = Shell(options, runner=RUNNER, verbose=args.verbose)
    try:
        unwrap_or(_abort, prepare_update_branch(shell, env))
        unwrap_or(_abort, push_update_branch(shell, env))
    except PublishAborted as exc:
        print(f"ERROR: {exc}", file=sys.stderr)
        return 1

    if options.dry_run:
        print(env.branch_name)
        return 0

    try:
        url = ensure_pull_request(
            repository=args.repository,
            token=options.github_token,
            head=f"{args.head_owner}:{env.branch_name}",
            base=UPSTREAM_BRANCH,
            title=f"{env.package_name}: {env.old_version} -> {env.new_version}",
            body=f"Automated update of {env.package_name} to {env.new_version}.\n",
        )
    except ForgeError as exc:
        print(f"ERROR: {exc}", file=sys.stderr)
        return 1

    print(url)
    return 0


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(prog="auto-updater", description=__doc__.splitlines()[0])
    parser.add_argument("--verbose", action="store_true", help="Log every command run")
    sub = parser.add_subparsers(dest="command", required=True)

    gate = sub.add_parser("gate", help="Check update proposals against attr path pins")
    gate.add_argument("--updates", required=True, help="File with one update per line")
    gate.add_argument(
        "--attr-path",
        action="append",
        default=[],
        metavar="PKG=ATTR",
        help="Catalog attr path for a package (defaults to the package name)",
    )
    gate.add_argument("--summary", default=None, help="Write a Markdown summary here")
    gate.add_argument("--warn-only", action="store_true")
    gate.set_defaults(handler=_gate)

    catalog = sub.add_parser("setup-catalog", help="Clone the catalog checkout if missing")
    catalog.add_argument("--path", type=Path, default=None)
    catalog.add_argument("--config", type=Path, default=None)
    catalog.set_defaults(handler=_setup_catalog)

    publish = sub.add_parser("publish", help="Push the update branch and open its pull request")
    publish.add_argument("--package", required=True)
    publish.add_argument("--old-version", required=True)
    publish.add_argument("--new-version", required=True)
    publish.add_argument("--repository", required=True, help="OWNER/REPO receiving the PR")
    publish.add_argument("--head-owner", required=True, help="Owner of the fork holding the branch")
    publish.add_argument("--attr-path", default=None, help="Defaults to the package name")
    publish.add_argument("--config", type=Path, default=None)
    publish.add_argument("--dry-run", action="store_true")
    publish.set_defaults(handler=_publish)

    return parser.parse_args(argv)


def main(argv: list[str] | None = None) -> int:
    args = parse_args(argv)
    logging.basicConfig(
        level=logging.INFO if args.verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
        stream=sys.stderr,
    )
    return args.handler(args)


if __name__ == "__main__":  # pragma: no cover
    raise SystemExit(main())
