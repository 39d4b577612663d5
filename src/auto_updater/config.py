"""Run configuration loader.

Reads the run configuration from a JSON or YAML file and validates it against
``CONFIG_SCHEMA``. The resulting ``RunConfig`` is threaded explicitly into every
shell; nothing here mutates the process environment.
"""

from __future__ import annotations

import json
import os
from collections.abc import Iterable, Mapping
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

import yaml
from jsonschema import Draft202012Validator

DEFAULT_CONFIG_NAME = "auto-updater.json"
CONFIG_PATH_ENV_VAR = "AUTO_UPDATER_CONFIG"
TOKEN_ENV_VAR = "GITHUB_TOKEN"
NIX_PATH_ENV_VAR = "NIX_PATH"

CONFIG_SCHEMA: dict[str, Any] = {
    "$schema": "https://json-schema.org/draft/2020-12/schema",
    "type": "object",
    "properties": {
        "dryRun": {"type": "boolean"},
        "workingDir": {"type": "string", "minLength": 1},
        "githubToken": {"type": "string"},
    },
    "additionalProperties": False,
}


class ConfigError(RuntimeError):
    """Raised when the configuration file cannot be loaded or is invalid."""


@dataclass(frozen=True)
class RunConfig:
    """Options for one run of the update agent."""

    dry_run: bool = False
    working_dir: Path = field(default_factory=Path.cwd)
    github_token: str = ""
    nix_path: str | None = None

    def environment(self, base: Mapping[str, str] | None = None) -> dict[str, str]:
        """Return the environment commands run with.

        The pager is disabled and the forge token is injected on top of
        ``base`` (the current process environment when omitted). A ``nix_path``
        set by the catalog bootstrap is exported as ``NIX_PATH``.
        """
        env = dict(os.environ if base is None else base)
        env["PAGER"] = ""
        env[TOKEN_ENV_VAR] = self.github_token
        if self.nix_path:
            env[NIX_PATH_ENV_VAR] = self.nix_path
        return env

    @classmethod
    def from_dict(cls, data: Mapping[str, Any], base_dir: Path | None = None) -> RunConfig:
        working_dir = Path(data.get("workingDir", "."))
        if base_dir is not None and not working_dir.is_absolute():
            working_dir = base_dir / working_dir
        token = data.get("githubToken") or os.environ.get(TOKEN_ENV_VAR, "")
        return cls(
            dry_run=bool(data.get("dryRun", False)),
            working_dir=working_dir,
            github_token=token,
        )


def _resolve_config_path(path: Path | str | None = None) -> Path:
    """Resolve the configuration file path.

    Priority:
    1. Explicit path argument
    2. AUTO_UPDATER_CONFIG environment variable
    3. auto-updater.json in the current directory
    """
    if path is not None:
        return Path(path)

    env_path = os.environ.get(CONFIG_PATH_ENV_VAR)
    if env_path:
        return Path(env_path)

    return Path.cwd() / DEFAULT_CONFIG_NAME


def _format_errors(errors: Iterable) -> str:
    messages = []
    for error in errors:
        pointer = "/".join(str(p) for p in error.path)
        messages.append(f"- {pointer or '<root>'}: {error.message}")
    return "\n".join(messages)


def _parse(content: str, config_path: Path) -> Any:
    if config_path.suffix in {".yaml", ".yml"}:
        try:
            return yaml.safe_load(content) or {}
        except yaml.YAMLError as exc:
            raise ConfigError(f"Invalid YAML in configuration file: {exc}") from exc
    try:
        return json.loads(content)
    except json.JSONDecodeError as exc:
        raise ConfigError(f"Invalid JSON in configuration file: {exc}") from exc


def load_config(path: Path | str | None = None) -> RunConfig:
    """Load and validate a ``RunConfig``.

    Args:
        path: Optional path to the config file. If not provided, uses the
            AUTO_UPDATER_CONFIG env var or falls back to auto-updater.json.

    Returns:
        The validated run configuration. A relative ``workingDir`` is
        resolved against the directory holding the config file.

    Raises:
        ConfigError: If the file cannot be read or contains invalid data.
    """
    config_path = _resolve_config_path(path)

    if not config_path.exists():
        raise ConfigError(f"Configuration file not found: {config_path}")

    try:
        content = config_path.read_text(encoding="utf-8")
    except OSError as exc:
        raise ConfigError(f"Failed to read configuration file: {exc}") from exc

    data = _parse(content, config_path)
    if not isinstance(data, dict):
        raise ConfigError("Configuration must be a mapping")

    validator = Draft202012Validator(CONFIG_SCHEMA)
    errors = sorted(validator.iter_errors(data), key=lambda e: [str(p) for p in e.path])
    if errors:
        raise ConfigError("Configuration failed validation:\n" + _format_errors(errors))

    return RunConfig.from_dict(data, base_dir=config_path.parent)
