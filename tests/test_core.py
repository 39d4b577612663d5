"""Tests for the gating entrypoint, report summary and CLI."""

import json

from auto_updater import cli
from auto_updater.cli import EXIT_VIOLATIONS, main
from auto_updater.core import gate_updates
from auto_updater.summary import render_summary

from conftest import FakeRunner

UPDATES = "\n".join(
    [
        "nodejs 10.12.0 11.2.0",
        "owncloud90 9.0.2 9.0.3",
        "not a valid line here",
    ]
)


def test_gate_updates_flags_pin_violation():
    report = gate_updates(UPDATES, {"nodejs": "nodejs-slim-10_x"})

    assert report["hasViolations"] is True
    assert report["totals"] == {"updates": 2, "violations": 1, "errors": 1}

    nodejs, owncloud = report["updates"]
    assert nodejs["attrPath"] == "nodejs-slim-10_x"
    assert nodejs["branch"] == "auto-update/nodejs"
    assert nodejs["status"] == "pin-violation"
    assert nodejs["reason"] == "Version in attr path nodejs-slim-10_x not compatible with 11.2.0"
    assert owncloud["status"] == "ok"
    assert "reason" not in owncloud
    assert report["errors"] == ["Unable to parse update: not a valid line here"]


def test_gate_updates_empty_input():
    report = gate_updates("")
    assert report["hasViolations"] is False
    assert report["updates"] == []
    assert report["totals"] == {"updates": 0, "violations": 0, "errors": 0}


def test_render_summary():
    md = render_summary(gate_updates(UPDATES, {"nodejs": "nodejs-slim-10_x"}))
    assert md.startswith("# auto-updater Summary\n")
    assert "| nodejs | nodejs-slim-10_x | 10.12.0 | 11.2.0 | pin-violation |" in md
    assert "- Unable to parse update: not a valid line here" in md


def test_render_summary_without_updates():
    md = render_summary(gate_updates(""))
    assert "| (no updates) | n/a | n/a | n/a | n/a |" in md


def test_cli_gate_exits_on_violation(tmp_path, capsys, monkeypatch):
    monkeypatch.delenv("AUTO_UPDATER_WARN_ONLY", raising=False)
    updates = tmp_path / "updates.txt"
    updates.write_text(UPDATES, encoding="utf-8")
    summary = tmp_path / "summary.md"

    code = main(
        [
            "gate",
            "--updates",
            str(updates),
            "--attr-path",
            "nodejs=nodejs-slim-10_x",
            "--summary",
            str(summary),
        ]
    )

    assert code == EXIT_VIOLATIONS
    report = json.loads(capsys.readouterr().out)
    assert report["totals"]["violations"] == 1
    assert "pin-violation" in summary.read_text(encoding="utf-8")


def test_cli_gate_warn_only(tmp_path, monkeypatch):
    updates = tmp_path / "updates.txt"
    updates.write_text("nodejs 10.12.0 11.2.0\n", encoding="utf-8")
    args = ["gate", "--updates", str(updates), "--attr-path", "nodejs=nodejs-slim-10_x"]

    assert main(args + ["--warn-only"]) == 0
    monkeypatch.setenv("AUTO_UPDATER_WARN_ONLY", "true")
    assert main(args) == 0


def test_cli_gate_clean_run(tmp_path):
    updates = tmp_path / "updates.txt"
    updates.write_text("owncloud90 9.0.2 9.0.3\n", encoding="utf-8")
    assert main(["gate", "--updates", str(updates)]) == 0


def test_cli_gate_bad_input(tmp_path, capsys):
    assert main(["gate", "--updates", str(tmp_path / "missing.txt")]) == 1
    updates = tmp_path / "updates.txt"
    updates.write_text("a 1 2\n", encoding="utf-8")
    assert main(["gate", "--updates", str(updates), "--attr-path", "broken"]) == 1
    assert "PACKAGE=ATTR" in capsys.readouterr().err


def test_cli_setup_catalog_existing_dir(tmp_path, capsys):
    assert main(["setup-catalog", "--path", str(tmp_path)]) == 0
    assert capsys.readouterr().out.strip() == str(tmp_path)


PUBLISH = [
    "publish",
    "--package",
    "hello",
    "--old-version",
    "2.10",
    "--new-version",
    "2.12",
    "--repository",
    "NixOS/nixpkgs",
    "--head-owner",
    "someone",
]


def test_cli_publish_pushes_and_opens_pull_request(monkeypatch, capsys):
    runner = FakeRunner()
    opened = {}

    def fake_ensure(**kwargs):
        opened.update(kwargs)
        return "https://github.com/NixOS/nixpkgs/pull/1"

    monkeypatch.setattr(cli, "RUNNER", runner)
    monkeypatch.setattr(cli, "ensure_pull_request", fake_ensure)

    assert main(PUBLISH) == 0
    assert runner.calls == [
        ("git", "fetch", "upstream"),
        ("git", "checkout", "auto-update/hello"),
        ("git", "push", "--force", "origin", "auto-update/hello"),
    ]
    assert opened["head"] == "someone:auto-update/hello"
    assert opened["repository"] == "NixOS/nixpkgs"
    assert opened["title"] == "hello: 2.10 -> 2.12"
    assert capsys.readouterr().out.strip() == "https://github.com/NixOS/nixpkgs/pull/1"


def test_cli_publish_dry_run_skips_push_and_forge(monkeypatch, capsys):
    runner = FakeRunner()
    monkeypatch.setattr(cli, "RUNNER", runner)

    def fail_ensure(**kwargs):  # pragma: no cover - must not be called
        raise AssertionError("no pull request in dry run")

    monkeypatch.setattr(cli, "ensure_pull_request", fail_ensure)

    assert main(PUBLISH + ["--dry-run"]) == 0
    assert ("git", "push", "--force", "origin", "auto-update/hello") not in runner.calls
    assert capsys.readouterr().out.strip() == "auto-update/hello"


def test_cli_publish_stops_on_command_failure(monkeypatch, capsys):
    runner = FakeRunner({("git", "fetch", "upstream"): (128, "", "offline")})
    monkeypatch.setattr(cli, "RUNNER", runner)

    assert main(PUBLISH) == 1
    assert runner.calls == [("git", "fetch", "upstream")]
    assert "Could not fetch upstream" in capsys.readouterr().err


def test_cli_publish_refuses_pin_violation(monkeypatch):
    runner = FakeRunner()
    monkeypatch.setattr(cli, "RUNNER", runner)
    args = [
        "publish",
        "--package",
        "nodejs",
        "--attr-path",
        "nodejs-slim-10_x",
        "--old-version",
        "10.12.0",
        "--new-version",
        "11.2.0",
        "--repository",
        "NixOS/nixpkgs",
        "--head-owner",
        "someone",
    ]
    assert main(args) == EXIT_VIOLATIONS
    assert runner.calls == []
