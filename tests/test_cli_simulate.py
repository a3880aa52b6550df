import json

import pytest
from typer.testing import CliRunner

from precedence_scheduler.cli import app

runner = CliRunner()


@pytest.fixture(autouse=True)
def _clean_env(monkeypatch):
    monkeypatch.delenv("PRECEDENCE_WORKERS", raising=False)
    monkeypatch.delenv("PRECEDENCE_BASE_DURATION", raising=False)


def test_cli_simulate_text():
    r = runner.invoke(app, ["simulate", "examples/steps.txt", "--workers", "2", "--base-duration", "0"])
    assert r.exit_code == 0
    assert r.stdout.strip() == "15"


def test_cli_simulate_defaults():
    # 5 workers, 60s base
    r = runner.invoke(app, ["simulate", "examples/steps.txt"])
    assert r.exit_code == 0
    assert r.stdout.strip() == "253"


def test_cli_simulate_config_file():
    r = runner.invoke(app, ["simulate", "examples/steps.txt", "--config", "examples/scheduler.yaml"])
    assert r.exit_code == 0
    assert r.stdout.strip() == "15"


def test_cli_simulate_env_override(monkeypatch):
    monkeypatch.setenv("PRECEDENCE_WORKERS", "3")
    r = runner.invoke(app, ["simulate", "examples/steps.txt", "-b", "0"])
    assert r.exit_code == 0
    assert r.stdout.strip() == "14"


def test_cli_simulate_trace():
    r = runner.invoke(
        app, ["simulate", "examples/steps.txt", "-w", "2", "-b", "0", "--trace"]
    )
    assert r.exit_code == 0
    lines = r.stdout.strip().splitlines()
    assert lines[0] == "t=0 start C worker=0"
    assert "t=9 finish F worker=1" in lines
    assert lines[-1] == "15"


def test_cli_simulate_json_with_table_durations():
    r = runner.invoke(
        app, ["simulate", "examples/steps-durations.json", "-w", "2", "--format", "json", "--trace"]
    )
    assert r.exit_code == 0
    payload = json.loads(r.stdout)
    assert payload["ok"] is True
    assert payload["result"]["elapsed"] == 8
    assert payload["result"]["completion_order"] == ["build", "docs", "test", "release"]
    assert payload["result"]["events"][0] == {"time": 0, "kind": "start", "task": "build", "worker": 0}


def test_cli_simulate_invalid_workers():
    r = runner.invoke(app, ["simulate", "examples/steps.txt", "--workers", "0", "--format", "json"])
    assert r.exit_code == 2
    payload = json.loads(r.stdout)
    assert payload["errors"][0]["code"] == "E_INVALID_CONFIG"


def test_cli_simulate_missing_config():
    r = runner.invoke(app, ["simulate", "examples/steps.txt", "--config", "examples/nope.yaml"])
    assert r.exit_code == 1
    assert "E_CONFIG_FILE_NOT_FOUND" in r.output


def test_cli_simulate_cycle():
    r = runner.invoke(app, ["simulate", "examples/cycle.txt", "-w", "2"])
    assert r.exit_code == 2
    assert "E_UNSCHEDULABLE" in r.output


def test_cli_simulate_non_letter_tasks_without_durations(tmp_path):
    p = tmp_path / "edges.yaml"
    p.write_text("edges:\n  - [build, test]\n", encoding="utf-8")
    r = runner.invoke(app, ["simulate", str(p), "-w", "2"])
    assert r.exit_code == 2
    assert "E_INVALID_DURATION" in r.output


def test_cli_simulate_duration_for_unknown_task(tmp_path):
    p = tmp_path / "edges.yaml"
    p.write_text("edges:\n  - [A, B]\ndurations:\n  Q: 4\n", encoding="utf-8")
    r = runner.invoke(app, ["simulate", str(p), "-w", "2", "--format", "json"])
    assert r.exit_code == 2
    payload = json.loads(r.stdout)
    assert payload["errors"][0]["code"] == "E_INVALID_DURATION"
    assert payload["errors"][0]["path"] == "durations.Q"
