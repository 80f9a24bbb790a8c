# tests/test_cli.py
from __future__ import annotations

import json
import sys
from pathlib import Path

import pytest

from runbook.cli import run_cli


def _py(code: str) -> str:
    exe = str(Path(sys.executable))
    # This returns a shell command string. JSON will escape it safely.
    return f'"{exe}" -c "{code}"'


def _log(log: Path, line: str) -> str:
    return _py(f"print('{line}', file=open(r'{log}', 'a'))")


def _write_json_config(path: Path, tasks: dict, **extra) -> None:
    path.write_text(json.dumps({"tasks": tasks, **extra}), encoding="utf-8")


def _recipes(log: Path) -> dict:
    return {
        "default": {"deps": ["check"]},
        "lint": {"command": _log(log, "lint")},
        "clippy": {"deps": ["lint"]},
        "fmt": {"command": _log(log, "fmt")},
        "check": {"deps": ["fmt", "lint"]},
    }


def test_list_prints_one_task_per_line(
    tmp_path: Path, capsys: pytest.CaptureFixture[str]
) -> None:
    cfg = tmp_path / "runbook.json"
    _write_json_config(
        cfg,
        {
            "b": {"command": _py("raise SystemExit(0)")},
            "a": {"command": _py("raise SystemExit(0)")},
        },
    )

    code = run_cli(["--config", str(cfg), "--list"])
    out = capsys.readouterr().out.splitlines()

    assert code == 0
    assert out == ["a", "b"]


def test_graph_prints_adjacency_in_declared_order(
    tmp_path: Path, capsys: pytest.CaptureFixture[str]
) -> None:
    cfg = tmp_path / "runbook.json"
    _write_json_config(cfg, _recipes(tmp_path / "log.txt"))

    code = run_cli(["--config", str(cfg), "--graph"])
    out = capsys.readouterr().out.splitlines()

    assert code == 0
    assert out == [
        "default: check",
        "lint:",
        "clippy: lint",
        "fmt:",
        "check: fmt lint",
    ]


def test_run_without_task_uses_default(
    tmp_path: Path, capsys: pytest.CaptureFixture[str]
) -> None:
    cfg = tmp_path / "runbook.json"
    log = tmp_path / "log.txt"
    _write_json_config(cfg, _recipes(log))

    code = run_cli(["--config", str(cfg), "-q"])
    out = capsys.readouterr().out.splitlines()

    assert code == 0
    assert log.read_text(encoding="utf-8").splitlines() == ["fmt", "lint"]
    assert [line.split(",")[0] for line in out] == [
        "OK fmt",
        "OK lint",
        "OK check",
        "OK default",
    ]


def test_run_named_task(tmp_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
    cfg = tmp_path / "runbook.json"
    log = tmp_path / "log.txt"
    _write_json_config(cfg, _recipes(log))

    code = run_cli(["--config", str(cfg), "-q", "clippy"])
    _ = capsys.readouterr()

    assert code == 0
    assert log.read_text(encoding="utf-8").splitlines() == ["lint"]


def test_configured_default_task(
    tmp_path: Path, capsys: pytest.CaptureFixture[str]
) -> None:
    cfg = tmp_path / "runbook.json"
    log = tmp_path / "log.txt"
    _write_json_config(cfg, _recipes(log), default="fmt")

    code = run_cli(["--config", str(cfg), "-q"])
    _ = capsys.readouterr()

    assert code == 0
    assert log.read_text(encoding="utf-8").splitlines() == ["fmt"]


def test_run_failure_propagates_exit_code(
    tmp_path: Path, capsys: pytest.CaptureFixture[str]
) -> None:
    cfg = tmp_path / "runbook.json"
    _write_json_config(
        cfg,
        {
            "all": {"deps": ["fail"]},
            "fail": {"command": _py("raise SystemExit(5)")},
        },
    )

    code = run_cli(["--config", str(cfg), "-q"])
    captured = capsys.readouterr()

    assert code == 5
    assert "FAIL fail" in captured.out
    assert "SKIP all" in captured.out
    assert "exited with code 5" in captured.err


def test_dry_run_does_not_execute(
    tmp_path: Path, capsys: pytest.CaptureFixture[str]
) -> None:
    cfg = tmp_path / "runbook.json"
    log = tmp_path / "log.txt"
    _write_json_config(cfg, _recipes(log))

    code = run_cli(["--config", str(cfg), "--dry-run"])
    captured = capsys.readouterr()

    assert code == 0
    assert not log.exists()
    assert _log(log, "fmt") in captured.err
    assert _log(log, "lint") in captured.err


def test_invalid_config_path_returns_2(
    tmp_path: Path, capsys: pytest.CaptureFixture[str]
) -> None:
    missing = tmp_path / "missing.json"

    code = run_cli(["--config", str(missing), "--list"])
    captured = capsys.readouterr()

    assert code == 2
    assert captured.err != ""


def test_unknown_task_returns_non_zero(
    tmp_path: Path, capsys: pytest.CaptureFixture[str]
) -> None:
    cfg = tmp_path / "runbook.json"
    _write_json_config(cfg, {"a": {"command": _py("raise SystemExit(0)")}})

    code = run_cli(["--config", str(cfg), "deploy"])
    captured = capsys.readouterr()

    assert code == 1
    assert "Unknown task: deploy" in captured.err


def test_cycle_returns_non_zero(
    tmp_path: Path, capsys: pytest.CaptureFixture[str]
) -> None:
    cfg = tmp_path / "runbook.json"
    _write_json_config(
        cfg,
        {
            "A": {"deps": ["B"]},
            "B": {"deps": ["A"]},
        },
    )

    code = run_cli(["--config", str(cfg), "A"])
    captured = capsys.readouterr()

    assert code == 1
    assert "Cycle detected: A -> B -> A" in captured.err


def test_undecodable_config_returns_2(
    tmp_path: Path, capsys: pytest.CaptureFixture[str]
) -> None:
    cfg = tmp_path / "runbook.yml"
    cfg.write_bytes(b"tasks:\n  a:\n    command: echo \xff\xfe\n")

    code = run_cli(["--config", str(cfg), "--list"])
    captured = capsys.readouterr()

    assert code == 2
    assert "cannot read file" in captured.err
