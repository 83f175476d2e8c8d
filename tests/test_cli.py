"""Smoke tests for the terminal viewer."""

from pathlib import Path
import json
import sys

sys.path.insert(0, str(Path(__file__).resolve().parents[1]))

from typer.testing import CliRunner  # noqa: E402  (import after path tweak)

from src.cli import app  # noqa: E402

runner = CliRunner()


def _write_run(root: Path, name: str = "2024-12-04_115429", failed: bool = True) -> Path:
    run_dir = root / name
    run_dir.mkdir(parents=True)
    data = [
        {
            "command": {"runFlowCommand": {"flow": "sub.yaml", "commands": [{"launchAppCommand": {"appId": "x"}}]}},
            "metadata": {"status": "COMPLETED", "timestamp": 1000, "duration": 1},
        },
        {
            "command": {"launchAppCommand": {"appId": "x"}},
            "metadata": {"status": "FAILED" if failed else "COMPLETED", "timestamp": 2000, "duration": 2},
        },
    ]
    path = run_dir / "commands-(login.yaml).json"
    path.write_text(json.dumps(data), encoding="utf-8")
    return path


def test_show_renders_nested_tree(tmp_path) -> None:
    path = _write_run(tmp_path)

    result = runner.invoke(app, ["show", str(path)])

    assert result.exit_code == 0
    assert "Run Flow" in result.output
    assert "Launch App" in result.output
    assert "FAILED" in result.output


def test_show_json_outputs_reconciled_commands(tmp_path) -> None:
    path = _write_run(tmp_path)

    result = runner.invoke(app, ["show", str(path), "--json"])

    assert result.exit_code == 0
    commands = json.loads(result.output)
    assert len(commands) == 1
    nested = commands[0]["command"]["runFlowCommand"]["commands"]
    assert nested[0]["metadata"]["timestamp"] == 2000


def test_show_raw_keeps_flat_list(tmp_path) -> None:
    path = _write_run(tmp_path)

    result = runner.invoke(app, ["show", str(path), "--raw", "--json"])

    assert result.exit_code == 0
    assert len(json.loads(result.output)) == 2


def test_show_missing_file(tmp_path) -> None:
    result = runner.invoke(app, ["show", str(tmp_path / "missing.json")])

    assert result.exit_code == 1
    assert "not found" in result.output


def test_summarize_lists_runs(tmp_path) -> None:
    _write_run(tmp_path, "2024-12-01_100000", failed=False)
    _write_run(tmp_path, "2024-12-02_100000", failed=True)

    result = runner.invoke(app, ["summarize", str(tmp_path)])

    assert result.exit_code == 0
    assert "2024-12-01_100000" in result.output
    assert "Overall: FAILED" in result.output


def test_summarize_empty_directory(tmp_path) -> None:
    result = runner.invoke(app, ["summarize", str(tmp_path)])

    assert result.exit_code == 1
    assert "No commands files found" in result.output
