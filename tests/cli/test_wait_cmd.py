"""Tests for ``inspectlens wait``."""

from __future__ import annotations

from pathlib import Path

from tests.cli.helpers import json_output, write_snapshot


class TestWait:
    """Waiting in a fresh process, where nothing was triggered."""

    def test_nothing_running(self, invoke, project_dir: Path) -> None:
        result = invoke(project_dir, "wait", "--format", "json")
        assert result.exit_code == 0
        data = json_output(result)
        assert data["wait_completed"] is True
        assert data["completion_reason"] == "no_results"

    def test_results(self, invoke, cli_project: Path) -> None:
        data = json_output(invoke(cli_project, "wait", "--format", "json"))
        assert data["completion_reason"] == "results"
        assert data["status"]["has_inspection_results"] is True

    def test_indexing_times_out(self, invoke, project_dir: Path) -> None:
        write_snapshot(project_dir, indexing=True)
        result = invoke(project_dir, "wait", "--timeout-ms", "0", "--format", "json")
        assert result.exit_code == 1
        data = json_output(result)
        assert data["timed_out"] is True
        assert data["message"] == "Wait timed out - inspection still running"

    def test_polls_until_timeout(self, invoke, project_dir: Path) -> None:
        write_snapshot(project_dir, indexing=True)
        result = invoke(project_dir, "wait", "--timeout-ms", "120", "--poll-ms", "50", "--format", "json")
        assert result.exit_code == 1
        assert json_output(result)["waited_ms"] >= 120

    def test_text(self, invoke, cli_project: Path) -> None:
        result = invoke(cli_project, "wait")
        assert result.exit_code == 0
        assert "Inspection finished - results available" in result.output
