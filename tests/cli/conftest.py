"""Shared fixtures for CLI tests.

Provides a Click runner, an ``invoke`` helper bound to ``--project-root``,
and a project directory carrying a result snapshot (see
``tests.cli.helpers.snapshot_for``).
"""

from __future__ import annotations

from pathlib import Path
from typing import Callable

import pytest
from click.testing import CliRunner, Result

from inspectlens.cli.main import cli
from tests.cli.helpers import write_snapshot


@pytest.fixture
def runner() -> CliRunner:
    """Create a Click CliRunner for invoking commands."""
    return CliRunner()


@pytest.fixture
def cli_project(project_dir: Path) -> Path:
    """The shared project with a result snapshot in the default location."""
    write_snapshot(project_dir)
    return project_dir


@pytest.fixture
def invoke(runner: CliRunner) -> Callable[..., Result]:
    """Invoke the CLI against a given project root."""

    def _invoke(root: Path, *args: str) -> Result:
        return runner.invoke(cli, ["--project-root", str(root), *args])

    return _invoke
