"""InspectLens CLI - Query and track static-analysis inspection results.

Entry point for the ``inspectlens`` command-line tool. Registers all
subcommands under a single Click group.

Commands:
    problems - List problems from the latest results, filtered and paged.
    trigger  - Request an inspection run for a scope.
    status   - Show whether a run is in progress, finished, or clean.
    wait     - Poll until the current run stops scanning.

Usage::

    inspectlens trigger --scope changed_files --changed-files-mode staged
    inspectlens trigger --scope files --file src/app.py --wait
    inspectlens status
    inspectlens problems --severity error --file-pattern "*.py"
    inspectlens problems --limit 50 --offset 50 --format json
"""

from __future__ import annotations

import logging
import sys
from pathlib import Path

import click

from inspectlens import __version__
from inspectlens.cli.context import CliState
from inspectlens.cli.problems_cmd import problems_command
from inspectlens.cli.status_cmd import status_command
from inspectlens.cli.trigger_cmd import trigger_command
from inspectlens.cli.wait_cmd import wait_command


def _configure_logging(verbose: int) -> None:
    if verbose <= 0:
        return
    logging.basicConfig(
        level=logging.DEBUG if verbose > 1 else logging.INFO,
        format="%(levelname)s %(name)s: %(message)s",
        stream=sys.stderr,
    )


@click.group()
@click.version_option(version=__version__)
@click.option(
    "--project-root",
    type=click.Path(file_okay=False, path_type=Path),
    default=".",
    show_default=True,
    envvar="INSPECTLENS_PROJECT_ROOT",
    help="Project root directory.",
)
@click.option(
    "--config",
    "config_path",
    type=click.Path(dir_okay=False, path_type=Path),
    default=None,
    help="Config file (default: .inspectlens.yaml in the project root).",
)
@click.option("-v", "--verbose", count=True, help="Log progress to stderr; repeat for debug.")
@click.pass_context
def cli(ctx: click.Context, project_root: Path, config_path: Path | None, verbose: int) -> None:
    """InspectLens: Query and track static-analysis inspection results.

    Trigger inspection runs on a scope of files, wait for them to finish,
    and page through the problems they found filtered by severity, rule
    and file pattern.
    """
    _configure_logging(verbose)
    ctx.obj = CliState(project_root=project_root, config_path=config_path)


# Register all subcommands
cli.add_command(problems_command)
cli.add_command(trigger_command)
cli.add_command(status_command)
cli.add_command(wait_command)
