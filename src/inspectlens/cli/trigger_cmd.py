"""``inspectlens trigger`` - Request an inspection run.

The request is resolved to concrete files (or the whole project) and
handed to the host engine; the command returns at once unless ``--wait``
is given.

Exit Codes:
    0 - Run requested (and, with --wait, finished).
    1 - With --wait, the timeout elapsed first.
    2 - No project, bad arguments, or the engine refused the run.
    3 - Internal error.
"""

from __future__ import annotations

import sys

import click

from inspectlens.cli.context import FORMAT_OPTION, CliState, error_boundary
from inspectlens.cli.output import echo_json, print_acknowledgement, print_wait_outcome
from inspectlens.core.scope.models import SCOPE_NAMES, ChangedFilesMode


@click.command("trigger")
@click.option(
    "--scope",
    type=click.Choice(list(SCOPE_NAMES), case_sensitive=False),
    default="whole_project",
    show_default=True,
)
@click.option("--directory", default=None, help="Directory for --scope directory.")
@click.option(
    "--file",
    "files",
    multiple=True,
    help="File for --scope files; repeat for several.",
)
@click.option(
    "--include-unversioned/--no-unversioned",
    default=True,
    show_default=True,
    help="Include untracked files for --scope changed_files.",
)
@click.option(
    "--changed-files-mode",
    type=click.Choice([m.value for m in ChangedFilesMode], case_sensitive=False),
    default=None,
    help="Restrict changed files to staged or unstaged changes.",
)
@click.option("--max-files", type=int, default=None, help="Cap on changed files.")
@click.option("--profile", default=None, help="Inspection profile name.")
@click.option("--current-file", default=None, help="File treated as open in the editor.")
@click.option("--wait", "wait_for_run", is_flag=True, help="Block until the run finishes.")
@click.option("--timeout-ms", type=click.IntRange(min=0), default=None)
@click.option("--poll-ms", type=click.IntRange(min=0), default=None)
@FORMAT_OPTION
@click.pass_obj
def trigger_command(
    state: CliState,
    scope: str,
    directory: str | None,
    files: tuple[str, ...],
    include_unversioned: bool,
    changed_files_mode: str | None,
    max_files: int | None,
    profile: str | None,
    current_file: str | None,
    wait_for_run: bool,
    timeout_ms: int | None,
    poll_ms: int | None,
    output_format: str,
) -> None:
    """Trigger an inspection run for the given scope."""
    outcome = None
    with error_boundary(output_format):
        service = state.service(current_file=current_file)
        ack = service.trigger(
            scope=scope,
            directory=directory,
            files=list(files),
            include_unversioned=include_unversioned,
            changed_files_mode=changed_files_mode,
            max_files=max_files,
            profile=profile,
        )
        if wait_for_run:
            settings = state.settings()
            outcome = service.wait(
                timeout_ms=settings.wait_timeout_ms if timeout_ms is None else timeout_ms,
                poll_ms=settings.wait_poll_ms if poll_ms is None else poll_ms,
            )

        if output_format == "json":
            data = ack.to_dict()
            if outcome is not None:
                data["wait"] = outcome.to_dict()
            echo_json(data)
        else:
            print_acknowledgement(ack)
            if outcome is not None:
                print_wait_outcome(outcome)
    sys.exit(1 if outcome is not None and outcome.timed_out else 0)
