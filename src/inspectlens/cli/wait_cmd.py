"""``inspectlens wait`` - Poll until the current run stops scanning.

Exit Codes:
    0 - Scanning stopped before the timeout.
    1 - The timeout elapsed while still scanning.
    2 - No project or invalid configuration.
    3 - Internal error.
"""

from __future__ import annotations

import sys

import click

from inspectlens.cli.context import FORMAT_OPTION, CliState, error_boundary
from inspectlens.cli.output import echo_json, print_wait_outcome


@click.command("wait")
@click.option("--timeout-ms", type=click.IntRange(min=0), default=None, help="Give up after this long.")
@click.option("--poll-ms", type=click.IntRange(min=0), default=None, help="Delay between status checks.")
@FORMAT_OPTION
@click.pass_obj
def wait_command(
    state: CliState,
    timeout_ms: int | None,
    poll_ms: int | None,
    output_format: str,
) -> None:
    """Wait for the current inspection run to finish."""
    with error_boundary(output_format):
        settings = state.settings()
        outcome = state.service().wait(
            timeout_ms=settings.wait_timeout_ms if timeout_ms is None else timeout_ms,
            poll_ms=settings.wait_poll_ms if poll_ms is None else poll_ms,
        )
        if output_format == "json":
            echo_json(outcome.to_dict())
        else:
            print_wait_outcome(outcome)
    sys.exit(1 if outcome.timed_out else 0)
