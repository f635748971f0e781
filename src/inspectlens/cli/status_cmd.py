"""``inspectlens status`` - Show whether a run is in progress or finished."""

from __future__ import annotations

import sys

import click

from inspectlens.cli.context import FORMAT_OPTION, CliState, error_boundary
from inspectlens.cli.output import echo_json, print_status


@click.command("status")
@FORMAT_OPTION
@click.pass_obj
def status_command(state: CliState, output_format: str) -> None:
    """Show inspection run status and what to do next."""
    with error_boundary(output_format):
        report = state.service().get_status()
        if output_format == "json":
            data = report.to_dict()
            data["message"] = report.guidance
            echo_json(data)
        else:
            print_status(report)
    sys.exit(0)
