"""``inspectlens problems`` - List inspection problems with filters.

Exit Codes:
    0 - Problems listed (possibly none), or no results captured yet.
    2 - No project, invalid configuration, or unreadable snapshot.
    3 - Internal error.
"""

from __future__ import annotations

import sys

import click

from inspectlens.cli.context import FORMAT_OPTION, CliState, error_boundary
from inspectlens.cli.output import echo_json, print_problems
from inspectlens.core.problems.models import Severity

_SEVERITY_CHOICES = ["all"] + [s.value for s in Severity]


@click.command("problems")
@click.option(
    "--scope",
    default="whole_project",
    show_default=True,
    help="whole_project, current_file, or a path substring to keep.",
)
@click.option(
    "--severity",
    type=click.Choice(_SEVERITY_CHOICES, case_sensitive=False),
    default="all",
    show_default=True,
    help="Keep one severity; 'warning' also keeps grammar and typo.",
)
@click.option("--problem-type", default=None, help="Substring of inspection type or category.")
@click.option("--file-pattern", default=None, help="Regex, glob or substring matched on the path.")
@click.option("--limit", type=click.IntRange(min=1), default=None, help="Page size.")
@click.option("--offset", type=click.IntRange(min=0), default=0, show_default=True)
@click.option("--current-file", default=None, help="File treated as open in the editor.")
@FORMAT_OPTION
@click.pass_obj
def problems_command(
    state: CliState,
    scope: str,
    severity: str,
    problem_type: str | None,
    file_pattern: str | None,
    limit: int | None,
    offset: int,
    current_file: str | None,
    output_format: str,
) -> None:
    """List problems from the latest inspection results.

    Use --limit and --offset to page through large result sets.
    """
    with error_boundary(output_format):
        service = state.service(current_file=current_file)
        result = service.get_problems(
            scope=scope,
            severity=severity,
            problem_type=problem_type,
            file_pattern=file_pattern,
            limit=limit,
            offset=offset,
        )
        if output_format == "json":
            echo_json(result.to_dict())
        else:
            print_problems(result)
    sys.exit(0)
