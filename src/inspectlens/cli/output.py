"""Rich output formatting helpers for the InspectLens CLI.

Provides severity-colored terminal output for problem pages, run status,
trigger acknowledgements and wait outcomes, plus the shared error emitter.

Values taken from results (paths, descriptions, rule names) are always
passed as ``Text`` so that brackets in them are never read as markup.

Severity Color Mapping:
    error = bold red, warning = yellow, weak_warning = cyan, info = dim,
    grammar = magenta, typo = blue
"""

from __future__ import annotations

import json
import sys
from typing import Any, NoReturn

import click
from rich.console import Console
from rich.panel import Panel
from rich.table import Table
from rich.text import Text

from inspectlens.core.problems.models import Severity
from inspectlens.service import (
    Acknowledgement,
    NoResults,
    ProblemsResponse,
    StatusReport,
    WaitOutcome,
)

_SEVERITY_STYLES: dict[Severity, str] = {
    Severity.ERROR: "bold red",
    Severity.WARNING: "yellow",
    Severity.WEAK_WARNING: "cyan",
    Severity.INFO: "dim",
    Severity.GRAMMAR: "magenta",
    Severity.TYPO: "blue",
}

console = Console()


def severity_style(severity: Severity) -> str:
    """Return the Rich style string for a given severity."""
    return _SEVERITY_STYLES.get(severity, "white")


def echo_json(data: dict[str, Any]) -> None:
    click.echo(json.dumps(data, indent=2))


def fail(output_format: str, message: str, exit_code: int) -> NoReturn:
    """Report an error in the requested format and exit."""
    if output_format == "json":
        echo_json({"error": message})
    else:
        click.echo(f"Error: {message}")
    sys.exit(exit_code)


def print_problems(result: ProblemsResponse | NoResults) -> None:
    """Print a problems page as a table followed by pagination guidance."""
    if isinstance(result, NoResults):
        console.print(f"[yellow]{result.message}[/yellow]")
        return

    page = result.page
    if page.total == 0:
        console.print("[green]No problems found matching filters.[/green]")
        return

    table = Table(
        title=Text(f"Inspection Problems: {result.project}"),
        show_header=True,
        header_style="bold",
    )
    table.add_column("Severity", justify="center")
    table.add_column("Location", style="dim")
    table.add_column("Type")
    table.add_column("Description")
    for problem in page.problems:
        table.add_row(
            Text(problem.severity.value, style=severity_style(problem.severity)),
            Text(f"{problem.file_path}:{problem.line}:{problem.column}"),
            Text(problem.inspection_type),
            Text(problem.description),
        )
    console.print(table)

    summary = f"Showing [bold]{page.shown}[/bold] of [bold]{page.total}[/bold] problems"
    if page.has_more:
        summary += f" | more available with --offset {page.next_offset}"
    console.print(summary)


def print_status(report: StatusReport) -> None:
    """Print the run status and what to do next."""
    table = Table(show_header=False, box=None)
    table.add_column("Field", style="bold")
    table.add_column("Value")
    for key, value in report.to_dict().items():
        table.add_row(key, Text("-" if value is None else str(value)))
    console.print(Panel(table, title=Text(f"Inspection Status: {report.project_name}")))
    console.print(Text(report.guidance))


def print_acknowledgement(ack: Acknowledgement) -> None:
    """Print a trigger acknowledgement."""
    if ack.resolved_files is None:
        target = "whole project"
    else:
        target = f"{len(ack.resolved_files)} file(s)"
    header = Text.assemble(
        ("Scope: ", "bold"), (ack.scope, ""),
        ("  Target: ", "bold"), (target, ""),
    )
    console.print(Panel(header, title="Inspection Triggered"))
    if ack.profile:
        console.print(Text.assemble("  Profile: ", (ack.profile, "bold")))
    console.print(Text(ack.message))


def print_wait_outcome(outcome: WaitOutcome) -> None:
    """Print the result of waiting for a run."""
    style = "yellow" if outcome.timed_out else "green"
    console.print(Text.assemble((outcome.message, style), f" (waited {outcome.waited_ms} ms)"))
