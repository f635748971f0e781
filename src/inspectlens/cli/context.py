"""Per-invocation CLI state and the error boundary shared by all commands."""

from __future__ import annotations

import logging
from collections.abc import Iterator
from contextlib import contextmanager
from dataclasses import dataclass, field
from pathlib import Path

import click

from inspectlens.cli.output import fail
from inspectlens.config import InspectLensSettings, load_settings
from inspectlens.exceptions import (
    AnalysisEngineError,
    ConfigError,
    NoProjectError,
    ScopeRequestError,
    SnapshotError,
)
from inspectlens.service import InspectionService, build_service

logger = logging.getLogger(__name__)

EXIT_USAGE = 2
EXIT_INTERNAL = 3

FORMAT_OPTION = click.option(
    "--format",
    "output_format",
    type=click.Choice(["text", "json"]),
    default="text",
    show_default=True,
    help="Output format.",
)


@dataclass
class CliState:
    """Options given to the ``inspectlens`` group."""

    project_root: Path
    config_path: Path | None = None
    _settings: InspectLensSettings | None = field(default=None, repr=False)

    def settings(self) -> InspectLensSettings:
        """Load settings once per invocation.

        Raises:
            NoProjectError: If the project root is not a directory.
            ConfigError: If the configuration is invalid.
        """
        if self._settings is None:
            self._settings = load_settings(self.project_root, self.config_path)
        return self._settings

    def service(self, current_file: str | None = None) -> InspectionService:
        """Build a service for this invocation."""
        settings = self.settings()
        if current_file:
            settings = settings.with_overrides(current_file=current_file)
        return build_service(settings)


@contextmanager
def error_boundary(output_format: str) -> Iterator[None]:
    """Turn library errors into an error message and exit code.

    No project is reported as ``No project found`` and other known errors
    with their own message, both with exit code 2. Anything unexpected is
    logged with its traceback and reported as ``Internal error`` with exit
    code 3.
    """
    try:
        yield
    except NoProjectError:
        fail(output_format, "No project found", EXIT_USAGE)
    except (ConfigError, ScopeRequestError, SnapshotError, AnalysisEngineError) as exc:
        fail(output_format, str(exc), EXIT_USAGE)
    except Exception:
        logger.exception("Unexpected failure")
        fail(output_format, "Internal error", EXIT_INTERNAL)
