"""Boundary operations: get problems, trigger a run, report status, wait.

``InspectionService`` wires the core together for one project. It owns one
``RunStatusStore``, so every operation on one service instance sees the
same run state; ``build_service`` backs that store with a state file so
separate invocations share it too.

Typical use::

    settings = load_settings(".")
    service = build_service(settings)
    service.trigger(scope="changed_files", changed_files_mode="staged")
    outcome = service.wait()
    page = service.get_problems(severity="error")
"""

from __future__ import annotations

import logging
import time
from dataclasses import dataclass, field
from typing import Any, Callable

from inspectlens.config import InspectLensSettings
from inspectlens.core.filtering.pipeline import (
    SCOPE_CURRENT_FILE,
    FilterSpec,
    ProblemPage,
    normalize_problems_scope,
    query,
)
from inspectlens.core.problems.models import ProblemRecord
from inspectlens.core.scope.models import (
    ChangedFiles,
    Directory,
    FileList,
    ProjectContext,
    build_scope_request,
)
from inspectlens.core.scope.resolver import ScopeResolver
from inspectlens.core.status.store import (
    RunPhase,
    RunStatus,
    RunStatusStore,
    monotonic_ms,
    wall_clock_ms,
)
from inspectlens.core.tree.extractor import TreeExtractor
from inspectlens.exceptions import AnalysisEngineError, NoProjectError
from inspectlens.host.base import AnalysisEngine, ProjectIndex, VcsStatus
from inspectlens.host.git_status import GitVcsStatus
from inspectlens.host.project_index import StaticProjectIndex
from inspectlens.host.snapshot_engine import SnapshotAnalysisEngine

logger = logging.getLogger(__name__)

NO_RESULTS_MESSAGE = (
    "No inspection results found. Either run an inspection first, or the last "
    "inspection found no problems (100% pass)."
)
TRIGGER_MESSAGE = "Inspection triggered. Wait 10-15 seconds then check status"
MIN_POLL_MS = 50


def _now_epoch_ms() -> int:
    return int(time.time() * 1000)


# ---------------------------------------------------------------------------
# Responses
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class NoResults:
    """Extraction found nothing and no completed run has been recorded."""

    message: str = NO_RESULTS_MESSAGE

    def to_dict(self) -> dict[str, Any]:
        return {"status": "no_results", "message": self.message}


@dataclass(frozen=True)
class ProblemsResponse:
    """A page of problems plus the context it was produced in."""

    project: str
    timestamp: int
    page: ProblemPage
    filters: FilterSpec

    @property
    def problems(self) -> tuple[ProblemRecord, ...]:
        return self.page.problems

    def to_dict(self) -> dict[str, Any]:
        return {
            "status": "results_available",
            "project": self.project,
            "timestamp": self.timestamp,
            "total_problems": self.page.total,
            "problems_shown": self.page.shown,
            "problems": [p.to_dict() for p in self.page.problems],
            "pagination": self.page.pagination_dict(),
            "filters": {
                "severity": self.filters.severity,
                "scope": self.filters.scope,
                "problem_type": self.filters.problem_type or "all",
                "file_pattern": self.filters.file_pattern or "all",
            },
        }


@dataclass(frozen=True)
class Acknowledgement:
    """Immediate answer to a trigger; the run itself proceeds asynchronously.

    Only the fields relevant to the requested scope are set; the rest stay
    ``None`` and are left out of ``to_dict``.
    """

    scope: str
    resolved_files: list[str] | None
    directory: str | None = None
    files_requested: int | None = None
    include_unversioned: bool | None = None
    changed_files_mode: str | None = None
    max_files: int | None = None
    profile: str | None = None
    message: str = TRIGGER_MESSAGE

    def to_dict(self) -> dict[str, Any]:
        out: dict[str, Any] = {"status": "triggered", "scope": self.scope}
        for key in (
            "directory",
            "files_requested",
            "include_unversioned",
            "changed_files_mode",
            "max_files",
            "profile",
        ):
            value = getattr(self, key)
            if value is not None:
                out[key] = value
        out["resolved_files"] = self.resolved_files
        out["message"] = self.message
        return out


def status_guidance(status: RunStatus) -> str:
    """One-line hint on what to do next, given a status snapshot."""
    if status.phase is RunPhase.SCANNING:
        return "Inspection still running - wait before getting problems"
    if status.phase is RunPhase.RESULTS_AVAILABLE:
        return "Inspection results available - get problems"
    if status.phase is RunPhase.CLEAN:
        return "Inspection complete - codebase is clean (no problems found)"
    return "No recent inspection - trigger inspection first"


@dataclass(frozen=True)
class StatusReport:
    """Run status for one project."""

    project_name: str
    status: RunStatus

    @property
    def is_scanning(self) -> bool:
        return self.status.is_scanning

    @property
    def has_results(self) -> bool:
        return self.status.has_results

    @property
    def clean_inspection(self) -> bool:
        return self.status.clean_inspection

    @property
    def guidance(self) -> str:
        return status_guidance(self.status)

    def to_dict(self) -> dict[str, Any]:
        s = self.status
        return {
            "project_name": self.project_name,
            "is_scanning": s.is_scanning,
            "has_inspection_results": s.has_results,
            "clean_inspection": s.clean_inspection,
            "inspection_in_progress": s.in_progress,
            "time_since_last_trigger_ms": s.time_since_trigger_ms,
            "indexing": s.indexing,
            "phase": s.phase.value,
        }


@dataclass(frozen=True)
class WaitOutcome:
    """Result of waiting for a run to finish.

    Attributes:
        wait_completed: The run stopped scanning before the timeout.
        timed_out: The timeout elapsed while still scanning.
        completion_reason: ``results``, ``clean``, ``no_results`` or
            ``timed_out``.
        waited_ms: Time spent waiting.
        status: Last status observed.
    """

    wait_completed: bool
    timed_out: bool
    completion_reason: str
    waited_ms: int
    status: StatusReport = field(compare=False)

    @property
    def message(self) -> str:
        if self.timed_out:
            return "Wait timed out - inspection still running"
        if self.completion_reason == "results":
            return "Inspection finished - results available"
        if self.completion_reason == "clean":
            return "Inspection finished - codebase is clean"
        return "Inspection finished but no results were captured"

    def to_dict(self) -> dict[str, Any]:
        return {
            "wait_completed": self.wait_completed,
            "timed_out": self.timed_out,
            "completion_reason": self.completion_reason,
            "waited_ms": self.waited_ms,
            "message": self.message,
            "status": self.status.to_dict(),
        }


# ---------------------------------------------------------------------------
# Service
# ---------------------------------------------------------------------------


class InspectionService:
    """The four boundary operations for one project.

    Args:
        project: The project context; ``None`` makes every operation raise
            ``NoProjectError``.
        engine: Host analysis engine.
        vcs: Version-control status provider.
        index: Active-editor and project-content provider.
        store: Run status store; a fresh one is created when omitted.
        extractor: Tree extractor; a default one is created when omitted.
        clock: Millisecond clock used for waiting and, when ``store`` is
            omitted, for run status.
        sleep: Sleep function used between ``wait`` polls, in seconds.
    """

    def __init__(
        self,
        project: ProjectContext | None,
        engine: AnalysisEngine,
        vcs: VcsStatus,
        index: ProjectIndex,
        store: RunStatusStore | None = None,
        extractor: TreeExtractor | None = None,
        clock: Callable[[], int] = monotonic_ms,
        sleep: Callable[[float], None] = time.sleep,
        default_limit: int = 100,
    ) -> None:
        self._project = project
        self._engine = engine
        self._index = index
        self._resolver = ScopeResolver(vcs, index)
        self._store = store or RunStatusStore(clock=clock)
        self._extractor = extractor or TreeExtractor()
        self._clock = clock
        self._sleep = sleep
        self._default_limit = default_limit

    @property
    def store(self) -> RunStatusStore:
        return self._store

    def _require_project(self) -> ProjectContext:
        if self._project is None:
            raise NoProjectError("No project found")
        return self._project

    def _records(self) -> list[ProblemRecord]:
        return self._extractor.extract_all(self._engine.result_tree())

    # -- GetProblems ----------------------------------------------------------

    def get_problems(
        self,
        scope: str = "whole_project",
        severity: str = "all",
        problem_type: str | None = None,
        file_pattern: str | None = None,
        limit: int | None = None,
        offset: int = 0,
    ) -> ProblemsResponse | NoResults:
        """Return one filtered page of the current problems.

        Raises:
            NoProjectError: If the service has no project.
            SnapshotError: If the engine's result snapshot is unreadable.
        """
        project = self._require_project()
        records = self._records()
        completed = self._store.observe_completion(bool(records))
        if not records and not completed:
            return NoResults()

        spec = FilterSpec(
            severity=(severity or "all").strip().lower(),
            scope=normalize_problems_scope(scope),
            problem_type=problem_type or None,
            file_pattern=file_pattern or None,
        )
        current_file = None
        if spec.scope == SCOPE_CURRENT_FILE:
            active = self._index.active_file()
            current_file = str(active) if active is not None else None
        page = query(
            records,
            spec,
            limit=self._default_limit if limit is None else limit,
            offset=offset,
            current_file=current_file,
        )
        return ProblemsResponse(
            project=project.name,
            timestamp=_now_epoch_ms(),
            page=page,
            filters=spec,
        )

    # -- Trigger --------------------------------------------------------------

    def trigger(
        self,
        scope: str = "whole_project",
        directory: str | None = None,
        files: list[str] | tuple[str, ...] | None = None,
        include_unversioned: bool = True,
        changed_files_mode: str | None = None,
        max_files: int | None = None,
        profile: str | None = None,
    ) -> Acknowledgement:
        """Resolve the scope, start a run, and acknowledge immediately.

        Raises:
            NoProjectError: If the service has no project.
            ScopeRequestError: If ``scope`` or ``changed_files_mode`` is
                unknown.
            AnalysisEngineError: If the engine refuses the run.
        """
        project = self._require_project()
        request = build_scope_request(
            scope,
            directory=directory,
            files=files,
            include_unversioned=include_unversioned,
            changed_files_mode=changed_files_mode,
            max_files=max_files,
        )
        resolved = self._resolver.resolve(request, project)

        self._store.trigger()
        try:
            self._engine.trigger(resolved, profile=profile or None)
        except AnalysisEngineError:
            self._store.abort()
            raise
        logger.info(
            "Triggered %s inspection (%s)",
            (scope or "whole_project"),
            "whole project" if resolved.is_whole_project else f"{len(resolved.files or ())} file(s)",
        )

        requested = (scope or "whole_project").strip().lower() or "whole_project"
        ack: dict[str, Any] = {}
        if requested == Directory.name:
            ack["directory"] = directory
        elif requested == FileList.name:
            ack["files_requested"] = len(files or ())
        elif requested == ChangedFiles.name and isinstance(request, ChangedFiles):
            ack["include_unversioned"] = request.include_unversioned
            ack["changed_files_mode"] = request.mode.value
            ack["max_files"] = request.max_files
        return Acknowledgement(
            scope=requested,
            resolved_files=resolved.as_strings(),
            profile=profile or None,
            **ack,
        )

    # -- GetStatus ------------------------------------------------------------

    def get_status(self) -> StatusReport:
        """Report the run status, observing completion on the way.

        Raises:
            NoProjectError: If the service has no project.
        """
        project = self._require_project()
        has_results = bool(self._records())
        self._store.observe_completion(has_results)
        snapshot = self._store.snapshot(has_results, indexing=self._engine.is_indexing())
        return StatusReport(project_name=project.name, status=snapshot)

    # -- Wait -----------------------------------------------------------------

    def wait(self, timeout_ms: int = 180_000, poll_ms: int = 1_000) -> WaitOutcome:
        """Poll the status until scanning stops or ``timeout_ms`` elapses.

        Raises:
            NoProjectError: If the service has no project.
        """
        poll_ms = max(MIN_POLL_MS, poll_ms)
        timeout_ms = max(0, timeout_ms)
        started = self._clock()
        while True:
            report = self.get_status()
            waited = self._clock() - started
            if not report.is_scanning:
                if report.has_results:
                    reason = "results"
                elif report.clean_inspection:
                    reason = "clean"
                else:
                    reason = "no_results"
                return WaitOutcome(True, False, reason, waited, report)
            if waited >= timeout_ms:
                return WaitOutcome(False, True, "timed_out", waited, report)
            self._sleep(min(poll_ms, timeout_ms - waited) / 1000)


def build_service(settings: InspectLensSettings) -> InspectionService:
    """Create a service backed by the file-based reference collaborators.

    The run status lives in ``settings.state_path`` on a wall clock, so a
    trigger issued by one invocation is seen by the next.
    """
    project = ProjectContext(name=settings.project_name, root=settings.project_root)
    store = RunStatusStore(
        clock=wall_clock_ms,
        thresholds=settings.thresholds,
        state_path=settings.state_path,
    )
    return InspectionService(
        project=project,
        engine=SnapshotAnalysisEngine(settings.snapshot_path, settings.spool_dir),
        vcs=GitVcsStatus(executable=settings.git_executable),
        index=StaticProjectIndex(settings.project_root, active=settings.current_file),
        store=store,
        clock=monotonic_ms,
        default_limit=settings.default_limit,
    )
