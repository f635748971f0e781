"""Run status tracking for asynchronous analysis runs.

The host engine gives no completion signal, so run status is inferred from
the time since the last trigger and from whether results are present:

- A run is *likely still running* while it is in progress and younger than
  the liveness window.
- Completion is observed once results exist and the settle delay has
  passed (so that a stale, empty first read is not mistaken for a clean
  run), or once the liveness window has passed regardless of results.
- A run is *clean* only with positive recent evidence: triggered within the
  staleness window, not scanning, and no results.

Given a ``state_path``, the store reads its state from that JSON file on
creation and writes it back on every change, so separate processes (one
CLI call triggering, a later one asking for status) share one run. The
persisted timestamp only means something across processes with a
wall clock such as ``wall_clock_ms``.
"""

from __future__ import annotations

import json
import logging
import threading
import time
from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from typing import Any, Callable

logger = logging.getLogger(__name__)


def monotonic_ms() -> int:
    return int(time.monotonic() * 1000)


def wall_clock_ms() -> int:
    """Milliseconds since the epoch."""
    return int(time.time() * 1000)


@dataclass(frozen=True)
class StatusThresholds:
    """Heuristic classification windows, in milliseconds."""

    liveness_ms: int = 30_000
    settle_ms: int = 5_000
    staleness_ms: int = 60_000


class RunPhase(str, Enum):
    """Coarse run state derived from a status snapshot."""

    IDLE = "idle"
    SCANNING = "scanning"
    RESULTS_AVAILABLE = "results_available"
    CLEAN = "clean"
    STALE = "stale"


@dataclass(frozen=True)
class RunStatus:
    """Consistent point-in-time view of the run status.

    Attributes:
        is_scanning: Indexing, or a run is likely still in progress.
        has_results: The extractor currently yields at least one record.
        clean_inspection: A recent run completed with no results.
        time_since_trigger_ms: ``None`` when nothing was triggered yet.
        in_progress: The raw in-progress flag, before liveness is applied.
        indexing: The host reports it is indexing.
        phase: Coarse state derived from the fields above.
    """

    is_scanning: bool
    has_results: bool
    clean_inspection: bool
    time_since_trigger_ms: int | None
    in_progress: bool
    indexing: bool
    phase: RunPhase


class RunStatusStore:
    """Run state, guarded by a lock and optionally persisted to a file.

    Args:
        clock: Millisecond clock; defaults to a monotonic clock.
        thresholds: Classification windows.
        state_path: JSON file the state is loaded from and saved to;
            ``None`` keeps the state in memory only.
    """

    def __init__(
        self,
        clock: Callable[[], int] | None = None,
        thresholds: StatusThresholds | None = None,
        state_path: Path | None = None,
    ) -> None:
        self._clock = clock or monotonic_ms
        self._thresholds = thresholds or StatusThresholds()
        self._state_path = Path(state_path) if state_path is not None else None
        self._lock = threading.Lock()
        self._last_trigger_ms: int | None = None
        self._in_progress = False
        self._completed = False
        if self._state_path is not None:
            self._load(self._state_path)

    @property
    def thresholds(self) -> StatusThresholds:
        return self._thresholds

    @property
    def state_path(self) -> Path | None:
        return self._state_path

    # -- Persistence ------------------------------------------------------------

    def _load(self, path: Path) -> None:
        if not path.exists():
            return
        try:
            data = json.loads(path.read_text(encoding="utf-8"))
        except (OSError, ValueError):
            logger.warning("Ignoring unreadable run state %s", path, exc_info=True)
            return
        if not isinstance(data, dict):
            logger.warning("Ignoring malformed run state %s", path)
            return
        last = data.get("last_trigger_ms")
        if isinstance(last, int) and not isinstance(last, bool):
            self._last_trigger_ms = last
        self._in_progress = data.get("in_progress") is True
        self._completed = data.get("completed") is True

    def _state(self) -> dict[str, Any]:
        return {
            "last_trigger_ms": self._last_trigger_ms,
            "in_progress": self._in_progress,
            "completed": self._completed,
        }

    def _save(self) -> None:
        """Write the state file; called with the lock held."""
        if self._state_path is None:
            return
        try:
            self._state_path.parent.mkdir(parents=True, exist_ok=True)
            self._state_path.write_text(json.dumps(self._state(), indent=2), encoding="utf-8")
        except OSError:
            logger.warning("Cannot save run state to %s", self._state_path, exc_info=True)

    # -- Transitions ------------------------------------------------------------

    def trigger(self) -> None:
        """Record that a run was just started."""
        with self._lock:
            self._last_trigger_ms = self._clock()
            self._in_progress = True
            self._save()

    def abort(self) -> None:
        """Forget the in-flight run after the engine refused it."""
        with self._lock:
            self._in_progress = False
            self._save()

    def observe_completion(self, has_results: bool) -> bool:
        """Clear the in-progress flag if the run can be considered finished.

        Args:
            has_results: Whether extraction currently yields any record.

        Returns:
            Whether a run has completed since the state was first recorded.
        """
        with self._lock:
            if self._in_progress and self._last_trigger_ms is not None:
                elapsed = self._clock() - self._last_trigger_ms
                settled = has_results and elapsed > self._thresholds.settle_ms
                if settled or elapsed >= self._thresholds.liveness_ms:
                    self._in_progress = False
                    self._completed = True
                    self._save()
            return self._completed

    @property
    def has_completed_run(self) -> bool:
        with self._lock:
            return self._completed

    def snapshot(self, has_results: bool, indexing: bool = False) -> RunStatus:
        """Classify the current state.

        Args:
            has_results: Whether extraction currently yields any record.
            indexing: Whether the host reports that it is indexing.
        """
        with self._lock:
            last = self._last_trigger_ms
            in_progress = self._in_progress
            now = self._clock()

        elapsed = None if last is None else max(0, now - last)
        likely_running = (
            in_progress and elapsed is not None and elapsed < self._thresholds.liveness_ms
        )
        is_scanning = indexing or likely_running
        recent = elapsed is not None and elapsed < self._thresholds.staleness_ms
        clean = recent and not likely_running and not indexing and not has_results

        if is_scanning:
            phase = RunPhase.SCANNING
        elif has_results:
            phase = RunPhase.RESULTS_AVAILABLE
        elif clean:
            phase = RunPhase.CLEAN
        elif elapsed is not None:
            phase = RunPhase.STALE
        else:
            phase = RunPhase.IDLE

        return RunStatus(
            is_scanning=is_scanning,
            has_results=has_results,
            clean_inspection=clean,
            time_since_trigger_ms=elapsed,
            in_progress=in_progress,
            indexing=indexing,
            phase=phase,
        )
