"""Run status tracking: ``RunStatusStore`` and its snapshots."""

from inspectlens.core.status.store import (
    RunPhase,
    RunStatus,
    RunStatusStore,
    StatusThresholds,
    monotonic_ms,
    wall_clock_ms,
)

__all__ = [
    "RunPhase",
    "RunStatus",
    "RunStatusStore",
    "StatusThresholds",
    "monotonic_ms",
    "wall_clock_ms",
]
