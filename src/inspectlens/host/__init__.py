"""Host collaborators: abstract interfaces and file-based reference adapters.

Submodules
----------
- ``base``: ``AnalysisEngine``, ``VcsStatus`` and ``ProjectIndex`` ABCs.
- ``git_status``: ``GitVcsStatus`` over ``git status --porcelain``.
- ``project_index``: ``StaticProjectIndex`` over a directory tree.
- ``snapshot_engine``: ``SnapshotAnalysisEngine`` over a result snapshot
  file and a trigger spool directory.
"""

from inspectlens.host.base import AnalysisEngine, ProjectIndex, VcsStatus
from inspectlens.host.git_status import GitVcsStatus, PorcelainStatus, parse_porcelain
from inspectlens.host.project_index import DEFAULT_EXCLUDED_DIRS, StaticProjectIndex
from inspectlens.host.snapshot_engine import SnapshotAnalysisEngine, load_snapshot

__all__ = [
    "DEFAULT_EXCLUDED_DIRS",
    "AnalysisEngine",
    "GitVcsStatus",
    "PorcelainStatus",
    "ProjectIndex",
    "SnapshotAnalysisEngine",
    "StaticProjectIndex",
    "VcsStatus",
    "load_snapshot",
    "parse_porcelain",
]
