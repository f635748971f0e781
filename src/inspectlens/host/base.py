"""Abstract collaborators the core consumes from its host.

The core never talks to an IDE, a VCS, or a file index directly. It calls
the three abstract base classes below, which a host integration implements.
``inspectlens.host`` ships reference implementations that work from a plain
checkout: ``GitVcsStatus``, ``StaticProjectIndex`` and
``SnapshotAnalysisEngine``.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from pathlib import Path

from inspectlens.core.scope.models import ChangeSet, ResolvedScope
from inspectlens.core.tree.nodes import ResultTree


class AnalysisEngine(ABC):
    """The host's static-analysis engine."""

    @abstractmethod
    def trigger(self, scope: ResolvedScope, profile: str | None = None) -> None:
        """Start an analysis run asynchronously and return immediately.

        Raises:
            AnalysisEngineError: If the engine cannot accept the run.
        """

    @abstractmethod
    def result_tree(self) -> ResultTree:
        """Return the result tree the engine currently displays."""

    @abstractmethod
    def is_indexing(self) -> bool:
        """Whether the host is busy indexing the project."""


class VcsStatus(ABC):
    """The host's version-control status provider."""

    @abstractmethod
    def changed_files(self, root: Path) -> ChangeSet:
        """Return staged and unstaged changed files under ``root``.

        Raises:
            VcsError: If status cannot be determined.
        """

    @abstractmethod
    def unversioned_files(self, root: Path) -> tuple[str, ...]:
        """Return files under ``root`` that version control does not track.

        Raises:
            VcsError: If status cannot be determined.
        """


class ProjectIndex(ABC):
    """The host's active-editor and project-content provider."""

    @abstractmethod
    def active_file(self) -> Path | None:
        """Return the file open in the active editor, if any."""

    @abstractmethod
    def is_in_content(self, path: Path) -> bool:
        """Whether ``path`` is a source file belonging to the project."""
