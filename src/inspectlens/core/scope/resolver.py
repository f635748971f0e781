"""Scope resolver: scope request in, concrete target files out.

Resolution never fails. Whenever a request cannot be honoured (a missing
directory, a file list that names nothing on disk, no active editor, a VCS
error, no changes) the resolver falls back to the whole project and logs
why.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import TYPE_CHECKING, Iterable

from inspectlens.core.scope.models import (
    ChangedFiles,
    ChangedFilesMode,
    CurrentFile,
    Directory,
    FileList,
    ProjectContext,
    ResolvedScope,
    ScopeRequest,
    WholeProject,
)
from inspectlens.exceptions import VcsError

if TYPE_CHECKING:
    from inspectlens.host.base import ProjectIndex, VcsStatus

logger = logging.getLogger(__name__)


def _absolute(raw: str, root: Path) -> Path:
    path = Path(raw).expanduser()
    if not path.is_absolute():
        path = root / path
    return Path(path.resolve())


def _relative_key(path: Path, root: Path) -> str:
    """Project-relative, forward-slash form used to compare VCS paths."""
    try:
        return path.relative_to(root).as_posix()
    except ValueError:
        return path.as_posix()


def _dedupe(paths: Iterable[Path]) -> list[Path]:
    seen: set[Path] = set()
    ordered: list[Path] = []
    for path in paths:
        if path not in seen:
            seen.add(path)
            ordered.append(path)
    return ordered


class ScopeResolver:
    """Resolves scope requests against a project.

    Args:
        vcs: Version-control status collaborator.
        index: Active-editor and project-content collaborator.
    """

    def __init__(self, vcs: VcsStatus, index: ProjectIndex) -> None:
        self._vcs = vcs
        self._index = index

    def resolve(self, request: ScopeRequest, project: ProjectContext) -> ResolvedScope:
        """Resolve ``request`` to a target-file set; see the module docstring."""
        root = Path(project.root).resolve()
        if isinstance(request, WholeProject):
            return ResolvedScope.whole_project()
        if isinstance(request, CurrentFile):
            return self._current_file()
        if isinstance(request, Directory):
            return self._directory(request, root)
        if isinstance(request, FileList):
            return self._file_list(request, root)
        if isinstance(request, ChangedFiles):
            return self._changed_files(request, root)
        logger.warning("Unrecognized scope request %r; using whole project", request)
        return ResolvedScope.whole_project()

    # -- per-kind resolution --------------------------------------------------

    def _current_file(self) -> ResolvedScope:
        active = self._index.active_file()
        if active is None:
            logger.info("No active editor file; analyzing whole project")
            return ResolvedScope.whole_project()
        if not self._index.is_in_content(active):
            logger.info("Active file %s is not project content; analyzing whole project", active)
            return ResolvedScope.whole_project()
        return ResolvedScope(files=(Path(active).resolve(),))

    def _directory(self, request: Directory, root: Path) -> ResolvedScope:
        directory = _absolute(request.path, root)
        if not directory.is_dir():
            logger.info("Directory %s does not exist; analyzing whole project", directory)
            return ResolvedScope.whole_project()
        files = [
            path
            for path in sorted(directory.rglob("*"))
            if path.is_file() and self._index.is_in_content(path)
        ]
        if not files:
            logger.info("Directory %s holds no project files; analyzing whole project", directory)
            return ResolvedScope.whole_project()
        return ResolvedScope(files=tuple(files))

    def _file_list(self, request: FileList, root: Path) -> ResolvedScope:
        candidates = [_absolute(raw, root) for raw in request.paths]
        existing = _dedupe(path for path in candidates if path.is_file())
        skipped = len(candidates) - len(existing)
        if skipped:
            logger.info("Ignoring %d requested file(s) that do not exist", skipped)
        if not existing:
            logger.info("None of the requested files exist; analyzing whole project")
            return ResolvedScope.whole_project()
        return ResolvedScope(files=tuple(existing))

    def _changed_files(self, request: ChangedFiles, root: Path) -> ResolvedScope:
        try:
            changes = self._vcs.changed_files(root)
            unversioned = self._vcs.unversioned_files(root) if request.include_unversioned else ()
        except VcsError:
            logger.warning("Cannot read VCS changes; analyzing whole project", exc_info=True)
            return ResolvedScope.whole_project()

        staged = [_absolute(p, root) for p in changes.staged]
        unstaged = [_absolute(p, root) for p in changes.unstaged]
        untracked = [_absolute(p, root) for p in unversioned]
        union = _dedupe(staged + unstaged + untracked)

        if request.mode is not ChangedFilesMode.ALL:
            wanted = staged if request.mode is ChangedFilesMode.STAGED else unstaged
            keys = {_relative_key(p, root) for p in wanted}
            union = [p for p in union if _relative_key(p, root) in keys]

        files = [p for p in union if p.is_file()]
        if request.max_files is not None and request.max_files > 0:
            files = files[: request.max_files]
        if not files:
            logger.info("No changed files to analyze; analyzing whole project")
            return ResolvedScope.whole_project()
        return ResolvedScope(files=tuple(files))
