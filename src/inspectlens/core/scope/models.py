"""Scope requests, resolved scopes, and the project context they resolve in."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from typing import Union

from inspectlens.exceptions import ScopeRequestError


class ChangedFilesMode(str, Enum):
    """Which version-control changes a ``ChangedFiles`` request keeps."""

    ALL = "all"
    STAGED = "staged"
    UNSTAGED = "unstaged"


# ---------------------------------------------------------------------------
# Requests
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class WholeProject:
    """Analyze every file in the project."""

    name = "whole_project"


@dataclass(frozen=True)
class CurrentFile:
    """Analyze the file open in the active editor."""

    name = "current_file"


@dataclass(frozen=True)
class Directory:
    """Analyze every project file beneath ``path``."""

    path: str
    name = "directory"


@dataclass(frozen=True)
class FileList:
    """Analyze an explicit list of files."""

    paths: tuple[str, ...]
    name = "files"


@dataclass(frozen=True)
class ChangedFiles:
    """Analyze the files version control reports as changed.

    Attributes:
        include_unversioned: Also analyze files VCS does not track yet.
        mode: Restrict to staged or unstaged changes.
        max_files: Cap on the number of files; ``None`` or ``<= 0`` means
            no cap.
    """

    include_unversioned: bool = True
    mode: ChangedFilesMode = ChangedFilesMode.ALL
    max_files: int | None = None
    name = "changed_files"


ScopeRequest = Union[WholeProject, CurrentFile, Directory, FileList, ChangedFiles]

SCOPE_NAMES: tuple[str, ...] = (
    WholeProject.name,
    CurrentFile.name,
    Directory.name,
    FileList.name,
    ChangedFiles.name,
)


def parse_changed_files_mode(raw: str | None) -> ChangedFilesMode:
    """Parse a changed-files mode name; blank means ``all``.

    Raises:
        ScopeRequestError: If the name is not a known mode.
    """
    if raw is None or not raw.strip():
        return ChangedFilesMode.ALL
    try:
        return ChangedFilesMode(raw.strip().lower())
    except ValueError as exc:
        raise ScopeRequestError(
            f"Unknown changed_files_mode {raw!r}; expected one of "
            + ", ".join(m.value for m in ChangedFilesMode)
        ) from exc


def build_scope_request(
    scope: str | None,
    directory: str | None = None,
    files: list[str] | tuple[str, ...] | None = None,
    include_unversioned: bool = True,
    changed_files_mode: str | None = None,
    max_files: int | None = None,
) -> ScopeRequest:
    """Build a scope request from flat trigger arguments.

    A ``directory`` scope without a directory, or a ``files`` scope without
    files, becomes a whole-project request.

    Raises:
        ScopeRequestError: If ``scope`` or ``changed_files_mode`` is unknown.
    """
    name = (scope or WholeProject.name).strip().lower() or WholeProject.name
    if name == WholeProject.name:
        return WholeProject()
    if name == CurrentFile.name:
        return CurrentFile()
    if name == Directory.name:
        return Directory(directory) if directory and directory.strip() else WholeProject()
    if name == FileList.name:
        cleaned = tuple(f for f in (files or ()) if f and f.strip())
        return FileList(cleaned) if cleaned else WholeProject()
    if name == ChangedFiles.name:
        return ChangedFiles(
            include_unversioned=include_unversioned,
            mode=parse_changed_files_mode(changed_files_mode),
            max_files=max_files,
        )
    raise ScopeRequestError(
        f"Unknown scope {scope!r}; expected one of " + ", ".join(SCOPE_NAMES)
    )


# ---------------------------------------------------------------------------
# Resolution results and collaborator data
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class ResolvedScope:
    """Concrete target of an analysis run.

    ``files`` is ``None`` for the whole project, otherwise a non-empty,
    ordered tuple of absolute paths.
    """

    files: tuple[Path, ...] | None = None

    @classmethod
    def whole_project(cls) -> ResolvedScope:
        return cls(files=None)

    @property
    def is_whole_project(self) -> bool:
        return self.files is None

    def as_strings(self) -> list[str] | None:
        return None if self.files is None else [str(f) for f in self.files]


@dataclass(frozen=True)
class ProjectContext:
    """The project a request resolves against."""

    name: str
    root: Path


@dataclass(frozen=True)
class ChangeSet:
    """Absolute paths version control reports as staged or unstaged."""

    staged: tuple[str, ...] = ()
    unstaged: tuple[str, ...] = ()
