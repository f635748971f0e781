"""Analysis-scope requests and their resolution to target files.

Submodules
----------
- ``models``: Request variants, ``ResolvedScope``, ``ProjectContext``.
- ``resolver``: ``ScopeResolver``, which never fails and degrades to the
  whole project.

All public names are re-exported here::

    from inspectlens.core.scope import ScopeResolver, ChangedFiles
"""

from inspectlens.core.scope.models import (
    SCOPE_NAMES,
    ChangedFiles,
    ChangedFilesMode,
    ChangeSet,
    CurrentFile,
    Directory,
    FileList,
    ProjectContext,
    ResolvedScope,
    ScopeRequest,
    WholeProject,
    build_scope_request,
    parse_changed_files_mode,
)
from inspectlens.core.scope.resolver import ScopeResolver

__all__ = [
    "SCOPE_NAMES",
    "ChangeSet",
    "ChangedFiles",
    "ChangedFilesMode",
    "CurrentFile",
    "Directory",
    "FileList",
    "ProjectContext",
    "ResolvedScope",
    "ScopeRequest",
    "ScopeResolver",
    "WholeProject",
    "build_scope_request",
    "parse_changed_files_mode",
]
