"""Filesystem-backed project index."""

from __future__ import annotations

from pathlib import Path

from inspectlens.host.base import ProjectIndex

DEFAULT_EXCLUDED_DIRS: frozenset[str] = frozenset({
    ".git",
    ".hg",
    ".svn",
    ".idea",
    "__pycache__",
    "node_modules",
    ".venv",
    "build",
    "dist",
    "out",
})


class StaticProjectIndex(ProjectIndex):
    """``ProjectIndex`` over a directory tree.

    The "active editor" is whatever file the caller names, typically from
    configuration or a CLI option. A named file that does not exist counts
    as no active file.

    Args:
        root: Project root directory.
        active: Active file, absolute or relative to ``root``.
        excluded_dirs: Directory names whose contents are not project content.
    """

    def __init__(
        self,
        root: Path,
        active: str | Path | None = None,
        excluded_dirs: frozenset[str] = DEFAULT_EXCLUDED_DIRS,
    ) -> None:
        self._root = Path(root).resolve()
        self._active = active
        self._excluded = excluded_dirs

    def active_file(self) -> Path | None:
        if self._active is None or not str(self._active).strip():
            return None
        path = Path(self._active).expanduser()
        if not path.is_absolute():
            path = self._root / path
        path = path.resolve()
        return path if path.is_file() else None

    def is_in_content(self, path: Path) -> bool:
        candidate = Path(path).resolve()
        if not candidate.is_file():
            return False
        try:
            relative = candidate.relative_to(self._root)
        except ValueError:
            return False
        return not any(part in self._excluded for part in relative.parts[:-1])
