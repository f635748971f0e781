"""Version-control status from ``git status --porcelain``.

Porcelain v1 with ``-z`` gives one NUL-terminated entry per path, ``XY
path``, where ``X`` is the index (staged) state and ``Y`` the worktree
(unstaged) state. Renames and copies are followed by an extra entry holding
the original path. Paths are relative to the repository top level.
"""

from __future__ import annotations

import logging
import subprocess
from dataclasses import dataclass, field
from pathlib import Path

from inspectlens.core.scope.models import ChangeSet
from inspectlens.exceptions import VcsError
from inspectlens.host.base import VcsStatus

logger = logging.getLogger(__name__)

_UNCHANGED = " ?!"


@dataclass
class PorcelainStatus:
    """Paths parsed out of porcelain output, relative to the top level."""

    staged: list[str] = field(default_factory=list)
    unstaged: list[str] = field(default_factory=list)
    untracked: list[str] = field(default_factory=list)


def parse_porcelain(output: str) -> PorcelainStatus:
    """Parse ``git status --porcelain=v1 -z`` output.

    Raises:
        VcsError: If an entry is too short to carry a status and a path.
    """
    status = PorcelainStatus()
    entries = output.split("\0")
    index = 0
    while index < len(entries):
        entry = entries[index]
        index += 1
        if not entry:
            continue
        if len(entry) < 4 or entry[2] != " ":
            raise VcsError(f"Unparseable git status entry: {entry!r}")
        x, y, path = entry[0], entry[1], entry[3:]
        if x in "RC":
            index += 1  # skip the original path
        if x == "?" and y == "?":
            status.untracked.append(path)
            continue
        if x not in _UNCHANGED:
            status.staged.append(path)
        if y not in _UNCHANGED:
            status.unstaged.append(path)
    return status


class GitVcsStatus(VcsStatus):
    """``VcsStatus`` backed by the ``git`` command line.

    Args:
        executable: Name or path of the git binary.
        timeout: Seconds to wait for each git invocation.
    """

    def __init__(self, executable: str = "git", timeout: float = 30.0) -> None:
        self._executable = executable
        self._timeout = timeout

    def _run(self, root: Path, *args: str) -> str:
        command = [self._executable, "-C", str(root), *args]
        try:
            completed = subprocess.run(
                command,
                capture_output=True,
                check=False,
                timeout=self._timeout,
                encoding="utf-8",
                errors="surrogateescape",
            )
        except (OSError, subprocess.TimeoutExpired) as exc:
            raise VcsError(f"Cannot run {' '.join(command)}: {exc}") from exc
        if completed.returncode != 0:
            raise VcsError(
                f"{' '.join(command)} exited with {completed.returncode}: "
                f"{completed.stderr.strip()}"
            )
        return completed.stdout

    def _status(self, root: Path) -> tuple[Path, PorcelainStatus]:
        toplevel = Path(self._run(root, "rev-parse", "--show-toplevel").strip())
        output = self._run(root, "status", "--porcelain=v1", "-z", "--untracked-files=all")
        return toplevel, parse_porcelain(output)

    def changed_files(self, root: Path) -> ChangeSet:
        toplevel, status = self._status(root)
        logger.debug(
            "git reports %d staged and %d unstaged path(s)",
            len(status.staged),
            len(status.unstaged),
        )
        return ChangeSet(
            staged=tuple(str(toplevel / p) for p in status.staged),
            unstaged=tuple(str(toplevel / p) for p in status.unstaged),
        )

    def unversioned_files(self, root: Path) -> tuple[str, ...]:
        toplevel, status = self._status(root)
        return tuple(str(toplevel / p) for p in status.untracked)
