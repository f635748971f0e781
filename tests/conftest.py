"""Shared fixtures for inspectlens tests.

Provides fake collaborators (engine, VCS, project index), a controllable
millisecond clock, and a small on-disk project to resolve scopes against.
"""

from __future__ import annotations

from pathlib import Path

import pytest

from inspectlens.core.scope.models import ChangeSet, ProjectContext, ResolvedScope
from inspectlens.core.tree.nodes import (
    Document,
    Element,
    GroupKind,
    GroupNode,
    LeafNode,
    Panel,
    ProblemDescriptor,
    ResultTree,
    RuleInfo,
    SourceFile,
)
from inspectlens.exceptions import AnalysisEngineError, VcsError
from inspectlens.host.base import AnalysisEngine, ProjectIndex, VcsStatus


class FakeClock:
    """Millisecond clock that only moves when told to."""

    def __init__(self, start: int = 1_000_000) -> None:
        self.now = start

    def __call__(self) -> int:
        return self.now

    def advance(self, ms: int) -> None:
        self.now += ms

    def sleep(self, seconds: float) -> None:
        self.advance(int(seconds * 1000))


class FakeEngine(AnalysisEngine):
    """Engine whose result tree and indexing flag are set by the test."""

    def __init__(self, tree: ResultTree | None = None) -> None:
        self.tree = tree or ResultTree.empty()
        self.indexing = False
        self.refuse = False
        self.triggers: list[tuple[ResolvedScope, str | None]] = []

    def trigger(self, scope: ResolvedScope, profile: str | None = None) -> None:
        if self.refuse:
            raise AnalysisEngineError("engine is busy")
        self.triggers.append((scope, profile))

    def result_tree(self) -> ResultTree:
        return self.tree

    def is_indexing(self) -> bool:
        return self.indexing


class FakeVcs(VcsStatus):
    """VCS reporting fixed changes, or failing on demand."""

    def __init__(
        self,
        staged: tuple[str, ...] = (),
        unstaged: tuple[str, ...] = (),
        unversioned: tuple[str, ...] = (),
        broken: bool = False,
    ) -> None:
        self.staged = staged
        self.unstaged = unstaged
        self.unversioned = unversioned
        self.broken = broken
        self.calls = 0

    def changed_files(self, root: Path) -> ChangeSet:
        self.calls += 1
        if self.broken:
            raise VcsError("not a git repository")
        return ChangeSet(staged=self.staged, unstaged=self.unstaged)

    def unversioned_files(self, root: Path) -> tuple[str, ...]:
        self.calls += 1
        if self.broken:
            raise VcsError("not a git repository")
        return self.unversioned


class FakeIndex(ProjectIndex):
    """Index with a settable active file; content means "is a file"."""

    def __init__(self, active: Path | None = None, excluded: tuple[Path, ...] = ()) -> None:
        self.active = active
        self.excluded = excluded

    def active_file(self) -> Path | None:
        return self.active

    def is_in_content(self, path: Path) -> bool:
        resolved = Path(path).resolve()
        if not resolved.is_file():
            return False
        return not any(resolved.is_relative_to(e.resolve()) for e in self.excluded)


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def fake_engine() -> FakeEngine:
    return FakeEngine()


@pytest.fixture
def fake_vcs() -> FakeVcs:
    return FakeVcs()


@pytest.fixture
def fake_index() -> FakeIndex:
    return FakeIndex()


@pytest.fixture
def project_dir(tmp_path: Path) -> Path:
    """A small project tree.

    Layout::

        project/
            src/app.py
            src/util.py
            src/pkg/deep.py
            docs/readme.md
            .git/config
    """
    root = tmp_path / "project"
    (root / "src" / "pkg").mkdir(parents=True)
    (root / "docs").mkdir()
    (root / ".git").mkdir()
    (root / "src" / "app.py").write_text("import os\n\nprint(undefined_name)\n")
    (root / "src" / "util.py").write_text("def helper():\n    return 1\n")
    (root / "src" / "pkg" / "deep.py").write_text("X = 1\n")
    (root / "docs" / "readme.md").write_text("# Readme\n\nThis is teh docs.\n")
    (root / ".git" / "config").write_text("[core]\n")
    return root.resolve()


@pytest.fixture
def project(project_dir: Path) -> ProjectContext:
    return ProjectContext(name="demo", root=project_dir)


@pytest.fixture
def sample_tree(project_dir: Path) -> ResultTree:
    """An inspection panel with three rule groups and four problems.

    - Python / PyUnresolvedReferences: one error in src/app.py line 3.
    - Python / PyUnusedImport: one weak warning in src/app.py line 1.
    - Proofreading / SpellCheckingInspection: one typo in docs/readme.md.
    - Proofreading / GrazieInspection: one grammar finding in docs/readme.md.
    """
    app = project_dir / "src" / "app.py"
    readme = project_dir / "docs" / "readme.md"
    app_file = SourceFile(str(app), Document(app.read_text()))
    readme_file = SourceFile(str(readme), Document(readme.read_text()))

    def leaf(description: str, highlight: str, source: SourceFile, offset: int) -> LeafNode:
        return LeafNode(ProblemDescriptor(description, highlight, Element(source, offset)))

    python = GroupNode(
        "Python",
        kind=GroupKind.FOLDER,
        children=(
            GroupNode(
                "Unresolved references",
                rule=RuleInfo("PyUnresolvedReferences", "Unresolved references", "Python"),
                children=(leaf("Unresolved reference 'undefined_name'", "LIKE_UNKNOWN_SYMBOL", app_file, 17),),
            ),
            GroupNode(
                "Unused import",
                rule=RuleInfo("PyUnusedImport", "Unused import", "Python"),
                children=(leaf("Unused import statement 'import os'", "LIKE_UNUSED_SYMBOL", app_file, 0),),
            ),
        ),
    )
    proofreading = GroupNode(
        "Proofreading",
        kind=GroupKind.FOLDER,
        children=(
            GroupNode(
                "Typo",
                rule=RuleInfo("SpellCheckingInspection", "Typo", "Proofreading"),
                children=(leaf("Typo: In word 'teh'", "WEAK_WARNING", readme_file, 18),),
            ),
            GroupNode(
                "Grammar",
                rule=RuleInfo("GrazieInspection", "Grammar", "Proofreading"),
                children=(leaf("Possible agreement error", "WARNING", readme_file, 10),),
            ),
        ),
    )
    root = GroupNode("Inspection Results", kind=GroupKind.FOLDER, children=(python, proofreading))
    return ResultTree(panels=(Panel("Inspection Results", root),))
