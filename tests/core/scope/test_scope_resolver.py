"""Tests for ScopeResolver, including every whole-project fallback."""

from __future__ import annotations

from pathlib import Path

import pytest

from inspectlens.core.scope import (
    ChangedFiles,
    ChangedFilesMode,
    CurrentFile,
    Directory,
    FileList,
    ProjectContext,
    ResolvedScope,
    ScopeResolver,
    WholeProject,
)

WHOLE = ResolvedScope.whole_project()


@pytest.fixture
def resolver(fake_vcs, fake_index) -> ScopeResolver:
    return ScopeResolver(fake_vcs, fake_index)


class TestWholeProject:
    """WholeProject is the identity."""

    def test_identity_without_collaborator_calls(self, resolver, project, fake_vcs) -> None:
        assert resolver.resolve(WholeProject(), project) == WHOLE
        assert fake_vcs.calls == 0


class TestCurrentFile:
    """CurrentFile uses the active editor."""

    def test_active_file(self, resolver, project, fake_index, project_dir: Path) -> None:
        fake_index.active = project_dir / "src" / "app.py"
        assert resolver.resolve(CurrentFile(), project).files == (project_dir / "src" / "app.py",)

    def test_no_active_editor_falls_back(self, resolver, project) -> None:
        assert resolver.resolve(CurrentFile(), project) == WHOLE

    def test_non_content_file_falls_back(self, resolver, project, fake_index,
                                         project_dir: Path) -> None:
        fake_index.active = project_dir / "src" / "app.py"
        fake_index.excluded = (project_dir / "src",)
        assert resolver.resolve(CurrentFile(), project) == WHOLE


class TestDirectory:
    """Directory resolves to content files beneath it."""

    def test_relative_directory(self, resolver, project, project_dir: Path) -> None:
        resolved = resolver.resolve(Directory("src"), project)
        assert resolved.files == (
            project_dir / "src" / "app.py",
            project_dir / "src" / "pkg" / "deep.py",
            project_dir / "src" / "util.py",
        )

    def test_absolute_directory(self, resolver, project, project_dir: Path) -> None:
        resolved = resolver.resolve(Directory(str(project_dir / "docs")), project)
        assert resolved.files == (project_dir / "docs" / "readme.md",)

    def test_missing_directory_falls_back(self, resolver, project) -> None:
        assert resolver.resolve(Directory("/no/such/dir"), project) == WHOLE

    def test_file_is_not_a_directory(self, resolver, project) -> None:
        assert resolver.resolve(Directory("src/app.py"), project) == WHOLE

    def test_directory_without_content_falls_back(self, resolver, project, fake_index,
                                                  project_dir: Path) -> None:
        fake_index.excluded = (project_dir / "docs",)
        assert resolver.resolve(Directory("docs"), project) == WHOLE


class TestFileList:
    """FileList keeps existing files only."""

    def test_existing_files(self, resolver, project, project_dir: Path) -> None:
        resolved = resolver.resolve(FileList(("src/util.py", str(project_dir / "src/app.py"))),
                                    project)
        assert resolved.files == (project_dir / "src" / "util.py", project_dir / "src" / "app.py")

    def test_missing_files_dropped(self, resolver, project, project_dir: Path) -> None:
        resolved = resolver.resolve(FileList(("src/app.py", "src/gone.py")), project)
        assert resolved.files == (project_dir / "src" / "app.py",)

    def test_duplicates_collapse(self, resolver, project, project_dir: Path) -> None:
        resolved = resolver.resolve(
            FileList(("src/app.py", "./src/app.py", str(project_dir / "src" / "app.py"))),
            project,
        )
        assert resolved.files == (project_dir / "src" / "app.py",)

    def test_nonexistent_falls_back(self, resolver, project) -> None:
        assert resolver.resolve(FileList(("/does/not/exist.txt",)), project) == WHOLE

    def test_directory_entry_is_not_a_file(self, resolver, project) -> None:
        assert resolver.resolve(FileList(("src",)), project) == WHOLE


class TestChangedFiles:
    """ChangedFiles unions VCS changes, then filters and caps."""

    @pytest.fixture
    def changes(self, fake_vcs, project_dir: Path):
        fake_vcs.staged = (str(project_dir / "src" / "app.py"),)
        fake_vcs.unstaged = (str(project_dir / "src" / "util.py"),
                             str(project_dir / "src" / "app.py"))
        fake_vcs.unversioned = (str(project_dir / "docs" / "readme.md"),)
        return fake_vcs

    def test_union_in_order(self, resolver, project, changes, project_dir: Path) -> None:
        resolved = resolver.resolve(ChangedFiles(), project)
        assert resolved.files == (
            project_dir / "src" / "app.py",
            project_dir / "src" / "util.py",
            project_dir / "docs" / "readme.md",
        )

    def test_exclude_unversioned(self, resolver, project, changes, project_dir: Path) -> None:
        resolved = resolver.resolve(ChangedFiles(include_unversioned=False), project)
        assert project_dir / "docs" / "readme.md" not in (resolved.files or ())

    def test_staged_only(self, resolver, project, changes, project_dir: Path) -> None:
        resolved = resolver.resolve(ChangedFiles(mode=ChangedFilesMode.STAGED), project)
        assert resolved.files == (project_dir / "src" / "app.py",)

    def test_unstaged_only(self, resolver, project, changes, project_dir: Path) -> None:
        resolved = resolver.resolve(ChangedFiles(mode=ChangedFilesMode.UNSTAGED), project)
        assert resolved.files == (project_dir / "src" / "app.py", project_dir / "src" / "util.py")

    def test_relative_vcs_paths(self, resolver, project, fake_vcs, project_dir: Path) -> None:
        fake_vcs.staged = ("src/util.py",)
        resolved = resolver.resolve(ChangedFiles(mode=ChangedFilesMode.STAGED), project)
        assert resolved.files == (project_dir / "src" / "util.py",)

    def test_max_files(self, resolver, project, changes, project_dir: Path) -> None:
        resolved = resolver.resolve(ChangedFiles(max_files=2), project)
        assert resolved.files == (project_dir / "src" / "app.py", project_dir / "src" / "util.py")

    @pytest.mark.parametrize("cap", [0, -1, None])
    def test_non_positive_cap_ignored(self, resolver, project, changes, cap) -> None:
        resolved = resolver.resolve(ChangedFiles(max_files=cap), project)
        assert resolved.files is not None and len(resolved.files) == 3

    def test_deleted_files_dropped(self, resolver, project, fake_vcs, project_dir: Path) -> None:
        fake_vcs.unstaged = (str(project_dir / "src" / "deleted.py"),
                             str(project_dir / "src" / "util.py"))
        resolved = resolver.resolve(ChangedFiles(), project)
        assert resolved.files == (project_dir / "src" / "util.py",)

    def test_no_changes_falls_back(self, resolver, project) -> None:
        assert resolver.resolve(ChangedFiles(), project) == WHOLE

    def test_vcs_error_falls_back(self, resolver, project, fake_vcs) -> None:
        fake_vcs.broken = True
        assert resolver.resolve(ChangedFiles(), project) == WHOLE

    def test_unversioned_not_queried_when_excluded(self, resolver, project, fake_vcs) -> None:
        resolver.resolve(ChangedFiles(include_unversioned=False), project)
        assert fake_vcs.calls == 1


def test_unrecognized_request_falls_back(resolver, project) -> None:
    assert resolver.resolve("bogus", project) == WHOLE  # type: ignore[arg-type]


def test_project_root_may_be_relative(fake_vcs, fake_index, project_dir: Path,
                                      monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.chdir(project_dir.parent)
    resolver = ScopeResolver(fake_vcs, fake_index)
    context = ProjectContext("demo", Path(project_dir.name))
    assert resolver.resolve(FileList(("src/app.py",)), context).files == (
        project_dir / "src" / "app.py",
    )
