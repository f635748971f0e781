"""Tests for the filesystem-backed project index."""

from __future__ import annotations

from pathlib import Path

from inspectlens.host import StaticProjectIndex


class TestActiveFile:
    """active_file."""

    def test_none(self, project_dir: Path) -> None:
        assert StaticProjectIndex(project_dir).active_file() is None

    def test_blank(self, project_dir: Path) -> None:
        assert StaticProjectIndex(project_dir, active="  ").active_file() is None

    def test_relative(self, project_dir: Path) -> None:
        index = StaticProjectIndex(project_dir, active="src/app.py")
        assert index.active_file() == project_dir / "src" / "app.py"

    def test_absolute(self, project_dir: Path) -> None:
        target = project_dir / "docs" / "readme.md"
        assert StaticProjectIndex(project_dir, active=target).active_file() == target

    def test_missing_file(self, project_dir: Path) -> None:
        assert StaticProjectIndex(project_dir, active="src/gone.py").active_file() is None


class TestIsInContent:
    """is_in_content."""

    def test_project_file(self, project_dir: Path) -> None:
        assert StaticProjectIndex(project_dir).is_in_content(project_dir / "src" / "pkg" / "deep.py")

    def test_excluded_directory(self, project_dir: Path) -> None:
        assert not StaticProjectIndex(project_dir).is_in_content(project_dir / ".git" / "config")

    def test_directory_is_not_content(self, project_dir: Path) -> None:
        assert not StaticProjectIndex(project_dir).is_in_content(project_dir / "src")

    def test_outside_root(self, project_dir: Path, tmp_path: Path) -> None:
        outside = tmp_path / "elsewhere.py"
        outside.write_text("x = 1\n")
        assert not StaticProjectIndex(project_dir).is_in_content(outside)

    def test_custom_exclusions(self, project_dir: Path) -> None:
        index = StaticProjectIndex(project_dir, excluded_dirs=frozenset({"docs"}))
        assert not index.is_in_content(project_dir / "docs" / "readme.md")
        assert index.is_in_content(project_dir / ".git" / "config")
