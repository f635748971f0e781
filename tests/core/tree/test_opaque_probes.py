"""Tests for the individual opaque-payload probes."""

from __future__ import annotations

from pathlib import Path
from types import SimpleNamespace

from inspectlens.core.problems import Severity
from inspectlens.core.tree import (
    DEFAULT_PROBES,
    Document,
    probe_flat_fields,
    probe_located_problem,
    unwrap_problem,
)


def _no_documents(path: str) -> Document | None:
    return None


class TestUnwrap:
    """unwrap_problem."""

    def test_unwraps(self) -> None:
        inner = {"text": "inner"}
        assert unwrap_problem({"problem": inner}) is inner

    def test_passes_through(self) -> None:
        payload = {"text": "x"}
        assert unwrap_problem(payload) is payload


class TestLocatedProblem:
    """probe_located_problem."""

    def test_requires_location(self) -> None:
        assert probe_located_problem({"text": "x", "file": "/a"}, _no_documents) is None

    def test_file_from_location(self) -> None:
        payload = {"title": "Title text", "problemLocation": {"filePath": "/loc.py", "line": 3}}
        record = probe_located_problem(payload, _no_documents)
        assert record is not None
        assert record.file_path == "/loc.py"
        assert record.line == 3

    def test_file_falls_back_to_candidate(self) -> None:
        payload = {"text": "x", "file": "/cand.py", "location": {"range": 0}}
        record = probe_located_problem(payload, _no_documents)
        assert record is not None and record.file_path == "/cand.py"

    def test_pathlib_file(self) -> None:
        payload = SimpleNamespace(text="x", location=SimpleNamespace(file=Path("/p.py")))
        record = probe_located_problem(payload, _no_documents)
        assert record is not None and record.file_path == "/p.py"

    def test_range_start_offset_uses_document(self) -> None:
        docs = {"/d.py": Document("ab\ncd\n")}
        payload = {"text": "x", "location": {"file": "/d.py", "textRange": {"startOffset": 4}}}
        record = probe_located_problem(payload, docs.get)
        assert record is not None
        assert (record.line, record.column) == (2, 1)


class TestFlatFields:
    """probe_flat_fields."""

    def test_minimal(self) -> None:
        record = probe_flat_fields({"description": "d", "file": "/f.py"}, _no_documents)
        assert record is not None
        assert (record.line, record.column) == (0, 0)
        assert record.severity is Severity.WARNING
        assert (record.category, record.inspection_type) == ("General", "unknown")

    def test_blank_description_rejected(self) -> None:
        assert probe_flat_fields({"description": "  ", "file": "/f.py"}, _no_documents) is None

    def test_missing_file_rejected(self) -> None:
        assert probe_flat_fields({"description": "d"}, _no_documents) is None

    def test_offset_without_document(self) -> None:
        record = probe_flat_fields({"text": "t", "file": "/f.py", "startOffset": 5},
                                   _no_documents)
        assert record is not None and (record.line, record.column) == (0, 0)

    def test_category_and_type_fields(self) -> None:
        record = probe_flat_fields(
            {"text": "t", "file": "/f.py", "categoryName": "Security",
             "inspectionToolId": "HardcodedPassword", "highlightSeverity": "ERROR"},
            _no_documents,
        )
        assert record is not None
        assert record.category == "Security"
        assert record.inspection_type == "HardcodedPassword"
        assert record.severity is Severity.ERROR

    def test_highlight_type_as_severity(self) -> None:
        record = probe_flat_fields(
            {"description": "d", "file": "/f.py", "highlightType": "LIKE_UNUSED_SYMBOL"},
            _no_documents,
        )
        assert record is not None
        assert record.severity is Severity.WEAK_WARNING

    def test_non_numeric_offset(self) -> None:
        record = probe_flat_fields({"description": "d", "file": "/f.py", "offset": "n/a"},
                                   lambda path: Document("abc\n"))
        assert record is not None and (record.line, record.column) == (0, 0)


def test_default_probe_order() -> None:
    assert DEFAULT_PROBES == (probe_located_problem, probe_flat_fields)
