"""Tests for ProblemRecord and Severity."""

from __future__ import annotations

import dataclasses

import pytest

from inspectlens.core.problems import ProblemRecord, Severity


def _record(**overrides: object) -> ProblemRecord:
    fields: dict[str, object] = {
        "description": "Unused variable 'x'",
        "file_path": "/work/src/app.py",
        "line": 4,
        "column": 2,
        "severity": Severity.WARNING,
    }
    fields.update(overrides)
    return ProblemRecord(**fields)  # type: ignore[arg-type]


class TestSeverity:
    """Severity values and string behaviour."""

    def test_values(self) -> None:
        assert [s.value for s in Severity] == [
            "error", "warning", "weak_warning", "info", "grammar", "typo",
        ]

    def test_str_is_value(self) -> None:
        assert str(Severity.WEAK_WARNING) == "weak_warning"

    def test_compares_equal_to_value(self) -> None:
        assert Severity.ERROR == "error"


class TestProblemRecord:
    """Defaults, immutability, identity and wire form."""

    def test_defaults(self) -> None:
        record = _record()
        assert record.category == "General"
        assert record.inspection_type == "unknown"
        assert record.source == "inspection_tree"

    def test_frozen(self) -> None:
        record = _record()
        with pytest.raises(dataclasses.FrozenInstanceError):
            record.line = 10  # type: ignore[misc]

    def test_dedup_key_ignores_category_and_source(self) -> None:
        a = _record(category="Python", source="inspection_tree")
        b = _record(category="General", source="problems_view")
        assert a.dedup_key == b.dedup_key

    def test_dedup_key_distinguishes_position(self) -> None:
        assert _record(line=1).dedup_key != _record(line=2).dedup_key

    def test_to_dict_uses_wire_keys(self) -> None:
        data = _record(inspection_type="PyUnusedLocal").to_dict()
        assert data == {
            "description": "Unused variable 'x'",
            "file": "/work/src/app.py",
            "line": 4,
            "column": 2,
            "severity": "warning",
            "category": "General",
            "inspectionType": "PyUnusedLocal",
            "source": "inspection_tree",
        }
