"""Data models shared across the pipeline: Severity and ProblemRecord.

These types are decoupled from the extractor and the filter pipeline so that
the CLI formatters and the service boundary can import them without pulling
in tree-walking or pattern-compiling logic.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Any


# ---------------------------------------------------------------------------
# Severity: Normalized problem severities
# ---------------------------------------------------------------------------


class Severity(str, Enum):
    """Normalized severity of a single problem.

    ``GRAMMAR`` and ``TYPO`` are not ordered above or below the others: they
    tag findings produced by grammar and spelling rules, and a ``warning``
    filter admits both.
    """

    ERROR = "error"
    WARNING = "warning"
    WEAK_WARNING = "weak_warning"
    INFO = "info"
    GRAMMAR = "grammar"
    TYPO = "typo"

    def __str__(self) -> str:
        return self.value


UNKNOWN_FILE = "unknown"
DEFAULT_CATEGORY = "General"
DEFAULT_INSPECTION_TYPE = "unknown"

SOURCE_INSPECTION_TREE = "inspection_tree"
SOURCE_PROBLEMS_VIEW = "problems_view"


# ---------------------------------------------------------------------------
# ProblemRecord: One normalized finding
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class ProblemRecord:
    """A single normalized problem extracted from the host's result tree.

    Records are immutable and are created only by the tree extractor.

    Attributes:
        description: Human-readable problem text. Never empty.
        file_path: Absolute path of the file the problem points at, or
            ``"unknown"`` when a typed leaf carries no file.
        line: 1-based line number, 0 when unknown.
        column: 0-based column, 0 when unknown.
        severity: Normalized severity.
        category: Rule group, e.g. ``"Grammar"`` or ``"Probable bugs"``.
        inspection_type: Rule identifier, e.g. ``"SpellCheckingInspection"``.
        source: Provenance tag: ``"inspection_tree"`` for typed leaves,
            ``"problems_view"`` for records synthesized from opaque nodes.
    """

    description: str
    file_path: str
    line: int
    column: int
    severity: Severity
    category: str = DEFAULT_CATEGORY
    inspection_type: str = DEFAULT_INSPECTION_TYPE
    source: str = SOURCE_INSPECTION_TREE

    @property
    def dedup_key(self) -> tuple[str, str, str, int, int, str]:
        """Identity used to collapse the same problem reached twice."""
        return (
            self.severity.value,
            self.inspection_type,
            self.file_path,
            self.line,
            self.column,
            self.description,
        )

    def to_dict(self) -> dict[str, Any]:
        """Render the record in its wire form."""
        return {
            "description": self.description,
            "file": self.file_path,
            "line": self.line,
            "column": self.column,
            "severity": self.severity.value,
            "category": self.category,
            "inspectionType": self.inspection_type,
            "source": self.source,
        }
