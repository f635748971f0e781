"""Filter and pagination pipeline over extracted problem records.

Every function here is pure: identical inputs give identical pages.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Sequence

from inspectlens.core.filtering.patterns import compile_file_pattern, path_matches
from inspectlens.core.problems.models import ProblemRecord, Severity

SEVERITY_ALL = "all"
SCOPE_WHOLE_PROJECT = "whole_project"
SCOPE_CURRENT_FILE = "current_file"

# Trigger-only scope names that mean "no path restriction" when querying.
_TRIGGER_ONLY_SCOPES = frozenset({"files", "directory", "changed_files"})

# A "warning" filter also admits these.
_WARNING_FAMILY = frozenset({Severity.WARNING, Severity.GRAMMAR, Severity.TYPO})


@dataclass(frozen=True)
class FilterSpec:
    """Query-time filters.

    Attributes:
        severity: ``"all"`` or a ``Severity`` value.
        scope: ``"whole_project"``, ``"current_file"``, or any other string,
            which is matched as a case-insensitive substring of the path.
        problem_type: Case-insensitive substring of inspection type or
            category; ``None`` for no restriction.
        file_pattern: Regex, glob, or substring applied to the path;
            ``None`` for no restriction.
    """

    severity: str = SEVERITY_ALL
    scope: str = SCOPE_WHOLE_PROJECT
    problem_type: str | None = None
    file_pattern: str | None = None


@dataclass(frozen=True)
class ProblemPage:
    """One page of filtered problems.

    ``has_more`` is ``offset + shown < total`` and ``next_offset`` is
    ``offset + limit`` exactly when ``has_more``.
    """

    total: int
    shown: int
    problems: tuple[ProblemRecord, ...] = field(default_factory=tuple)
    has_more: bool = False
    next_offset: int | None = None
    limit: int = 0
    offset: int = 0

    def pagination_dict(self) -> dict[str, Any]:
        return {
            "limit": self.limit,
            "offset": self.offset,
            "has_more": self.has_more,
            "next_offset": self.next_offset,
        }


def normalize_problems_scope(raw: str | None) -> str:
    """Map a scope argument to the path filter it means when querying.

    Blank means whole project, and the trigger-only scope names carry no
    path restriction. Anything else passes through trimmed.
    """
    trimmed = (raw or "").strip()
    if not trimmed:
        return SCOPE_WHOLE_PROJECT
    lowered = trimmed.lower()
    if lowered in (SCOPE_WHOLE_PROJECT, SCOPE_CURRENT_FILE):
        return lowered
    if lowered in _TRIGGER_ONLY_SCOPES:
        return SCOPE_WHOLE_PROJECT
    return trimmed


def _severity_admits(wanted: str, actual: Severity) -> bool:
    if wanted == actual.value:
        return True
    return wanted == Severity.WARNING.value and actual in _WARNING_FAMILY


def filter_problems(
    records: Sequence[ProblemRecord],
    spec: FilterSpec,
    current_file: str | None = None,
) -> list[ProblemRecord]:
    """Apply severity, scope, problem-type and file-pattern filters in order.

    Args:
        records: Records in extraction order.
        spec: Filters to apply.
        current_file: Path of the active editor file; only consulted for
            the ``current_file`` scope, which matches nothing without it.

    Returns:
        Matching records, order preserved.
    """
    result = list(records)

    severity = (spec.severity or SEVERITY_ALL).strip().lower()
    if severity != SEVERITY_ALL:
        result = [r for r in result if _severity_admits(severity, r.severity)]

    scope = spec.scope
    if scope == SCOPE_CURRENT_FILE:
        if not current_file or not current_file.strip():
            return []
        result = [
            r for r in result
            if r.file_path == current_file or r.file_path.endswith(current_file)
        ]
    elif scope != SCOPE_WHOLE_PROJECT:
        needle = scope.lower()
        result = [r for r in result if needle in r.file_path.lower()]

    if spec.problem_type is not None:
        needle = spec.problem_type.lower()
        result = [
            r for r in result
            if needle in r.inspection_type.lower() or needle in r.category.lower()
        ]

    if spec.file_pattern is not None:
        compiled = compile_file_pattern(spec.file_pattern)
        result = [r for r in result if path_matches(r.file_path, spec.file_pattern, compiled)]

    return result


def paginate(records: Sequence[ProblemRecord], limit: int, offset: int) -> ProblemPage:
    """Slice one page out of ``records``; negative arguments clamp to 0."""
    limit = max(0, limit)
    offset = max(0, offset)
    total = len(records)
    page = tuple(records[offset:offset + limit])
    has_more = offset + len(page) < total
    return ProblemPage(
        total=total,
        shown=len(page),
        problems=page,
        has_more=has_more,
        next_offset=offset + limit if has_more else None,
        limit=limit,
        offset=offset,
    )


def query(
    records: Sequence[ProblemRecord],
    spec: FilterSpec,
    limit: int,
    offset: int,
    current_file: str | None = None,
) -> ProblemPage:
    """Filter then paginate."""
    return paginate(filter_problems(records, spec, current_file), limit, offset)
