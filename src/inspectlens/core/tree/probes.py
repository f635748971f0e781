"""Probes for opaque result-tree payloads.

An opaque payload is whatever object the host's generic problems view hangs
on a tree node. Its shape is unknown, so each probe looks for one known
arrangement of fields and either builds a ``ProblemRecord`` or returns
``None``. The extractor runs ``DEFAULT_PROBES`` in order and keeps the first
record produced.

Field lookup accepts both mappings (payloads decoded from a JSON or YAML
snapshot) and attribute-bearing objects (payloads handed over in-process).
Zero-argument callables found under a field name are called.
"""

from __future__ import annotations

import os
from collections.abc import Mapping
from typing import Any, Callable, Optional

from inspectlens.core.classification.severity import normalize_severity
from inspectlens.core.problems.models import (
    DEFAULT_CATEGORY,
    DEFAULT_INSPECTION_TYPE,
    SOURCE_PROBLEMS_VIEW,
    ProblemRecord,
)
from inspectlens.core.tree.nodes import Document

DocumentLookup = Callable[[str], Optional[Document]]
Probe = Callable[[Any, DocumentLookup], Optional[ProblemRecord]]

_DESCRIPTION_FIELDS = ("description", "text", "message", "title")
_LOCATION_FIELDS = ("location", "problemLocation", "problem_location")
_FILE_FIELDS = ("virtualFile", "virtual_file", "file", "filePath", "file_path")
_RANGE_FIELDS = ("textRange", "text_range", "range")
_OFFSET_FIELDS = ("startOffset", "start_offset", "offset", "start")
_SEVERITY_FIELDS = (
    "severity",
    "highlightSeverity",
    "highlight_severity",
    "highlightType",
    "highlight_type",
)
_CATEGORY_FIELDS = ("category", "group", "categoryName", "category_name")
_TYPE_FIELDS = ("inspectionToolId", "inspection_tool_id", "shortName", "short_name", "name")


# ---------------------------------------------------------------------------
# Field access
# ---------------------------------------------------------------------------


def _field(obj: Any, *names: str) -> Any:
    """Return the first non-``None`` value found under any of ``names``."""
    if obj is None or isinstance(obj, (str, bytes, int, float)):
        return None
    for name in names:
        if isinstance(obj, Mapping):
            value = obj.get(name)
        else:
            value = getattr(obj, name, None)
            if callable(value) and not isinstance(value, type):
                value = value()
        if value is not None:
            return value
    return None


def _text(obj: Any, *names: str) -> str | None:
    """Like ``_field`` but only accepts values that render as non-blank text."""
    for name in names:
        value = _field(obj, name)
        if value is None:
            continue
        text = str(value).strip()
        if text:
            return text
    return None


def _int(value: Any) -> int | None:
    if isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value
    if isinstance(value, float):
        return int(value)
    if isinstance(value, str) and value.strip().lstrip("-").isdigit():
        return int(value.strip())
    return None


def _path_of(file_obj: Any) -> str | None:
    """Resolve a file reference (string, path-like, or object with ``path``)."""
    if file_obj is None:
        return None
    if isinstance(file_obj, str):
        return file_obj.strip() or None
    if isinstance(file_obj, os.PathLike):
        return os.fspath(file_obj)
    path = _field(file_obj, "path")
    if isinstance(path, (str, os.PathLike)):
        return _path_of(path)
    return None


def _start_offset(*holders: Any) -> int | None:
    for holder in holders:
        range_obj = _field(holder, *_RANGE_FIELDS)
        if range_obj is not None:
            direct = _int(range_obj)
            if direct is not None:
                return direct
            offset = _int(_field(range_obj, *_OFFSET_FIELDS))
            if offset is not None:
                return offset
    for holder in holders:
        offset = _int(_field(holder, *_OFFSET_FIELDS))
        if offset is not None:
            return offset
    return None


def _line_column(path: str, documents: DocumentLookup, *holders: Any) -> tuple[int, int]:
    """Find the problem position; ``(0, 0)`` when it cannot be determined."""
    for holder in holders:
        line = _int(_field(holder, "line"))
        if line is not None:
            column = _int(_field(holder, "column")) or 0
            return max(line, 0), max(column, 0)
    offset = _start_offset(*holders)
    if offset is None:
        return 0, 0
    document = documents(path)
    if document is None:
        return 0, 0
    return document.position(offset)


def _inspection_type(candidate: Any) -> str:
    found = _text(candidate, *_TYPE_FIELDS)
    if found:
        return found
    if isinstance(candidate, Mapping):
        return DEFAULT_INSPECTION_TYPE
    return type(candidate).__name__


def _record(
    candidate: Any,
    location: Any,
    documents: DocumentLookup,
) -> ProblemRecord | None:
    description = _text(candidate, *_DESCRIPTION_FIELDS)
    if description is None:
        return None
    path = _path_of(_field(location, *_FILE_FIELDS)) or _path_of(
        _field(candidate, *_FILE_FIELDS)
    )
    if path is None:
        return None
    line, column = _line_column(path, documents, location, candidate)
    return ProblemRecord(
        description=description,
        file_path=path,
        line=line,
        column=column,
        severity=normalize_severity(_field(candidate, *_SEVERITY_FIELDS)),
        category=_text(candidate, *_CATEGORY_FIELDS) or DEFAULT_CATEGORY,
        inspection_type=_inspection_type(candidate),
        source=SOURCE_PROBLEMS_VIEW,
    )


# ---------------------------------------------------------------------------
# Probes
# ---------------------------------------------------------------------------


def unwrap_problem(payload: Any) -> Any:
    """Return the problem a wrapper payload carries, or the payload itself."""
    inner = _field(payload, "problem")
    return payload if inner is None else inner


def probe_located_problem(payload: Any, documents: DocumentLookup) -> ProblemRecord | None:
    """Payload exposes a separate location object holding file and range."""
    location = _field(payload, *_LOCATION_FIELDS)
    if location is None:
        return None
    return _record(payload, location, documents)


def probe_flat_fields(payload: Any, documents: DocumentLookup) -> ProblemRecord | None:
    """Payload carries description, file and range directly."""
    return _record(payload, None, documents)


DEFAULT_PROBES: tuple[Probe, ...] = (
    probe_located_problem,
    probe_flat_fields,
)


def has_description(payload: Any) -> bool:
    """Whether a payload offers any usable description text."""
    return _text(payload, *_DESCRIPTION_FIELDS) is not None
