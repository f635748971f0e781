"""Severity normalization for problems coming out of the host engine.

The host reports severity in three different vocabularies depending on where
a problem came from: a highlight type on typed descriptors, a severity level
name on the tree node, and free text on opaque payloads. Each vocabulary has
its own function here and all of them land on ``Severity``.
"""

from __future__ import annotations

from typing import Any

from inspectlens.core.problems.models import Severity

_HIGHLIGHT_TYPES: dict[str, Severity] = {
    "ERROR": Severity.ERROR,
    "GENERIC_ERROR": Severity.ERROR,
    "LIKE_UNKNOWN_SYMBOL": Severity.ERROR,
    "WARNING": Severity.WARNING,
    "GENERIC_ERROR_OR_WARNING": Severity.WARNING,
    "WEAK_WARNING": Severity.WEAK_WARNING,
    "LIKE_DEPRECATED": Severity.WEAK_WARNING,
    "LIKE_MARKED_FOR_REMOVAL": Severity.WEAK_WARNING,
    "LIKE_UNUSED_SYMBOL": Severity.WEAK_WARNING,
    "INFORMATION": Severity.INFO,
    "INFO": Severity.INFO,
}

_LEVEL_NAMES: dict[str, Severity] = {
    "ERROR": Severity.ERROR,
    "WARNING": Severity.WARNING,
    "WEAK WARNING": Severity.WEAK_WARNING,
    "WEAK_WARNING": Severity.WEAK_WARNING,
    "INFO": Severity.INFO,
    "INFORMATION": Severity.INFO,
}

# Checked in order; "weak warning" must hit "weak" before "warning".
_FREE_TEXT_MARKERS: tuple[tuple[str, Severity], ...] = (
    ("error", Severity.ERROR),
    ("weak", Severity.WEAK_WARNING),
    ("warning", Severity.WARNING),
    ("info", Severity.INFO),
)

GRAMMAR_RULES = frozenset({"GrazieInspection"})
SPELLING_RULES = frozenset({"SpellCheckingInspection", "AiaStyle"})


def severity_from_highlight_type(raw: str | None) -> Severity:
    """Map a descriptor highlight type name to a severity.

    Unrecognized and missing highlight types map to ``info``.
    """
    if not raw:
        return Severity.INFO
    return _HIGHLIGHT_TYPES.get(raw.strip().upper(), Severity.INFO)


def severity_from_level(level: str | None, fallback: Severity) -> Severity:
    """Refine a severity using the tree node's severity level name.

    Args:
        level: Level name such as ``"WEAK WARNING"``; ``None`` when the node
            carries no level.
        fallback: Severity to keep when the level is missing or unknown.

    Returns:
        The severity the level name maps to, or ``fallback``.
    """
    if not level:
        return fallback
    name = level.strip().upper()
    mapped = _LEVEL_NAMES.get(name)
    if mapped is not None:
        return mapped
    if "WEAK" in name:
        return Severity.WEAK_WARNING
    return fallback


def normalize_severity(raw: Any) -> Severity:
    """Normalize a loosely-typed severity value to ``Severity``.

    Accepts ``Severity`` members, their string values, highlight type names,
    and arbitrary free text (matched by keyword). ``None`` and anything
    unrecognized normalize to ``warning``.
    """
    if raw is None:
        return Severity.WARNING
    if isinstance(raw, Severity):
        return raw
    text = str(raw).strip()
    if not text:
        return Severity.WARNING
    try:
        return Severity(text.lower())
    except ValueError:
        pass
    mapped = _HIGHLIGHT_TYPES.get(text.upper())
    if mapped is not None:
        return mapped
    lowered = text.lower()
    for marker, severity in _FREE_TEXT_MARKERS:
        if marker in lowered:
            return severity
    return Severity.WARNING


def apply_rule_severity(inspection_type: str, severity: Severity) -> Severity:
    """Force ``grammar`` or ``typo`` for findings from language rules.

    Grammar and spelling checkers report through ordinary highlight types, so
    their findings would otherwise be indistinguishable from code warnings.
    """
    if inspection_type in GRAMMAR_RULES:
        return Severity.GRAMMAR
    if inspection_type in SPELLING_RULES:
        return Severity.TYPO
    return severity
