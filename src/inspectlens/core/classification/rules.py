"""Category and inspection-type classification.

A problem's classification comes from the nearest rule group that contains
it. The host exposes that group inconsistently: sometimes as a typed tool
wrapper with a short name and a group name, sometimes only as display text.
Classification is therefore a chain of small pure stages, each of which
either produces a ``Classification`` or passes.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Callable, Optional

from inspectlens.core.problems.models import DEFAULT_CATEGORY, DEFAULT_INSPECTION_TYPE

_RULE_ID_PATTERN = re.compile(r"\w+Inspection|\w+Check")


@dataclass(frozen=True)
class Classification:
    """Category and inspection type of a problem."""

    category: str
    inspection_type: str


DEFAULT_CLASSIFICATION = Classification(DEFAULT_CATEGORY, DEFAULT_INSPECTION_TYPE)


@dataclass(frozen=True)
class RuleHint:
    """Everything known about the enclosing rule group.

    Attributes:
        tool_identifier: The rule's short name, e.g. ``"PyUnresolvedReferences"``.
        group_label: The rule's group display name, e.g. ``"Python"``.
        free_text_hint: The group node's display text.
        display_name: The rule's display name.
    """

    tool_identifier: str | None = None
    group_label: str | None = None
    free_text_hint: str | None = None
    display_name: str | None = None


# (needles, classification); needles are matched case-insensitively.
_KNOWN_RULES: tuple[tuple[tuple[str, ...], Classification], ...] = (
    (("grazieinspection", "grazie", "grammar"), Classification("Grammar", "GrazieInspection")),
    (
        ("spellcheckinginspection", "spellcheck", "typo"),
        Classification("Typo", "SpellCheckingInspection"),
    ),
    (("shellcheck",), Classification("Shell Script", "ShellCheck")),
    (("duplicatedcode",), Classification("General", "DuplicatedCode")),
)


def _extract_rule_id(text: str | None) -> str | None:
    if not text:
        return None
    match = _RULE_ID_PATTERN.search(text)
    return match.group(0) if match else None


# ---------------------------------------------------------------------------
# Stages
# ---------------------------------------------------------------------------


def classify_known_rule(hint: RuleHint) -> Classification | None:
    """Recognize grammar, spelling, shell and duplicate rules by their text."""
    text = (hint.free_text_hint or "").lower()
    if not text:
        return None
    for needles, classification in _KNOWN_RULES:
        if any(needle in text for needle in needles):
            return classification
    return None


def classify_explicit_group(hint: RuleHint) -> Classification | None:
    """Use the typed rule wrapper's names when any of them is present."""
    if not (hint.group_label or hint.display_name or hint.tool_identifier):
        return None
    category = hint.group_label or hint.display_name or DEFAULT_CATEGORY
    inspection_type = (
        hint.tool_identifier
        or _extract_rule_id(hint.free_text_hint)
        or DEFAULT_INSPECTION_TYPE
    )
    return Classification(category, inspection_type)


def classify_by_pattern(hint: RuleHint) -> Classification | None:
    """Pull a ``FooInspection`` or ``BarCheck`` identifier out of display text."""
    rule_id = _extract_rule_id(hint.free_text_hint)
    if rule_id is None:
        return None
    return Classification(DEFAULT_CATEGORY, rule_id)


def classify_default(hint: RuleHint) -> Classification | None:
    return DEFAULT_CLASSIFICATION


Stage = Callable[[RuleHint], Optional[Classification]]

_CHAIN: tuple[Stage, ...] = (
    classify_known_rule,
    classify_explicit_group,
    classify_by_pattern,
    classify_default,
)


def classification_chain() -> tuple[Stage, ...]:
    """Return the ordered classification stages."""
    return _CHAIN


def classify(hint: RuleHint | None) -> Classification:
    """Run the classification chain, stopping at the first stage that answers."""
    if hint is None:
        return DEFAULT_CLASSIFICATION
    for stage in _CHAIN:
        result = stage(hint)
        if result is not None:
            return result
    return DEFAULT_CLASSIFICATION


def normalize_category_and_type(
    tool_identifier: str | None,
    group_label: str | None,
    free_text_hint: str | None,
    display_name: str | None = None,
) -> Classification:
    """Classify a problem from whatever its enclosing rule group exposes.

    Args:
        tool_identifier: The rule's short name, if known.
        group_label: The rule's group display name, if known.
        free_text_hint: Display text of the enclosing group node.
        display_name: The rule's display name, if known.

    Returns:
        The first classification produced by the stage chain; at worst
        ``("General", "unknown")``.
    """
    return classify(
        RuleHint(
            tool_identifier=tool_identifier,
            group_label=group_label,
            free_text_hint=free_text_hint,
            display_name=display_name,
        )
    )
