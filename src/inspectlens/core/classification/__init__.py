"""Severity and category normalization.

Submodules
----------
- ``severity``: Highlight-type, level-name and free-text severity mapping.
- ``rules``: The category/inspection-type classification chain.

All public names are re-exported here::

    from inspectlens.core.classification import normalize_severity, classify
"""

from inspectlens.core.classification.rules import (
    DEFAULT_CLASSIFICATION,
    Classification,
    RuleHint,
    classification_chain,
    classify,
    classify_by_pattern,
    classify_default,
    classify_explicit_group,
    classify_known_rule,
    normalize_category_and_type,
)
from inspectlens.core.classification.severity import (
    GRAMMAR_RULES,
    SPELLING_RULES,
    apply_rule_severity,
    normalize_severity,
    severity_from_highlight_type,
    severity_from_level,
)

__all__ = [
    "DEFAULT_CLASSIFICATION",
    "GRAMMAR_RULES",
    "SPELLING_RULES",
    "Classification",
    "RuleHint",
    "apply_rule_severity",
    "classification_chain",
    "classify",
    "classify_by_pattern",
    "classify_default",
    "classify_explicit_group",
    "classify_known_rule",
    "normalize_category_and_type",
    "normalize_severity",
    "severity_from_highlight_type",
    "severity_from_level",
]
