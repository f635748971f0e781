"""Normalized problem records and their severity scale.

Submodules
----------
- ``models``: ``Severity``, ``ProblemRecord`` and the shared default values.

All public names are re-exported here::

    from inspectlens.core.problems import ProblemRecord, Severity
"""

from inspectlens.core.problems.models import (
    DEFAULT_CATEGORY,
    DEFAULT_INSPECTION_TYPE,
    SOURCE_INSPECTION_TREE,
    SOURCE_PROBLEMS_VIEW,
    UNKNOWN_FILE,
    ProblemRecord,
    Severity,
)

__all__ = [
    "DEFAULT_CATEGORY",
    "DEFAULT_INSPECTION_TYPE",
    "SOURCE_INSPECTION_TREE",
    "SOURCE_PROBLEMS_VIEW",
    "UNKNOWN_FILE",
    "ProblemRecord",
    "Severity",
]
