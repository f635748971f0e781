"""Filtering and pagination of problem records.

Submodules
----------
- ``patterns``: Regex/glob/substring file-pattern compilation.
- ``pipeline``: ``FilterSpec``, ``filter_problems``, ``paginate``, ``query``.
"""

from inspectlens.core.filtering.patterns import (
    compile_file_pattern,
    glob_to_regex,
    path_matches,
)
from inspectlens.core.filtering.pipeline import (
    SCOPE_CURRENT_FILE,
    SCOPE_WHOLE_PROJECT,
    SEVERITY_ALL,
    FilterSpec,
    ProblemPage,
    filter_problems,
    normalize_problems_scope,
    paginate,
    query,
)

__all__ = [
    "SCOPE_CURRENT_FILE",
    "SCOPE_WHOLE_PROJECT",
    "SEVERITY_ALL",
    "FilterSpec",
    "ProblemPage",
    "compile_file_pattern",
    "filter_problems",
    "glob_to_regex",
    "normalize_problems_scope",
    "paginate",
    "path_matches",
    "query",
]
