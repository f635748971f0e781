"""File-pattern compilation for the ``file_pattern`` filter.

A pattern is tried as a case-insensitive regular expression first. If that
fails and the pattern looks like a glob (contains ``*`` or ``?``), it is
translated to a regex. If that fails as well, callers fall back to a
case-insensitive substring match, signalled by a ``None`` return.
"""

from __future__ import annotations

import re

_GLOB_SPECIALS = frozenset(".^$+()[]{}|\\")


def glob_to_regex(pattern: str) -> str:
    """Translate ``*`` and ``?`` wildcards, escaping other regex syntax."""
    out: list[str] = []
    for char in pattern:
        if char == "*":
            out.append(".*")
        elif char == "?":
            out.append(".")
        elif char in _GLOB_SPECIALS:
            out.append("\\" + char)
        else:
            out.append(char)
    return "".join(out)


def compile_file_pattern(raw: str) -> re.Pattern[str] | None:
    """Compile a file pattern, or return ``None`` for substring matching.

    Args:
        raw: User-supplied pattern; surrounding whitespace is ignored.

    Returns:
        A case-insensitive compiled pattern to ``search`` file paths with,
        or ``None`` when the pattern is blank or compiles neither as a
        regex nor as a glob.
    """
    pattern = raw.strip()
    if not pattern:
        return None
    try:
        return re.compile(pattern, re.IGNORECASE)
    except re.error:
        if "*" not in pattern and "?" not in pattern:
            return None
    try:
        return re.compile(glob_to_regex(pattern), re.IGNORECASE)
    except re.error:
        return None


def path_matches(path: str, raw_pattern: str, compiled: re.Pattern[str] | None) -> bool:
    """Apply a pattern compiled by ``compile_file_pattern`` to one path."""
    if compiled is not None:
        return compiled.search(path) is not None
    return raw_pattern.strip().lower() in path.lower()
