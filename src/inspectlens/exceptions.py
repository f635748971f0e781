"""InspectLens exception hierarchy.

All public exceptions inherit from InspectLensError, giving callers a single
base class to catch when they want to handle any InspectLens-specific failure
without swallowing unrelated errors.

Most failure modes in the query path never surface as exceptions: extraction
skips bad nodes and scope resolution degrades to the whole project. The
classes below cover what remains.
"""


class InspectLensError(Exception):
    """Base exception for all InspectLens errors."""


class NoProjectError(InspectLensError):
    """Raised when an operation needs a project context and none is available.

    Rendered at the CLI boundary as ``{"error": "No project found"}``.
    """


class ScopeRequestError(InspectLensError):
    """Raised when trigger arguments cannot form a scope request.

    Covers unknown scope names and unknown changed-files modes. Missing or
    nonexistent paths are not errors; they fall back to the whole project.
    """


class VcsError(InspectLensError):
    """Raised when the version-control collaborator cannot report changes.

    Covers a missing ``git`` executable, a non-repository root, and
    unparseable status output. The scope resolver absorbs this error.
    """


class AnalysisEngineError(InspectLensError):
    """Raised when the analysis engine refuses or fails to accept a trigger."""


class SnapshotError(InspectLensError):
    """Raised when a result snapshot exists but cannot be read or decoded.

    Covers I/O failures, malformed JSON or YAML, and a top-level document
    that is not a mapping.
    """


class ConfigError(InspectLensError):
    """Raised for an invalid configuration file or environment override."""
