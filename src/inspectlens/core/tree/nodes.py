"""Node model for the host engine's result tree.

The host's result tree mixes three kinds of node, modelled here as a tagged
union:

- ``LeafNode``: a typed problem descriptor with a known shape.
- ``GroupNode``: an interior node. ``RULE`` groups wrap one inspection rule
  and carry its identity; ``FOLDER`` groups (per-file, per-directory and
  per-severity groupings) only organize children.
- ``OpaqueNode``: a node whose payload has no statically known shape.

Text coordinates are resolved through ``Document``, which indexes line starts
once, and ``Injection``, which translates offsets inside an injected
fragment (say, SQL in a string literal) to offsets in the host file.
"""

from __future__ import annotations

import bisect
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Union


# ---------------------------------------------------------------------------
# Text coordinates
# ---------------------------------------------------------------------------


class Document:
    """Immutable text with a precomputed line-start index."""

    def __init__(self, text: str) -> None:
        self._text = text
        starts = [0]
        for index, char in enumerate(text):
            if char == "\n":
                starts.append(index + 1)
        self._line_starts = tuple(starts)

    @property
    def text(self) -> str:
        return self._text

    @property
    def line_count(self) -> int:
        return len(self._line_starts)

    def _clamp(self, offset: int) -> int:
        return max(0, min(offset, len(self._text)))

    def line_number(self, offset: int) -> int:
        """Return the 0-based line containing ``offset`` (clamped to the text)."""
        return bisect.bisect_right(self._line_starts, self._clamp(offset)) - 1

    def line_start_offset(self, line: int) -> int:
        """Return the offset of the first character of 0-based ``line``."""
        line = max(0, min(line, len(self._line_starts) - 1))
        return self._line_starts[line]

    def position(self, offset: int) -> tuple[int, int]:
        """Return the 1-based line and 0-based column of ``offset``."""
        offset = self._clamp(offset)
        line = self.line_number(offset)
        return line + 1, offset - self._line_starts[line]

    def __repr__(self) -> str:
        return f"Document(lines={self.line_count}, length={len(self._text)})"


@dataclass(frozen=True)
class Shred:
    """A contiguous run of injected text and where it sits in the host."""

    injected_start: int
    host_start: int
    length: int

    def contains(self, offset: int) -> bool:
        return self.injected_start <= offset <= self.injected_start + self.length


@dataclass(frozen=True)
class Injection:
    """Maps an injected fragment back to its host file.

    Attributes:
        host_path: Absolute path of the host file.
        host_document: Host text, ``None`` when the host could not provide it.
        shreds: Fragment pieces in injected-offset order.
    """

    host_path: str
    host_document: Document | None = None
    shreds: tuple[Shred, ...] = ()

    def to_host(self, offset: int) -> int:
        """Translate an injected offset to a host offset.

        Offsets between shreds snap to the end of the preceding shred.
        """
        if not self.shreds:
            return offset
        previous: Shred | None = None
        for shred in self.shreds:
            if shred.contains(offset):
                return shred.host_start + (offset - shred.injected_start)
            if shred.injected_start > offset:
                break
            previous = shred
        if previous is None:
            return self.shreds[0].host_start
        return previous.host_start + previous.length


@dataclass(frozen=True)
class SourceFile:
    """A file as the host engine sees it.

    ``injection`` is set when the file is an injected fragment living inside
    another file.
    """

    path: str
    document: Document | None = None
    injection: Injection | None = None


@dataclass(frozen=True)
class Element:
    """The source element a problem descriptor points at."""

    file: SourceFile | None
    start_offset: int = 0
    valid: bool = True


@dataclass(frozen=True)
class ProblemDescriptor:
    """Typed problem payload carried by a ``LeafNode``."""

    description: str
    highlight_type: str | None = None
    element: Element | None = None


# ---------------------------------------------------------------------------
# Tree nodes
# ---------------------------------------------------------------------------


class GroupKind(str, Enum):
    """Whether a group wraps an inspection rule or only organizes children."""

    RULE = "rule"
    FOLDER = "folder"


@dataclass(frozen=True)
class RuleInfo:
    """Identity of the inspection rule a ``RULE`` group wraps."""

    short_name: str | None = None
    display_name: str | None = None
    group_display_name: str | None = None


@dataclass(frozen=True)
class LeafNode:
    """A typed problem.

    Attributes:
        descriptor: The problem; ``None`` for placeholder leaves.
        level: The host's severity level name for this node, if any.
    """

    descriptor: ProblemDescriptor | None
    level: str | None = None


@dataclass(frozen=True)
class GroupNode:
    """An interior node; see ``GroupKind``."""

    label: str
    children: tuple["Node", ...] = ()
    rule: RuleInfo | None = None
    kind: GroupKind = GroupKind.RULE


@dataclass(frozen=True)
class OpaqueNode:
    """A node whose payload is probed at extraction time."""

    payload: Any
    children: tuple["Node", ...] = ()


Node = Union[LeafNode, GroupNode, OpaqueNode]


# ---------------------------------------------------------------------------
# Panels and result trees
# ---------------------------------------------------------------------------


class PanelKind(str, Enum):
    """``INSPECTION`` panels hold inspection results; ``PROBLEMS`` panels
    hold whatever the host's generic problems view shows."""

    INSPECTION = "inspection"
    PROBLEMS = "problems"


# Read in this order when no inspection panel exists.
FALLBACK_PANEL_NAMES: tuple[str, ...] = ("Problems View", "Problems", "Inspections")


@dataclass(frozen=True)
class Panel:
    """One tool-window panel of the host and the tree it displays."""

    name: str
    root: Node
    kind: PanelKind = PanelKind.INSPECTION


@dataclass(frozen=True)
class ResultTree:
    """Everything the host engine currently displays.

    ``documents`` maps absolute paths to file text for opaque payloads that
    only report offsets.
    """

    panels: tuple[Panel, ...] = ()
    documents: dict[str, Document] = field(default_factory=dict, compare=False)

    @classmethod
    def empty(cls) -> ResultTree:
        return cls()

    def panels_to_read(self) -> tuple[Panel, ...]:
        """Select the panels extraction should walk.

        Every inspection panel when at least one exists; otherwise the first
        problems panel found by fallback name preference.
        """
        inspection = tuple(p for p in self.panels if p.kind is PanelKind.INSPECTION)
        if inspection:
            return inspection
        for name in FALLBACK_PANEL_NAMES:
            for panel in self.panels:
                if panel.name == name:
                    return (panel,)
        return ()
