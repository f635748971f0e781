"""Tree extractor: result tree in, normalized ``ProblemRecord`` list out.

The walk is depth-first and never raises. Typed leaves are located through
their document and classified from the nearest enclosing rule group; opaque
nodes go through the probe tuple; folder groups are transparent. Records are
de-duplicated across every panel read, keeping the first occurrence.
"""

from __future__ import annotations

import logging
from collections.abc import Mapping
from dataclasses import dataclass
from enum import Enum
from pathlib import Path

from inspectlens.core.classification.rules import RuleHint, classify
from inspectlens.core.classification.severity import (
    apply_rule_severity,
    severity_from_highlight_type,
    severity_from_level,
)
from inspectlens.core.problems.models import (
    SOURCE_INSPECTION_TREE,
    UNKNOWN_FILE,
    ProblemRecord,
    Severity,
)
from inspectlens.core.tree.nodes import (
    Document,
    GroupKind,
    GroupNode,
    LeafNode,
    Node,
    OpaqueNode,
    ProblemDescriptor,
    ResultTree,
    SourceFile,
)
from inspectlens.core.tree.probes import (
    DEFAULT_PROBES,
    DocumentLookup,
    Probe,
    has_description,
    unwrap_problem,
)

logger = logging.getLogger(__name__)


class SkipReason(str, Enum):
    """Why a node produced no record."""

    NO_DESCRIPTOR = "no_descriptor"
    NO_DESCRIPTION = "no_description"
    NO_FILE = "no_file"
    ALREADY_CLASSIFIED = "already_classified"
    GROUP_NODE = "group_node"
    ERROR = "error"


@dataclass(frozen=True)
class ExtractionOutcome:
    """Result of extracting a single node: a record or a skip reason."""

    record: ProblemRecord | None = None
    skip_reason: SkipReason | None = None

    @property
    def ok(self) -> bool:
        return self.record is not None

    @classmethod
    def skipped(cls, reason: SkipReason) -> ExtractionOutcome:
        return cls(skip_reason=reason)


class DocumentProvider:
    """Resolves file paths to ``Document`` objects.

    Documents shipped with the result tree win; anything else is read from
    disk on first use. Unreadable files resolve to ``None``. One provider is
    created per extraction pass.
    """

    def __init__(self, preloaded: Mapping[str, Document] | None = None) -> None:
        self._cache: dict[str, Document | None] = dict(preloaded or {})

    def __call__(self, path: str) -> Document | None:
        if path in self._cache:
            return self._cache[path]
        try:
            document: Document | None = Document(
                Path(path).read_text(encoding="utf-8", errors="replace")
            )
        except OSError:
            logger.debug("Cannot read %s for position lookup", path)
            document = None
        self._cache[path] = document
        return document


@dataclass(frozen=True)
class ExtractionContext:
    """What a node inherits from its ancestors."""

    documents: DocumentLookup
    rule_hint: RuleHint | None = None


def _hint_for(group: GroupNode) -> RuleHint:
    rule = group.rule
    if rule is None:
        return RuleHint(free_text_hint=group.label)
    return RuleHint(
        tool_identifier=rule.short_name,
        group_label=rule.group_display_name,
        free_text_hint=group.label,
        display_name=rule.display_name,
    )


def _locate(source: SourceFile, offset: int, documents: DocumentLookup) -> tuple[str, int, int]:
    """Compute (file, line, column) for an offset into ``source``."""
    injection = source.injection
    if injection is not None:
        host_document = injection.host_document or documents(injection.host_path)
        if host_document is None:
            return injection.host_path, 0, 0
        line, column = host_document.position(injection.to_host(offset))
        return injection.host_path, line, column

    document = source.document or documents(source.path)
    if document is None:
        return source.path, 0, 0
    line, column = document.position(offset)
    return source.path, line, column


class TreeExtractor:
    """Extracts normalized problem records from a ``ResultTree``.

    Holds no per-call state, so one instance may be shared across threads.

    Args:
        probes: Ordered opaque-payload probes; the first record wins.
    """

    def __init__(self, probes: tuple[Probe, ...] = DEFAULT_PROBES) -> None:
        self._probes = probes

    def extract_all(self, tree: ResultTree) -> list[ProblemRecord]:
        """Extract every distinct record from the panels worth reading.

        Args:
            tree: The host's current result tree.

        Returns:
            Records in walk order, duplicates removed (first occurrence kept).
        """
        context = ExtractionContext(documents=DocumentProvider(tree.documents))
        records: list[ProblemRecord] = []
        seen: set[tuple[str, str, str, int, int, str]] = set()
        for panel in tree.panels_to_read():
            for record in self._walk(panel.root, context):
                key = record.dedup_key
                if key in seen:
                    continue
                seen.add(key)
                records.append(record)
        logger.debug("Extracted %d distinct problems", len(records))
        return records

    def _walk(self, node: Node, context: ExtractionContext) -> list[ProblemRecord]:
        found: list[ProblemRecord] = []
        if isinstance(node, GroupNode):
            child_context = context
            if node.kind is GroupKind.RULE:
                child_context = ExtractionContext(context.documents, _hint_for(node))
            for child in node.children:
                found.extend(self._walk(child, child_context))
            return found

        outcome = self.extract_node(node, context)
        if outcome.record is not None:
            found.append(outcome.record)
        if isinstance(node, OpaqueNode):
            for child in node.children:
                found.extend(self._walk(child, context))
        return found

    def extract_node(self, node: Node, context: ExtractionContext) -> ExtractionOutcome:
        """Extract a single node without descending into its children.

        Never raises: failures come back as ``SkipReason.ERROR``.
        """
        try:
            if isinstance(node, LeafNode):
                return self._extract_leaf(node, context)
            if isinstance(node, OpaqueNode):
                return self._extract_opaque(node, context)
            return ExtractionOutcome.skipped(SkipReason.GROUP_NODE)
        except Exception:
            logger.debug("Skipping node that failed extraction: %r", node, exc_info=True)
            return ExtractionOutcome.skipped(SkipReason.ERROR)

    def _extract_leaf(self, node: LeafNode, context: ExtractionContext) -> ExtractionOutcome:
        descriptor = node.descriptor
        if descriptor is None:
            return ExtractionOutcome.skipped(SkipReason.NO_DESCRIPTOR)
        if not descriptor.description.strip():
            return ExtractionOutcome.skipped(SkipReason.NO_DESCRIPTION)

        file_path, line, column = UNKNOWN_FILE, 0, 0
        severity = Severity.WARNING
        element = descriptor.element
        if element is not None and element.valid:
            severity = severity_from_highlight_type(descriptor.highlight_type)
            if element.file is not None:
                file_path, line, column = _locate(
                    element.file, element.start_offset, context.documents
                )

        classification = classify(context.rule_hint)
        severity = severity_from_level(node.level, severity)
        severity = apply_rule_severity(classification.inspection_type, severity)
        return ExtractionOutcome(
            record=ProblemRecord(
                description=descriptor.description,
                file_path=file_path,
                line=line,
                column=column,
                severity=severity,
                category=classification.category,
                inspection_type=classification.inspection_type,
                source=SOURCE_INSPECTION_TREE,
            )
        )

    def _extract_opaque(self, node: OpaqueNode, context: ExtractionContext) -> ExtractionOutcome:
        payload = node.payload
        if payload is None:
            return ExtractionOutcome.skipped(SkipReason.NO_DESCRIPTION)
        if isinstance(payload, (LeafNode, GroupNode, ProblemDescriptor)):
            return ExtractionOutcome.skipped(SkipReason.ALREADY_CLASSIFIED)

        candidate = unwrap_problem(payload)
        for probe in self._probes:
            record = probe(candidate, context.documents)
            if record is not None:
                return ExtractionOutcome(record=record)
        if not has_description(candidate):
            return ExtractionOutcome.skipped(SkipReason.NO_DESCRIPTION)
        return ExtractionOutcome.skipped(SkipReason.NO_FILE)
