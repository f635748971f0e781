"""Result-tree model and the extractor that turns it into problem records.

Submodules
----------
- ``nodes``: Tagged-union node model, documents, panels and result trees.
- ``probes``: Ordered probes for opaque payloads.
- ``extractor``: ``TreeExtractor`` with per-node ``ExtractionOutcome``.
- ``loader``: Builds a ``ResultTree`` from a decoded JSON/YAML snapshot.

All public names are re-exported here::

    from inspectlens.core.tree import TreeExtractor, ResultTree
"""

from inspectlens.core.tree.extractor import (
    DocumentProvider,
    ExtractionContext,
    ExtractionOutcome,
    SkipReason,
    TreeExtractor,
)
from inspectlens.core.tree.loader import node_from_mapping, tree_from_mapping
from inspectlens.core.tree.nodes import (
    FALLBACK_PANEL_NAMES,
    Document,
    Element,
    GroupKind,
    GroupNode,
    Injection,
    LeafNode,
    Node,
    OpaqueNode,
    Panel,
    PanelKind,
    ProblemDescriptor,
    ResultTree,
    RuleInfo,
    Shred,
    SourceFile,
)
from inspectlens.core.tree.probes import (
    DEFAULT_PROBES,
    probe_flat_fields,
    probe_located_problem,
    unwrap_problem,
)

__all__ = [
    "DEFAULT_PROBES",
    "FALLBACK_PANEL_NAMES",
    "Document",
    "DocumentProvider",
    "Element",
    "ExtractionContext",
    "ExtractionOutcome",
    "GroupKind",
    "GroupNode",
    "Injection",
    "LeafNode",
    "Node",
    "OpaqueNode",
    "Panel",
    "PanelKind",
    "ProblemDescriptor",
    "ResultTree",
    "RuleInfo",
    "Shred",
    "SkipReason",
    "SourceFile",
    "TreeExtractor",
    "node_from_mapping",
    "probe_flat_fields",
    "probe_located_problem",
    "tree_from_mapping",
    "unwrap_problem",
]
