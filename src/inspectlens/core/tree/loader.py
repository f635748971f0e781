"""Build a ``ResultTree`` from the loosely-typed snapshot a host dumps.

A snapshot is a JSON or YAML mapping::

    panels:
      - name: Inspection Results
        kind: inspection
        root:
          label: Python
          children:
            - label: Unresolved reference
              rule: {shortName: PyUnresolvedReferences, groupDisplayName: Python}
              children:
                - descriptor:
                    description: Unresolved reference 'foo'
                    highlightType: LIKE_UNKNOWN_SYMBOL
                    file: /work/app.py
                    offset: 120
                  level: ERROR
    documents:
      /work/app.py: "...file text..."
    indexing: false

Node kinds are taken from an explicit ``kind`` key when present and inferred
from the node's fields otherwise: ``descriptor`` means a leaf, ``rule`` or
``tool`` means a rule group, bare ``children`` means a folder group, and
anything else is opaque. Keys are accepted in camelCase or snake_case.

Damage stays local: a node that cannot be converted (unknown ``kind``,
non-numeric offsets, broken injection shreds) is kept as an ``OpaqueNode``
holding its raw data, and a malformed panel is skipped. Only a document
that is not a mapping, or whose ``panels``/``documents`` have the wrong
shape, raises ``SnapshotError``.
"""

from __future__ import annotations

import logging
from collections.abc import Mapping
from typing import Any

from inspectlens.core.tree.nodes import (
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
from inspectlens.exceptions import SnapshotError

logger = logging.getLogger(__name__)

_OPAQUE_MARKERS = ("payload", "userObject", "user_object")
_DESCRIPTION_KEYS = ("description", "text", "message", "title")


def _get(data: Mapping[str, Any], *keys: str) -> Any:
    for key in keys:
        if key in data and data[key] is not None:
            return data[key]
    return None


def _str_or_none(value: Any) -> str | None:
    if value is None:
        return None
    text = str(value)
    return text if text.strip() else None


def _children(data: Mapping[str, Any]) -> tuple[Node, ...]:
    raw = data.get("children") or ()
    if not isinstance(raw, (list, tuple)):
        logger.debug("Ignoring 'children' that is a %s, not a list", type(raw).__name__)
        return ()
    return tuple(node_from_mapping(child) for child in raw)


# ---------------------------------------------------------------------------
# Leaves
# ---------------------------------------------------------------------------


def _shred(raw: Any) -> Shred:
    if isinstance(raw, Mapping):
        return Shred(
            injected_start=int(_get(raw, "injectedStart", "injected_start") or 0),
            host_start=int(_get(raw, "hostStart", "host_start") or 0),
            length=int(_get(raw, "length") or 0),
        )
    if isinstance(raw, (list, tuple)) and len(raw) == 3:
        return Shred(int(raw[0]), int(raw[1]), int(raw[2]))
    raise SnapshotError(f"Unrecognized injection shred: {raw!r}")


def _injection(raw: Mapping[str, Any]) -> Injection:
    host_path = _str_or_none(_get(raw, "hostPath", "host_path"))
    if host_path is None:
        raise SnapshotError("Injection without 'hostPath'")
    host_text = _get(raw, "hostText", "host_text")
    return Injection(
        host_path=host_path,
        host_document=Document(str(host_text)) if host_text is not None else None,
        shreds=tuple(_shred(s) for s in raw.get("shreds") or ()),
    )


def _source_file(raw: Any) -> SourceFile | None:
    if raw is None:
        return None
    if isinstance(raw, str):
        return SourceFile(path=raw) if raw.strip() else None
    if not isinstance(raw, Mapping):
        raise SnapshotError(f"Unrecognized file reference: {raw!r}")
    path = _str_or_none(_get(raw, "path"))
    if path is None:
        return None
    text = _get(raw, "text")
    injection = _get(raw, "injection")
    return SourceFile(
        path=path,
        document=Document(str(text)) if text is not None else None,
        injection=_injection(injection) if isinstance(injection, Mapping) else None,
    )


def _descriptor(raw: Any) -> ProblemDescriptor | None:
    if not isinstance(raw, Mapping):
        return None
    element = None
    if any(k in raw for k in ("file", "offset", "startOffset", "start_offset", "valid")):
        element = Element(
            file=_source_file(raw.get("file")),
            start_offset=int(_get(raw, "offset", "startOffset", "start_offset") or 0),
            valid=bool(raw.get("valid", True)),
        )
    return ProblemDescriptor(
        description=str(_get(raw, *_DESCRIPTION_KEYS) or ""),
        highlight_type=_str_or_none(_get(raw, "highlightType", "highlight_type")),
        element=element,
    )


def _leaf(data: Mapping[str, Any]) -> LeafNode:
    return LeafNode(
        descriptor=_descriptor(data.get("descriptor")),
        level=_str_or_none(data.get("level")),
    )


# ---------------------------------------------------------------------------
# Groups and opaque nodes
# ---------------------------------------------------------------------------


def _rule(raw: Any) -> RuleInfo | None:
    if isinstance(raw, str):
        return RuleInfo(short_name=raw)
    if not isinstance(raw, Mapping):
        return None
    return RuleInfo(
        short_name=_str_or_none(_get(raw, "shortName", "short_name", "id")),
        display_name=_str_or_none(_get(raw, "displayName", "display_name")),
        group_display_name=_str_or_none(
            _get(raw, "groupDisplayName", "group_display_name", "group")
        ),
    )


def _group(data: Mapping[str, Any], kind: GroupKind) -> GroupNode:
    return GroupNode(
        label=str(_get(data, "label", "name") or ""),
        children=_children(data),
        rule=_rule(_get(data, "rule", "tool")) if kind is GroupKind.RULE else None,
        kind=kind,
    )


def _opaque(data: Mapping[str, Any]) -> OpaqueNode:
    payload = _get(data, *_OPAQUE_MARKERS)
    if payload is None:
        payload = {k: v for k, v in data.items() if k not in ("children", "kind")}
    return OpaqueNode(payload=payload, children=_children(data))


def _salvage(data: Mapping[str, Any]) -> OpaqueNode:
    """Keep a node that failed conversion as an opaque payload.

    Leaves hand their descriptor over, so the probes can still recover the
    description and file.
    """
    descriptor = data.get("descriptor")
    if isinstance(descriptor, Mapping):
        payload: Any = dict(descriptor)
    else:
        payload = {k: v for k, v in data.items() if k not in ("children", "kind")}
    return OpaqueNode(payload=payload, children=_children(data))


def _typed_node(data: Mapping[str, Any]) -> Node:
    kind = str(data.get("kind") or "").lower()
    if kind == "leaf":
        return _leaf(data)
    if kind in ("group", "rule"):
        return _group(data, GroupKind.RULE)
    if kind == "folder":
        return _group(data, GroupKind.FOLDER)
    if kind == "opaque":
        return _opaque(data)
    if kind:
        logger.debug("Unknown node kind %r, treating it as opaque", kind)
        return _opaque(data)

    if "descriptor" in data:
        return _leaf(data)
    if "rule" in data or "tool" in data:
        return _group(data, GroupKind.RULE)
    if any(k in data for k in _OPAQUE_MARKERS) or _get(data, *_DESCRIPTION_KEYS):
        return _opaque(data)
    return _group(data, GroupKind.FOLDER)


def node_from_mapping(data: Any) -> Node:
    """Convert one snapshot node (and its subtree) into the node model.

    Never raises. A node whose own fields are malformed becomes an
    ``OpaqueNode`` (see ``_salvage``); its siblings and children are
    converted independently.
    """
    if not isinstance(data, Mapping):
        return OpaqueNode(payload=data)
    try:
        return _typed_node(data)
    except (SnapshotError, TypeError, ValueError):
        logger.debug("Keeping malformed node as opaque: %r", data, exc_info=True)
        return _salvage(data)


def _panel(data: Any) -> Panel:
    if not isinstance(data, Mapping):
        raise SnapshotError(f"Panel must be a mapping, got {type(data).__name__}")
    raw_kind = str(data.get("kind") or PanelKind.INSPECTION.value).lower()
    try:
        kind = PanelKind(raw_kind)
    except ValueError as exc:
        raise SnapshotError(f"Unknown panel kind: {raw_kind!r}") from exc
    root = _get(data, "root", "tree")
    return Panel(
        name=str(data.get("name") or ""),
        root=node_from_mapping(root if root is not None else {}),
        kind=kind,
    )


def tree_from_mapping(data: Mapping[str, Any]) -> ResultTree:
    """Convert a decoded snapshot document into a ``ResultTree``.

    A document with a top-level ``root`` and no ``panels`` is read as a
    single inspection panel.

    Raises:
        SnapshotError: If the document is not a mapping, or its ``panels``
            or ``documents`` entry has the wrong shape.
    """
    if not isinstance(data, Mapping):
        raise SnapshotError("Snapshot document must be a mapping")

    raw_panels = data.get("panels")
    if raw_panels is None and data.get("root") is not None:
        raw_panels = [{"name": "Inspection Results", "root": data["root"]}]
    if raw_panels is None:
        raw_panels = []
    if not isinstance(raw_panels, (list, tuple)):
        raise SnapshotError("'panels' must be a list")

    raw_documents = data.get("documents") or {}
    if not isinstance(raw_documents, Mapping):
        raise SnapshotError("'documents' must be a mapping of path to text")

    panels: list[Panel] = []
    for raw_panel in raw_panels:
        try:
            panels.append(_panel(raw_panel))
        except SnapshotError as exc:
            logger.warning("Skipping malformed panel: %s", exc)
    return ResultTree(
        panels=tuple(panels),
        documents={str(path): Document(str(text)) for path, text in raw_documents.items()},
    )
