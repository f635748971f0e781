"""Analysis engine that exchanges files with the host.

The host dumps its current result tree to a snapshot file (JSON, or YAML
when the suffix is ``.yaml``/``.yml``; see ``inspectlens.core.tree.loader``
for the layout) and picks trigger requests up from a spool directory. A
trigger request is a small JSON document::

    {"scope": "files", "files": ["/work/app.py"], "profile": null,
     "requested_at": "2026-01-01T12:00:00+00:00"}
"""

from __future__ import annotations

import json
import logging
import uuid
from collections.abc import Mapping
from datetime import datetime, timezone
from pathlib import Path
from typing import Any

import yaml

from inspectlens.core.scope.models import ResolvedScope
from inspectlens.core.tree.loader import tree_from_mapping
from inspectlens.core.tree.nodes import ResultTree
from inspectlens.exceptions import AnalysisEngineError, SnapshotError
from inspectlens.host.base import AnalysisEngine

logger = logging.getLogger(__name__)

_YAML_SUFFIXES = frozenset({".yaml", ".yml"})


def load_snapshot(path: Path) -> Mapping[str, Any] | None:
    """Read and decode a snapshot file.

    Returns:
        The decoded mapping, or ``None`` if the file does not exist.

    Raises:
        SnapshotError: If the file cannot be read or decoded, or is not a
            mapping.
    """
    if not path.exists():
        return None
    try:
        text = path.read_text(encoding="utf-8")
    except OSError as exc:
        raise SnapshotError(f"Cannot read snapshot {path}: {exc}") from exc
    if not text.strip():
        return None
    try:
        if path.suffix.lower() in _YAML_SUFFIXES:
            data = yaml.safe_load(text)
        else:
            data = json.loads(text)
    except (yaml.YAMLError, json.JSONDecodeError) as exc:
        raise SnapshotError(f"Cannot decode snapshot {path}: {exc}") from exc
    if data is None:
        return None
    if not isinstance(data, Mapping):
        raise SnapshotError(f"Snapshot {path} must contain a mapping")
    return data


class SnapshotAnalysisEngine(AnalysisEngine):
    """``AnalysisEngine`` over a snapshot file and a trigger spool directory.

    Args:
        snapshot_path: Where the host dumps its result tree.
        spool_dir: Where trigger requests are written.
    """

    def __init__(self, snapshot_path: Path, spool_dir: Path) -> None:
        self._snapshot_path = Path(snapshot_path)
        self._spool_dir = Path(spool_dir)

    @property
    def snapshot_path(self) -> Path:
        return self._snapshot_path

    @property
    def spool_dir(self) -> Path:
        return self._spool_dir

    def result_tree(self) -> ResultTree:
        data = load_snapshot(self._snapshot_path)
        if data is None:
            return ResultTree.empty()
        return tree_from_mapping(data)

    def is_indexing(self) -> bool:
        data = load_snapshot(self._snapshot_path)
        return bool(data.get("indexing", False)) if data is not None else False

    def trigger(self, scope: ResolvedScope, profile: str | None = None) -> None:
        now = datetime.now(timezone.utc)
        request = {
            "scope": "whole_project" if scope.is_whole_project else "files",
            "files": scope.as_strings(),
            "profile": profile,
            "requested_at": now.isoformat(),
        }
        name = f"trigger-{now.strftime('%Y%m%dT%H%M%S')}-{uuid.uuid4().hex[:8]}.json"
        target = self._spool_dir / name
        try:
            self._spool_dir.mkdir(parents=True, exist_ok=True)
            target.write_text(json.dumps(request, indent=2), encoding="utf-8")
        except OSError as exc:
            raise AnalysisEngineError(f"Cannot write trigger request to {target}: {exc}") from exc
        logger.info("Wrote trigger request %s", target)
