"""Shared helpers for CLI tests: result snapshots and JSON output parsing."""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any

from click.testing import Result


def _rule(short_name: str, group: str, label: str, leaf: dict[str, Any]) -> dict[str, Any]:
    return {
        "kind": "rule",
        "label": label,
        "rule": {"shortName": short_name, "groupDisplayName": group},
        "children": [{"kind": "leaf", "descriptor": leaf}],
    }


def snapshot_for(root: Path, indexing: bool = False) -> dict[str, Any]:
    """Build a snapshot with three problems for the files under ``root``.

    An error in ``src/app.py``, a typo in ``docs/readme.md`` and a weak
    warning in ``src/util.py``, in that order.
    """
    return {
        "indexing": indexing,
        "panels": [
            {
                "name": "Inspection Results",
                "root": {
                    "kind": "folder",
                    "label": "Inspection Results",
                    "children": [
                        _rule("PyUnresolvedReferences", "Python", "Unresolved references", {
                            "description": "Unresolved reference 'undefined_name'",
                            "highlightType": "LIKE_UNKNOWN_SYMBOL",
                            "file": str(root / "src" / "app.py"),
                            "offset": 17,
                        }),
                        _rule("SpellCheckingInspection", "Proofreading", "Typo", {
                            "description": "Typo: In word 'teh'",
                            "highlightType": "WEAK_WARNING",
                            "file": str(root / "docs" / "readme.md"),
                            "offset": 18,
                        }),
                        _rule("PyUnusedLocal", "Python", "Unused local", {
                            "description": "Function is not used",
                            "highlightType": "LIKE_UNUSED_SYMBOL",
                            "file": str(root / "src" / "util.py"),
                            "offset": 4,
                        }),
                    ],
                },
            }
        ],
    }


def write_snapshot(root: Path, indexing: bool = False) -> Path:
    """Write ``snapshot_for(root)`` to the default snapshot location."""
    path = root / ".inspectlens" / "results.json"
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(json.dumps(snapshot_for(root, indexing)))
    return path


def json_output(result: Result) -> dict[str, Any]:
    return json.loads(result.output)
