"""Configuration: project location, snapshot exchange paths, thresholds.

Settings are resolved in three layers, later layers winning:

1. Defaults (``InspectLensSettings`` field defaults).
2. ``.inspectlens.yaml`` in the project root, or an explicit config file::

       project_name: my-service
       snapshot: .inspectlens/results.json
       spool_dir: .inspectlens/triggers
       state_file: .inspectlens/run_state.json
       current_file: src/app.py
       default_limit: 100
       git_executable: git
       wait:
         timeout_ms: 180000
         poll_ms: 1000
       status:
         liveness_ms: 30000
         settle_ms: 5000
         staleness_ms: 60000

3. ``INSPECTLENS_*`` environment variables (see ``_ENV_KEYS``).

Relative paths are resolved against the project root.
"""

from __future__ import annotations

import os
from collections.abc import Mapping
from dataclasses import dataclass, field, replace
from pathlib import Path
from typing import Any

import yaml

from inspectlens.core.status.store import StatusThresholds
from inspectlens.exceptions import ConfigError, NoProjectError

CONFIG_FILENAME = ".inspectlens.yaml"
STATE_DIRNAME = ".inspectlens"

# Environment variable -> flat settings key.
_ENV_KEYS: dict[str, str] = {
    "INSPECTLENS_PROJECT_NAME": "project_name",
    "INSPECTLENS_SNAPSHOT": "snapshot",
    "INSPECTLENS_SPOOL_DIR": "spool_dir",
    "INSPECTLENS_STATE_FILE": "state_file",
    "INSPECTLENS_CURRENT_FILE": "current_file",
    "INSPECTLENS_DEFAULT_LIMIT": "default_limit",
    "INSPECTLENS_GIT": "git_executable",
    "INSPECTLENS_WAIT_TIMEOUT_MS": "wait_timeout_ms",
    "INSPECTLENS_WAIT_POLL_MS": "wait_poll_ms",
    "INSPECTLENS_LIVENESS_MS": "liveness_ms",
    "INSPECTLENS_SETTLE_MS": "settle_ms",
    "INSPECTLENS_STALENESS_MS": "staleness_ms",
}

_INT_KEYS = frozenset({
    "default_limit",
    "wait_timeout_ms",
    "wait_poll_ms",
    "liveness_ms",
    "settle_ms",
    "staleness_ms",
})


@dataclass(frozen=True)
class InspectLensSettings:
    """Fully resolved settings for one project.

    Attributes:
        project_root: Absolute project root directory.
        project_name: Name reported in responses; defaults to the root's name.
        snapshot_path: Result snapshot the host dumps.
        spool_dir: Directory trigger requests are written to.
        state_path: File the run status is kept in between invocations.
        current_file: File treated as open in the active editor.
        default_limit: Page size when a query does not give one.
        git_executable: git binary used for changed-files scopes.
        wait_timeout_ms: Default ``wait`` timeout.
        wait_poll_ms: Default ``wait`` polling interval.
        thresholds: Run status classification windows.
    """

    project_root: Path
    project_name: str = ""
    snapshot_path: Path = Path(STATE_DIRNAME) / "results.json"
    spool_dir: Path = Path(STATE_DIRNAME) / "triggers"
    state_path: Path = Path(STATE_DIRNAME) / "run_state.json"
    current_file: str | None = None
    default_limit: int = 100
    git_executable: str = "git"
    wait_timeout_ms: int = 180_000
    wait_poll_ms: int = 1_000
    thresholds: StatusThresholds = field(default_factory=StatusThresholds)

    def with_overrides(self, **changes: Any) -> InspectLensSettings:
        """Return a copy with the non-``None`` changes applied."""
        return replace(self, **{k: v for k, v in changes.items() if v is not None})


def _flatten(data: Mapping[str, Any], source: str) -> dict[str, Any]:
    flat: dict[str, Any] = {}
    for key, value in data.items():
        if key == "wait":
            if not isinstance(value, Mapping):
                raise ConfigError(f"{source}: 'wait' must be a mapping")
            for sub in ("timeout_ms", "poll_ms"):
                if sub in value:
                    flat[f"wait_{sub}"] = value[sub]
        elif key == "status":
            if not isinstance(value, Mapping):
                raise ConfigError(f"{source}: 'status' must be a mapping")
            for sub in ("liveness_ms", "settle_ms", "staleness_ms"):
                if sub in value:
                    flat[sub] = value[sub]
        else:
            flat[str(key)] = value
    return flat


def _read_config_file(path: Path) -> dict[str, Any]:
    try:
        data = yaml.safe_load(path.read_text(encoding="utf-8"))
    except OSError as exc:
        raise ConfigError(f"Cannot read config file {path}: {exc}") from exc
    except yaml.YAMLError as exc:
        raise ConfigError(f"Invalid YAML in {path}: {exc}") from exc
    if data is None:
        return {}
    if not isinstance(data, Mapping):
        raise ConfigError(f"{path}: top level must be a mapping")
    return _flatten(data, str(path))


def _coerce_int(key: str, value: Any, source: str) -> int:
    if isinstance(value, bool):
        raise ConfigError(f"{source}: '{key}' must be an integer, got {value!r}")
    try:
        number = int(value)
    except (TypeError, ValueError) as exc:
        raise ConfigError(f"{source}: '{key}' must be an integer, got {value!r}") from exc
    if number < 0:
        raise ConfigError(f"{source}: '{key}' must not be negative")
    return number


def _resolve_path(root: Path, raw: Any) -> Path:
    path = Path(str(raw)).expanduser()
    return path if path.is_absolute() else root / path


def load_settings(
    root: str | Path,
    config_path: str | Path | None = None,
    environ: Mapping[str, str] | None = None,
) -> InspectLensSettings:
    """Resolve settings for the project at ``root``.

    Args:
        root: Project root directory.
        config_path: Explicit config file; must exist when given. Defaults
            to ``.inspectlens.yaml`` in the root, which may be absent.
        environ: Environment to read overrides from; defaults to
            ``os.environ``.

    Raises:
        NoProjectError: If ``root`` is not a directory.
        ConfigError: If the config file or an override is invalid.
    """
    project_root = Path(root).expanduser().resolve()
    if not project_root.is_dir():
        raise NoProjectError(f"Project root {project_root} is not a directory")

    values: dict[str, Any] = {}
    if config_path is not None:
        explicit = Path(config_path)
        if not explicit.is_file():
            raise ConfigError(f"Config file {explicit} does not exist")
        values.update(_read_config_file(explicit))
    elif (project_root / CONFIG_FILENAME).is_file():
        values.update(_read_config_file(project_root / CONFIG_FILENAME))

    env = os.environ if environ is None else environ
    for env_key, key in _ENV_KEYS.items():
        raw = env.get(env_key)
        if raw is not None and raw.strip():
            values[key] = raw.strip()

    unknown = set(values) - set(_ENV_KEYS.values())
    if unknown:
        raise ConfigError(f"Unknown configuration key(s): {', '.join(sorted(unknown))}")

    for key in _INT_KEYS & set(values):
        values[key] = _coerce_int(key, values[key], "configuration")

    defaults = InspectLensSettings(project_root=project_root)
    thresholds = StatusThresholds(
        liveness_ms=values.pop("liveness_ms", defaults.thresholds.liveness_ms),
        settle_ms=values.pop("settle_ms", defaults.thresholds.settle_ms),
        staleness_ms=values.pop("staleness_ms", defaults.thresholds.staleness_ms),
    )
    snapshot = values.pop("snapshot", defaults.snapshot_path)
    spool_dir = values.pop("spool_dir", defaults.spool_dir)
    state_file = values.pop("state_file", defaults.state_path)
    current_file = values.pop("current_file", None)

    return InspectLensSettings(
        project_root=project_root,
        project_name=str(values.pop("project_name", "") or project_root.name),
        snapshot_path=_resolve_path(project_root, snapshot),
        spool_dir=_resolve_path(project_root, spool_dir),
        state_path=_resolve_path(project_root, state_file),
        current_file=str(current_file) if current_file is not None else None,
        default_limit=values.pop("default_limit", defaults.default_limit),
        git_executable=str(values.pop("git_executable", defaults.git_executable)),
        wait_timeout_ms=values.pop("wait_timeout_ms", defaults.wait_timeout_ms),
        wait_poll_ms=values.pop("wait_poll_ms", defaults.wait_poll_ms),
        thresholds=thresholds,
    )
