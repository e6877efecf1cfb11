from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path

from .config import CONFIG_FILENAME, DaybookConfig


def find_workspace_root(start: Path | None = None) -> Path:
    """Best-effort workspace root discovery.

    The nearest ancestor holding a `daybook.toml` sentinel wins. If nothing
    matches, return the start directory so ad-hoc folders of notes still work.
    """

    probe = (start or Path.cwd()).resolve()
    for candidate in [probe, *probe.parents]:
        if (candidate / CONFIG_FILENAME).exists():
            return candidate
    return probe


@dataclass(frozen=True)
class WorkspacePaths:
    root: Path
    config_toml: Path
    daily_dir: Path
    runtime_dir: Path
    locks_dir: Path
    events_log: Path


def workspace_paths(root: Path, config: DaybookConfig | None = None) -> WorkspacePaths:
    config = config or DaybookConfig()
    runtime = root / ".daybook"
    events = Path(config.log.events)
    return WorkspacePaths(
        root=root,
        config_toml=root / CONFIG_FILENAME,
        daily_dir=root / config.daily.root,
        runtime_dir=runtime,
        locks_dir=runtime / "locks",
        events_log=events if events.is_absolute() else root / events,
    )


def ensure_runtime_dirs(paths: WorkspacePaths) -> WorkspacePaths:
    paths.runtime_dir.mkdir(parents=True, exist_ok=True)
    paths.locks_dir.mkdir(parents=True, exist_ok=True)
    paths.events_log.parent.mkdir(parents=True, exist_ok=True)
    return paths
