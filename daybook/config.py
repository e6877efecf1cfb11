from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date
from pathlib import Path
import tomllib

from .tasks.positioning import InsertPosition


CONFIG_FILENAME = "daybook.toml"


def _as_int(value, *, default: int) -> int:
    try:
        return int(value)
    except Exception:  # noqa: BLE001
        return int(default)


def _as_position(value, *, default: str) -> str:
    candidate = str(value or "").strip().lower()
    if candidate in {InsertPosition.BEGINNING.value, InsertPosition.END.value}:
        return candidate
    return default


def _as_strftime(value, *, default: str) -> str:
    candidate = str(value or "").strip()
    if not candidate or "%" not in candidate:
        return default
    try:
        date(2000, 1, 2).strftime(candidate)
    except Exception:  # noqa: BLE001
        return default
    return candidate


@dataclass(frozen=True)
class WorkspaceConfig:
    name: str = "Daybook"
    version: int = 1


@dataclass(frozen=True)
class DailyConfig:
    root: str = "daily"
    filename_format: str = "%Y-%m-%d"


@dataclass(frozen=True)
class TasksConfig:
    default_position: str = InsertPosition.BEGINNING.value
    time_format: str = "%H:%M"


@dataclass(frozen=True)
class LogConfig:
    events: str = ".daybook/logs/events.jsonl"


@dataclass(frozen=True)
class DaybookConfig:
    workspace: WorkspaceConfig = field(default_factory=WorkspaceConfig)
    daily: DailyConfig = field(default_factory=DailyConfig)
    tasks: TasksConfig = field(default_factory=TasksConfig)
    log: LogConfig = field(default_factory=LogConfig)


def load_daybook_toml(path: Path) -> tuple[DaybookConfig, str]:
    """Load workspace config from daybook.toml.

    Returns (config, warning). Warning is empty on success; on any problem the
    defaults are returned alongside it.
    """

    if not path.exists():
        return DaybookConfig(), ""

    try:
        data = tomllib.loads(path.read_text(encoding="utf-8"))
    except Exception as exc:  # noqa: BLE001
        return DaybookConfig(), f"{path.name} parse failed: {exc}"

    if not isinstance(data, dict):
        return DaybookConfig(), f"{path.name} parse failed: top-level is not a table"

    workspace = data.get("workspace") if isinstance(data.get("workspace"), dict) else {}
    daily = data.get("daily") if isinstance(data.get("daily"), dict) else {}
    tasks = data.get("tasks") if isinstance(data.get("tasks"), dict) else {}
    log = data.get("log") if isinstance(data.get("log"), dict) else {}

    cfg = DaybookConfig(
        workspace=WorkspaceConfig(
            name=str(workspace.get("name") or WorkspaceConfig.name),
            version=_as_int(workspace.get("version"), default=WorkspaceConfig.version),
        ),
        daily=DailyConfig(
            root=str(daily.get("root") or DailyConfig.root).strip() or DailyConfig.root,
            filename_format=_as_strftime(daily.get("filename_format"), default=DailyConfig.filename_format),
        ),
        tasks=TasksConfig(
            default_position=_as_position(tasks.get("default_position"), default=TasksConfig.default_position),
            time_format=_as_strftime(tasks.get("time_format"), default=TasksConfig.time_format),
        ),
        log=LogConfig(
            events=str(log.get("events") or LogConfig.events).strip() or LogConfig.events,
        ),
    )
    return cfg, ""


def explain_daybook_toml(config: DaybookConfig, *, path: Path | None = None) -> str:
    location = str(path) if path is not None else CONFIG_FILENAME
    lines = [
        f"{CONFIG_FILENAME} guide ({location})",
        "",
        "[workspace]",
        f"- name: workspace display name (current: {config.workspace.name})",
        f"- version: workspace schema version (current: {config.workspace.version})",
        "",
        "[daily]",
        f"- root: folder holding daily notes, relative to the workspace (current: {config.daily.root})",
        f"- filename_format: strftime pattern of daily note names (current: {config.daily.filename_format})",
        "",
        "[tasks]",
        f"- default_position: where `add` puts new to-dos, beginning or end (current: {config.tasks.default_position})",
        f"- time_format: strftime pattern for completion times (current: {config.tasks.time_format})",
        "",
        "[log]",
        f"- events: JSONL audit log of applied edits (current: {config.log.events})",
    ]
    return "\n".join(lines)
