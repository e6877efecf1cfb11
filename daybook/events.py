from __future__ import annotations

from collections.abc import Callable
import contextlib
from dataclasses import asdict, dataclass
from datetime import datetime, timezone
import json
from pathlib import Path
import secrets
import time
from typing import Any


def utc_now_iso() -> str:
    return datetime.now(tz=timezone.utc).replace(microsecond=0).isoformat()


def new_event_id() -> str:
    stamp = int(time.time() * 1000)
    token = secrets.token_hex(4)
    return f"evt-{stamp}-{token}"


@dataclass(frozen=True)
class EditEvent:
    id: str
    ts: str
    type: str  # "tasks.<command>" or "tasks.<command>.failed"
    severity: str
    note: str
    message: str
    touched: int = 0
    error: str = ""

    @property
    def command(self) -> str:
        parts = self.type.split(".")
        return parts[1] if len(parts) > 1 else self.type

    @property
    def failed(self) -> bool:
        return self.severity == "error"


EditHandler = Callable[[EditEvent], Any]


def _event_from_record(payload: Any) -> EditEvent | None:
    if not isinstance(payload, dict):
        return None
    event_type = payload.get("type")
    if not isinstance(event_type, str) or not event_type.startswith("tasks."):
        return None
    try:
        touched = int(payload.get("touched") or 0)
    except (TypeError, ValueError):
        touched = 0
    return EditEvent(
        id=str(payload.get("id") or ""),
        ts=str(payload.get("ts") or ""),
        type=event_type,
        severity=str(payload.get("severity") or "info"),
        note=str(payload.get("note") or ""),
        message=str(payload.get("message") or ""),
        touched=touched,
        error=str(payload.get("error") or ""),
    )


class EditLog:
    """Append-only JSONL record of note edits, with in-process subscribers.

    One line per applied or rejected operation. Reading tolerates lines it
    cannot decode, so a hand-edited log never breaks `daybook log`.
    """

    def __init__(self, log_path: Path) -> None:
        self._log_path = log_path
        self._handlers: list[EditHandler] = []
        self.events_written = 0
        self._log_path.parent.mkdir(parents=True, exist_ok=True)

    @property
    def log_path(self) -> Path:
        return self._log_path

    def subscribe(self, handler: EditHandler) -> Callable[[], None]:
        self._handlers.append(handler)

        def _unsubscribe() -> None:
            with contextlib.suppress(ValueError):
                self._handlers.remove(handler)

        return _unsubscribe

    def record_edit(self, command: str, note: str, summary: str, *, touched: int = 0) -> EditEvent:
        return self._publish(
            EditEvent(
                id=new_event_id(),
                ts=utc_now_iso(),
                type=f"tasks.{command}",
                severity="info",
                note=note,
                message=summary,
                touched=touched,
            )
        )

    def record_failure(self, command: str, note: str, error: Exception) -> EditEvent:
        return self._publish(
            EditEvent(
                id=new_event_id(),
                ts=utc_now_iso(),
                type=f"tasks.{command}.failed",
                severity="error",
                note=note,
                message=str(error),
                error=type(error).__name__,
            )
        )

    def recent(self, limit: int = 20, *, note: str | None = None) -> list[EditEvent]:
        """Newest-last list of at most `limit` events, optionally for one note."""

        if limit <= 0 or not self._log_path.exists():
            return []
        events: list[EditEvent] = []
        for raw in self._log_path.read_text(encoding="utf-8").splitlines():
            raw = raw.strip()
            if not raw:
                continue
            try:
                payload = json.loads(raw)
            except Exception:  # noqa: BLE001
                continue
            event = _event_from_record(payload)
            if event is None:
                continue
            if note is not None and event.note != note:
                continue
            events.append(event)
        return events[-limit:]

    def _publish(self, event: EditEvent) -> EditEvent:
        with self._log_path.open("a", encoding="utf-8") as handle:
            handle.write(json.dumps(asdict(event), sort_keys=True, ensure_ascii=True))
            handle.write("\n")
        self.events_written += 1
        for handler in list(self._handlers):
            try:
                handler(event)
            except Exception:
                continue
        return event
