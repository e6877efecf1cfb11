from __future__ import annotations

from datetime import date
from pathlib import Path


def daily_path(daily_root: Path, day: date, filename_format: str = "%Y-%m-%d") -> Path:
    return daily_root / f"{day.strftime(filename_format)}.md"


def ensure_daily_note(daily_root: Path, day: date, filename_format: str = "%Y-%m-%d") -> Path:
    """Return today's note path, creating an empty note when it is missing."""

    path = daily_path(daily_root, day, filename_format)
    if path.exists():
        return path
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text("", encoding="utf-8")
    return path
