from __future__ import annotations

from dataclasses import dataclass, field, replace
from enum import Enum
from typing import Iterator, Union


COMMENT_INDENT = "    "
MOVED_TO_SEPARATOR = "→"


class TaskStatus(str, Enum):
    PENDING = "pending"
    COMPLETED = "completed"
    ABANDONED = "abandoned"
    MOVED = "moved"

    @property
    def marker(self) -> str:
        return _STATUS_MARKERS[self]

    @classmethod
    def from_marker(cls, marker: str) -> TaskStatus:
        for status, char in _STATUS_MARKERS.items():
            if char == marker:
                return status
        raise ValueError(f"unknown task marker: {marker!r}")


_STATUS_MARKERS: dict[TaskStatus, str] = {
    TaskStatus.PENDING: " ",
    TaskStatus.COMPLETED: "x",
    TaskStatus.ABANDONED: "-",
    TaskStatus.MOVED: ">",
}


@dataclass(frozen=True)
class TimeInfo:
    scheduled: str | None = None  # "09:00-10:00" or "~13:30"
    completed: str | None = None  # "15:40" or "15:40 2026-10-18"


@dataclass(frozen=True)
class Task:
    status: TaskStatus
    description: str
    emoji: str | None = None
    time_info: TimeInfo = field(default_factory=TimeInfo)
    original_line: str = ""
    comment: str = ""
    target: str | None = None
    source: str | None = None
    line_index: int = -1

    @property
    def identity(self) -> tuple[str, TaskStatus]:
        """Content identity used to locate a task inside a document.

        Two tasks with the same description and status are indistinguishable.
        """

        return self.description, self.status

    @property
    def text(self) -> str:
        """Everything after the checkbox, exactly as it is rendered.

        The completion time shows up here as the ` (HH:MM)` suffix; it is kept
        in `time_info.completed` and never folded into `description`.
        """

        parts = []
        if self.emoji:
            parts.append(f"{self.emoji} ")
        if self.time_info.scheduled:
            parts.append(f"{self.time_info.scheduled} ")
        parts.append(self.description)
        if self.status is TaskStatus.COMPLETED and self.time_info.completed:
            parts.append(f" ({self.time_info.completed})")
        if self.status is TaskStatus.MOVED and self.target:
            parts.append(f" {MOVED_TO_SEPARATOR} {self.target}")
        if self.source:
            parts.append(f" (from {self.source})")
        return "".join(parts)

    def evolve(self, **changes) -> Task:
        return replace(self, **changes)


@dataclass(frozen=True)
class TextBlock:
    content: str
    line_index: int = -1


Node = Union[Task, TextBlock]


@dataclass(frozen=True)
class Document:
    file_path: str
    content: tuple[Node, ...] = ()

    def __len__(self) -> int:
        return len(self.content)

    def tasks(self) -> Iterator[Task]:
        for node in self.content:
            if isinstance(node, Task):
                yield node

    def with_content(self, content) -> Document:
        return Document(file_path=self.file_path, content=tuple(content))

    def spliced(self, index: int, *, delete: int = 0, insert: tuple[Node, ...] = ()) -> Document:
        nodes = list(self.content)
        nodes[index : index + delete] = insert
        return self.with_content(nodes)


def is_comment_line(line: str) -> bool:
    return line.startswith("> ") or line.startswith(COMMENT_INDENT) or line.startswith("\t")


def join_comment(comment: str, text: str) -> str:
    """Append comment text below an existing comment, indenting bare lines."""

    lines = [line if is_comment_line(line) else COMMENT_INDENT + line for line in text.split("\n")]
    indented = "\n".join(lines)
    return f"{comment}\n{indented}" if comment else indented
