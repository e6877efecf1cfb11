from __future__ import annotations

from .errors import TaskToolError
from .formatter import format_task
from .model import Task, TaskStatus, TimeInfo, join_comment
from .parser import parse_task_content


def create_task(description: str, emoji: str | None = None, scheduled: str | None = None) -> Task:
    task = Task(
        status=TaskStatus.PENDING,
        description=" ".join(description.strip().split()),
        emoji=emoji or None,
        time_info=TimeInfo(scheduled=scheduled or None),
    )
    return task.evolve(original_line=format_task(task))


def task_from_text(text: str, status: TaskStatus = TaskStatus.PENDING) -> Task:
    """Build a task from free text that may carry emoji/time annotations."""

    cleaned = " ".join(text.strip().split())
    if not cleaned:
        raise TaskToolError("to-do text is empty")
    parsed = parse_task_content(cleaned, status)
    task = Task(
        status=status,
        description=parsed.description,
        emoji=parsed.emoji,
        time_info=TimeInfo(scheduled=parsed.scheduled, completed=parsed.completed),
        target=parsed.target,
        source=parsed.source,
    )
    return task.evolve(original_line=format_task(task))


def append_comment_line(task: Task, text: str | None) -> Task:
    if not text:
        return task
    return task.evolve(comment=join_comment(task.comment, text))


def add_comment_to_task(task: Task, comment: str | None, timestamp: str | None = None) -> Task:
    if not comment:
        return task
    formatted = f"({timestamp}) {comment}" if timestamp else comment
    return append_comment_line(task, formatted)


def complete_task(task: Task, time: str | None = None, comment: str | None = None) -> Task:
    time_info = task.time_info
    if time:
        time_info = TimeInfo(scheduled=time_info.scheduled, completed=time)
    completed = task.evolve(status=TaskStatus.COMPLETED, time_info=time_info)
    return append_comment_line(completed, comment)


def uncheck_task(task: Task) -> Task:
    return task.evolve(
        status=TaskStatus.PENDING,
        time_info=TimeInfo(scheduled=task.time_info.scheduled),
    )


def abandon_task(task: Task, comment: str | None = None) -> Task:
    return append_comment_line(task.evolve(status=TaskStatus.ABANDONED), comment)


def mark_task_as_moved(task: Task, target: str) -> Task:
    return task.evolve(status=TaskStatus.MOVED, target=target)


def create_moved_task(task: Task, source: str) -> Task:
    """Destination copy of a task that is being moved away from `source`."""

    status = TaskStatus.PENDING if task.status is TaskStatus.MOVED else task.status
    return task.evolve(status=status, target=None, source=source, line_index=-1)
