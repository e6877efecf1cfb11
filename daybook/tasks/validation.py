from __future__ import annotations

from dataclasses import dataclass
from typing import Callable

from .errors import InvalidTaskStateError, TaskToolError, TaskValidationError
from .lookup import find_task_by_description
from .model import Document, Task, TaskStatus

StatusPredicate = Callable[[TaskStatus], bool]


@dataclass(frozen=True)
class TaskQuery:
    query_text: str
    status_predicate: StatusPredicate | None = None
    requirement: str = ""


def status_is(*statuses: TaskStatus) -> tuple[StatusPredicate, str]:
    wanted = frozenset(statuses)
    return (lambda status: status in wanted), " or ".join(item.value for item in statuses)


def status_is_not(*statuses: TaskStatus) -> tuple[StatusPredicate, str]:
    unwanted = frozenset(statuses)
    return (lambda status: status not in unwanted), "not " + " or ".join(item.value for item in statuses)


def task_query(query_text: str, rule: tuple[StatusPredicate, str] | None = None) -> TaskQuery:
    if rule is None:
        return TaskQuery(query_text=query_text)
    predicate, requirement = rule
    return TaskQuery(query_text=query_text, status_predicate=predicate, requirement=requirement)


def _resolve(document: Document, item: TaskQuery) -> Task:
    task = find_task_by_description(document, item.query_text)
    predicate = item.status_predicate
    if predicate is not None and not predicate(task.status):
        raise InvalidTaskStateError(item.query_text, document.file_path, task.status.value, item.requirement)
    return task


def validate_tasks(document: Document, items: list[TaskQuery]) -> list[tuple[TaskQuery, Task]]:
    """Resolve every query up front; raise once with every failure listed."""

    resolved: list[tuple[TaskQuery, Task]] = []
    unresolved: list[TaskToolError] = []
    invalid: list[InvalidTaskStateError] = []

    for item in items:
        try:
            resolved.append((item, _resolve(document, item)))
        except InvalidTaskStateError as exc:
            invalid.append(exc)
        except TaskToolError as exc:
            unresolved.append(exc)

    if unresolved or invalid:
        raise TaskValidationError(document.file_path, unresolved, invalid)
    return resolved
