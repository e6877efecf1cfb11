from __future__ import annotations

from typing import Callable
import unicodedata

from .errors import AmbiguousTaskError, TaskNotFoundError
from .model import Document, Task

TaskPredicate = Callable[[Task], bool]


def normalize_text(text: str) -> str:
    """Fold text for forgiving comparisons: no diacritics, punctuation or case.

    Typos are not tolerated; "Kupić mleko" and "kupic mleko!" fold to the same
    value, "kup mleko" does not.
    """

    decomposed = unicodedata.normalize("NFKD", text)
    kept = [
        char
        for char in decomposed
        if not unicodedata.combining(char) and (char.isalnum() or char.isspace())
    ]
    return " ".join("".join(kept).lower().split())


def find_tasks_by_description(
    document: Document,
    query: str,
    predicate: TaskPredicate | None = None,
) -> list[Task]:
    """Resolve free text to tasks, most precise tier first.

    1. substring of the annotation-free description
    2. substring of the raw source line
    3. substring after `normalize_text` on both sides
    The first tier with any hit wins.
    """

    needle = query.strip()
    candidates = [task for task in document.tasks() if predicate is None or predicate(task)]

    by_description = [task for task in candidates if needle in task.description]
    if by_description:
        return by_description

    by_line = [task for task in candidates if needle in task.original_line]
    if by_line:
        return by_line

    folded = normalize_text(needle)
    return [task for task in candidates if folded in normalize_text(task.original_line)]


def find_task_by_description(
    document: Document,
    query: str,
    predicate: TaskPredicate | None = None,
) -> Task:
    matches = find_tasks_by_description(document, query, predicate)
    if not matches:
        raise TaskNotFoundError(query, document.file_path)
    if len(matches) > 1:
        raise AmbiguousTaskError(query, document.file_path, len(matches))
    return matches[0]
