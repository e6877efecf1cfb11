from __future__ import annotations

from enum import Enum

from .errors import InsertionOutOfBoundsError, InvalidPositionError, TaskNotFoundError, TaskToolError
from .lookup import find_task_by_description
from .model import Document, Task, TaskStatus


class InsertPosition(str, Enum):
    BEGINNING = "beginning"
    END = "end"
    BEFORE = "before"
    AFTER = "after"


def insert_position_from_name(value: str | InsertPosition) -> InsertPosition:
    try:
        return InsertPosition(str(getattr(value, "value", value)).strip().lower())
    except ValueError:
        names = ", ".join(item.value for item in InsertPosition)
        raise InvalidPositionError(f"invalid position: {value!r} (expected one of {names})") from None


def find_current_spot(document: Document) -> int:
    """Index where freshly processed tasks belong.

    That is right after the last task preceding the first pending one, plus
    any text attached to it, so processed items cluster together while prose
    introducing the pending section stays with it.
    """

    nodes = document.content
    first_pending = next(
        (idx for idx, node in enumerate(nodes) if isinstance(node, Task) and node.status is TaskStatus.PENDING),
        None,
    )
    if first_pending is None:
        return len(nodes)
    if first_pending == 0:
        return 0

    preceding = next(
        (idx for idx in range(first_pending - 1, -1, -1) if isinstance(nodes[idx], Task)),
        None,
    )
    if preceding is None:
        return 0

    index = preceding + 1
    while index < first_pending and not isinstance(nodes[index], Task):
        index += 1
    return index


def task_index(document: Document, task: Task) -> int | None:
    """First index holding a task with the same (description, status)."""

    for idx, node in enumerate(document.content):
        if isinstance(node, Task) and node.identity == task.identity:
            return idx
    return None


def _reference_index(document: Document, reference_text: str) -> int:
    reference = find_task_by_description(document, reference_text)
    index = task_index(document, reference)
    if index is None:
        raise TaskNotFoundError(reference_text, document.file_path)
    return index


def determine_insertion_position(
    document: Document,
    position: str | InsertPosition,
    reference_text: str | None = None,
) -> int:
    mode = insert_position_from_name(position)
    if mode is InsertPosition.BEGINNING:
        return find_current_spot(document)
    if mode is InsertPosition.END:
        return len(document.content)

    if not reference_text:
        raise InvalidPositionError(
            f"position '{mode.value}' needs the text of a reference to-do to place items {mode.value}"
        )
    try:
        index = _reference_index(document, reference_text)
    except TaskToolError as exc:
        raise InvalidPositionError(f"cannot place items {mode.value} reference to-do: {exc}") from exc
    if mode is InsertPosition.BEFORE:
        return index
    return index + 1


def insert_task_at_position(document: Document, task: Task, index: int) -> Document:
    if index < 0 or index > len(document.content):
        raise InsertionOutOfBoundsError(index, len(document.content))
    return document.spliced(index, insert=(task,))


def remove_task_from_document(document: Document, task: Task) -> Document:
    index = task_index(document, task)
    if index is None:
        raise TaskNotFoundError(task.description, document.file_path)
    return document.spliced(index, delete=1)


def replace_task_in_document(document: Document, task: Task, replacement: Task) -> Document:
    index = task_index(document, task)
    if index is None:
        raise TaskNotFoundError(task.description, document.file_path)
    return document.spliced(index, delete=1, insert=(replacement,))


def move_task_to_position(
    document: Document,
    task: Task,
    position: str | InsertPosition = InsertPosition.BEGINNING,
    reference_text: str | None = None,
) -> Document:
    without = remove_task_from_document(document, task)
    index = determine_insertion_position(without, position, reference_text)
    return insert_task_at_position(without, task, index)


def move_task_to_current_spot(document: Document, task: Task, replacement: Task | None = None) -> Document:
    """Take `task` out and put it, or `replacement`, at the current spot.

    The spot is computed on the document without the task.
    """

    without = remove_task_from_document(document, task)
    moved = task if replacement is None else replacement
    return insert_task_at_position(without, moved, find_current_spot(without))
