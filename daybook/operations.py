from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from pathlib import PurePath

from .tasks import (
    Document,
    InsertPosition,
    Task,
    TaskStatus,
    TaskToolError,
    TextBlock,
    abandon_task,
    append_comment_line,
    complete_task,
    create_moved_task,
    determine_insertion_position,
    find_current_spot,
    format_task,
    insert_task_at_position,
    mark_task_as_moved,
    move_task_to_current_spot,
    move_task_to_position,
    replace_task_in_document,
    status_is,
    status_is_not,
    task_from_text,
    task_query,
    uncheck_task,
    validate_tasks,
)
from .tasks.positioning import insert_position_from_name, task_index


DEFAULT_TIME_FORMAT = "%H:%M"
REMOVED_MARKER = "REMOVED TASK: This task has been removed"


@dataclass(frozen=True)
class TodoItem:
    text: str
    note: str | None = None  # completion/abandon comment or removal reason


@dataclass(frozen=True)
class TaskEdit:
    document: Document
    summary: str
    touched: tuple[Task, ...] = ()


@dataclass(frozen=True)
class MoveEdit:
    source: Document
    target: Document
    summary: str
    touched: tuple[Task, ...] = ()

    @property
    def same_document(self) -> bool:
        return self.source.file_path == self.target.file_path


def resolve_time(value: str | None, *, time_format: str = DEFAULT_TIME_FORMAT, now: datetime | None = None) -> str:
    cleaned = (value or "").strip()
    if cleaned:
        return cleaned
    return (now or datetime.now()).strftime(time_format)


def note_name(path: str) -> str:
    return PurePath(path).stem or path


def _as_items(items: list[TodoItem] | list[str]) -> list[TodoItem]:
    normalized = [item if isinstance(item, TodoItem) else TodoItem(text=str(item)) for item in items]
    if not normalized:
        raise TaskToolError("no to-do items provided")
    return normalized


def _describe(texts: list[str]) -> str:
    if len(texts) == 1:
        return f'"{texts[0]}"'
    return f"{len(texts)} to-dos"


def check_todos(document: Document, items: list[TodoItem] | list[str], *, time: str | None = None) -> TaskEdit:
    """Complete pending to-dos and gather them at the current spot."""

    todos = _as_items(items)
    resolved = validate_tasks(document, [task_query(item.text, status_is(TaskStatus.PENDING)) for item in todos])

    updated = document
    touched: list[Task] = []
    for (_query, task), item in zip(resolved, todos):
        done = complete_task(task, time, item.note)
        updated = move_task_to_current_spot(updated, task, done)
        touched.append(done)

    at = f" at {time}" if time else ""
    summary = f"checked {_describe([item.text for item in todos])} in {document.file_path}{at}"
    return TaskEdit(updated, summary, tuple(touched))


def uncheck_todos(document: Document, items: list[TodoItem] | list[str]) -> TaskEdit:
    todos = _as_items(items)
    resolved = validate_tasks(document, [task_query(item.text, status_is_not(TaskStatus.PENDING)) for item in todos])

    updated = document
    touched: list[Task] = []
    for (_query, task), item in zip(resolved, todos):
        reopened = append_comment_line(uncheck_task(task).evolve(target=None), item.note)
        updated = replace_task_in_document(updated, task, reopened)
        touched.append(reopened)

    summary = f"unchecked {_describe([item.text for item in todos])} in {document.file_path}"
    return TaskEdit(updated, summary, tuple(touched))


def abandon_todos(document: Document, items: list[TodoItem] | list[str]) -> TaskEdit:
    todos = _as_items(items)
    resolved = validate_tasks(
        document,
        [task_query(item.text, status_is_not(TaskStatus.ABANDONED)) for item in todos],
    )

    updated = document
    touched: list[Task] = []
    for (_query, task), item in zip(resolved, todos):
        dropped = abandon_task(task, item.note)
        updated = move_task_to_current_spot(updated, task, dropped)
        touched.append(dropped)

    summary = f"abandoned {_describe([item.text for item in todos])} in {document.file_path}"
    return TaskEdit(updated, summary, tuple(touched))


def add_todos(
    document: Document,
    texts: list[str],
    *,
    position: str | InsertPosition = InsertPosition.BEGINNING,
    reference_text: str | None = None,
) -> TaskEdit:
    if not texts:
        raise TaskToolError("no to-do items provided")
    new_tasks = [task_from_text(text) for text in texts]
    index = determine_insertion_position(document, position, reference_text)

    updated = document
    for offset, task in enumerate(new_tasks):
        updated = insert_task_at_position(updated, task, index + offset)

    summary = f"added {_describe([task.text for task in new_tasks])} to {document.file_path}"
    return TaskEdit(updated, summary, tuple(new_tasks))


def create_completed_todo(
    document: Document,
    text: str,
    *,
    time: str | None = None,
    comment: str | None = None,
) -> TaskEdit:
    task = complete_task(task_from_text(text), time, comment)
    updated = insert_task_at_position(document, task, find_current_spot(document))
    at = f" at {time}" if time else ""
    return TaskEdit(updated, f'recorded "{task.description}" as done in {document.file_path}{at}', (task,))


def edit_todo(
    document: Document,
    original_text: str,
    replacement_text: str,
    *,
    status: TaskStatus | str | None = None,
    comment: str | None = None,
) -> TaskEdit:
    """Replace a to-do in place.

    `comment=None` keeps the existing comment, an empty string clears it and
    any other value replaces it.
    """

    if not replacement_text.strip():
        raise TaskToolError("replacement to-do text is required")
    ((_query, task),) = validate_tasks(document, [task_query(original_text)])

    new_status = TaskStatus(status) if status else task.status
    parsed = task_from_text(replacement_text, new_status)
    edited = parsed.evolve(
        comment=task.comment,
        original_line=task.original_line,
        line_index=task.line_index,
    )
    if edited.status is TaskStatus.COMPLETED and not edited.time_info.completed:
        edited = complete_task(edited, task.time_info.completed)
    if edited.status is TaskStatus.MOVED and not edited.target:
        edited = edited.evolve(target=task.target)
    if comment is not None:
        edited = append_comment_line(edited.evolve(comment=""), comment)

    updated = replace_task_in_document(document, task, edited)
    summary = f'edited "{original_text}" -> "{edited.text}" in {document.file_path}'
    return TaskEdit(updated, summary, (edited,))


def removal_block(task: Task, reason: str | None = None) -> TextBlock:
    reason_text = f" (Reason: {reason})" if reason else ""
    return TextBlock(content=f"<!-- {REMOVED_MARKER}{reason_text}\n{format_task(task)}\n-->")


def remove_todos(document: Document, items: list[TodoItem] | list[str]) -> TaskEdit:
    """Swap each to-do for an HTML comment that keeps its original line."""

    todos = _as_items(items)
    resolved = validate_tasks(document, [task_query(item.text) for item in todos])

    updated = document
    touched: list[Task] = []
    for (_query, task), item in zip(resolved, todos):
        index = task_index(updated, task)
        if index is None:
            raise TaskToolError(f'to-do "{item.text}" disappeared while removing items from {document.file_path}')
        updated = updated.spliced(index, delete=1, insert=(removal_block(task, item.note),))
        touched.append(task)

    summary = f"removed {_describe([item.text for item in todos])} from {document.file_path}"
    return TaskEdit(updated, summary, tuple(touched))


def move_todos(
    source: Document,
    texts: list[str],
    *,
    target: Document | None = None,
    position: str | InsertPosition = InsertPosition.BEGINNING,
    reference_text: str | None = None,
) -> MoveEdit:
    """Relocate to-dos inside a note or hand them over to another note.

    Across notes the source entry stays behind as moved (`→ target`) and the
    destination gets a copy tagged `(from source)`.
    """

    todos = _as_items(texts)
    mode = insert_position_from_name(position)
    same_document = target is None or target.file_path == source.file_path
    resolved = validate_tasks(source, [task_query(item.text) for item in todos])
    if not same_document and mode in {InsertPosition.BEFORE, InsertPosition.AFTER}:
        determine_insertion_position(target, mode, reference_text)

    # Repeated inserts at a fixed anchor land in reverse, so walk backwards
    # for every mode that anchors on something other than the end.
    ordered = list(resolved)
    if mode is not InsertPosition.END and mode is not InsertPosition.BEFORE:
        ordered.reverse()

    updated_source = source
    updated_target = source if same_document else target
    touched: list[Task] = []
    source_name = note_name(source.file_path)
    target_name = note_name(updated_target.file_path)

    for _query, task in ordered:
        if same_document:
            updated_source = move_task_to_position(updated_source, task, mode, reference_text)
            updated_target = updated_source
            touched.append(task)
            continue

        arrived = create_moved_task(task, source_name)
        updated_source = replace_task_in_document(updated_source, task, mark_task_as_moved(task, target_name))
        index = determine_insertion_position(updated_target, mode, reference_text)
        updated_target = insert_task_at_position(updated_target, arrived, index)
        touched.append(arrived)

    where = source.file_path if same_document else f"{source.file_path} to {updated_target.file_path}"
    placement = f"{mode.value} {reference_text}" if reference_text and mode in {InsertPosition.BEFORE, InsertPosition.AFTER} else mode.value
    summary = f"moved {_describe([item.text for item in todos])} in {where} ({placement})"
    return MoveEdit(updated_source, updated_target, summary, tuple(touched))
