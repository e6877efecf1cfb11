"""Task document engine.

Daily notes are plain markdown with embedded to-dos:

- [ ] 📞 09:00-09:30 Call dentist
- [x] 📧 Send invoice (14:05)
    left a voicemail first
- [>] Renew passport → 2026-10-21

A note is parsed into a Document (tasks + surrounding prose), mutated through
pure functions that always return a new Document, and rendered back to text.
"""

from .errors import (
    AmbiguousTaskError,
    InsertionOutOfBoundsError,
    InvalidPositionError,
    InvalidTaskStateError,
    NoteLockError,
    NoteMissingError,
    TaskNotFoundError,
    TaskToolError,
    TaskValidationError,
)
from .formatter import format_note, format_node, format_task
from .lookup import find_task_by_description, find_tasks_by_description, normalize_text
from .model import Document, Node, Task, TaskStatus, TextBlock, TimeInfo
from .mutations import (
    abandon_task,
    add_comment_to_task,
    append_comment_line,
    complete_task,
    create_moved_task,
    create_task,
    mark_task_as_moved,
    task_from_text,
    uncheck_task,
)
from .parser import parse_note, parse_task_content
from .positioning import (
    InsertPosition,
    determine_insertion_position,
    find_current_spot,
    insert_task_at_position,
    move_task_to_current_spot,
    move_task_to_position,
    remove_task_from_document,
    replace_task_in_document,
)
from .validation import TaskQuery, status_is, status_is_not, task_query, validate_tasks

__all__ = [
    "AmbiguousTaskError",
    "Document",
    "InsertPosition",
    "InsertionOutOfBoundsError",
    "InvalidPositionError",
    "InvalidTaskStateError",
    "Node",
    "NoteLockError",
    "NoteMissingError",
    "Task",
    "TaskNotFoundError",
    "TaskQuery",
    "TaskStatus",
    "TaskToolError",
    "TaskValidationError",
    "TextBlock",
    "TimeInfo",
    "abandon_task",
    "add_comment_to_task",
    "append_comment_line",
    "complete_task",
    "create_moved_task",
    "create_task",
    "determine_insertion_position",
    "find_current_spot",
    "find_task_by_description",
    "find_tasks_by_description",
    "format_node",
    "format_note",
    "format_task",
    "insert_task_at_position",
    "mark_task_as_moved",
    "move_task_to_current_spot",
    "move_task_to_position",
    "normalize_text",
    "parse_note",
    "parse_task_content",
    "remove_task_from_document",
    "replace_task_in_document",
    "status_is",
    "status_is_not",
    "task_from_text",
    "task_query",
    "uncheck_task",
    "validate_tasks",
]
