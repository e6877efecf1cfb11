from __future__ import annotations

import argparse
from dataclasses import dataclass
from datetime import date
from pathlib import Path
import sys
from typing import Callable

from . import __version__
from .config import DaybookConfig, explain_daybook_toml, load_daybook_toml
from .daily import daily_path, ensure_daily_note
from .events import EditEvent, EditLog
from .notes import NoteStore
from .operations import (
    MoveEdit,
    TaskEdit,
    TodoItem,
    abandon_todos,
    add_todos,
    check_todos,
    create_completed_todo,
    edit_todo,
    move_todos,
    remove_todos,
    resolve_time,
    uncheck_todos,
)
from .paths import WorkspacePaths, ensure_runtime_dirs, find_workspace_root, workspace_paths
from .tasks import Document, InsertPosition, NoteMissingError, Task, TaskStatus, TaskToolError
from .tasks.formatter import line_number_for_node


POSITION_CHOICES = [item.value for item in InsertPosition]
STATUS_CHOICES = [item.value for item in TaskStatus]


@dataclass(frozen=True)
class CliContext:
    config: DaybookConfig
    paths: WorkspacePaths
    store: NoteStore
    edits: EditLog


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="daybook",
        description="daybook: check off, move and tidy the to-dos in your daily notes",
    )
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    parser.add_argument("--workspace", help="Workspace folder (default: nearest daybook.toml or cwd)")

    note = argparse.ArgumentParser(add_help=False)
    note.add_argument("--file", help="Note to edit, relative to the workspace (default: today's daily note)")

    sub = parser.add_subparsers(dest="cmd", required=False)

    sub.add_parser("show", parents=[note], help="List the to-dos of a note.")

    check = sub.add_parser("check", parents=[note], help="Check off pending to-dos.")
    check.add_argument("todos", nargs="+", help="Text of each to-do")
    check.add_argument("--time", help="Completion time (default: now)")
    check.add_argument("--comment", help="Comment added below every checked to-do")

    uncheck = sub.add_parser("uncheck", parents=[note], help="Reopen to-dos.")
    uncheck.add_argument("todos", nargs="+", help="Text of each to-do")
    uncheck.add_argument("--comment", help="Comment added below every reopened to-do")

    abandon = sub.add_parser("abandon", parents=[note], help="Mark to-dos as abandoned.")
    abandon.add_argument("todos", nargs="+", help="Text of each to-do")
    abandon.add_argument("--comment", help="Comment added below every abandoned to-do")

    add = sub.add_parser("add", parents=[note], help="Add new pending to-dos.")
    add.add_argument("todos", nargs="+", help="Text of each new to-do")
    add.add_argument("--position", choices=POSITION_CHOICES, help="Where to insert (default from daybook.toml)")
    add.add_argument("--ref", help="Reference to-do for --position before/after")

    done = sub.add_parser("done", parents=[note], help="Record something already finished.")
    done.add_argument("todo", help="Text of the finished item")
    done.add_argument("--time", help="Completion time (default: now)")
    done.add_argument("--comment", help="Comment added below the item")

    edit = sub.add_parser("edit", parents=[note], help="Rewrite a to-do in place.")
    edit.add_argument("original", help="Text of the to-do to edit")
    edit.add_argument("replacement", help="New to-do text")
    edit.add_argument("--status", choices=STATUS_CHOICES, help="New status")
    edit.add_argument("--comment", help="Replace the comment ('' clears it)")

    remove = sub.add_parser("remove", parents=[note], help="Comment out to-dos, keeping their text.")
    remove.add_argument("todos", nargs="+", help="Text of each to-do")
    remove.add_argument("--reason", help="Reason recorded in the removal marker")

    move = sub.add_parser("move", parents=[note], help="Move to-dos within a note or to another note.")
    move.add_argument("todos", nargs="+", help="Text of each to-do")
    move.add_argument("--to", dest="target", help="Destination note (default: same note)")
    move.add_argument("--position", choices=POSITION_CHOICES, default=InsertPosition.BEGINNING.value)
    move.add_argument("--ref", help="Reference to-do for --position before/after")

    log = sub.add_parser("log", help="Show recent edits made through daybook.")
    log.add_argument("--file", help="Only edits of this note, relative to the workspace")
    log.add_argument("--limit", type=int, default=20, help="Number of entries (default: 20)")

    sub.add_parser("config", help="Explain daybook.toml settings.")

    return parser


def _context(args: argparse.Namespace) -> tuple[CliContext, str]:
    start = Path(args.workspace).expanduser() if args.workspace else None
    root = find_workspace_root(start)
    paths = workspace_paths(root)
    config, warning = load_daybook_toml(paths.config_toml)
    paths = ensure_runtime_dirs(workspace_paths(root, config))
    store = NoteStore(root, locks_dir=paths.locks_dir)
    return CliContext(config=config, paths=paths, store=store, edits=EditLog(paths.events_log)), warning


def _note_path(ctx: CliContext, args: argparse.Namespace, *, create: bool = False) -> Path:
    if getattr(args, "file", None):
        path = ctx.store.resolve(args.file)
        return ctx.store.create_note(path) if create else path
    if create:
        return ensure_daily_note(ctx.paths.daily_dir, date.today(), ctx.config.daily.filename_format)
    return daily_path(ctx.paths.daily_dir, date.today(), ctx.config.daily.filename_format)


def _items(texts: list[str], note: str | None) -> list[TodoItem]:
    return [TodoItem(text=text, note=note) for text in texts]


def _apply(ctx: CliContext, command: str, path: Path, edit: Callable[[Document], TaskEdit]) -> int:
    def _run(document: Document) -> tuple[Document, TaskEdit]:
        result = edit(document)
        return result.document, result

    try:
        result = ctx.store.edit_note(path, _run)
    except TaskToolError as exc:
        ctx.edits.record_failure(command, ctx.store.display_path(path), exc)
        print(f"error: {exc}", file=sys.stderr)
        return 1
    ctx.edits.record_edit(command, ctx.store.display_path(path), result.summary, touched=len(result.touched))
    print(result.summary)
    return 0


def format_task_line(task: Task, line_number: int) -> str:
    return f"{line_number:>4}  [{task.status.value}] {task.text}"


def cmd_show(ctx: CliContext, args: argparse.Namespace) -> int:
    path = _note_path(ctx, args)
    try:
        document = ctx.store.read_note(path)
    except TaskToolError as exc:
        print(f"error: {exc}", file=sys.stderr)
        return 1
    lines = [
        format_task_line(node, line_number_for_node(document, idx))
        for idx, node in enumerate(document.content)
        if isinstance(node, Task)
    ]
    if not lines:
        print(f"no to-dos in {document.file_path}")
        return 0
    print(f"{document.file_path}:")
    for line in lines:
        print(line)
    return 0


def cmd_check(ctx: CliContext, args: argparse.Namespace) -> int:
    time = resolve_time(args.time, time_format=ctx.config.tasks.time_format)
    items = _items(args.todos, args.comment)
    return _apply(ctx, "check", _note_path(ctx, args), lambda doc: check_todos(doc, items, time=time))


def cmd_uncheck(ctx: CliContext, args: argparse.Namespace) -> int:
    items = _items(args.todos, args.comment)
    return _apply(ctx, "uncheck", _note_path(ctx, args), lambda doc: uncheck_todos(doc, items))


def cmd_abandon(ctx: CliContext, args: argparse.Namespace) -> int:
    items = _items(args.todos, args.comment)
    return _apply(ctx, "abandon", _note_path(ctx, args), lambda doc: abandon_todos(doc, items))


def cmd_add(ctx: CliContext, args: argparse.Namespace) -> int:
    position = args.position or ctx.config.tasks.default_position
    return _apply(
        ctx,
        "add",
        _note_path(ctx, args, create=True),
        lambda doc: add_todos(doc, args.todos, position=position, reference_text=args.ref),
    )


def cmd_done(ctx: CliContext, args: argparse.Namespace) -> int:
    time = resolve_time(args.time, time_format=ctx.config.tasks.time_format)
    return _apply(
        ctx,
        "done",
        _note_path(ctx, args, create=True),
        lambda doc: create_completed_todo(doc, args.todo, time=time, comment=args.comment),
    )


def cmd_edit(ctx: CliContext, args: argparse.Namespace) -> int:
    return _apply(
        ctx,
        "edit",
        _note_path(ctx, args),
        lambda doc: edit_todo(doc, args.original, args.replacement, status=args.status, comment=args.comment),
    )


def cmd_remove(ctx: CliContext, args: argparse.Namespace) -> int:
    items = _items(args.todos, args.reason)
    return _apply(ctx, "remove", _note_path(ctx, args), lambda doc: remove_todos(doc, items))


def cmd_move(ctx: CliContext, args: argparse.Namespace) -> int:
    source = _note_path(ctx, args)
    if not args.target or ctx.store.resolve(args.target) == source:

        def _within(doc: Document) -> TaskEdit:
            moved = move_todos(doc, args.todos, position=args.position, reference_text=args.ref)
            return TaskEdit(moved.source, moved.summary, moved.touched)

        return _apply(ctx, "move", source, _within)

    def _across(source_doc: Document, target_doc: Document) -> tuple[Document, Document, MoveEdit]:
        moved = move_todos(
            source_doc,
            args.todos,
            target=target_doc,
            position=args.position,
            reference_text=args.ref,
        )
        return moved.source, moved.target, moved

    try:
        if not source.is_file():
            raise NoteMissingError(ctx.store.display_path(source))
        target = ctx.store.create_note(args.target)
        result = ctx.store.edit_notes(source, target, _across)
    except TaskToolError as exc:
        ctx.edits.record_failure("move", ctx.store.display_path(source), exc)
        print(f"error: {exc}", file=sys.stderr)
        return 1
    ctx.edits.record_edit("move", ctx.store.display_path(source), result.summary, touched=len(result.touched))
    print(result.summary)
    return 0


def format_edit_event(event: EditEvent) -> str:
    status = "FAILED " if event.failed else ""
    return f"{event.ts}  {event.command:<8} {status}{event.message}"


def cmd_log(ctx: CliContext, args: argparse.Namespace) -> int:
    note = ctx.store.display_path(ctx.store.resolve(args.file)) if args.file else None
    events = ctx.edits.recent(args.limit, note=note)
    if not events:
        print("no edits recorded yet")
        return 0
    for event in events:
        print(format_edit_event(event))
    return 0


def cmd_config(ctx: CliContext, args: argparse.Namespace) -> int:
    print(explain_daybook_toml(ctx.config, path=ctx.paths.config_toml))
    return 0


COMMANDS: dict[str, Callable[[CliContext, argparse.Namespace], int]] = {
    "show": cmd_show,
    "check": cmd_check,
    "uncheck": cmd_uncheck,
    "abandon": cmd_abandon,
    "add": cmd_add,
    "done": cmd_done,
    "edit": cmd_edit,
    "remove": cmd_remove,
    "move": cmd_move,
    "log": cmd_log,
    "config": cmd_config,
}


def main(argv: list[str] | None = None) -> int:
    parser = build_parser()
    argv = list(argv) if argv is not None else list(sys.argv[1:])
    if not argv:
        argv = ["show"]
    args = parser.parse_args(argv)
    if args.cmd is None:
        args = parser.parse_args([*argv, "show"])

    handler = COMMANDS.get(args.cmd)
    if handler is None:
        parser.error(f"Unknown command: {args.cmd}")
        return 2

    ctx, warning = _context(args)
    if warning:
        print(f"warning: {warning}", file=sys.stderr)
    return handler(ctx, args)
