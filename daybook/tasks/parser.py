from __future__ import annotations

from dataclasses import dataclass
import re
import unicodedata

from .model import MOVED_TO_SEPARATOR, Document, Node, Task, TaskStatus, TextBlock, TimeInfo, is_comment_line, join_comment


_TASK_LINE_RE = re.compile(r"^-\s+\[(?P<marker>[ x\->])\]\s*(?P<content>.*?)$")
_EMOJI_RE = re.compile(r"^(?P<emoji>\S\ufe0f?)\s+(?P<rest>.+)$")
_SCHEDULED_RE = re.compile(r"^(?P<scheduled>\d{1,2}:\d{2}-\d{1,2}:\d{2}|~\d{1,2}:\d{2})\s+(?P<rest>.+)$")
_COMPLETED_RE = re.compile(r"^(?P<rest>.+?)\s+\((?P<completed>\d{1,2}:\d{2}(?:\s+\d{4}-\d{2}-\d{2})?)\)$")
_TARGET_RE = re.compile(rf"^(?P<rest>.+?)\s+{MOVED_TO_SEPARATOR}\s+(?P<target>.+)$")
_SOURCE_RE = re.compile(r"^(?P<rest>.+?)\s+\(from\s+(?P<source>.+?)\)$")

HTML_COMMENT_OPEN = "<!--"
HTML_COMMENT_CLOSE = "-->"


@dataclass(frozen=True)
class TaskContent:
    description: str
    emoji: str | None = None
    scheduled: str | None = None
    completed: str | None = None
    target: str | None = None
    source: str | None = None


def _is_emoji(value: str) -> bool:
    first = value[0]
    return ord(first) >= 0x1F000 or unicodedata.category(first) == "So"


def parse_task_content(content: str, status: TaskStatus = TaskStatus.PENDING) -> TaskContent:
    """Split the text after a checkbox into its annotations.

    The head (emoji, scheduled time) and the tail (source, move target,
    completion time) are peeled independently. The tail goes outside-in, the
    reverse of the order the formatter appends suffixes, so a rendered line
    always parses back into the same fields. Completion time and move target
    are only read for the statuses that render them.
    """

    rest = content.strip()
    emoji = None
    scheduled = None
    completed = None
    target = None
    source = None

    match = _EMOJI_RE.match(rest)
    if match and _is_emoji(match.group("emoji")):
        emoji = match.group("emoji")
        rest = match.group("rest").strip()

    match = _SCHEDULED_RE.match(rest)
    if match:
        scheduled = match.group("scheduled")
        rest = match.group("rest").strip()

    match = _SOURCE_RE.match(rest)
    if match:
        source = match.group("source")
        rest = match.group("rest").strip()

    if status is TaskStatus.MOVED:
        match = _TARGET_RE.match(rest)
        if match:
            target = match.group("target")
            rest = match.group("rest").strip()

    if status is TaskStatus.COMPLETED:
        match = _COMPLETED_RE.match(rest)
        if match:
            completed = match.group("completed")
            rest = match.group("rest").strip()

    return TaskContent(
        description=rest,
        emoji=emoji,
        scheduled=scheduled,
        completed=completed,
        target=target,
        source=source,
    )


def parse_task_line(line: str, line_index: int = -1) -> Task | None:
    match = _TASK_LINE_RE.match(line)
    if not match:
        return None
    status = TaskStatus.from_marker(match.group("marker"))
    parsed = parse_task_content(match.group("content"), status)
    return Task(
        status=status,
        description=parsed.description,
        emoji=parsed.emoji,
        time_info=TimeInfo(scheduled=parsed.scheduled, completed=parsed.completed),
        original_line=line,
        target=parsed.target,
        source=parsed.source,
        line_index=line_index,
    )


def _inside_html_comment_after(line: str, inside: bool) -> bool:
    opened = line.rfind(HTML_COMMENT_OPEN)
    closed = line.rfind(HTML_COMMENT_CLOSE)
    if opened == -1 and closed == -1:
        return inside
    return opened > closed


def parse_note(text: str, file_path: str) -> Document:
    """Parse raw note text into a Document of tasks and text blocks."""

    nodes: list[Node] = []
    inside_html_comment = False

    for line_index, line in enumerate(text.split("\n")):
        current = nodes[-1] if nodes else None
        task = None if inside_html_comment else parse_task_line(line, line_index)

        if isinstance(current, Task) and is_comment_line(line):
            nodes[-1] = current.evolve(comment=join_comment(current.comment, line))
        elif task is not None:
            nodes.append(task)
        elif isinstance(current, TextBlock):
            nodes[-1] = TextBlock(content=f"{current.content}\n{line}", line_index=current.line_index)
        else:
            nodes.append(TextBlock(content=line, line_index=line_index))

        inside_html_comment = _inside_html_comment_after(line, inside_html_comment)

    return Document(file_path=file_path, content=tuple(nodes))
