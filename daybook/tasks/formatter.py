from __future__ import annotations

from .model import Document, Node, Task, TextBlock


def format_task(task: Task) -> str:
    line = f"- [{task.status.marker}] {task.text}"
    if task.comment:
        return f"{line}\n{task.comment}"
    return line


def format_node(node: Node) -> str:
    if isinstance(node, Task):
        return format_task(node)
    if isinstance(node, TextBlock):
        return node.content
    raise TypeError(f"unsupported node: {type(node).__name__}")


def format_note(document: Document) -> str:
    return "\n".join(format_node(node) for node in document.content)


def _line_count(node: Node) -> int:
    return format_node(node).count("\n") + 1


def line_number_for_node(document: Document, index: int) -> int:
    """1-based line on which the node at `index` starts once formatted."""

    return 1 + sum(_line_count(node) for node in document.content[:index])


def task_line_range(document: Document, index: int) -> tuple[int, int]:
    """1-based (first, last) lines covered by a node, comment included."""

    start = line_number_for_node(document, index)
    return start, start + _line_count(document.content[index]) - 1
