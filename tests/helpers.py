from __future__ import annotations

from daybook.tasks import Document, Task, parse_note


DAILY_PATH = "daily/2026-10-19.md"

SAMPLE_NOTE = "\n".join(
    [
        "# Monday",
        "",
        "- [x] 📧 Send invoice (14:05)",
        "    paid by wire",
        "- [ ] 📞 09:00-09:30 Call dentist",
        "- [-] Water plants",
        "- [>] Renew passport → 2026-10-21",
        "Loose thoughts",
        "more",
        "- [ ] ~13:30 Lunch with Ana (from 2026-10-18)",
        "",
    ]
)


def note(text: str, path: str = DAILY_PATH) -> Document:
    return parse_note(text, path)


def task_descriptions(document: Document) -> list[str]:
    return [node.description for node in document.content if isinstance(node, Task)]


def node_kinds(document: Document) -> list[str]:
    return ["task" if isinstance(node, Task) else "text" for node in document.content]
