from __future__ import annotations

from contextlib import ExitStack
from pathlib import Path
from typing import Callable, TypeVar

from .locks import lock_path_for, note_lock
from .tasks import Document, NoteMissingError, format_note, parse_note

T = TypeVar("T")


class NoteStore:
    """Reads and writes whole notes; the only place the engine touches disk.

    `edit_note` serializes read-modify-write per note with a lock file, so two
    daybook processes never interleave edits of one note. Writers outside
    daybook are not detected: the later write wins.
    """

    def __init__(self, root: Path, locks_dir: Path | None = None) -> None:
        self.root = root
        self.locks_dir = locks_dir

    def resolve(self, path: str | Path) -> Path:
        candidate = Path(path).expanduser()
        return candidate if candidate.is_absolute() else self.root / candidate

    def display_path(self, path: Path) -> str:
        try:
            return path.relative_to(self.root).as_posix()
        except ValueError:
            return str(path)

    def read_text(self, path: str | Path) -> str:
        resolved = self.resolve(path)
        if not resolved.is_file():
            raise NoteMissingError(self.display_path(resolved))
        return resolved.read_text(encoding="utf-8")

    def read_note(self, path: str | Path) -> Document:
        resolved = self.resolve(path)
        return parse_note(self.read_text(resolved), self.display_path(resolved))

    def write_note(self, document: Document) -> Path:
        resolved = self.resolve(document.file_path)
        if not resolved.is_file():
            raise NoteMissingError(document.file_path)
        resolved.write_text(format_note(document), encoding="utf-8")
        return resolved

    def create_note(self, path: str | Path) -> Path:
        resolved = self.resolve(path)
        if not resolved.exists():
            resolved.parent.mkdir(parents=True, exist_ok=True)
            resolved.write_text("", encoding="utf-8")
        return resolved

    def edit_note(self, path: str | Path, edit: Callable[[Document], tuple[Document, T]]) -> T:
        """Run `edit` on a fresh parse and write its document back.

        `edit` returns (new_document, result). Nothing is written when it
        raises, and the lock is held across the whole sequence.
        """

        resolved = self.resolve(path)
        with ExitStack() as stack:
            if self.locks_dir is not None:
                stack.enter_context(note_lock(lock_path_for(self.locks_dir, resolved)))
            document = self.read_note(resolved)
            updated, result = edit(document)
            if updated != document:
                self.write_note(updated)
        return result

    def edit_notes(
        self,
        source: str | Path,
        target: str | Path,
        edit: Callable[[Document, Document], tuple[Document, Document, T]],
    ) -> T:
        """Two-note variant of `edit_note`, locking both notes in path order."""

        paths = sorted({self.resolve(source), self.resolve(target)})
        with ExitStack() as stack:
            if self.locks_dir is not None:
                for resolved in paths:
                    stack.enter_context(note_lock(lock_path_for(self.locks_dir, resolved)))
            source_doc = self.read_note(source)
            target_doc = self.read_note(target)
            new_source, new_target, result = edit(source_doc, target_doc)
            if new_source != source_doc:
                self.write_note(new_source)
            if new_target != target_doc:
                self.write_note(new_target)
        return result
