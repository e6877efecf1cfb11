from __future__ import annotations

from contextlib import contextmanager
import hashlib
from pathlib import Path
from typing import IO, Iterator

from .tasks.errors import NoteLockError


def lock_path_for(locks_dir: Path, note_path: Path) -> Path:
    digest = hashlib.sha1(str(note_path.resolve()).encode("utf-8")).hexdigest()[:16]
    return locks_dir / f"{note_path.stem}-{digest}.lock"


@contextmanager
def note_lock(lock_path: Path) -> Iterator[IO[str]]:
    """Hold an exclusive lock for one read-modify-write of a note.

    Blocks until any other daybook process editing the same note is done.
    """

    lock_path.parent.mkdir(parents=True, exist_ok=True)
    handle = lock_path.open("a+", encoding="utf-8")
    try:
        try:
            import fcntl  # type: ignore

            fcntl.flock(handle.fileno(), fcntl.LOCK_EX)
        except ModuleNotFoundError:
            raise NoteLockError(str(lock_path), "fcntl is not available on this platform") from None
        except OSError as exc:
            raise NoteLockError(str(lock_path), str(exc)) from exc
        yield handle
    finally:
        try:
            import fcntl  # type: ignore

            fcntl.flock(handle.fileno(), fcntl.LOCK_UN)
        except Exception:
            pass
        handle.close()
