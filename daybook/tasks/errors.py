from __future__ import annotations


class TaskToolError(RuntimeError):
    """Base error for everything surfaced to callers of the task engine.

    The message is always human readable and already aggregated, so callers can
    print it as-is.
    """


class TaskNotFoundError(TaskToolError):
    def __init__(self, query: str, file_path: str) -> None:
        self.query = query
        self.file_path = file_path
        super().__init__(f'to-do "{query}" not found in {file_path}')


class AmbiguousTaskError(TaskToolError):
    def __init__(self, query: str, file_path: str, matches: int) -> None:
        self.query = query
        self.file_path = file_path
        self.matches = matches
        super().__init__(
            f'to-do "{query}" matches {matches} items in {file_path}; use more of its text to pick one'
        )


class InvalidTaskStateError(TaskToolError):
    def __init__(self, query: str, file_path: str, status: str, requirement: str = "") -> None:
        self.query = query
        self.file_path = file_path
        self.status = status
        self.requirement = requirement
        detail = f" (expected {requirement})" if requirement else ""
        super().__init__(f'to-do "{query}" in {file_path} is {status}{detail}')


class InsertionOutOfBoundsError(TaskToolError):
    def __init__(self, index: int, total: int) -> None:
        self.index = index
        self.total = total
        super().__init__(f"cannot insert at position {index}; document has {total} nodes")


class InvalidPositionError(TaskToolError):
    pass


class NoteLockError(TaskToolError):
    def __init__(self, lock_path: str, reason: str) -> None:
        self.lock_path = lock_path
        super().__init__(f"could not lock note for editing: {reason} (lock: {lock_path})")


class NoteMissingError(TaskToolError):
    def __init__(self, path: str) -> None:
        self.path = path
        super().__init__(f"note not found: {path}")


class TaskValidationError(TaskToolError):
    """Every failed item of a batch, reported together."""

    def __init__(
        self,
        file_path: str,
        unresolved: list[TaskToolError],
        invalid: list[InvalidTaskStateError],
    ) -> None:
        self.file_path = file_path
        self.unresolved = list(unresolved)
        self.invalid = list(invalid)
        failures = [*self.unresolved, *self.invalid]
        noun = "item" if len(failures) == 1 else "items"
        lines = [f"{len(failures)} to-do {noun} failed validation in {file_path}:"]
        lines.extend(f"- {failure}" for failure in failures)
        super().__init__("\n".join(lines))
