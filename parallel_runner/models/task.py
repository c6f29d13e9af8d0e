"""Models for schedulable units of work."""

import uuid
from collections.abc import Awaitable, Callable
from dataclasses import dataclass, field, replace
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from parallel_runner.models.result import TaskResult

Work = Callable[[], Awaitable["TaskResult | None"]]


def generate_task_id() -> str:
    """Return a new random task identifier."""
    return uuid.uuid4().hex


@dataclass(frozen=True, kw_only=True)
class Task:
    """A single unit of work plus its retry bookkeeping.

    A retried task is a new instance derived with ``next_attempt``; the
    original attempt is never mutated.
    """

    name: str
    work: Work = field(repr=False, compare=False)
    id: str = field(default_factory=generate_task_id)
    attempt: int = 0

    def __post_init__(self) -> None:
        if self.attempt < 0:
            raise ValueError(f"attempt must be >= 0, got {self.attempt}")

    def next_attempt(self) -> "Task":
        """Return the same task with the attempt counter incremented."""
        return replace(self, attempt=self.attempt + 1)

    @property
    def is_retry(self) -> bool:
        return self.attempt > 0
