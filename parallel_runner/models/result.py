"""Models for task execution results."""

from collections.abc import Iterator, Mapping, Sequence
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Literal

TaskStatus = Literal["passed", "failed", "skipped"]


@dataclass(frozen=True, kw_only=True)
class Attachment:
    """Artifact produced by a task (screenshot, log file, trace...)."""

    name: str
    path: str
    content_type: str
    description: str | None = None


@dataclass(frozen=True, kw_only=True)
class TaskResult:
    """Terminal outcome of one execution attempt of a task.

    Timing is wall-clock for ``start_time``/``end_time`` and seconds for
    ``duration``. ``error`` is only set on failed results.
    """

    name: str
    status: TaskStatus
    start_time: datetime
    end_time: datetime
    duration: float
    error: BaseException | None = field(default=None, compare=False)
    attachments: Sequence[Attachment] = field(default_factory=tuple)
    metadata: Mapping[str, Any] = field(default_factory=dict)

    def __post_init__(self) -> None:
        if self.error is not None and self.status != "failed":
            raise ValueError(
                f"Only failed results carry an error, got status={self.status!r}"
            )

    @property
    def message(self) -> str | None:
        """Human-readable error message, if any."""
        if self.error is None:
            return None
        return str(self.error) or type(self.error).__name__

    def causes(self) -> Iterator[BaseException]:
        """Iterate over the error and its chained causes, outermost first."""
        seen: set[int] = set()
        error = self.error
        while error is not None and id(error) not in seen:
            seen.add(id(error))
            yield error
            error = error.__cause__ or error.__context__
