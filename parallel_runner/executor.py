"""Execution of a single task attempt with a deadline."""

import asyncio
import logging
from dataclasses import dataclass, field, replace
from datetime import datetime, timezone

from parallel_runner.events import EventSink
from parallel_runner.models.result import TaskResult, TaskStatus
from parallel_runner.models.task import Task

log = logging.getLogger(__name__)

# Cancelled work that has not unwound yet; holds references until it finishes.
_abandoned: set[asyncio.Future[object]] = set()


def _reap_abandoned(work: asyncio.Future[object]) -> None:
    _abandoned.discard(work)
    if work.cancelled():
        return
    if (exc := work.exception()) is not None:
        log.warning("Abandoned work failed after its deadline: %s", exc)
    else:
        log.warning("Abandoned work finished after its deadline, result discarded")


class TaskTimeoutError(TimeoutError):
    """Raised when a task does not settle before its deadline."""

    def __init__(self, timeout: float) -> None:
        super().__init__(f"execution timed out after {round(timeout * 1000)}ms")
        self.timeout = timeout


class SkipTask(Exception):
    """Raised by a task's work to report it as skipped."""


@dataclass(frozen=True, kw_only=True)
class TaskExecutor:
    """Runs one attempt of a task and normalizes its outcome into a result.

    Failures never escape ``execute``: raised errors, timeouts and malformed
    return values all become failed results.
    """

    timeout: float
    events: EventSink = field(default_factory=EventSink)

    async def execute(self, task: Task) -> TaskResult:
        """Run the task's work, racing it against the configured timeout."""
        log.info(
            "Starting task: %s%s",
            task.name,
            f" (retry {task.attempt})" if task.is_retry else "",
        )
        self.events.on_task_start(task)

        loop = asyncio.get_running_loop()
        start_time = datetime.now(timezone.utc)
        started = loop.time()

        try:
            work = asyncio.ensure_future(task.work())
        except Exception as exc:
            return self._finish(
                task, self._failed(task, exc, start_time, loop.time() - started)
            )

        try:
            done, _ = await asyncio.wait({work}, timeout=self.timeout)
        except asyncio.CancelledError:
            self._abandon(task, work)
            raise
        duration = loop.time() - started

        if not done:
            self._abandon(task, work)
            result = self._failed(
                task, TaskTimeoutError(self.timeout), start_time, duration
            )
        elif work.cancelled():
            result = self._failed(
                task,
                RuntimeError(f"Work of task {task.name} was cancelled"),
                start_time,
                duration,
            )
        elif isinstance(exc := work.exception(), SkipTask):
            result = self._build(
                task,
                "skipped",
                start_time,
                duration,
                metadata={"skip_reason": str(exc)} if str(exc) else {},
            )
        elif exc is not None:
            result = self._failed(task, exc, start_time, duration)
        else:
            result = self._normalize(task, work.result(), start_time, duration)

        return self._finish(task, result)

    def _finish(self, task: Task, result: TaskResult) -> TaskResult:
        log.info("Completed task: %s (%s)", task.name, result.status)
        self.events.on_task_end(task, result)
        return result

    def _failed(
        self,
        task: Task,
        error: BaseException,
        start_time: datetime,
        duration: float,
    ) -> TaskResult:
        log.error("Task failed: %s: %s", task.name, error)
        return self._build(task, "failed", start_time, duration, error=error)

    @staticmethod
    def _abandon(task: Task, work: asyncio.Future[object]) -> None:
        # The attempt is settled without waiting for the work to unwind.
        work.cancel()
        _abandoned.add(work)
        work.add_done_callback(_reap_abandoned)
        log.warning("Abandoned work of task %s after cancellation", task.name)

    def _normalize(
        self,
        task: Task,
        outcome: object,
        start_time: datetime,
        duration: float,
    ) -> TaskResult:
        if outcome is None:
            return self._build(task, "passed", start_time, duration)

        if isinstance(outcome, TaskResult):
            return replace(
                outcome,
                name=task.name,
                start_time=start_time,
                end_time=datetime.now(timezone.utc),
                duration=duration,
            )

        error = TypeError(
            f"Task work must return a TaskResult or None, got {type(outcome).__name__}"
        )
        log.error("Task returned an invalid value: %s: %s", task.name, error)
        return self._build(task, "failed", start_time, duration, error=error)

    @staticmethod
    def _build(
        task: Task,
        status: TaskStatus,
        start_time: datetime,
        duration: float,
        *,
        error: BaseException | None = None,
        metadata: dict[str, str] | None = None,
    ) -> TaskResult:
        return TaskResult(
            name=task.name,
            status=status,
            start_time=start_time,
            end_time=datetime.now(timezone.utc),
            duration=duration,
            error=error,
            metadata=metadata or {},
        )
