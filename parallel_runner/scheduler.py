"""Bounded-concurrency scheduler with retries and fail-fast."""

import asyncio
import logging
from collections import deque
from collections.abc import Iterable, Sequence
from dataclasses import dataclass
from datetime import datetime, timezone

from parallel_runner.config import RunnerConfig
from parallel_runner.events import EventDispatcher, EventSink
from parallel_runner.executor import TaskExecutor
from parallel_runner.models.result import TaskResult
from parallel_runner.models.summary import RunSummary
from parallel_runner.models.task import Task, Work, generate_task_id
from parallel_runner.retry import Finalize, Retry, decide

log = logging.getLogger(__name__)


class SchedulerError(Exception):
    """Raised when the scheduler is used incorrectly."""


class SchedulerBusyError(SchedulerError):
    """Raised when an operation is not allowed while a run is in progress."""


@dataclass(frozen=True, kw_only=True)
class SchedulerStatus:
    """Snapshot of the scheduler's queues."""

    is_running: bool
    pending: int
    running: int
    completed: int
    failed: int


class Scheduler:
    """Runs submitted tasks on a bounded number of concurrent worker slots.

    Tasks are admitted from a pending queue whenever a slot is free. Failed
    tasks are retried ahead of the untouched backlog, and with ``fail_fast``
    the first finalized failure stops further admission while in-flight tasks
    finish. All queue state is owned by the coroutine running ``run``.
    """

    def __init__(
        self,
        config: RunnerConfig | None = None,
        sinks: Sequence[EventSink] = (),
    ) -> None:
        self.config = config or RunnerConfig()
        self._events = EventDispatcher(sinks)
        self._pending: deque[Task] = deque()
        self._in_flight: dict[asyncio.Task[TaskResult], Task] = {}
        self._completed: list[TaskResult] = []
        self._failed: list[TaskResult] = []
        self._is_running = False

    @property
    def is_running(self) -> bool:
        return self._is_running

    @property
    def status(self) -> SchedulerStatus:
        return SchedulerStatus(
            is_running=self._is_running,
            pending=len(self._pending),
            running=len(self._in_flight),
            completed=len(self._completed),
            failed=len(self._failed),
        )

    def add_sink(self, sink: EventSink) -> None:
        """Register an event sink for subsequent runs."""
        self._ensure_idle("register an event sink")
        self._events.add(sink)

    def submit(self, tasks: Iterable[Task]) -> None:
        """Append tasks to the pending queue.

        Raises:
            SchedulerBusyError: If a run is in progress
            SchedulerError: If a task id is already queued or repeated in ``tasks``

        """
        self._ensure_idle("submit tasks")
        tasks = list(tasks)
        queued = {task.id for task in self._pending}
        for task in tasks:
            if task.id in queued:
                raise SchedulerError(f"Duplicate task id: {task.id}")
            queued.add(task.id)
        self._pending.extend(tasks)

    def add_task(self, name: str, work: Work, *, task_id: str | None = None) -> Task:
        """Create a task for ``work`` and append it to the pending queue."""
        task = Task(id=task_id or generate_task_id(), name=name, work=work)
        self.submit([task])
        return task

    def clear(self) -> None:
        """Drop pending tasks and the results of the previous run."""
        self._ensure_idle("clear tasks")
        self._pending.clear()
        self._completed = []
        self._failed = []

    async def run(self) -> list[TaskResult]:
        """Run all pending tasks and return their finalized results.

        Results are in completion order. Task failures never raise; only
        misuse of the scheduler does.

        Raises:
            SchedulerBusyError: If a run is already in progress

        """
        if self._is_running:
            raise SchedulerBusyError("Scheduler is already running")

        self._is_running = True
        self._completed = []
        self._failed = []
        executor = TaskExecutor(timeout=self.config.timeout, events=self._events)

        log.info(
            "Starting parallel execution of %d task(s) with %d worker(s)",
            len(self._pending),
            self.config.max_workers,
        )
        self._events.on_run_start(len(self._pending))

        try:
            await self._process(executor)
        finally:
            await self._cancel_in_flight()
            self._is_running = False

        results = list(self._completed)
        summary = RunSummary.from_results(results)
        log.info(
            "Execution completed: %d passed, %d failed, %d skipped (%.2fs)",
            summary.passed,
            summary.failed,
            summary.skipped,
            summary.total_duration,
        )
        self._events.on_run_end(results, summary)
        return results

    @property
    def _halted(self) -> bool:
        return self.config.fail_fast and bool(self._failed)

    async def _process(self, executor: TaskExecutor) -> None:
        while True:
            self._admit(executor)
            if not self._in_flight:
                break

            done, _ = await asyncio.wait(
                self._in_flight, return_when=asyncio.FIRST_COMPLETED
            )
            for future in done:
                task = self._in_flight.pop(future)
                self._settle(task, self._outcome(task, future))

        if self._pending:
            log.warning(
                "Stopping execution due to fail-fast, %d task(s) not started",
                len(self._pending),
            )
            self._pending.clear()

    def _admit(self, executor: TaskExecutor) -> None:
        if self._halted:
            return

        while self._pending and len(self._in_flight) < self.config.max_workers:
            task = self._pending.popleft()
            future = asyncio.create_task(
                executor.execute(task), name=f"{task.name}#{task.attempt}"
            )
            self._in_flight[future] = task

    def _outcome(self, task: Task, future: asyncio.Task[TaskResult]) -> TaskResult:
        if future.cancelled():
            error: BaseException = RuntimeError(
                f"Execution of task {task.name} was cancelled"
            )
        elif (exc := future.exception()) is not None:
            error = exc
        else:
            return future.result()

        log.error(
            "Unexpected error executing task %s: %s", task.id, task.name, exc_info=error
        )
        now = datetime.now(timezone.utc)
        result = TaskResult(
            name=task.name,
            status="failed",
            start_time=now,
            end_time=now,
            duration=0.0,
            error=error,
        )
        self._events.on_task_end(task, result)
        return result

    def _settle(self, task: Task, result: TaskResult) -> None:
        # Once fail-fast has stopped admission a retry could never run.
        decision = decide(
            result,
            task,
            retry_failed=self.config.retry_failed_tests and not self._halted,
            max_retries=self.config.max_retries,
        )

        match decision:
            case Retry(task=retry):
                log.info("Retrying failed task: %s (retry %d)", task.name, retry.attempt)
                self._pending.appendleft(retry)
            case Finalize(result=final):
                self._completed.append(final)
                if final.status == "failed":
                    self._failed.append(final)

    async def _cancel_in_flight(self) -> None:
        if not self._in_flight:
            return

        log.warning("Cancelling %d in-flight task(s)", len(self._in_flight))
        for future in self._in_flight:
            future.cancel()
        await asyncio.gather(*self._in_flight, return_exceptions=True)
        self._in_flight.clear()

    def _ensure_idle(self, action: str) -> None:
        if self._is_running:
            raise SchedulerBusyError(f"Cannot {action} while the scheduler is running")
