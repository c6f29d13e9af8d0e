"""Observer interface for scheduler lifecycle events."""

import logging
from collections.abc import Sequence

from parallel_runner.models.result import TaskResult
from parallel_runner.models.summary import RunSummary
from parallel_runner.models.task import Task

log = logging.getLogger(__name__)


class EventSink:
    """Receives lifecycle notifications from the scheduler.

    Every method is a no-op by default; subclasses override the events they
    care about. Sinks are notified synchronously from the scheduling loop and
    have no say over scheduling: they cannot veto, delay or reorder tasks.
    """

    def on_run_start(self, total_tasks: int) -> None:
        """Called once before any task is admitted."""

    def on_task_start(self, task: Task) -> None:
        """Called before each attempt of a task is invoked."""

    def on_task_end(self, task: Task, result: TaskResult) -> None:
        """Called after each attempt settles, including ones that get retried."""

    def on_run_end(self, results: Sequence[TaskResult], summary: RunSummary) -> None:
        """Called once with the finalized results of the run."""


class EventDispatcher(EventSink):
    """Fans events out to registered sinks, isolating their failures."""

    def __init__(self, sinks: Sequence[EventSink] = ()) -> None:
        self._sinks: list[EventSink] = list(sinks)

    @property
    def sinks(self) -> Sequence[EventSink]:
        return tuple(self._sinks)

    def add(self, sink: EventSink) -> None:
        self._sinks.append(sink)

    def on_run_start(self, total_tasks: int) -> None:
        for sink in self._sinks:
            self._notify(sink, "on_run_start", total_tasks)

    def on_task_start(self, task: Task) -> None:
        for sink in self._sinks:
            self._notify(sink, "on_task_start", task)

    def on_task_end(self, task: Task, result: TaskResult) -> None:
        for sink in self._sinks:
            self._notify(sink, "on_task_end", task, result)

    def on_run_end(self, results: Sequence[TaskResult], summary: RunSummary) -> None:
        for sink in self._sinks:
            self._notify(sink, "on_run_end", results, summary)

    def _notify(self, sink: EventSink, event: str, *args: object) -> None:
        try:
            getattr(sink, event)(*args)
        except Exception as exc:
            log.error(
                "Event sink %s failed on %s: %s",
                type(sink).__name__,
                event,
                exc,
                exc_info=exc,
            )
