"""Reporter that keeps finalized results in memory."""

from collections.abc import Iterable, Sequence
from typing import Any

from parallel_runner.events import EventSink
from parallel_runner.models.result import TaskResult
from parallel_runner.models.summary import RunSummary
from parallel_runner.models.task import Task


class ResultCollector(EventSink):
    """Collects the finalized results of every run it observes."""

    def __init__(self) -> None:
        self._results: list[TaskResult] = []
        self.attempts = 0

    @property
    def results(self) -> Sequence[TaskResult]:
        return tuple(self._results)

    def on_task_end(self, task: Task, result: TaskResult) -> None:
        self.attempts += 1

    def on_run_end(self, results: Sequence[TaskResult], summary: RunSummary) -> None:
        self._results.extend(results)

    def summary(self) -> RunSummary:
        return RunSummary.from_results(self._results)

    def clear(self) -> None:
        self._results = []
        self.attempts = 0


def format_output(results: Iterable[TaskResult]) -> dict[str, Any]:
    """Format results as a JSON-serializable report."""
    results = list(results)
    summary = RunSummary.from_results(results)
    return {
        "total": summary.total,
        "passed": summary.passed,
        "failed": summary.failed,
        "skipped": summary.skipped,
        "duration": summary.total_duration,
        "results": [
            {
                "name": result.name,
                "status": result.status,
                "duration": result.duration,
                "start_time": result.start_time.isoformat(),
                "end_time": result.end_time.isoformat(),
                "message": result.message,
                "attachments": [
                    {"name": a.name, "path": a.path, "content_type": a.content_type}
                    for a in result.attachments
                ],
            }
            for result in results
        ],
    }
