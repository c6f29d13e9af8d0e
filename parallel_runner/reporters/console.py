"""Reporter that writes task progress and a run summary to a logger."""

import logging
from collections.abc import Sequence
from dataclasses import dataclass, field

from parallel_runner.events import EventSink
from parallel_runner.models.result import TaskResult
from parallel_runner.models.summary import RunSummary
from parallel_runner.models.task import Task

STATUS_SYMBOLS = {
    "passed": "✓",
    "failed": "✗",
    "skipped": "-",
}


@dataclass(frozen=True, kw_only=True)
class ConsoleReporter(EventSink):
    """Logs each settled attempt and a formatted summary at the end of a run."""

    log: logging.Logger = field(
        default_factory=lambda: logging.getLogger("parallel_runner.report")
    )

    def on_run_start(self, total_tasks: int) -> None:
        self.log.info("Running %d task(s)", total_tasks)

    def on_task_end(self, task: Task, result: TaskResult) -> None:
        symbol = STATUS_SYMBOLS.get(result.status, "?")
        attempt = f" [attempt {task.attempt + 1}]" if task.is_retry else ""
        self.log.info(
            "%s %s%s (%.2fs)", symbol, result.name, attempt, result.duration
        )

    def on_run_end(self, results: Sequence[TaskResult], summary: RunSummary) -> None:
        log_results_summary(self.log, results, summary)


def log_results_summary(
    log: logging.Logger,
    results: Sequence[TaskResult],
    summary: RunSummary,
) -> None:
    """Log a formatted summary of finalized results."""
    log.info("=" * 80)
    log.info("Task Results Summary:")
    log.info("=" * 80)

    for result in results:
        symbol = STATUS_SYMBOLS.get(result.status, "?")
        log.info("%s %s: %s (%.2fs)", symbol, result.name, result.status, result.duration)
        if result.message:
            log.info("  Message: %s", result.message)
        for attachment in result.attachments:
            log.info("  Attachment: %s (%s)", attachment.name, attachment.path)

    log.info(
        "Total: %d, passed: %d, failed: %d, skipped: %d, duration: %.2fs",
        summary.total,
        summary.passed,
        summary.failed,
        summary.skipped,
        summary.total_duration,
    )
