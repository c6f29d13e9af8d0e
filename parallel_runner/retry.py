"""Retry decision for settled task attempts."""

from dataclasses import dataclass

from parallel_runner.models.result import TaskResult
from parallel_runner.models.task import Task


@dataclass(frozen=True, kw_only=True)
class Retry:
    """Requeue the task for another attempt."""

    task: Task


@dataclass(frozen=True, kw_only=True)
class Finalize:
    """Keep the result as the task's final outcome."""

    result: TaskResult


Decision = Retry | Finalize


def decide(
    result: TaskResult,
    task: Task,
    *,
    retry_failed: bool,
    max_retries: int,
) -> Decision:
    """Decide whether a settled attempt is retried or finalized.

    Args:
        result: Result of the attempt that just settled
        task: The task that produced the result
        retry_failed: Whether failed tasks are retried at all
        max_retries: Number of retries allowed per task (0 disables retries)

    Returns:
        ``Retry`` with the next attempt of the task, or ``Finalize`` with the
        result to keep

    """
    if result.status == "failed" and retry_failed and task.attempt < max_retries:
        return Retry(task=task.next_attempt())
    return Finalize(result=result)
